from __future__ import annotations

import logging
from typing import Sequence

from PyQt6.QtCore import QPointF, QRectF, Qt, QTimer, pyqtSignal
from PyQt6.QtGui import QColor, QFont, QPainter, QPen, QPolygonF
from PyQt6.QtWidgets import (
    QCheckBox,
    QFileDialog,
    QGroupBox,
    QHBoxLayout,
    QLabel,
    QMessageBox,
    QPushButton,
    QRadioButton,
    QSpinBox,
    QVBoxLayout,
    QWidget,
)

from .config import DEFAULT_PARAMS, RenderOptions
from .geometry2d import Color, TilePolygon, Vec2
from .image_export import render_view, save_png
from .krinkle import KrinkleGenerator, ParameterError, TilingParams
from .renderer import TilingRenderer
from .viewport import Viewport

logger = logging.getLogger(__name__)

STATUS_OK = "#8b949e"
STATUS_WARNING = "#d29922"
STATUS_ERROR = "#ff6b6b"


def _qcolor(color: Color) -> QColor:
    return QColor(color[0], color[1], color[2], color[3])


class QPainterSurface:
    def __init__(self, painter: QPainter, width: int, height: int) -> None:
        self.painter = painter
        self._size = (width, height)

    def size(self) -> tuple[int, int]:
        return self._size

    def clear(self, color: Color) -> None:
        self.painter.fillRect(0, 0, self._size[0], self._size[1], _qcolor(color))

    def polygon(self, points: Sequence[Vec2], fill: Color | None, stroke: Color | None, width: float) -> None:
        if stroke is not None:
            self.painter.setPen(QPen(_qcolor(stroke), width))
        else:
            self.painter.setPen(Qt.PenStyle.NoPen)
        if fill is not None:
            self.painter.setBrush(_qcolor(fill))
        else:
            self.painter.setBrush(Qt.BrushStyle.NoBrush)
        self.painter.drawPolygon(QPolygonF([QPointF(x, y) for x, y in points]))

    def line(self, a: Vec2, b: Vec2, color: Color, width: float) -> None:
        self.painter.setPen(QPen(_qcolor(color), width))
        self.painter.drawLine(QPointF(*a), QPointF(*b))

    def circle(self, center: Vec2, radius: float, fill: Color, stroke: Color | None) -> None:
        self.painter.setBrush(_qcolor(fill))
        if stroke is not None:
            self.painter.setPen(QPen(_qcolor(stroke), 1))
        else:
            self.painter.setPen(Qt.PenStyle.NoPen)
        self.painter.drawEllipse(QPointF(*center), radius, radius)

    def text(self, pos: Vec2, text: str, color: Color, size: int) -> None:
        font = QFont()
        font.setPixelSize(size)
        self.painter.setFont(font)
        self.painter.setPen(QPen(_qcolor(color)))
        x, y = pos
        rect = QRectF(x - 100, y - size, 200, size * 2)
        self.painter.drawText(rect, Qt.AlignmentFlag.AlignCenter, text)


class TilingCanvas(QWidget):
    zoomChanged = pyqtSignal(float)
    hoverChanged = pyqtSignal(object)  # HoverTarget | None
    cursorMoved = pyqtSignal(float, float)

    def __init__(self, renderer: TilingRenderer) -> None:
        super().__init__()
        self.setMinimumSize(900, 650)
        self.setMouseTracking(True)
        self.setCursor(Qt.CursorShape.OpenHandCursor)

        self.renderer = renderer
        self._fit_target: list[TilePolygon] | None = None

    def set_display_data(self, polygons: list[TilePolygon], mode: str, fit_target: list[TilePolygon] | None = None) -> None:
        if self.renderer.set_display_data(polygons, mode):
            self.hoverChanged.emit(None)
        self._fit_target = fit_target
        self.fit_view()

    def fit_view(self) -> None:
        if self.renderer.auto_center(self._fit_target):
            self.zoomChanged.emit(self.renderer.viewport.scale)
        self.update()

    def _pos(self, event) -> Vec2:
        p = event.position()
        return (float(p.x()), float(p.y()))

    def mousePressEvent(self, event) -> None:  # type: ignore[override]
        if event.button() != Qt.MouseButton.LeftButton:
            return
        self.renderer.viewport.press(self._pos(event))
        self.setCursor(Qt.CursorShape.ClosedHandCursor)

    def mouseMoveEvent(self, event) -> None:  # type: ignore[override]
        pos = self._pos(event)
        wx, wy = self.renderer.viewport.screen_to_world(pos)
        self.cursorMoved.emit(wx, wy)

        if self.renderer.viewport.move(pos):
            self.update()
            return

        if self.renderer.update_hover(pos):
            self.hoverChanged.emit(self.renderer.hover)
            self.update()

    def mouseReleaseEvent(self, event) -> None:  # type: ignore[override]
        if event.button() != Qt.MouseButton.LeftButton:
            return
        self.renderer.viewport.release()
        self.setCursor(Qt.CursorShape.OpenHandCursor)

    def wheelEvent(self, event) -> None:  # type: ignore[override]
        # angleDelta > 0 przy przewijaniu od siebie, deltaY przeglądarki ma odwrotny znak
        delta_y = -event.angleDelta().y()
        if self.renderer.viewport.zoom(delta_y):
            self.zoomChanged.emit(self.renderer.viewport.scale)
            self.update()

    def leaveEvent(self, event) -> None:  # type: ignore[override]
        if self.renderer.clear_hover():
            self.hoverChanged.emit(None)
            self.update()
        super().leaveEvent(event)

    def resizeEvent(self, event) -> None:  # type: ignore[override]
        super().resizeEvent(event)
        viewport = self.renderer.viewport
        viewport.resize(self.width(), self.height())
        if viewport.state.auto_fit and self.renderer.polygons:
            self.fit_view()

    def paintEvent(self, event) -> None:  # type: ignore[override]
        painter = QPainter(self)
        painter.setRenderHint(QPainter.RenderHint.Antialiasing)
        self.renderer.draw(QPainterSurface(painter, self.width(), self.height()))
        painter.end()


class TilingWindow(QWidget):
    """Panel parametrów (k, m, t, wiersze, offset) + płótno z parkietażem."""

    statusChanged = pyqtSignal(str)

    def __init__(self) -> None:
        super().__init__()
        self.setWindowTitle("Parkietaż Modulo Krinkle")

        self.generator = KrinkleGenerator()
        self.options = RenderOptions()
        self.renderer = TilingRenderer(Viewport(900, 650), self.options)
        self.canvas = TilingCanvas(self.renderer)
        self.mode = str(DEFAULT_PARAMS["mode"])

        panel = self._create_panel()
        main = QHBoxLayout()
        main.addWidget(self.canvas, stretch=1)
        main.addLayout(panel)
        self.setLayout(main)

        self.request_update()

    def _create_panel(self) -> QVBoxLayout:
        layout = QVBoxLayout()

        title = QLabel("Modulo Krinkle")
        title.setStyleSheet("font-size: 16px; font-weight: bold;")
        layout.addWidget(title)

        info = QLabel(
            "n = k·t (tryb zwykły)\n"
            "n = 2·(t·k − m) (tryb offset)\n\n"
            "Sterowanie:\n"
            "- LPM + przeciągnij: przesuwanie\n"
            "- kółko myszy: przybliżanie\n"
            "- najechanie (parkietaż): klin i wiersz\n"
        )
        info.setStyleSheet("color: #555;")
        layout.addWidget(info)

        # Parametry
        params_group = QGroupBox("Parametry")
        params_l = QVBoxLayout()
        self.k_spin = self._add_spin(params_l, "k (moduł):", 1, 200, int(DEFAULT_PARAMS["k"]))
        self.m_spin = self._add_spin(params_l, "m (krok):", -200, 200, int(DEFAULT_PARAMS["m"]))
        self.t_spin = self._add_spin(params_l, "t (mnożnik):", 1, 50, int(DEFAULT_PARAMS["t"]))
        self.rows_spin = self._add_spin(params_l, "wiersze:", 1, 30, int(DEFAULT_PARAMS["rows"]))
        self.offset_check = QCheckBox("Tryb offset")
        self.offset_check.setChecked(bool(DEFAULT_PARAMS["is_offset"]))
        params_l.addWidget(self.offset_check)
        params_group.setLayout(params_l)
        layout.addWidget(params_group)

        for spin in (self.k_spin, self.m_spin, self.t_spin, self.rows_spin):
            spin.valueChanged.connect(self.request_update)
        self.offset_check.toggled.connect(self.request_update)

        # Tryb
        mode_group = QGroupBox("Tryb")
        mode_l = QVBoxLayout()
        self.rb_prototile = QRadioButton("Prototyl")
        self.rb_wedge = QRadioButton("Klin")
        self.rb_tiling = QRadioButton("Parkietaż")
        buttons = {"prototile": self.rb_prototile, "wedge": self.rb_wedge, "tiling": self.rb_tiling}
        buttons[self.mode].setChecked(True)
        for mode, rb in buttons.items():
            mode_l.addWidget(rb)
            rb.toggled.connect(lambda checked, mode=mode: checked and self.set_mode(mode))
        mode_group.setLayout(mode_l)
        layout.addWidget(mode_group)

        # Nakładki
        overlay_group = QGroupBox("Nakładki")
        overlay_l = QVBoxLayout()
        self.edges_check = QCheckBox("Indeksy krawędzi")
        self.edges_check.setChecked(self.options.show_edges)
        self.wedge_labels_check = QCheckBox("Etykiety klinów")
        self.wedge_labels_check.setChecked(self.options.show_wedge_labels)
        self.tile_labels_check = QCheckBox("Etykiety kafli")
        self.tile_labels_check.setChecked(self.options.show_tile_labels)
        for cb in (self.edges_check, self.wedge_labels_check, self.tile_labels_check):
            overlay_l.addWidget(cb)
            cb.toggled.connect(self._on_overlay_changed)
        overlay_group.setLayout(overlay_l)
        layout.addWidget(overlay_group)

        self.status_label = QLabel("")
        self.status_label.setWordWrap(True)
        layout.addWidget(self.status_label)

        btn_fit = QPushButton("Dopasuj widok")
        btn_fit.clicked.connect(self.canvas.fit_view)
        btn_save = QPushButton("Zapisz PNG...")
        btn_save.clicked.connect(self.save_as_png)
        layout.addWidget(btn_fit)
        layout.addWidget(btn_save)

        layout.addStretch()
        return layout

    def _add_spin(self, layout: QVBoxLayout, label: str, minimum: int, maximum: int, value: int) -> QSpinBox:
        row = QHBoxLayout()
        row.addWidget(QLabel(label))
        spin = QSpinBox()
        spin.setRange(minimum, maximum)
        spin.setValue(value)
        row.addWidget(spin)
        layout.addLayout(row)
        return spin

    def current_params(self) -> TilingParams:
        return TilingParams(
            k=self.k_spin.value(),
            m=self.m_spin.value(),
            t=self.t_spin.value(),
            rows=self.rows_spin.value(),
            is_offset=self.offset_check.isChecked(),
        )

    def set_mode(self, mode: str) -> None:
        self.mode = mode
        self.request_update()

    def request_update(self) -> None:
        params = self.current_params()
        try:
            params.validate()
        except ParameterError as exc:
            logger.error(f"Invalid parameters {params}: {exc}")
            self._set_status(str(exc), STATUS_ERROR)
            return

        self._set_status("Generowanie...", STATUS_OK)
        # generowanie w następnym obiegu pętli zdarzeń, żeby status zdążył się odświeżyć
        QTimer.singleShot(0, lambda: self._regenerate(params))

    def _regenerate(self, params: TilingParams) -> None:
        polygons = self.generator.generate_from_params(params, self.mode)
        fit_target = polygons[:1] if self.mode == "prototile" else None
        self.canvas.set_display_data(polygons, self.mode, fit_target)

        text = f"{params.describe()} | Błąd domknięcia: {self.generator.closure_error():.2f} | Wielokąty: {len(polygons)}"
        if self.generator.has_short_period():
            self._set_status(text + " | Krótki okres!", STATUS_WARNING)
        else:
            self._set_status(text, STATUS_OK)

    def _set_status(self, text: str, color: str) -> None:
        self.status_label.setText(text)
        self.status_label.setStyleSheet(f"color: {color};")
        self.statusChanged.emit(text)

    def _on_overlay_changed(self) -> None:
        self.options.show_edges = self.edges_check.isChecked()
        self.options.show_wedge_labels = self.wedge_labels_check.isChecked()
        self.options.show_tile_labels = self.tile_labels_check.isChecked()
        self.canvas.update()

    def save_as_png(self) -> None:
        path, _ = QFileDialog.getSaveFileName(self, "Zapisz jako PNG", "", "PNG (*.png)")
        if not path:
            return
        try:
            save_png(render_view(self.renderer), path)
        except Exception as exc:  # noqa: BLE001
            logger.exception(f"Failed to save PNG: {exc}")
            QMessageBox.critical(self, "Błąd", f"Nie udało się zapisać obrazu:\n{exc}")
