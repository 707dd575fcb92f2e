from __future__ import annotations

from typing import Callable

from PyQt6.QtGui import QAction
from PyQt6.QtWidgets import QApplication, QLabel, QMainWindow, QMenu, QStatusBar

from .logging_config import setup_logging
from .renderer import HoverTarget, wedge_label
from .tiling_window import TilingWindow


class MainWindow(QMainWindow):
    def __init__(self) -> None:
        super().__init__()
        self.setWindowTitle("Modulo Krinkle Tiling")
        self.resize(1280, 900)

        self.tiling = TilingWindow()
        self.setCentralWidget(self.tiling)

        self.status_bar = QStatusBar()
        self.setStatusBar(self.status_bar)
        self.zoom_value_label = QLabel("100%")
        self.zoom_value_label.setMinimumWidth(60)
        self.hover_label = QLabel("")
        self.hover_label.setMinimumWidth(140)
        self.status_bar.addPermanentWidget(self.hover_label)
        self.status_bar.addPermanentWidget(self.zoom_value_label)

        canvas = self.tiling.canvas
        canvas.zoomChanged.connect(self._on_zoom_changed)
        canvas.cursorMoved.connect(self._on_cursor_moved)
        canvas.hoverChanged.connect(self._on_hover_changed)
        self.tiling.statusChanged.connect(lambda text: self.status_bar.showMessage(text, 4000))

        self._build_menus()

    # Menu construction
    def _build_menus(self) -> None:
        menubar = self.menuBar()

        file_menu = menubar.addMenu("Plik")
        self._add_action(file_menu, "Zapisz jako PNG...", self.tiling.save_as_png, shortcut="Ctrl+S")
        file_menu.addSeparator()
        self._add_action(file_menu, "Wyjście", self.close, shortcut="Ctrl+Q")

        view_menu = menubar.addMenu("Widok")
        self._add_action(view_menu, "Dopasuj widok", self.tiling.canvas.fit_view, shortcut="Ctrl+0")
        view_menu.addSeparator()
        self._add_action(view_menu, "Indeksy krawędzi", self.tiling.edges_check.toggle)
        self._add_action(view_menu, "Etykiety klinów", self.tiling.wedge_labels_check.toggle)
        self._add_action(view_menu, "Etykiety kafli", self.tiling.tile_labels_check.toggle)

    def _add_action(self, menu: QMenu, text: str, handler: Callable, shortcut: str | None = None) -> QAction:
        action = QAction(text, self)
        if shortcut:
            action.setShortcut(shortcut)
        action.triggered.connect(handler)
        menu.addAction(action)
        return action

    def _on_zoom_changed(self, scale: float) -> None:
        self.zoom_value_label.setText(f"{scale * 100:.0f}%")

    def _on_cursor_moved(self, x: float, y: float) -> None:
        self.status_bar.showMessage(f"X:{x:.1f} Y:{y:.1f}")

    def _on_hover_changed(self, target: HoverTarget | None) -> None:
        if target is None or target.wedge_index is None:
            self.hover_label.setText("")
            return
        self.hover_label.setText(f"Klin {wedge_label(target.wedge_index)} | wiersz {target.depth}")


def run_app() -> None:
    import sys

    setup_logging()
    app = QApplication(sys.argv)
    window = MainWindow()
    window.show()
    sys.exit(app.exec())


if __name__ == "__main__":
    run_app()
