# colorpick_qt/pick/menu_window.py
from __future__ import annotations

import logging
from typing import Callable, Dict, List, Optional, Tuple

from PySide6.QtCore import QPoint, Qt
from PySide6.QtGui import QCloseEvent, QCursor, QHideEvent, QMoveEvent, QResizeEvent, QShowEvent
from PySide6.QtWidgets import (
    QGridLayout,
    QHBoxLayout,
    QLabel,
    QPushButton,
    QSlider,
    QVBoxLayout,
    QWidget,
)

from colorpick.color.model import Color, Component, Format, GradientStop
from colorpick.input.grab import ExclusionZone
from colorpick.pick.host import Clipboard
from colorpick.pick.menu import SLIDERS, AdjustmentMenu
from colorpick_qt.widgets.color_swatch import ColorSwatch

log = logging.getLogger(__name__)

_FORMAT_ORDER = (Format.HEX, Format.RGB, Format.HSL, Format.HSV, Format.CMYK)
_FINE_STEPS = 1000  # 0..1 分量的滑块刻度


def _steps(comp: Component) -> int:
    _lo, hi = comp.bounds
    return _FINE_STEPS if hi <= 1.0 else int(hi)


def _gradient_css(stops: List[GradientStop], handle: Tuple[float, float, float, float]) -> str:
    hr, hg, hb, _ha = (round(v * 255) for v in handle)
    parts = []
    for off, r, g, b, _a in stops:
        parts.append(f"stop:{off:.3f} rgb({round(r * 255)}, {round(g * 255)}, {round(b * 255)})")
    return (
        "QSlider::groove:horizontal {"
        " height: 8px; border-radius: 4px;"
        f" background: qlineargradient(x1:0, y1:0, x2:1, y2:0, {', '.join(parts)});"
        " }"
        "QSlider::handle:horizontal {"
        " width: 10px; margin: -4px 0; border-radius: 5px;"
        f" background: rgb({hr}, {hg}, {hb}); border: 2px solid white;"
        " }"
    )


class AdjustmentMenuWindow(QWidget):
    """
    调色菜单窗口（MenuView 实现）：渲染一个 AdjustmentMenu。

    - r/g/b/h/s/l 滑块，轨道按当前颜色渐变着色
    - HEX/RGB/HSL/HSV/CMYK 按钮：以该格式提交颜色并关闭菜单
    - 复制 / 从剪贴板读取
    - 窗口区域登记到 ExclusionZone，点击菜单不会被当作取色
    - 无论以何种方式关闭都回调 on_closed（由会话接到 close_menu）
    """

    def __init__(
        self,
        *,
        clipboard: Clipboard,
        exclusion: ExclusionZone,
        parent: QWidget | None = None,
    ) -> None:
        super().__init__(parent)
        self._clipboard = clipboard
        self._exclusion = exclusion
        self._menu: Optional[AdjustmentMenu] = None
        self._unsub: Optional[Callable[[], None]] = None
        self._on_closed: Optional[Callable[[], None]] = None
        self._syncing = False

        self.setWindowFlags(Qt.FramelessWindowHint | Qt.WindowStaysOnTopHint | Qt.Tool)
        self.setWindowTitle("Adjust color")

        root = QVBoxLayout(self)
        root.setContentsMargins(10, 10, 10, 10)
        root.setSpacing(8)

        self._swatch = ColorSwatch(self, width=48, height=20)
        root.addWidget(self._swatch)

        grid = QGridLayout()
        grid.setHorizontalSpacing(8)
        self._sliders: Dict[Component, QSlider] = {}
        for row, comp in enumerate(SLIDERS):
            grid.addWidget(QLabel(comp.value.upper(), self), row, 0)
            s = QSlider(Qt.Horizontal, self)
            s.setRange(0, _steps(comp))
            s.setMinimumWidth(180)
            s.valueChanged.connect(lambda v, c=comp: self._on_slider(c, v))
            grid.addWidget(s, row, 1)
            self._sliders[comp] = s
        root.addLayout(grid)

        self._format_buttons: Dict[Format, QPushButton] = {}
        for fmt in _FORMAT_ORDER:
            btn = QPushButton(fmt.name, self)
            btn.setStyleSheet("text-align: left; padding: 2px 6px;")
            btn.clicked.connect(lambda _checked=False, f=fmt: self._on_select(f))
            root.addWidget(btn)
            self._format_buttons[fmt] = btn

        actions = QHBoxLayout()
        self._btn_copy = QPushButton("Copy", self)
        self._btn_copy.clicked.connect(self._on_copy)
        actions.addWidget(self._btn_copy)
        self._btn_paste = QPushButton("Read from clipboard", self)
        self._btn_paste.clicked.connect(self._on_read_clipboard)
        actions.addWidget(self._btn_paste)
        root.addLayout(actions)

        self.hide()

    def set_on_closed(self, fn: Optional[Callable[[], None]]) -> None:
        self._on_closed = fn

    # ---------- MenuView ----------

    def open_with(self, menu: AdjustmentMenu) -> None:
        self._detach()
        self._menu = menu
        self._unsub = menu.subscribe_changed(self._refresh)
        self._refresh(menu.color)

        self.adjustSize()
        pos = QCursor.pos()
        self.move(QPoint(pos.x() + 12, pos.y() + 12))
        self.show()
        self.raise_()
        self.activateWindow()

    def close(self) -> bool:
        was_open = self._menu is not None
        self._detach()
        self.hide()

        fn = self._on_closed
        if was_open and fn is not None:
            try:
                fn()
            except Exception:
                log.exception("menu close callback failed")
        return True

    # ---------- Qt events ----------

    def closeEvent(self, event: QCloseEvent) -> None:
        event.ignore()
        self.close()

    def showEvent(self, event: QShowEvent) -> None:
        super().showEvent(event)
        self._publish_geometry()

    def moveEvent(self, event: QMoveEvent) -> None:
        super().moveEvent(event)
        self._publish_geometry()

    def resizeEvent(self, event: QResizeEvent) -> None:
        super().resizeEvent(event)
        self._publish_geometry()

    def hideEvent(self, event: QHideEvent) -> None:
        super().hideEvent(event)
        self._exclusion.clear()

    # ---------- internals ----------

    def _publish_geometry(self) -> None:
        if not self.isVisible():
            return
        g = self.frameGeometry()
        self._exclusion.set(g.left(), g.top(), g.width(), g.height())

    def _detach(self) -> None:
        if self._unsub is not None:
            self._unsub()
            self._unsub = None
        self._menu = None

    def _refresh(self, color: Color) -> None:
        menu = self._menu
        if menu is None:
            return
        self._swatch.set_color(color)

        self._syncing = True
        try:
            for comp, value in menu.slider_values().items():
                s = self._sliders[comp]
                lo, hi = comp.bounds
                s.setValue(round((value - lo) / (hi - lo) * _steps(comp)))
                s.setStyleSheet(_gradient_css(menu.gradient(comp), color.to_rgba()))
        finally:
            self._syncing = False

        for fmt, btn in self._format_buttons.items():
            btn.setText(color.to_text(fmt))

    def _on_slider(self, comp: Component, v: int) -> None:
        if self._syncing or self._menu is None:
            return
        lo, hi = comp.bounds
        self._menu.set_component(comp, lo + (hi - lo) * v / _steps(comp))

    def _on_select(self, fmt: Format) -> None:
        menu = self._menu
        if menu is None:
            return
        menu.select(fmt)
        self.close()

    def _on_copy(self) -> None:
        if self._menu is not None:
            self._menu.copy(self._clipboard)

    def _on_read_clipboard(self) -> None:
        menu = self._menu
        if menu is None:
            return
        menu.read_clipboard_soon(self._clipboard)
