# colorpick_qt/pick/preview_window.py
from __future__ import annotations

from typing import List, Tuple

from PySide6.QtCore import QPoint, Qt
from PySide6.QtWidgets import QApplication, QLabel, QVBoxLayout, QWidget

from colorpick.color.model import Color
from colorpick.pick.host import PreviewStyle
from colorpick_qt.widgets.color_swatch import ColorSwatch

OFFSET = (16, 16)


class PreviewOverlayWindow(QWidget):
    """
    无边框置顶、不接收输入的小预览窗（PreviewOverlay 实现）：
    - LABEL：坐标 + 色块 + 颜色文本
    - ICON：只显示一个小色块
    - 跟随采样点，偏移到右下方并限制在所有屏幕的虚拟边界内
    """

    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__(parent)

        # 不抢焦点、点击穿透，避免挡住采样点
        self.setWindowFlags(
            Qt.FramelessWindowHint
            | Qt.WindowStaysOnTopHint
            | Qt.Tool
            | Qt.WindowTransparentForInput
            | Qt.WindowDoesNotAcceptFocus
        )
        self.setAttribute(Qt.WA_ShowWithoutActivating, True)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(6, 6, 6, 6)
        layout.setSpacing(4)

        self._lbl_xy = QLabel("x=0  y=0", self)
        layout.addWidget(self._lbl_xy)

        self._swatch = ColorSwatch(self, width=22, height=22)
        layout.addWidget(self._swatch)

        self._style = PreviewStyle.LABEL
        self.hide()

    @property
    def size_tuple(self) -> Tuple[int, int]:
        sz = self.size()
        return sz.width(), sz.height()

    # ---------- PreviewOverlay ----------

    def show_color(self, x: int, y: int, color: Color, style: PreviewStyle) -> None:
        if style is not self._style:
            self._apply_style(style)

        self._lbl_xy.setText(f"x={int(x)}  y={int(y)}")
        self._swatch.set_color(color)
        self.adjustSize()

        self._place_near(int(x), int(y))
        if not self.isVisible():
            self.show()
        self.raise_()

    # ---------- internals ----------

    def _apply_style(self, style: PreviewStyle) -> None:
        self._style = style
        label = style is PreviewStyle.LABEL
        self._lbl_xy.setVisible(label)
        self._swatch.set_text_visible(label)

    def _place_near(self, x: int, y: int) -> None:
        pw, ph = self.size_tuple
        ox, oy = OFFSET
        L, T, R, B = self._virtual_bounds()

        nx, ny = x + ox, y + oy
        # 右/下放不下时翻到另一侧
        if nx + pw > R:
            nx = x - ox - pw
        if ny + ph > B:
            ny = y - oy - ph

        nx = self._clamp(nx, L, R - pw)
        ny = self._clamp(ny, T, B - ph)
        self.move(QPoint(nx, ny))

    @staticmethod
    def _virtual_bounds() -> Tuple[int, int, int, int]:
        app = QApplication.instance()
        screens = app.screens() if app is not None else []
        if not screens:
            return 0, 0, 1920, 1080

        xs: List[int] = []
        ys: List[int] = []
        rs: List[int] = []
        bs: List[int] = []
        for s in screens:
            g = s.geometry()
            xs.append(g.left())
            ys.append(g.top())
            rs.append(g.right())
            bs.append(g.bottom())
        return min(xs), min(ys), max(rs), max(bs)

    @staticmethod
    def _clamp(v: int, lo: int, hi: int) -> int:
        if v < lo:
            return lo
        if v > hi:
            return hi
        return v
