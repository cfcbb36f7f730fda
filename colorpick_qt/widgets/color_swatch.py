# colorpick_qt/widgets/color_swatch.py
from __future__ import annotations

from PySide6.QtWidgets import QWidget, QHBoxLayout, QLabel, QFrame
from PySide6.QtGui import QColor, QPalette
from PySide6.QtCore import Qt

from colorpick.color.model import Color


class ColorSwatch(QWidget):
    """
    颜色预览控件：
    - 左侧一块有背景色的矩形
    - 右侧显示颜色文本（格式由 Color 自身决定），可隐藏
    """

    def __init__(self, parent: QWidget | None = None, *, width: int = 64, height: int = 24) -> None:
        super().__init__(parent)

        layout = QHBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(8)

        self._frame = QFrame(self)
        self._frame.setFixedSize(width, height)
        self._frame.setFrameShape(QFrame.Box)
        self._frame.setFrameShadow(QFrame.Sunken)
        self._frame.setAutoFillBackground(True)
        layout.addWidget(self._frame)

        self._label = QLabel("", self)
        self._label.setAlignment(Qt.AlignLeft | Qt.AlignVCenter)
        self._label.setTextInteractionFlags(Qt.NoTextInteraction)
        layout.addWidget(self._label)

        self._color = Color()
        self.set_color(self._color)

    @property
    def color(self) -> Color:
        return self._color

    def set_text_visible(self, visible: bool) -> None:
        self._label.setVisible(bool(visible))

    def set_color(self, color: Color) -> None:
        self._color = color
        r, g, b = color.rgb
        pal = self._frame.palette()
        pal.setColor(QPalette.Window, QColor(r, g, b))
        self._frame.setPalette(pal)
        self._label.setText(color.to_text())
