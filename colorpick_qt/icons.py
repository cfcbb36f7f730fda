# colorpick_qt/icons.py
from __future__ import annotations

from PySide6.QtCore import QByteArray, Qt
from PySide6.QtGui import QColor, QIcon, QPainter, QPixmap
from PySide6.QtSvg import QSvgRenderer

from colorpick.color.model import Color, swatch_svg

# 吸管图标（24x24 viewBox）
_PIPETTE_PATH = (
    "M19.4 3.6a2 2 0 0 0-2.8 0l-2.5 2.5-1.4-1.4-1.4 1.4 1.4 1.4L4 16.2V20h3.8"
    "l8.7-8.7 1.4 1.4 1.4-1.4-1.4-1.4 2.5-2.5a2 2 0 0 0 0-2.8z"
)

IDLE_TINT = "#d0d0d0"
BUSY_TINT = "#3daee9"


def svg_pixmap(svg: str, size: int = 16) -> QPixmap:
    """Render SVG text into a transparent square pixmap."""
    pixmap = QPixmap(size, size)
    pixmap.fill(Qt.transparent)

    renderer = QSvgRenderer(QByteArray(svg.encode("utf-8")))
    if renderer.isValid():
        p = QPainter(pixmap)
        renderer.render(p)
        p.end()
    return pixmap


def svg_icon(svg: str, size: int = 16) -> QIcon:
    return QIcon(svg_pixmap(svg, size))


def color_icon(color: Color, size: int = 16) -> QIcon:
    return svg_icon(swatch_svg(color), size)


def picker_icon(*, busy: bool = False, size: int = 32) -> QIcon:
    tint = QColor(BUSY_TINT if busy else IDLE_TINT).name()
    svg = (
        f'<svg xmlns="http://www.w3.org/2000/svg" width="{size}" height="{size}" viewBox="0 0 24 24">'
        f'<path d="{_PIPETTE_PATH}" fill="{tint}"/></svg>'
    )
    return svg_icon(svg, size)
