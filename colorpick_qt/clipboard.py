# colorpick_qt/clipboard.py
from __future__ import annotations

from PySide6.QtGui import QGuiApplication


class QtClipboard:
    """Clipboard over QGuiApplication.clipboard(); UI thread only."""

    def write(self, text: str) -> None:
        QGuiApplication.clipboard().setText(text or "")

    async def read(self) -> str:
        return QGuiApplication.clipboard().text() or ""
