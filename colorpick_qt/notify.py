# colorpick_qt/notify.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Union

from PySide6.QtGui import QIcon
from PySide6.QtWidgets import QSystemTrayIcon

from colorpick_qt.dispatcher import QtDispatcher
from colorpick_qt.icons import svg_icon

log = logging.getLogger(__name__)

MESSAGE_MS = 4000


@dataclass
class QtNotifier:
    """
    线程安全的桌面通知（Notifier 协议）：
    - notify_message：普通气泡消息
    - notify_rich：带色块图标的短时提示
    - 通过 QtDispatcher 切回 UI 线程；没有托盘或系统不支持消息时只记日志
    """
    dispatcher: QtDispatcher
    tray: QSystemTrayIcon

    def notify_message(self, title: str, body: str) -> None:
        self.dispatcher.call_soon(self._show, title, body, QSystemTrayIcon.Information, MESSAGE_MS)

    def notify_rich(self, icon_svg: str, title: str, body: str, timeout_s: float) -> None:
        self.dispatcher.call_soon(self._show, title, body, icon_svg, int(timeout_s * 1000))

    def _show(self, title: str, body: str, icon: Union[str, QSystemTrayIcon.MessageIcon], ms: int) -> None:
        if not QSystemTrayIcon.supportsMessages() or not self.tray.isVisible():
            log.info("tray messages unavailable, notification dropped: %s", title)
            return
        if isinstance(icon, str):
            qicon: QIcon = svg_icon(icon, 48)
            self.tray.showMessage(title, body, qicon, ms)
        else:
            self.tray.showMessage(title, body, icon, ms)
