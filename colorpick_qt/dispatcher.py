# colorpick_qt/dispatcher.py
from __future__ import annotations

import logging
from typing import Any, Callable

from PySide6.QtCore import QObject, Qt, Signal, Slot

log = logging.getLogger(__name__)


class QtDispatcher(QObject):
    """
    UI 线程调度器（Scheduler 协议）：
    - call_soon(fn, *args) 可在任意线程调用，fn 排队到本对象所在线程执行
    - 已经在 UI 线程时仍然排队，保证调用方栈展开后才执行
    """

    _sig_call = Signal(object, object)  # fn, args

    def __init__(self, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self._sig_call.connect(self._on_call, Qt.QueuedConnection)

    def call_soon(self, fn: Callable[..., Any], *args: Any) -> None:
        if fn is None:
            return
        self._sig_call.emit(fn, args)

    @Slot(object, object)
    def _on_call(self, fn: Callable[..., Any], args: tuple) -> None:
        try:
            fn(*args)
        except Exception:
            log.exception("dispatched call failed: %s", getattr(fn, "__qualname__", fn))
