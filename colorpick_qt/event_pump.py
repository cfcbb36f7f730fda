# colorpick_qt/event_pump.py
from __future__ import annotations

import logging
from typing import Callable, Optional

from PySide6.QtCore import QObject, QTimer

from colorpick.event_bus import Event, EventBus

log = logging.getLogger(__name__)


class EventPump(QObject):
    """
    Periodically drains EventBus in the Qt main thread via QTimer.

    Logging:
    - Any handler exception will be logged with stacktrace (unless caller overrides on_handler_error).
    - Any unexpected pump exception will be logged too.
    """

    def __init__(
        self,
        *,
        bus: EventBus,
        tick_ms: int = 16,
        on_handler_error: Optional[Callable[[Event, BaseException], None]] = None,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        self._bus = bus
        self._on_handler_error = on_handler_error

        self._timer = QTimer(self)
        self._timer.setInterval(int(max(5, tick_ms)))
        self._timer.timeout.connect(self._tick)

    @property
    def running(self) -> bool:
        return self._timer.isActive()

    def start(self) -> None:
        if not self._timer.isActive():
            self._timer.start()

    def stop(self) -> None:
        self._timer.stop()

    def _on_error_default(self, ev: Event, err: BaseException) -> None:
        log.error("Event handler failed: %s", ev.type.value, exc_info=err)

    def _tick(self) -> None:
        try:
            on_err = self._on_handler_error or self._on_error_default
            self._bus.dispatch_pending(max_events=200, on_error=on_err)
        except Exception:
            log.exception("EventPump tick failed")
