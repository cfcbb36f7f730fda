# File: colorpick/app/pick_status.py
from __future__ import annotations

import logging
from typing import Callable

from colorpick.event_bus import Event, EventBus
from colorpick.event_types import EventType
from colorpick.events.payloads import ColorPickedPayload, PickModeEnteredPayload, PickModeExitedPayload

log = logging.getLogger(__name__)

APP_TITLE = "Color Picker"


class PickStatus:
    """
    取色会话的状态文字（托盘提示）：
    - PICK_MODE_ENTERED：进入取色
    - COLOR_PICKED：记住最近一次取到的颜色
    - PICK_MODE_EXITED：回到空闲，带上最近颜色
    STRICT typed event payloads.
    """

    def __init__(self, *, bus: EventBus, sink: Callable[[str], None]) -> None:
        self._bus = bus
        self._sink = sink
        self._picking = False
        self._last = ""

        self._bus.subscribe(EventType.PICK_MODE_ENTERED, self._on_entered)
        self._bus.subscribe(EventType.COLOR_PICKED, self._on_picked)
        self._bus.subscribe(EventType.PICK_MODE_EXITED, self._on_exited)

    @property
    def text(self) -> str:
        parts = [APP_TITLE]
        if self._picking:
            parts.append("(picking)")
        if self._last:
            parts.append(f"last: {self._last}")
        return " ".join(parts)

    def close(self) -> None:
        self._bus.unsubscribe(EventType.PICK_MODE_ENTERED, self._on_entered)
        self._bus.unsubscribe(EventType.COLOR_PICKED, self._on_picked)
        self._bus.unsubscribe(EventType.PICK_MODE_EXITED, self._on_exited)

    def _on_entered(self, ev: Event) -> None:
        if not isinstance(ev.payload, PickModeEnteredPayload):
            return
        self._picking = True
        self._push()

    def _on_picked(self, ev: Event) -> None:
        p = ev.payload
        if not isinstance(p, ColorPickedPayload):
            return
        self._last = p.text
        self._push()

    def _on_exited(self, ev: Event) -> None:
        p = ev.payload
        if not isinstance(p, PickModeExitedPayload):
            return
        self._picking = False
        log.debug("session %s exited reason=%s picked=%d", p.session_id, p.reason, p.picked)
        self._push()

    def _push(self) -> None:
        self._sink(self.text)
