from __future__ import annotations

import asyncio
import logging
import sys
import threading
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional, Tuple

from pynput import keyboard, mouse

from colorpick.input.hotkey import button_of, key_to_name
from colorpick.pick.host import Button, InputTarget, Scheduler

log = logging.getLogger(__name__)

# Win32 mouse messages: button-down -> Button, button-up -> None
_WIN32_BUTTON_MSGS: Dict[int, Optional[Button]] = {
    0x0201: Button.PRIMARY,
    0x0202: None,
    0x0204: Button.SECONDARY,
    0x0205: None,
    0x0207: Button.MIDDLE,
    0x0208: None,
}


class LoopScheduler:
    """Scheduler that marshals calls from listener threads onto an asyncio loop."""

    def __init__(self, loop: asyncio.AbstractEventLoop) -> None:
        self._loop = loop

    def call_soon(self, fn: Callable[[], None]) -> None:
        if fn is None:
            return
        try:
            self._loop.call_soon_threadsafe(fn)
        except RuntimeError:
            # loop already closed
            log.debug("dropped input event: loop closed")


class ExclusionZone:
    """
    Screen rectangle owned by our own UI (the adjustment menu).
    Clicks inside it are neither forwarded nor suppressed. Read from
    listener threads, written from the UI thread.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._rect: Optional[Tuple[int, int, int, int]] = None

    def set(self, left: int, top: int, width: int, height: int) -> None:
        with self._lock:
            self._rect = (int(left), int(top), int(width), int(height))

    def clear(self) -> None:
        with self._lock:
            self._rect = None

    def contains(self, x: int, y: int) -> bool:
        with self._lock:
            r = self._rect
        if r is None:
            return False
        left, top, width, height = r
        return left <= x < left + width and top <= y < top + height


@dataclass
class GrabHandle:
    target: InputTarget
    keyboard_listener: keyboard.Listener
    mouse_listener: mouse.Listener
    released: bool = field(default=False)


class PynputInputGrab:
    """
    Modal input grab on top of pynput listeners.

    - keyboard listener is suppressing: keys never reach other applications
      while the grab is held
    - clicks inside the exclusion zone belong to our own windows and are
      left alone
    - mouse motion always passes through; on Windows button messages are
      swallowed in win32_event_filter (pynput then skips on_click, so the
      filter forwards the press itself)
    - every callback is forwarded to the target on the scheduler's thread;
      events that arrive after release() are dropped there
    """

    def __init__(
        self,
        *,
        scheduler: Scheduler,
        exclusion: Optional[ExclusionZone] = None,
        suppress_clicks: bool = True,
    ) -> None:
        self._scheduler = scheduler
        self._exclusion = exclusion or ExclusionZone()
        self._suppress_clicks = bool(suppress_clicks)

    @property
    def exclusion(self) -> ExclusionZone:
        return self._exclusion

    def acquire(self, target: InputTarget) -> GrabHandle:
        box: Dict[str, GrabHandle] = {}

        def forward(fn: Callable[[], None]) -> None:
            def _run() -> None:
                h = box.get("handle")
                if h is None or h.released:
                    return
                fn()

            self._scheduler.call_soon(_run)

        def on_press(key) -> None:
            name = key_to_name(key)
            if name:
                forward(lambda: target.on_key(name))

        def on_move(x, y) -> None:
            forward(lambda: target.on_motion(int(x), int(y)))

        exclusion = self._exclusion

        def on_click(x, y, button, pressed) -> None:
            if not pressed or exclusion.contains(int(x), int(y)):
                return
            b = button_of(button)
            forward(lambda: target.on_button(b))

        extra: Dict[str, Any] = {}
        if self._suppress_clicks and sys.platform == "win32":

            def win32_event_filter(msg, data) -> bool:
                h = box.get("handle")
                if h is None or h.released or msg not in _WIN32_BUTTON_MSGS:
                    return True
                if exclusion.contains(int(data.pt.x), int(data.pt.y)):
                    return True
                b = _WIN32_BUTTON_MSGS[msg]
                if b is not None:
                    forward(lambda: target.on_button(b))
                h.mouse_listener.suppress_event()
                return True

            extra["win32_event_filter"] = win32_event_filter

        kb = keyboard.Listener(on_press=on_press, suppress=True)
        ms = mouse.Listener(on_move=on_move, on_click=on_click, **extra)

        handle = GrabHandle(target=target, keyboard_listener=kb, mouse_listener=ms)
        box["handle"] = handle

        kb.start()
        try:
            ms.start()
        except Exception:
            kb.stop()
            raise
        log.info("input grab acquired")
        return handle

    def release(self, handle: GrabHandle) -> None:
        if handle is None or handle.released:
            return
        handle.released = True
        for listener in (handle.mouse_listener, handle.keyboard_listener):
            try:
                listener.stop()
            except Exception:
                log.warning("listener stop failed", exc_info=True)
        log.info("input grab released")


class PynputPointer:
    """PointerMover backed by pynput.mouse.Controller."""

    def __init__(self) -> None:
        self._ctl = mouse.Controller()

    def move_by(self, dx: int, dy: int) -> None:
        self._ctl.move(int(dx), int(dy))

    def position(self) -> Tuple[int, int]:
        x, y = self._ctl.position
        return int(x), int(y)
