# File: colorpick/pick/state_machine.py
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, Tuple

from colorpick.color.model import Color, Format
from colorpick.errors import SamplingUnavailable
from colorpick.events.listeners import Listeners
from colorpick.input.keys import ESCAPE_NAMES, direction_of, normalize
from colorpick.pick.host import (
    Button,
    MenuView,
    NullMenuView,
    NullOverlay,
    PointerMover,
    PreviewOverlay,
    PreviewStyle,
    SamplingSource,
)
from colorpick.pick.menu import AdjustmentMenu

log = logging.getLogger(__name__)


class CaptureState(str, Enum):
    IDLE = "idle"
    TRACKING = "tracking"
    PREVIEW_OPEN = "preview_open"
    MENU_OPEN = "menu_open"
    ENDED = "ended"


class EndReason(str, Enum):
    QUIT_KEY = "quit_key"
    ESCAPE = "escape"
    BUTTON = "button"
    CANCELLED = "cancelled"
    ABORTED = "aborted"
    DONE = "done"


@dataclass(frozen=True)
class CaptureConfig:
    """Per-session immutable snapshot; the machine never reads settings."""

    once: bool = False
    persist: bool = True
    preview: bool = True
    preview_style: PreviewStyle = PreviewStyle.LABEL
    format: Format = Format.HEX
    menu_key: str = "m"
    quit_key: str = "q"


@dataclass(frozen=True)
class CaptureEnded:
    reason: EndReason
    error: Optional[BaseException] = None


class CaptureStateMachine:
    """
    One interactive sampling session.

    IDLE -> TRACKING <-> PREVIEW_OPEN <-> MENU_OPEN, any -> ENDED (terminal).

    Sampling is coalesced: at most one sample is in flight; requests made
    meanwhile only bump a sequence number, and a result whose sequence is no
    longer the latest is dropped and the newest coordinates are sampled again.
    Anything that resolves after ENDED is dropped as well.
    """

    def __init__(
        self,
        *,
        config: CaptureConfig,
        source: SamplingSource,
        pointer: PointerMover,
        overlay: Optional[PreviewOverlay] = None,
        menu_view: Optional[MenuView] = None,
    ) -> None:
        self._cfg = config
        self._source = source
        self._pointer = pointer
        self._overlay: PreviewOverlay = overlay if overlay is not None else NullOverlay()
        self._menu_view: MenuView = menu_view if menu_view is not None else NullMenuView()

        self._state = CaptureState.IDLE
        self._color = Color(format=config.format)
        self._x = 0
        self._y = 0

        self._req_seq = 0
        self._emit_pending = False
        self._task: Optional[asyncio.Task] = None

        self._menu: Optional[AdjustmentMenu] = None
        self._menu_seed: Optional[Color] = None
        self._end_info: Optional[CaptureEnded] = None

        self._emitted: Listeners[Color] = Listeners("capture.emitted")
        self._ended: Listeners[CaptureEnded] = Listeners("capture.ended")

    # ---------- read side ----------

    @property
    def config(self) -> CaptureConfig:
        return self._cfg

    @property
    def state(self) -> CaptureState:
        return self._state

    @property
    def color(self) -> Color:
        return self._color

    @property
    def position(self) -> Tuple[int, int]:
        return self._x, self._y

    @property
    def menu(self) -> Optional[AdjustmentMenu]:
        return self._menu

    @property
    def is_ended(self) -> bool:
        return self._state is CaptureState.ENDED

    @property
    def end_info(self) -> Optional[CaptureEnded]:
        return self._end_info

    @property
    def sampling(self) -> bool:
        return self._task is not None and not self._task.done()

    def subscribe_emitted(self, fn: Callable[[Color], None]) -> Callable[[], None]:
        return self._emitted.subscribe(fn)

    def subscribe_ended(self, fn: Callable[[CaptureEnded], None]) -> Callable[[], None]:
        return self._ended.subscribe(fn)

    # ---------- input ----------

    def start(self, x: Optional[int] = None, y: Optional[int] = None) -> None:
        if self._state is not CaptureState.IDLE:
            return
        if x is None or y is None:
            try:
                x, y = self._pointer.position()
            except Exception:
                log.warning("pointer position unavailable, starting at (0, 0)", exc_info=True)
                x, y = 0, 0
        self._x, self._y = int(x), int(y)
        log.info(
            "capture started once=%s persist=%s preview=%s",
            self._cfg.once,
            self._cfg.persist,
            self._cfg.preview,
        )
        self._request_sample()

    def on_motion(self, x: int, y: int) -> None:
        if self.is_ended:
            return
        self._x, self._y = int(x), int(y)
        # 菜单打开时只记录坐标，不重新采样
        if self._state is CaptureState.MENU_OPEN:
            return
        self._request_sample()

    def on_button(self, button: Button) -> None:
        if self.is_ended:
            return
        if button is Button.PRIMARY:
            if self._state is CaptureState.MENU_OPEN and self._menu is not None:
                self._emit(self._menu.color)
            elif self._state is CaptureState.PREVIEW_OPEN:
                self._emit(self._color)
            else:
                self._request_sample(emit=True)
        elif button is Button.MIDDLE:
            self.open_menu()
        else:
            self._end(EndReason.BUTTON)

    def on_key(self, name: str) -> None:
        if self.is_ended:
            return
        key = normalize(name)
        if not key:
            return

        menu_key = normalize(self._cfg.menu_key)
        quit_key = normalize(self._cfg.quit_key)

        if menu_key and key == menu_key:
            self.open_menu()
            return
        if key in ESCAPE_NAMES:
            self._end(EndReason.ESCAPE)
            return
        if quit_key and key == quit_key:
            self._end(EndReason.QUIT_KEY)
            return

        if self._state is CaptureState.MENU_OPEN:
            return

        d = direction_of(key)
        if d is not None:
            self._nudge(*d)

    def open_menu(self) -> None:
        if self.is_ended or self._state is CaptureState.MENU_OPEN:
            return
        self._menu_seed = self._color
        self._menu = AdjustmentMenu(self._color, on_selected=self._on_menu_selected)
        self._state = CaptureState.MENU_OPEN
        try:
            self._menu_view.open_with(self._menu)
        except Exception:
            log.exception("menu view failed to open")

    def close_menu(self) -> None:
        """Host calls this whenever the menu closes, whatever the reason."""
        if self._state is not CaptureState.MENU_OPEN:
            return
        self._menu = None
        self._menu_seed = None
        self._state = CaptureState.PREVIEW_OPEN if self._cfg.preview else CaptureState.TRACKING
        # 关闭菜单后立即按当前指针位置重新采样
        self._request_sample()

    def cancel(self) -> None:
        self._end(EndReason.CANCELLED)

    # ---------- internals ----------

    def _nudge(self, dx: int, dy: int) -> None:
        try:
            self._pointer.move_by(dx, dy)
        except Exception:
            log.warning("pointer move failed dx=%s dy=%s", dx, dy, exc_info=True)
        # 屏幕边缘处指针不会真的移动，以宿主报告的位置为准
        try:
            self._x, self._y = (int(v) for v in self._pointer.position())
        except Exception:
            log.debug("pointer position unavailable after move", exc_info=True)
            self._x += dx
            self._y += dy
        self._request_sample()

    def _request_sample(self, *, emit: bool = False) -> None:
        if self.is_ended:
            return
        self._req_seq += 1
        if emit:
            self._emit_pending = True
        if self._task is None or self._task.done():
            self._task = asyncio.get_running_loop().create_task(self._sample_loop())

    async def _sample_loop(self) -> None:
        while not self.is_ended:
            seq = self._req_seq
            x, y = self._x, self._y
            emit = self._emit_pending
            self._emit_pending = False

            try:
                raw = await self._source.sample_color_at(x, y)
            except asyncio.CancelledError:
                raise
            except Exception as e:
                if self.is_ended:
                    return
                err = e if isinstance(e, SamplingUnavailable) else SamplingUnavailable(str(e) or type(e).__name__)
                if err is not e:
                    err.__cause__ = e
                log.warning("sampling failed at (%s, %s): %s", x, y, err)
                self._end(EndReason.ABORTED, err)
                return

            if self.is_ended:
                return
            if seq != self._req_seq:
                # superseded
                self._emit_pending = self._emit_pending or emit
                continue

            self._apply_sample(x, y, raw, emit)
            if seq == self._req_seq:
                return

    def _apply_sample(self, x: int, y: int, raw: Color, emit: bool) -> None:
        color = raw.with_format(self._cfg.format)
        self._color = color

        if self._state is CaptureState.IDLE:
            self._state = CaptureState.PREVIEW_OPEN if self._cfg.preview else CaptureState.TRACKING

        if self._state is CaptureState.PREVIEW_OPEN:
            try:
                self._overlay.show_color(x, y, color, self._cfg.preview_style)
            except Exception:
                log.exception("overlay update failed")
        elif self._state is CaptureState.MENU_OPEN:
            self._refresh_untouched_menu(color)

        if emit:
            self._emit(color)

    def _refresh_untouched_menu(self, color: Color) -> None:
        # 菜单打开前发出的采样晚到：用户还没动过滑块时跟上最新颜色
        menu = self._menu
        if menu is None or menu.color is not self._menu_seed:
            return
        self._menu_seed = color
        menu.set_color(color)

    def _on_menu_selected(self, color: Color) -> None:
        if self.is_ended:
            return
        self._emit(color)

    def _emit(self, color: Color) -> None:
        log.info("color emitted %s", color.to_text())
        self._emitted.emit(color)
        if self.is_ended:
            return
        if self._cfg.once or not self._cfg.persist:
            self._end(EndReason.DONE)
            return
        if self._state is not CaptureState.MENU_OPEN:
            self._state = CaptureState.PREVIEW_OPEN if self._cfg.preview else CaptureState.TRACKING

    def _end(self, reason: EndReason, error: Optional[BaseException] = None) -> None:
        if self.is_ended:
            return
        was_menu = self._state is CaptureState.MENU_OPEN
        self._state = CaptureState.ENDED
        self._end_info = CaptureEnded(reason=reason, error=error)
        self._req_seq += 1
        self._emit_pending = False

        task, self._task = self._task, None
        if task is not None and not task.done() and task is not _current_task():
            task.cancel()

        if was_menu:
            try:
                self._menu_view.close()
            except Exception:
                log.exception("menu view failed to close")
        self._menu = None
        self._menu_seed = None
        try:
            self._overlay.hide()
        except Exception:
            log.exception("overlay hide failed")

        log.info("capture ended reason=%s", reason.value)
        self._ended.emit(self._end_info)
        self._emitted.clear()
        self._ended.clear()


def _current_task() -> Optional[asyncio.Task]:
    try:
        return asyncio.current_task()
    except RuntimeError:
        return None
