# File: colorpick/app/controller.py
from __future__ import annotations

import logging
from typing import Any, List, Optional, Set

from colorpick.color.model import Color, Format, swatch_svg
from colorpick.errors import AlreadyRunningError
from colorpick.event_bus import Event, EventBus
from colorpick.event_types import EventType
from colorpick.events.payloads import (
    ColorPickedPayload,
    HistoryChangedPayload,
    PickModeEnteredPayload,
    PickModeExitedPayload,
    PinnedChangedPayload,
)
from colorpick.history.reconciler import HistoryEntry, display_entries, record_history, toggle_pinned
from colorpick.logging_context import log_context, new_corr_id
from colorpick.models.settings import PickerSettings
from colorpick.pick.host import Clipboard, InputGrab, Notifier, NotifyStyle, StatusIndicator
from colorpick.pick.session import MachineFactory, PickSessionRunner
from colorpick.pick.state_machine import CaptureConfig, CaptureEnded, CaptureStateMachine
from colorpick.store.settings_store import SettingsStore

log = logging.getLogger(__name__)

NOTIFY_TITLE = "Color Picker"
RICH_TIMEOUT_S = 2.0


class PickerController:
    """
    顶层编排：

    - summon(): 打开一个持续取色会话；已有会话（包括 pick_async）时直接忽略
    - 每次取到颜色：加入本次批次、写入历史、发 COLOR_PICKED，按设置发通知
    - 会话结束：释放输入独占、清除忙碌状态；auto_copy 时把批次以空格连接写入剪贴板
    - pick_async(): 唯一的程序化接口，与 summon 共用“同一时刻一个会话”的名额
    """

    def __init__(
        self,
        *,
        settings: PickerSettings,
        store: SettingsStore,
        bus: EventBus,
        factory: MachineFactory,
        grab: InputGrab,
        clipboard: Clipboard,
        notifier: Notifier,
        status: Optional[StatusIndicator] = None,
    ) -> None:
        self._settings = settings
        self._store = store
        self._bus = bus
        self._factory = factory
        self._grab = grab
        self._clipboard = clipboard
        self._notifier = notifier
        self._status = status

        self._runner = PickSessionRunner(factory=factory, grab=grab)

        self._machine: Optional[CaptureStateMachine] = None
        self._grab_handle: Any = None
        self._session_id = ""
        self._picked: List[str] = []

        self._unsub_settings = store.subscribe(self._on_settings_changed)
        self._bus.subscribe(EventType.SUMMON_REQUEST, self._on_summon_request)

    # ---------- read side ----------

    @property
    def settings(self) -> PickerSettings:
        return self._settings

    @property
    def busy(self) -> bool:
        return self._machine is not None or self._runner.active

    @property
    def machine(self) -> Optional[CaptureStateMachine]:
        return self._machine or self._runner.machine

    @property
    def picked(self) -> List[str]:
        return list(self._picked)

    def capture_config(self, *, once: bool = False) -> CaptureConfig:
        s = self._settings
        return CaptureConfig(
            once=once,
            persist=s.persist,
            preview=s.preview,
            preview_style=s.preview_style,
            format=s.session_format,
            menu_key=s.menu_key,
            quit_key=s.quit_key,
        )

    def section_entries(self) -> List[HistoryEntry]:
        s = self._settings
        return display_entries(s.history, s.pinned, pin_display=s.pin_display)

    # ---------- interactive session ----------

    def summon(self) -> None:
        if self.busy:
            log.debug("summon ignored: a session is active")
            return

        machine = self._factory(self.capture_config())
        session_id = new_corr_id()

        with log_context(corr_id=session_id, session=session_id, action="summon"):
            self._machine = machine
            self._session_id = session_id
            self._picked = []

            machine.subscribe_emitted(self.inform)
            machine.subscribe_ended(self._on_ended)

            try:
                self._grab_handle = self._grab.acquire(machine)
            except Exception:
                log.exception("input grab failed, session not started")
                self._machine = None
                self._session_id = ""
                raise

            self._set_busy(True)
            self._bus.post_payload(EventType.PICK_MODE_ENTERED, PickModeEnteredPayload(session_id=session_id))
            machine.start()

    def dispel(self) -> None:
        if self._machine is not None:
            self._machine.cancel()
        elif self._runner.active:
            self._runner.cancel()

    def inform(self, color: Color) -> None:
        text = color.to_text()
        self._picked.append(text)

        s = self._settings
        self._store.update(history=record_history(s.history, color.pixel, s.menu_size))

        self._bus.post_payload(
            EventType.COLOR_PICKED,
            ColorPickedPayload(session_id=self._session_id, pixel=color.pixel, hex=color.hex, text=text),
        )

        if not s.enable_notify:
            return
        try:
            if s.notify_style is NotifyStyle.MESSAGE:
                self._notifier.notify_message(NOTIFY_TITLE, f"{text} is picked.")
            else:
                self._notifier.notify_rich(swatch_svg(color), text, "", RICH_TIMEOUT_S)
        except Exception:
            log.exception("notification failed")

    def _on_ended(self, ev: CaptureEnded) -> None:
        self._machine = None
        handle, self._grab_handle = self._grab_handle, None
        if handle is not None:
            try:
                self._grab.release(handle)
            except Exception:
                log.exception("input grab release failed")

        self._set_busy(False)

        picked, self._picked = self._picked, []
        if picked and self._settings.auto_copy:
            self._clipboard.write(" ".join(picked))

        session_id, self._session_id = self._session_id, ""
        log.info("pick mode exited reason=%s picked=%d", ev.reason.value, len(picked))
        self._bus.post_payload(
            EventType.PICK_MODE_EXITED,
            PickModeExitedPayload(session_id=session_id, reason=ev.reason.value, picked=len(picked)),
        )

    # ---------- programmatic ----------

    async def pick_async(self) -> str:
        """
        Pick one color and return it as #RRGGBB.

        Raises AlreadyRunningError when any session is active and
        PickCancelledError when the user quits without picking.
        Nothing is added to history or the clipboard.
        """
        if self.busy:
            raise AlreadyRunningError("a pick session is already running")
        self._set_busy(True)
        try:
            return await self._runner.pick(config=self.capture_config(once=True))
        finally:
            self._set_busy(False)

    # ---------- lists / settings ----------

    def toggle_pin(self, pixel: int) -> List[int]:
        s = self._settings
        pinned = toggle_pinned(s.pinned, int(pixel) & 0xFFFFFF, s.menu_size)
        self._store.update(pinned=pinned)
        return pinned

    def set_pin_display(self, on: bool) -> None:
        self._store.update(pin_display=bool(on))

    def set_format(self, fmt: "Format | int") -> None:
        self._store.update(format=Format.from_ordinal(int(fmt)))

    def copy_color(self, pixel: int) -> str:
        text = Color.from_pixel(pixel).with_format(self._settings.session_format).to_text()
        self._clipboard.write(text)
        return text

    def close(self) -> None:
        self.dispel()
        self._unsub_settings()
        self._bus.unsubscribe(EventType.SUMMON_REQUEST, self._on_summon_request)

    # ---------- internals ----------

    def _set_busy(self, busy: bool) -> None:
        if self._status is None:
            return
        try:
            self._status.set_busy(busy)
        except Exception:
            log.exception("status indicator update failed")

    def _on_summon_request(self, _ev: Event) -> None:
        self.summon()

    def _on_settings_changed(self, snap: PickerSettings, changed: Set[str]) -> None:
        self._settings = snap
        if "history" in changed:
            self._bus.post_payload(EventType.HISTORY_CHANGED, HistoryChangedPayload(history=list(snap.history)))
        if changed & {"pinned", "pin_display"}:
            self._bus.post_payload(EventType.PINNED_CHANGED, PinnedChangedPayload(pinned=list(snap.pinned)))
