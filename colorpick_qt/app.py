# colorpick_qt/app.py
from __future__ import annotations

import asyncio
import logging
from typing import Optional, Set

from PySide6.QtCore import QObject

from colorpick.app.controller import PickerController
from colorpick.app.pick_status import PickStatus
from colorpick.errors import AlreadyRunningError, PickCancelledError
from colorpick.event_bus import Event, EventBus
from colorpick.event_types import EventType
from colorpick.input.global_hotkeys import GlobalHotkeyService
from colorpick.input.grab import ExclusionZone, LoopScheduler, PynputInputGrab, PynputPointer
from colorpick.models.settings import PickerSettings
from colorpick.pick.capture import MssSamplingSource
from colorpick.pick.state_machine import CaptureConfig, CaptureStateMachine
from colorpick.store.settings_store import SettingsStore
from colorpick_qt.clipboard import QtClipboard
from colorpick_qt.dispatcher import QtDispatcher
from colorpick_qt.event_pump import EventPump
from colorpick_qt.notify import QtNotifier
from colorpick_qt.pick.menu_window import AdjustmentMenuWindow
from colorpick_qt.pick.preview_window import PreviewOverlayWindow
from colorpick_qt.tray import TrayIcon

log = logging.getLogger(__name__)

_TRAY_FIELDS = frozenset({"systray", "format", "enable_format", "pin_display"})


class PickerApp(QObject):
    """
    组装宿主协作者与 PickerController：
    - 托盘 / 预览窗 / 调色菜单（Qt）
    - mss 采样、pynput 输入独占与指针移动
    - EventBus 由 EventPump 在 UI 线程分发；托盘列表按 HISTORY_CHANGED / PINNED_CHANGED 刷新，
      托盘提示由 PickStatus 按 PICK_MODE_ENTERED / COLOR_PICKED / PICK_MODE_EXITED 更新
    必须在运行中的事件循环里构造（QtAsyncio）。
    """

    def __init__(
        self,
        *,
        store: SettingsStore,
        bus: EventBus,
        loop: asyncio.AbstractEventLoop,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        self._store = store
        self._bus = bus
        self._closed = asyncio.Event()

        settings = store.snapshot

        self._dispatcher = QtDispatcher(self)
        self._exclusion = ExclusionZone()
        self._grab = PynputInputGrab(scheduler=LoopScheduler(loop), exclusion=self._exclusion)
        self._pointer = PynputPointer()
        self._source = MssSamplingSource()
        self._clipboard = QtClipboard()

        self._overlay = PreviewOverlayWindow()
        self._menu_window = AdjustmentMenuWindow(clipboard=self._clipboard, exclusion=self._exclusion)

        self._tray = TrayIcon(
            on_summon=lambda: self._bus.post(EventType.SUMMON_REQUEST),
            on_copy=lambda pixel: self._controller.copy_color(pixel),
            on_pin=lambda pixel: self._controller.toggle_pin(pixel),
            on_format=lambda fmt: self._controller.set_format(fmt),
            on_pin_display=lambda on: self._controller.set_pin_display(on),
            on_quit=self.quit,
            parent=self,
        )
        self._notifier = QtNotifier(dispatcher=self._dispatcher, tray=self._tray.tray)

        self._controller = PickerController(
            settings=settings,
            store=store,
            bus=bus,
            factory=self._make_machine,
            grab=self._grab,
            clipboard=self._clipboard,
            notifier=self._notifier,
            status=self._tray,
        )
        self._hotkeys = GlobalHotkeyService(bus=bus, store=store)
        self._pump = EventPump(bus=bus, parent=self)
        self._status = PickStatus(bus=bus, sink=self._tray.set_tooltip)

        self._bus.subscribe(EventType.HISTORY_CHANGED, self._on_lists_changed)
        self._bus.subscribe(EventType.PINNED_CHANGED, self._on_lists_changed)
        self._unsub_settings = store.subscribe(self._on_settings)

    @property
    def controller(self) -> PickerController:
        return self._controller

    # ---------- lifecycle ----------

    def start(self, *, interactive: bool = True) -> None:
        """interactive=False: no tray, no global shortcut (single programmatic pick)."""
        self._pump.start()
        if not interactive:
            return
        self._apply_tray(self._store.snapshot)
        self._tray.set_entries(self._controller.section_entries())
        self._hotkeys.start()
        log.info("picker started")

    async def wait_closed(self) -> None:
        await self._closed.wait()

    def quit(self) -> None:
        self._closed.set()

    def close(self) -> None:
        self._controller.close()
        self._status.close()
        self._hotkeys.close()
        self._unsub_settings()
        self._pump.stop()
        self._tray.set_visible(False)
        self._overlay.close()
        self._menu_window.set_on_closed(None)
        self._menu_window.close()
        log.info("picker closed")

    async def pick_once(self) -> Optional[str]:
        """One programmatic pick; None when cancelled."""
        try:
            return await self._controller.pick_async()
        except PickCancelledError as e:
            log.info("pick cancelled: %s", e.reason)
            return None
        except AlreadyRunningError:
            log.warning("pick requested while a session is active")
            return None

    # ---------- wiring ----------

    def _make_machine(self, cfg: CaptureConfig) -> CaptureStateMachine:
        machine = CaptureStateMachine(
            config=cfg,
            source=self._source,
            pointer=self._pointer,
            overlay=self._overlay if cfg.preview else None,
            menu_view=self._menu_window,
        )
        self._menu_window.set_on_closed(machine.close_menu)
        return machine

    def _apply_tray(self, s: PickerSettings) -> None:
        self._tray.set_visible(s.systray)
        self._tray.set_format(s.format, enabled=s.enable_format)
        self._tray.set_pin_display(s.pin_display)

    def _on_lists_changed(self, _ev: Event) -> None:
        self._tray.set_entries(self._controller.section_entries())

    def _on_settings(self, snap: PickerSettings, changed: Set[str]) -> None:
        if changed & _TRAY_FIELDS:
            self._apply_tray(snap)


async def run_picker(*, store: SettingsStore, bus: EventBus, once: bool = False) -> Optional[str]:
    """
    Entry coroutine for QtAsyncio.run.

    once=True: pick a single color without tray and return it;
    otherwise run until Quit.
    """
    picker = PickerApp(store=store, bus=bus, loop=asyncio.get_running_loop())
    try:
        if once:
            picker.start(interactive=False)
            return await picker.pick_once()
        picker.start()
        await picker.wait_closed()
        return None
    finally:
        picker.close()
