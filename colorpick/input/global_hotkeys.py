from __future__ import annotations

import logging
from typing import Optional, Set

from pynput import keyboard

from colorpick.event_bus import EventBus
from colorpick.event_types import EventType
from colorpick.input.hotkey_strings import to_pynput_hotkey
from colorpick.models.settings import PickerSettings
from colorpick.store.settings_store import SettingsStore

log = logging.getLogger(__name__)

_WATCHED = frozenset({"enable_shortcut", "shortcut"})


class GlobalHotkeyService:
    """
    Global summon shortcut (pynput.keyboard.GlobalHotKeys).

    The listener thread only posts SUMMON_REQUEST; the UI side consumes it.
    start() 可重复调用：设置变化时用于重载热键。
    """

    def __init__(self, *, bus: EventBus, store: SettingsStore) -> None:
        self._bus = bus
        self._store = store
        self._settings = store.snapshot
        self._listener: Optional[keyboard.GlobalHotKeys] = None
        self._unsub = store.subscribe(self._on_settings)

    @property
    def running(self) -> bool:
        return self._listener is not None

    def start(self) -> None:
        self.stop()

        s = self._settings
        if not s.enable_shortcut:
            return

        try:
            hk = to_pynput_hotkey(s.shortcut)
        except ValueError as e:
            log.error("invalid summon shortcut %r: %s", s.shortcut, e)
            return

        try:
            self._listener = keyboard.GlobalHotKeys({hk: self._on_hotkey})
            self._listener.start()
            log.info("global shortcut enabled: %s", hk)
        except Exception:
            self._listener = None
            log.exception("global shortcut failed to start")

    def stop(self) -> None:
        if self._listener is not None:
            try:
                self._listener.stop()
            except Exception:
                log.warning("global shortcut listener stop failed", exc_info=True)
            self._listener = None

    def close(self) -> None:
        self._unsub()
        self.stop()

    def _on_hotkey(self) -> None:
        self._bus.post(EventType.SUMMON_REQUEST)

    def _on_settings(self, snap: PickerSettings, changed: Set[str]) -> None:
        self._settings = snap
        if changed & _WATCHED:
            self.start()
