from __future__ import annotations

import pytest

# pynput 需要可用的桌面后端（X11 / Windows / macOS）
pytest.importorskip("pynput.keyboard")

from colorpick.event_bus import EventBus
from colorpick.event_types import EventType
from colorpick.input import global_hotkeys
from colorpick.models.settings import PickerSettings
from colorpick.store.settings_store import SettingsStore


class DummyHotKeys:
    instances: list = []

    def __init__(self, mapping) -> None:
        self.mapping = mapping
        self.started = False
        self.stopped = False
        DummyHotKeys.instances.append(self)

    def start(self) -> None:
        self.started = True

    def stop(self) -> None:
        self.stopped = True


@pytest.fixture(autouse=True)
def fake_hotkeys(monkeypatch):
    DummyHotKeys.instances = []
    monkeypatch.setattr(global_hotkeys.keyboard, "GlobalHotKeys", DummyHotKeys)


def test_hotkey_posts_summon_request() -> None:
    bus = EventBus()
    store = SettingsStore(PickerSettings(shortcut="ctrl+shift+p"))
    svc = global_hotkeys.GlobalHotkeyService(bus=bus, store=store)
    svc.start()

    (hk,) = DummyHotKeys.instances
    assert hk.started and svc.running
    (combo, callback) = next(iter(hk.mapping.items()))
    assert combo == "<ctrl>+<shift>+p"

    seen = []
    bus.subscribe(EventType.SUMMON_REQUEST, seen.append)
    callback()
    bus.dispatch_pending()
    assert len(seen) == 1


def test_settings_change_reloads_or_disables() -> None:
    store = SettingsStore(PickerSettings())
    svc = global_hotkeys.GlobalHotkeyService(bus=EventBus(), store=store)
    svc.start()

    store.update(shortcut="alt+f2")
    first, second = DummyHotKeys.instances
    assert first.stopped
    assert list(second.mapping) == ["<alt>+<f2>"]

    store.update(enable_shortcut=False)
    assert second.stopped
    assert not svc.running

    # 与快捷键无关的设置不触发重载
    store.update(auto_copy=False)
    assert len(DummyHotKeys.instances) == 2
    svc.close()


def test_invalid_shortcut_leaves_service_stopped() -> None:
    store = SettingsStore(PickerSettings(shortcut="ctrl+alt"))
    svc = global_hotkeys.GlobalHotkeyService(bus=EventBus(), store=store)
    svc.start()
    assert not svc.running
    assert DummyHotKeys.instances == []
