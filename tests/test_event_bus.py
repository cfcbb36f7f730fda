from __future__ import annotations

import pytest

from colorpick.event_bus import Event, EventBus
from colorpick.event_types import EventType, as_event_type
from colorpick.events.payloads import ColorPickedPayload, HistoryChangedPayload


def test_payload_type_is_enforced() -> None:
    bus = EventBus()
    with pytest.raises(TypeError):
        bus.post_payload(EventType.COLOR_PICKED, {"hex": "#FFFFFF"})
    with pytest.raises(TypeError):
        bus.publish(Event(type=EventType.COLOR_PICKED, payload={}))
    with pytest.raises(TypeError):
        bus.post_payload(EventType.COLOR_PICKED, HistoryChangedPayload(history=[]))
    with pytest.raises(TypeError):
        bus.post_payload(EventType.SUMMON_REQUEST, HistoryChangedPayload(history=[]))
    assert bus.pending_count_approx() == 0


def test_post_builds_payload_from_fields() -> None:
    bus = EventBus()
    seen = []
    bus.subscribe(EventType.HISTORY_CHANGED, seen.append)

    bus.post(EventType.HISTORY_CHANGED, history=[0xFF0000])
    bus.dispatch_pending()
    assert seen[0].payload == HistoryChangedPayload(history=[0xFF0000])

    with pytest.raises(TypeError):
        bus.post(EventType.HISTORY_CHANGED)
    with pytest.raises(TypeError):
        bus.post(EventType.SUMMON_REQUEST, source="tray")


def test_event_type_parsing() -> None:
    assert as_event_type("*") is EventType.ANY
    assert as_event_type(" COLOR_PICKED ") is EventType.COLOR_PICKED
    with pytest.raises(ValueError):
        as_event_type("NOPE")


def test_handlers_run_only_on_dispatch() -> None:
    bus = EventBus()
    seen = []
    everything = []
    bus.subscribe(EventType.COLOR_PICKED, seen.append)
    bus.subscribe("*", everything.append)

    payload = ColorPickedPayload(session_id="s", pixel=0xFFFFFF, hex="#FFFFFF", text="#FFFFFF")
    bus.post_payload(EventType.COLOR_PICKED, payload)
    bus.post(EventType.SUMMON_REQUEST)
    assert seen == []

    assert bus.dispatch_pending() == 2
    assert [e.payload for e in seen] == [payload]
    assert [e.type for e in everything] == [EventType.COLOR_PICKED, EventType.SUMMON_REQUEST]


def test_max_events_and_unsubscribe() -> None:
    bus = EventBus()
    seen = []
    bus.subscribe(EventType.SUMMON_REQUEST, seen.append)
    for _ in range(3):
        bus.post(EventType.SUMMON_REQUEST)

    assert bus.dispatch_pending(max_events=2) == 2
    # 绑定方法：按相等而不是同一对象取消订阅
    bus.unsubscribe(EventType.SUMMON_REQUEST, seen.append)
    assert bus.dispatch_pending() == 1
    assert len(seen) == 2


def test_handler_errors() -> None:
    bus = EventBus()

    def boom(ev: Event) -> None:
        raise RuntimeError("handler bug")

    bus.subscribe(EventType.SUMMON_REQUEST, boom)
    bus.post(EventType.SUMMON_REQUEST)
    bus.post(EventType.SUMMON_REQUEST)
    with pytest.raises(RuntimeError):
        bus.dispatch_pending()
    assert bus.pending_count_approx() == 1

    errors = []
    bus.post(EventType.SUMMON_REQUEST)
    n = bus.dispatch_pending(on_error=lambda ev, e: errors.append((ev.type, str(e))))
    assert n == 2
    assert errors == [(EventType.SUMMON_REQUEST, "handler bug")] * 2
