from __future__ import annotations

from colorpick.app.pick_status import PickStatus
from colorpick.event_bus import EventBus
from colorpick.event_types import EventType


def test_status_text_follows_session_events() -> None:
    bus = EventBus()
    texts = []
    status = PickStatus(bus=bus, sink=texts.append)
    assert status.text == "Color Picker"

    bus.post(EventType.PICK_MODE_ENTERED, session_id="s1")
    bus.post(EventType.COLOR_PICKED, session_id="s1", pixel=0xFF0000, hex="#FF0000", text="rgb(255, 0, 0)")
    bus.post(EventType.PICK_MODE_EXITED, session_id="s1", reason="escape", picked=1)
    bus.dispatch_pending()

    assert texts == [
        "Color Picker (picking)",
        "Color Picker (picking) last: rgb(255, 0, 0)",
        "Color Picker last: rgb(255, 0, 0)",
    ]


def test_close_stops_updates() -> None:
    bus = EventBus()
    texts = []
    status = PickStatus(bus=bus, sink=texts.append)
    status.close()

    bus.post(EventType.PICK_MODE_ENTERED, session_id="s1")
    bus.dispatch_pending()
    assert texts == []
