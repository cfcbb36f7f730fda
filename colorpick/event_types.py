# File: colorpick/event_types.py
from __future__ import annotations

from enum import Enum


class EventType(str, Enum):
    ANY = "*"

    # summon / session lifecycle
    SUMMON_REQUEST = "SUMMON_REQUEST"
    PICK_MODE_ENTERED = "PICK_MODE_ENTERED"
    COLOR_PICKED = "COLOR_PICKED"
    PICK_MODE_EXITED = "PICK_MODE_EXITED"

    # lists
    HISTORY_CHANGED = "HISTORY_CHANGED"
    PINNED_CHANGED = "PINNED_CHANGED"

    def __str__(self) -> str:
        return self.value


def as_event_type(t: "EventType | str") -> EventType:
    if isinstance(t, EventType):
        return t

    s = (t or "").strip()
    if s == "*":
        return EventType.ANY

    try:
        return EventType(s)
    except ValueError as e:
        raise ValueError(f"Unknown event type: {t!r}") from e
