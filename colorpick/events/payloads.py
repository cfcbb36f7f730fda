# File: colorpick/events/payloads.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List

from colorpick.event_types import EventType


# -------- session --------

@dataclass(frozen=True)
class PickModeEnteredPayload:
    session_id: str


@dataclass(frozen=True)
class ColorPickedPayload:
    session_id: str
    pixel: int
    hex: str
    text: str


@dataclass(frozen=True)
class PickModeExitedPayload:
    session_id: str
    reason: str = ""
    picked: int = 0


# -------- lists --------

@dataclass(frozen=True)
class HistoryChangedPayload:
    history: List[int]


@dataclass(frozen=True)
class PinnedChangedPayload:
    pinned: List[int]


# EventType -> payload class；不在表里的事件不带 payload
PAYLOAD_TYPES: Dict[EventType, type] = {
    EventType.PICK_MODE_ENTERED: PickModeEnteredPayload,
    EventType.COLOR_PICKED: ColorPickedPayload,
    EventType.PICK_MODE_EXITED: PickModeExitedPayload,
    EventType.HISTORY_CHANGED: HistoryChangedPayload,
    EventType.PINNED_CHANGED: PinnedChangedPayload,
}
