# File: colorpick/event_bus.py
from __future__ import annotations

import queue
import threading
import time
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Any, Callable, DefaultDict, List, Optional

from colorpick.event_types import EventType, as_event_type
from colorpick.events.payloads import PAYLOAD_TYPES


@dataclass(frozen=True)
class Event:
    type: EventType
    payload: Any = None  # PAYLOAD_TYPES[type] 的实例，或 None
    ts: float = field(default_factory=time.time)


Handler = Callable[[Event], None]
ErrorHandler = Callable[[Event, BaseException], None]


class EventBus:
    """
    Strict typed-payload EventBus.

    - every event type has at most one payload class (events.payloads.PAYLOAD_TYPES);
      a payload of any other type, dicts included, is rejected at post time
    - post(event_type, **fields) builds that payload from keyword fields
    - posting is thread-safe and only enqueues (pynput / hotkey threads post too);
      handlers run in dispatch_pending(), driven on the UI thread by EventPump
    """

    def __init__(self) -> None:
        self._q: "queue.Queue[Event]" = queue.Queue()
        self._handlers: DefaultDict[EventType, List[Handler]] = defaultdict(list)
        self._lock = threading.RLock()

    # ---------- publish side ----------
    def publish(self, event: Event) -> None:
        if not isinstance(event, Event):
            raise TypeError("publish() expects an Event")
        _check_payload(event.type, event.payload)
        self._q.put(event)

    def post_payload(self, event_type: EventType | str, payload: Any = None) -> None:
        self.publish(Event(type=as_event_type(event_type), payload=payload))

    def post(self, event_type: EventType | str, **fields: Any) -> None:
        et = as_event_type(event_type)
        cls = PAYLOAD_TYPES.get(et)
        if cls is None:
            if fields:
                raise TypeError(f"{et.value} carries no payload, got fields {sorted(fields)}")
            self.post_payload(et, None)
            return
        # 缺字段 / 多字段由 dataclass 构造函数报 TypeError
        self.post_payload(et, cls(**fields))

    # ---------- subscribe side ----------
    def subscribe(self, event_type: EventType | str, handler: Handler) -> None:
        et = as_event_type(event_type)
        if handler is None:
            raise ValueError("handler cannot be None")
        with self._lock:
            self._handlers[et].append(handler)

    def unsubscribe(self, event_type: EventType | str, handler: Handler) -> None:
        et = as_event_type(event_type)
        with self._lock:
            if et not in self._handlers:
                return
            # 绑定方法每次取值都是新对象，只能按 == 比较
            self._handlers[et] = [h for h in self._handlers[et] if h != handler]

    # ---------- dispatch side ----------
    def dispatch_pending(self, *, max_events: int = 200, on_error: Optional[ErrorHandler] = None) -> int:
        """
        Run handlers for up to max_events queued events; returns how many were
        dispatched. Without on_error the first handler exception propagates and
        the remaining events stay queued.
        """
        dispatched = 0
        while dispatched < max_events:
            try:
                ev = self._q.get_nowait()
            except queue.Empty:
                break

            dispatched += 1
            try:
                self._dispatch_one(ev)
            except Exception as e:
                if on_error is None:
                    raise
                on_error(ev, e)
        return dispatched

    def _dispatch_one(self, ev: Event) -> None:
        with self._lock:
            handlers = list(self._handlers.get(ev.type, []))
            handlers += self._handlers.get(EventType.ANY, [])

        for h in handlers:
            h(ev)

    def pending_count_approx(self) -> int:
        return int(self._q.qsize())


def _check_payload(et: EventType, payload: Any) -> None:
    if isinstance(payload, dict):
        raise TypeError(f"dict payload is not allowed for {et.value}")
    cls = PAYLOAD_TYPES.get(et)
    if cls is None:
        if payload is not None:
            raise TypeError(f"{et.value} carries no payload, got {type(payload).__name__}")
        return
    if not isinstance(payload, cls):
        raise TypeError(f"{et.value} expects {cls.__name__}, got {type(payload).__name__}")
