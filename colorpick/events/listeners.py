# File: colorpick/events/listeners.py
from __future__ import annotations

import logging
from typing import Callable, Generic, List, TypeVar

log = logging.getLogger(__name__)

T = TypeVar("T")


class Listeners(Generic[T]):
    """
    同步订阅列表：
    - subscribe() 返回取消订阅函数
    - emit() 逐个调用；单个订阅者抛异常只记日志，不影响其他订阅者
    """

    def __init__(self, name: str) -> None:
        self._name = name
        self._fns: List[Callable[[T], None]] = []

    def subscribe(self, fn: Callable[[T], None]) -> Callable[[], None]:
        if fn is None:
            raise ValueError("listener cannot be None")
        self._fns.append(fn)

        def _unsub() -> None:
            try:
                self._fns.remove(fn)
            except ValueError:
                pass

        return _unsub

    def emit(self, value: T) -> None:
        for fn in list(self._fns):
            try:
                fn(value)
            except Exception:
                log.exception("listener failed: %s", self._name)

    def clear(self) -> None:
        self._fns.clear()

    def __len__(self) -> int:
        return len(self._fns)
