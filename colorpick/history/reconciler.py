# File: colorpick/history/reconciler.py
"""
历史 / 收藏列表：纯算法 + 一个按索引原地更新的条目容器。

列表长度变化时先按数量增删（只在尾部追加空白条目 / 只销毁尾部多余条目），
再逐个位置写入内容；位置不变的条目保持同一个对象。
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Generic, List, Optional, Protocol, Sequence, TypeVar


@dataclass(frozen=True)
class HistoryEntry:
    pixel: int
    pinned: bool = False


class OpKind(str, Enum):
    APPEND = "append"
    REMOVE = "remove"
    UPDATE = "update"


@dataclass(frozen=True)
class Op:
    kind: OpKind
    index: int
    entry: Optional[HistoryEntry] = None


def display_entries(history: Sequence[int], pinned: Sequence[int], *, pin_display: bool) -> List[HistoryEntry]:
    if pin_display:
        return [HistoryEntry(pixel=p, pinned=True) for p in pinned]
    pinned_set = set(pinned)
    return [HistoryEntry(pixel=p, pinned=p in pinned_set) for p in history]


def plan_reconcile(old: Sequence[Optional[HistoryEntry]], new: Sequence[HistoryEntry]) -> List[Op]:
    """
    Ops to turn `old` into `new`:
    APPEND blanks at the tail (or REMOVE from the tail, last index first),
    then UPDATE every index whose content differs.
    """
    ops: List[Op] = []
    diff = len(new) - len(old)
    if diff > 0:
        for i in range(len(old), len(new)):
            ops.append(Op(OpKind.APPEND, i))
    elif diff < 0:
        for i in range(len(old) - 1, len(new) - 1, -1):
            ops.append(Op(OpKind.REMOVE, i))

    for i, entry in enumerate(new):
        prev = old[i] if i < len(old) else None
        if prev != entry:
            ops.append(Op(OpKind.UPDATE, i, entry))
    return ops


class EntryView(Protocol):
    def set_entry(self, entry: HistoryEntry) -> None: ...

    def destroy(self) -> None: ...


V = TypeVar("V", bound=EntryView)


class ColorSection(Generic[V]):
    """
    Owns the rendered entry views of one menu section.
    `factory()` creates a blank view; views are never recreated just because
    the list length changed.
    """

    def __init__(self, factory: Callable[[], V]) -> None:
        self._factory = factory
        self._views: List[V] = []
        self._entries: List[Optional[HistoryEntry]] = []

    @property
    def views(self) -> List[V]:
        return list(self._views)

    @property
    def entries(self) -> List[Optional[HistoryEntry]]:
        return list(self._entries)

    def set_list(self, entries: Sequence[HistoryEntry]) -> List[Op]:
        ops = plan_reconcile(self._entries, entries)
        for op in ops:
            if op.kind is OpKind.APPEND:
                self._views.append(self._factory())
                self._entries.append(None)
            elif op.kind is OpKind.REMOVE:
                view = self._views.pop(op.index)
                self._entries.pop(op.index)
                view.destroy()
            else:
                assert op.entry is not None
                self._views[op.index].set_entry(op.entry)
                self._entries[op.index] = op.entry
        return ops


def _capacity(capacity: int) -> int:
    return max(1, int(capacity))


def toggle_pinned(pinned: Sequence[int], pixel: int, capacity: int) -> List[int]:
    if pixel in pinned:
        return [p for p in pinned if p != pixel]
    return [pixel, *pinned][: _capacity(capacity)]


def record_history(history: Sequence[int], pixel: int, capacity: int) -> List[int]:
    rest = [p for p in history if p != pixel]
    return [pixel, *rest][: _capacity(capacity)]
