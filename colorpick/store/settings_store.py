# File: colorpick/store/settings_store.py
from __future__ import annotations

import logging
from dataclasses import fields, replace
from typing import Any, Callable, List, Optional, Set

from colorpick.models.settings import PickerSettings
from colorpick.repos.settings_repo import SettingsRepo

log = logging.getLogger(__name__)

SettingsListener = Callable[[PickerSettings, Set[str]], None]

_FIELD_NAMES = frozenset(f.name for f in fields(PickerSettings))


class SettingsStore:
    """
    当前设置快照的唯一持有者：
    - snapshot 为不可变 PickerSettings，组件构造时拿一份
    - update(**changes) 生成新快照 -> 落盘（有 repo 时）-> 通知订阅者(新快照, 变更字段)
    """

    def __init__(self, snapshot: PickerSettings, *, repo: Optional[SettingsRepo] = None) -> None:
        self._snap = snapshot
        self._repo = repo
        self._listeners: List[SettingsListener] = []

    @property
    def snapshot(self) -> PickerSettings:
        return self._snap

    # ---------- subscription ----------
    def subscribe(self, fn: SettingsListener) -> Callable[[], None]:
        self._listeners.append(fn)

        def _unsub() -> None:
            try:
                self._listeners.remove(fn)
            except ValueError:
                pass

        return _unsub

    def _emit(self, changed: Set[str]) -> None:
        snap = self._snap
        for fn in list(self._listeners):
            try:
                fn(snap, changed)
            except Exception:
                log.exception("settings listener failed")

    # ---------- write ----------
    def update(self, **changes: Any) -> PickerSettings:
        unknown = set(changes) - _FIELD_NAMES
        if unknown:
            raise KeyError(f"unknown settings fields: {sorted(unknown)}")

        old = self._snap
        changed = {k for k, v in changes.items() if getattr(old, k) != v}
        if not changed:
            return old

        # 经 from_dict 归一化（裁剪 / 去重）
        new = PickerSettings.from_dict(replace(old, **changes).to_dict())
        self._snap = new

        if self._repo is not None:
            self._repo.save(new)

        self._emit(changed)
        return new
