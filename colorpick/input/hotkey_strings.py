from __future__ import annotations

import re

from colorpick.input.keys import normalize

# 将 "ctrl+alt+c" 转为 pynput GlobalHotKeys 需要的 "<ctrl>+<alt>+c" 格式
# https://pynput.readthedocs.io/en/latest/keyboard.html#global-hotkeys


_MOD_ALIASES = {
    "ctrl": "<ctrl>",
    "control": "<ctrl>",
    "alt": "<alt>",
    "shift": "<shift>",
    "cmd": "<cmd>",
    "win": "<cmd>",
    "super": "<cmd>",
}

_SPECIAL_KEYS = {
    "esc": "<esc>",
    "escape": "<esc>",
    "enter": "<enter>",
    "space": "<space>",
    "tab": "<tab>",
    "insert": "<insert>",
    "home": "<home>",
    "end": "<end>",
    "pageup": "<page_up>",
    "pagedown": "<page_down>",
    "print": "<print_screen>",
}

_FKEY_RE = re.compile(r"^f([1-9]|1[0-2])$")  # f1..f12


def to_pynput_hotkey(s: str) -> str:
    """
    'ctrl+alt+c' -> '<ctrl>+<alt>+c'.

    A combination without any non-modifier key is rejected: GlobalHotKeys
    would otherwise fire on a bare modifier press.
    """
    s = normalize(s)
    if not s:
        raise ValueError("empty hotkey")

    out_parts: list[str] = []
    has_key = False
    for p in (x for x in s.split("+") if x):
        if p in _MOD_ALIASES:
            part = _MOD_ALIASES[p]
        elif p in _SPECIAL_KEYS:
            part, has_key = _SPECIAL_KEYS[p], True
        elif _FKEY_RE.match(p):
            part, has_key = f"<{p}>", True
        elif len(p) == 1:
            part, has_key = p, True
        else:
            raise ValueError(f"unknown key in hotkey: {p!r}")

        if part not in out_parts:
            out_parts.append(part)

    if not has_key:
        raise ValueError(f"hotkey needs a non-modifier key: {s!r}")
    return "+".join(out_parts)
