# File: colorpick/input/keys.py
from __future__ import annotations

from typing import Dict, Optional, Tuple

ESCAPE_NAMES = frozenset({"esc", "escape"})

# 方向键 / WASD / hjkl -> 每次移动 1 个设备像素
DIRECTION_KEYS: Dict[str, Tuple[int, int]] = {
    "left": (-1, 0),
    "a": (-1, 0),
    "h": (-1, 0),
    "up": (0, -1),
    "w": (0, -1),
    "k": (0, -1),
    "right": (1, 0),
    "d": (1, 0),
    "l": (1, 0),
    "down": (0, 1),
    "s": (0, 1),
    "j": (0, 1),
}


def normalize(s: str) -> str:
    s = (s or "").strip().lower()
    s = s.replace(" ", "")
    s = s.replace("-", "+")
    s = s.replace("_", "+")
    while "++" in s:
        s = s.replace("++", "+")
    return s.strip("+")


def direction_of(name: str) -> Optional[Tuple[int, int]]:
    return DIRECTION_KEYS.get(normalize(name))
