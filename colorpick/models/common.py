# File: colorpick/models/common.py
from __future__ import annotations

from typing import Any, Dict, List


def as_dict(v: Any) -> Dict[str, Any]:
    return v if isinstance(v, dict) else {}


def as_list(v: Any) -> List[Any]:
    return v if isinstance(v, list) else []


def as_str(v: Any, default: str = "") -> str:
    if v is None:
        return default
    if isinstance(v, str):
        return v
    return str(v)


def as_int(v: Any, default: int = 0) -> int:
    try:
        if v is None:
            return default
        return int(v)
    except (TypeError, ValueError):
        return default


def as_bool(v: Any, default: bool = False) -> bool:
    if isinstance(v, bool):
        return v
    if isinstance(v, int):
        return v != 0
    if isinstance(v, str):
        s = v.strip().lower()
        if s in ("1", "true", "yes", "y", "on"):
            return True
        if s in ("0", "false", "no", "n", "off"):
            return False
    return default


def clamp_int(v: int, lo: int, hi: int) -> int:
    if v < lo:
        return lo
    if v > hi:
        return hi
    return v


def as_pixel_list(v: Any, *, limit: int) -> List[int]:
    """Packed 0xRRGGBB list; drops non-ints and duplicates, keeps order, caps at limit."""
    out: List[int] = []
    for x in as_list(v):
        if isinstance(x, bool) or not isinstance(x, int):
            continue
        p = x & 0xFFFFFF
        if p in out:
            continue
        out.append(p)
        if len(out) >= limit:
            break
    return out
