# File: colorpick/color/convert.py
"""
纯函数颜色空间换算（8-bit sRGB 显示色，无色彩管理）。

约定：
- RGB 通道为 0..255 整数
- h 为角度 [0, 360)，其余分量为 0..1 小数
- 回到 RGB 时统一四舍五入（round-half-up），不用 Python 的 banker's rounding
"""
from __future__ import annotations

import math
from typing import Tuple

RGB3 = Tuple[int, int, int]
F3 = Tuple[float, float, float]


def round_half_up(v: float) -> int:
    return int(math.floor(v + 0.5))


def clamp_float(v: float, lo: float, hi: float) -> float:
    if v < lo:
        return lo
    if v > hi:
        return hi
    return v


def _to_byte(v: float) -> int:
    # v in 0..1
    n = round_half_up(v * 255.0)
    if n < 0:
        return 0
    if n > 255:
        return 255
    return n


def _hue_of(r: float, g: float, b: float, mx: float, delta: float) -> float:
    if delta == 0:
        return 0.0
    if mx == r:
        h = 60.0 * (((g - b) / delta) % 6)
    elif mx == g:
        h = 60.0 * (((b - r) / delta) + 2)
    else:
        h = 60.0 * (((r - g) / delta) + 4)
    return h % 360.0


def _chroma_to_rgb(h: float, c: float, m: float) -> RGB3:
    hp = (h % 360.0) / 60.0
    x = c * (1 - abs(hp % 2 - 1))
    if hp < 1:
        r1, g1, b1 = c, x, 0.0
    elif hp < 2:
        r1, g1, b1 = x, c, 0.0
    elif hp < 3:
        r1, g1, b1 = 0.0, c, x
    elif hp < 4:
        r1, g1, b1 = 0.0, x, c
    elif hp < 5:
        r1, g1, b1 = x, 0.0, c
    else:
        r1, g1, b1 = c, 0.0, x
    return _to_byte(r1 + m), _to_byte(g1 + m), _to_byte(b1 + m)


# -------- HSL --------

def rgb_to_hsl(r: int, g: int, b: int) -> F3:
    rf, gf, bf = r / 255.0, g / 255.0, b / 255.0
    mx = max(rf, gf, bf)
    mn = min(rf, gf, bf)
    delta = mx - mn
    l = (mx + mn) / 2.0
    if delta == 0:
        s = 0.0
    else:
        s = clamp_float(delta / (1 - abs(2 * l - 1)), 0.0, 1.0)
    return _hue_of(rf, gf, bf, mx, delta), s, l


def hsl_to_rgb(h: float, s: float, l: float) -> RGB3:
    c = (1 - abs(2 * l - 1)) * s
    return _chroma_to_rgb(h, c, l - c / 2.0)


# -------- HSV --------

def rgb_to_hsv(r: int, g: int, b: int) -> F3:
    rf, gf, bf = r / 255.0, g / 255.0, b / 255.0
    mx = max(rf, gf, bf)
    mn = min(rf, gf, bf)
    delta = mx - mn
    s = 0.0 if mx == 0 else delta / mx
    return _hue_of(rf, gf, bf, mx, delta), s, mx


def hsv_to_rgb(h: float, s: float, v: float) -> RGB3:
    c = v * s
    return _chroma_to_rgb(h, c, v - c)


# -------- CMYK --------

def rgb_to_cmyk(r: int, g: int, b: int) -> Tuple[float, float, float, float]:
    rf, gf, bf = r / 255.0, g / 255.0, b / 255.0
    k = 1 - max(rf, gf, bf)
    if k >= 1:
        return 0.0, 0.0, 0.0, 1.0
    return (1 - rf - k) / (1 - k), (1 - gf - k) / (1 - k), (1 - bf - k) / (1 - k), k


def cmyk_to_rgb(c: float, m: float, y: float, k: float) -> RGB3:
    return _to_byte((1 - c) * (1 - k)), _to_byte((1 - m) * (1 - k)), _to_byte((1 - y) * (1 - k))
