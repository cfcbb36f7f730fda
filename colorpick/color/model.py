# File: colorpick/color/model.py
from __future__ import annotations

import math
import re
from dataclasses import dataclass, replace
from enum import Enum, IntEnum
from functools import cached_property
from typing import Any, Callable, Dict, List, NamedTuple, Optional, Tuple

from colorpick.color.convert import (
    clamp_float,
    cmyk_to_rgb,
    hsl_to_rgb,
    hsv_to_rgb,
    rgb_to_cmyk,
    rgb_to_hsl,
    rgb_to_hsv,
    round_half_up,
)
from colorpick.errors import InvalidChannel, ParseError

GradientStop = Tuple[float, float, float, float, float]  # offset, r, g, b, a


class Format(IntEnum):
    """Output notation; the ordinal is what settings.json stores."""

    HEX = 0
    RGB = 1
    HSL = 2
    HSV = 3
    CMYK = 4

    def next(self) -> "Format":
        members = list(Format)
        return members[(members.index(self) + 1) % len(members)]

    @staticmethod
    def from_ordinal(v: Any) -> "Format":
        try:
            return Format(int(v))
        except (TypeError, ValueError):
            return Format.HEX


class Component(str, Enum):
    R = "r"
    G = "g"
    B = "b"
    H = "h"
    S = "s"
    L = "l"
    V = "v"
    C = "c"
    M = "m"
    Y = "y"
    K = "k"

    @staticmethod
    def coerce(v: "Component | str") -> "Component":
        if isinstance(v, Component):
            return v
        return Component(str(v).strip().lower())

    @property
    def bounds(self) -> Tuple[float, float]:
        return _BOUNDS[self]

    @property
    def space(self) -> str:
        return _SPACE[self]

    def clamp(self, value: float) -> float:
        lo, hi = self.bounds
        v = float(value)
        if math.isnan(v):
            v = lo
        if self is Component.H and math.isfinite(v):
            return v % hi
        return clamp_float(v, lo, hi)


_BOUNDS: Dict[Component, Tuple[float, float]] = {
    Component.R: (0.0, 255.0),
    Component.G: (0.0, 255.0),
    Component.B: (0.0, 255.0),
    Component.H: (0.0, 360.0),
    Component.S: (0.0, 1.0),
    Component.L: (0.0, 1.0),
    Component.V: (0.0, 1.0),
    Component.C: (0.0, 1.0),
    Component.M: (0.0, 1.0),
    Component.Y: (0.0, 1.0),
    Component.K: (0.0, 1.0),
}

_SPACE: Dict[Component, str] = {
    Component.R: "rgb",
    Component.G: "rgb",
    Component.B: "rgb",
    Component.H: "hsl",
    Component.S: "hsl",
    Component.L: "hsl",
    Component.V: "hsv",
    Component.C: "cmyk",
    Component.M: "cmyk",
    Component.Y: "cmyk",
    Component.K: "cmyk",
}


class RGB(NamedTuple):
    r: int
    g: int
    b: int


class HSL(NamedTuple):
    h: float
    s: float
    l: float


class HSV(NamedTuple):
    h: float
    s: float
    v: float


class CMYK(NamedTuple):
    c: float
    m: float
    y: float
    k: float


def _check_channel(name: str, v: Any) -> int:
    if isinstance(v, bool) or not isinstance(v, int):
        raise InvalidChannel(name, v)
    if v < 0 or v > 255:
        raise InvalidChannel(name, v)
    return v


def _deg(h: float) -> int:
    return round_half_up(h) % 360


def _pct(v: float) -> str:
    return f"{math.floor(v * 1000.0 + 0.5) / 10.0:.1f}%"


@dataclass(frozen=True, eq=False)
class Color:
    """
    8-bit RGB is the only stored state; HSL/HSV/CMYK/HEX are derived views.

    format / alpha are presentation tags and take no part in equality.
    """

    r: int = 0
    g: int = 0
    b: int = 0
    format: Format = Format.HEX
    alpha: float = 1.0

    def __post_init__(self) -> None:
        _check_channel("r", self.r)
        _check_channel("g", self.g)
        _check_channel("b", self.b)

    # ---------- identity ----------

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Color):
            return NotImplemented
        return (self.r, self.g, self.b) == (other.r, other.g, other.b)

    def __hash__(self) -> int:
        return hash((self.r, self.g, self.b))

    # ---------- constructors ----------

    @classmethod
    def from_channels(cls, r: int, g: int, b: int, *, format: Format = Format.HEX) -> "Color":
        return cls(r=r, g=g, b=b, format=format)

    @classmethod
    def from_pixel(cls, pixel: int, *, format: Format = Format.HEX) -> "Color":
        p = int(pixel) & 0xFFFFFF
        return cls(r=(p >> 16) & 0xFF, g=(p >> 8) & 0xFF, b=p & 0xFF, format=format)

    @classmethod
    def from_text(cls, text: str, assumed_format: Format = Format.HEX) -> "Color":
        fmt = Format(assumed_format)
        s = (text or "").strip()
        parser = _PARSERS[fmt]
        try:
            rgb = parser(s)
        except InvalidChannel as e:
            raise ParseError(s, fmt.name) from e
        if rgb is None:
            raise ParseError(s, fmt.name)
        return cls(r=rgb[0], g=rgb[1], b=rgb[2], format=fmt)

    def with_format(self, fmt: Format) -> "Color":
        return replace(self, format=Format(fmt))

    # ---------- views ----------

    @property
    def pixel(self) -> int:
        return (self.r << 16) | (self.g << 8) | self.b

    @property
    def rgb(self) -> RGB:
        return RGB(self.r, self.g, self.b)

    @cached_property
    def hsl(self) -> HSL:
        return HSL(*rgb_to_hsl(self.r, self.g, self.b))

    @cached_property
    def hsv(self) -> HSV:
        return HSV(*rgb_to_hsv(self.r, self.g, self.b))

    @cached_property
    def cmyk(self) -> CMYK:
        return CMYK(*rgb_to_cmyk(self.r, self.g, self.b))

    def hex_digits(self, *, upper: bool = True) -> str:
        s = f"{self.r:02x}{self.g:02x}{self.b:02x}"
        return s.upper() if upper else s

    @property
    def hex(self) -> str:
        return "#" + self.hex_digits()

    def get(self, component: "Component | str") -> float:
        comp = Component.coerce(component)
        if comp.space == "rgb":
            return float(getattr(self, comp.value))
        if comp.space == "hsl":
            return float(getattr(self.hsl, comp.value))
        if comp.space == "hsv":
            return float(getattr(self.hsv, comp.value))
        return float(getattr(self.cmyk, comp.value))

    # ---------- update ----------

    def update(self, component: "Component | str", value: float) -> "Color":
        """
        Returns a new Color with one component set; value is clamped into the
        component's range (h wraps at 360). Every other view is recomputed
        from the new RGB.
        """
        comp = Component.coerce(component)
        v = comp.clamp(value)
        r, g, b = _UPDATERS[comp.space](self, comp, v)
        return replace(self, r=r, g=g, b=b)

    # ---------- rendering ----------

    def to_text(self, fmt: Optional[Format] = None) -> str:
        f = self.format if fmt is None else Format(fmt)
        if f is Format.HEX:
            return self.hex
        if f is Format.RGB:
            return f"rgb({self.r}, {self.g}, {self.b})"
        if f is Format.HSL:
            h, s, l = self.hsl
            return f"hsl({_deg(h)}, {_pct(s)}, {_pct(l)})"
        if f is Format.HSV:
            h, s, v = self.hsv
            return f"hsv({_deg(h)}, {_pct(s)}, {_pct(v)})"
        c, m, y, k = self.cmyk
        return f"cmyk({_pct(c)}, {_pct(m)}, {_pct(y)}, {_pct(k)})"

    def to_markup(self, fmt: Optional[Format] = None) -> str:
        # \u2001 = em quad，色块宽度与字号一致
        return f'<span bgcolor="{self.hex}">\u2001 </span> {self.to_text(fmt)}'

    def to_rgba(self) -> Tuple[float, float, float, float]:
        return self.r / 255.0, self.g / 255.0, self.b / 255.0, float(self.alpha)

    def to_gradient_stops(self, component: "Component | str") -> List[GradientStop]:
        """
        Stops for painting a slider track of `component`, every other
        component held at its current value.
        """
        comp = Component.coerce(component)
        lo, hi = comp.bounds
        if comp is Component.H:
            n = 7
        elif comp is Component.L:
            n = 3
        else:
            n = 2

        stops: List[GradientStop] = []
        for i in range(n):
            off = i / (n - 1)
            c = self.update(comp, lo + (hi - lo) * off)
            stops.append((off, c.r / 255.0, c.g / 255.0, c.b / 255.0, float(self.alpha)))
        return stops

    def __str__(self) -> str:
        return self.to_text()


# ---------- update functions, one per color space ----------

def _update_rgb(c: Color, comp: Component, v: float) -> Tuple[int, int, int]:
    ch = {"r": c.r, "g": c.g, "b": c.b}
    ch[comp.value] = round_half_up(v)
    return ch["r"], ch["g"], ch["b"]


def _update_hsl(c: Color, comp: Component, v: float) -> Tuple[int, int, int]:
    h, s, l = c.hsl
    if comp is Component.H:
        h = v % 360.0
    elif comp is Component.S:
        s = v
    else:
        l = v
    return hsl_to_rgb(h, s, l)


def _update_hsv(c: Color, comp: Component, v: float) -> Tuple[int, int, int]:
    h, s, _ = c.hsv
    return hsv_to_rgb(h, s, v)


def _update_cmyk(c: Color, comp: Component, v: float) -> Tuple[int, int, int]:
    vals = c.cmyk._asdict()
    vals[comp.value] = v
    return cmyk_to_rgb(vals["c"], vals["m"], vals["y"], vals["k"])


_UPDATERS: Dict[str, Callable[[Color, Component, float], Tuple[int, int, int]]] = {
    "rgb": _update_rgb,
    "hsl": _update_hsl,
    "hsv": _update_hsv,
    "cmyk": _update_cmyk,
}


# ---------- parsing ----------

_NUM = r"(\d+(?:\.\d+)?)"
_RE_HEX = re.compile(r"^#?([0-9a-fA-F]{3}|[0-9a-fA-F]{6})$")
_RE_RGB = re.compile(r"^rgb\(\s*(\d{1,3})\s*,\s*(\d{1,3})\s*,\s*(\d{1,3})\s*\)$", re.IGNORECASE)
_RE_HSL = re.compile(rf"^hsl\(\s*{_NUM}\s*,\s*{_NUM}%\s*,\s*{_NUM}%\s*\)$", re.IGNORECASE)
_RE_HSV = re.compile(rf"^hsv\(\s*{_NUM}\s*,\s*{_NUM}%\s*,\s*{_NUM}%\s*\)$", re.IGNORECASE)
_RE_CMYK = re.compile(
    rf"^cmyk\(\s*{_NUM}%\s*,\s*{_NUM}%\s*,\s*{_NUM}%\s*,\s*{_NUM}%\s*\)$", re.IGNORECASE
)


def _frac(p: str) -> Optional[float]:
    v = float(p) / 100.0
    if v > 1.0:
        return None
    return v


def _parse_hex(s: str) -> Optional[Tuple[int, int, int]]:
    m = _RE_HEX.match(s)
    if not m:
        return None
    d = m.group(1)
    if len(d) == 3:
        d = "".join(ch * 2 for ch in d)
    return int(d[0:2], 16), int(d[2:4], 16), int(d[4:6], 16)


def _parse_rgb(s: str) -> Optional[Tuple[int, int, int]]:
    m = _RE_RGB.match(s)
    if not m:
        return None
    r, g, b = (int(x) for x in m.groups())
    return _check_channel("r", r), _check_channel("g", g), _check_channel("b", b)


def _parse_hsl(s: str) -> Optional[Tuple[int, int, int]]:
    m = _RE_HSL.match(s)
    if not m:
        return None
    h = float(m.group(1))
    s_, l = _frac(m.group(2)), _frac(m.group(3))
    if h > 360.0 or s_ is None or l is None:
        return None
    return hsl_to_rgb(h % 360.0, s_, l)


def _parse_hsv(s: str) -> Optional[Tuple[int, int, int]]:
    m = _RE_HSV.match(s)
    if not m:
        return None
    h = float(m.group(1))
    s_, v = _frac(m.group(2)), _frac(m.group(3))
    if h > 360.0 or s_ is None or v is None:
        return None
    return hsv_to_rgb(h % 360.0, s_, v)


def _parse_cmyk(s: str) -> Optional[Tuple[int, int, int]]:
    m = _RE_CMYK.match(s)
    if not m:
        return None
    vals = [_frac(x) for x in m.groups()]
    if any(v is None for v in vals):
        return None
    c, mm, y, k = vals  # type: ignore[misc]
    return cmyk_to_rgb(c, mm, y, k)


_PARSERS: Dict[Format, Callable[[str], Optional[Tuple[int, int, int]]]] = {
    Format.HEX: _parse_hex,
    Format.RGB: _parse_rgb,
    Format.HSL: _parse_hsl,
    Format.HSV: _parse_hsv,
    Format.CMYK: _parse_cmyk,
}


def swatch_svg(color: Color) -> str:
    """16x16 rounded square, used for rich notifications and menu icons."""
    return (
        '<svg xmlns="http://www.w3.org/2000/svg" width="16" height="16" version="1.1">\n'
        f'  <rect x="2" y="2" width="12" height="12" rx="2" fill="{color.hex}" />\n'
        "</svg>"
    )
