from __future__ import annotations

import pytest

from colorpick.color.convert import cmyk_to_rgb, hsl_to_rgb, hsv_to_rgb
from colorpick.color.model import Color, Component, Format, swatch_svg
from colorpick.errors import InvalidChannel, ParseError

RED = Color.from_channels(255, 0, 0)
STEEL = Color.from_channels(0x33, 0x66, 0x99)


def test_channels_are_validated() -> None:
    with pytest.raises(InvalidChannel):
        Color(256, 0, 0)
    with pytest.raises(InvalidChannel):
        Color(0, -1, 0)
    with pytest.raises(InvalidChannel):
        Color(0, 0, 1.5)  # type: ignore[arg-type]


def test_equality_ignores_presentation_tags() -> None:
    a = Color(1, 2, 3)
    b = Color(1, 2, 3, format=Format.CMYK, alpha=0.5)
    assert a == b
    assert hash(a) == hash(b)
    assert a != Color(1, 2, 4)


def test_pixel_packing() -> None:
    c = Color(0x12, 0x34, 0x56)
    assert c.pixel == 0x123456
    assert Color.from_pixel(0x123456) == c
    # 高位被屏蔽
    assert Color.from_pixel(0x1FFFFFF) == Color(255, 255, 255)


def test_text_in_every_format() -> None:
    assert RED.to_text() == "#FF0000"
    assert RED.to_text(Format.RGB) == "rgb(255, 0, 0)"
    assert RED.to_text(Format.HSL) == "hsl(0, 100.0%, 50.0%)"
    assert RED.to_text(Format.HSV) == "hsv(0, 100.0%, 100.0%)"
    assert RED.to_text(Format.CMYK) == "cmyk(0.0%, 100.0%, 100.0%, 0.0%)"
    assert STEEL.to_text(Format.HSL) == "hsl(210, 50.0%, 40.0%)"
    # 默认格式来自颜色自身
    assert str(STEEL.with_format(Format.RGB)) == "rgb(51, 102, 153)"


def test_markup_and_swatch() -> None:
    assert RED.to_markup() == '<span bgcolor="#FF0000">\u2001 </span> #FF0000'
    assert 'fill="#FF0000"' in swatch_svg(RED)


@pytest.mark.parametrize(
    "color",
    [Color(0, 0, 0), Color(255, 255, 255), RED, STEEL, Color(12, 200, 77), Color(250, 128, 3)],
)
def test_notation_roundtrip_within_one(color: Color) -> None:
    back = [hsl_to_rgb(*color.hsl), hsv_to_rgb(*color.hsv), cmyk_to_rgb(*color.cmyk)]
    for rgb in back:
        assert all(abs(a - b) <= 1 for a, b in zip(rgb, color.rgb)), rgb

    # 文本只保留显示精度；HEX / RGB 无损
    for fmt in (Format.HEX, Format.RGB):
        assert Color.from_text(color.to_text(fmt), fmt) == color


def test_parse_hex_variants() -> None:
    assert Color.from_text("#abc") == Color(0xAA, 0xBB, 0xCC)
    assert Color.from_text("  336699 ") == STEEL
    assert Color.from_text("#336699").format is Format.HEX


def test_parse_errors() -> None:
    with pytest.raises(ParseError):
        Color.from_text("not a color")
    with pytest.raises(ParseError):
        Color.from_text("rgb(300, 0, 0)", Format.RGB)
    with pytest.raises(ParseError):
        Color.from_text("hsl(10, 120%, 50%)", Format.HSL)
    # ParseError 同时是 ValueError
    with pytest.raises(ValueError):
        Color.from_text("")


def test_update_hue_on_saturated_red_gives_cyan() -> None:
    assert RED.update("h", 180).rgb == (0, 255, 255)


def test_update_lightness_zero_is_black() -> None:
    for c in (RED, STEEL, Color(200, 190, 10)):
        assert c.update(Component.L, 0).rgb == (0, 0, 0)


def test_update_clamps_at_boundary() -> None:
    assert RED.update("g", 300).rgb == (255, 255, 0)
    assert RED.update("r", -5).rgb == (0, 0, 0)
    # h 在 360 处回绕
    assert RED.update("h", 360) == RED
    assert RED.update("h", 480).rgb == (0, 255, 0)
    assert RED.update("h", -120).rgb == (0, 0, 255)
    assert RED.update("h", 370) == RED.update("h", 10)
    assert STEEL.update("s", 2.0).get("s") == pytest.approx(1.0, abs=0.01)


def test_update_keeps_format_and_returns_new_color() -> None:
    c = STEEL.with_format(Format.HSV)
    d = c.update("v", 1.0)
    assert d is not c
    assert d.format is Format.HSV
    assert c == STEEL


def test_get_components() -> None:
    assert RED.get("r") == 255
    assert RED.get("s") == pytest.approx(1.0)
    assert RED.get("l") == pytest.approx(0.5)
    assert RED.get("k") == pytest.approx(0.0)
    with pytest.raises(ValueError):
        RED.get("z")


def test_gradient_stop_counts() -> None:
    hue = RED.to_gradient_stops("h")
    assert len(hue) == 7
    assert hue[0][0] == 0.0 and hue[-1][0] == 1.0
    # 中间一格 h=180 -> 青色
    assert hue[3][1:4] == (0.0, 1.0, 1.0)
    assert len(RED.to_gradient_stops("l")) == 3
    assert len(RED.to_gradient_stops("r")) == 2


def test_format_cycle_and_ordinal() -> None:
    assert Format.HEX.next() is Format.RGB
    assert Format.CMYK.next() is Format.HEX
    assert Format.from_ordinal(2) is Format.HSL
    assert Format.from_ordinal(99) is Format.HEX
    assert Format.from_ordinal("x") is Format.HEX


def test_rgba_floats() -> None:
    assert STEEL.to_rgba() == pytest.approx((0.2, 0.4, 0.6, 1.0))
    assert Color(0, 0, 0, alpha=0.5).to_rgba()[3] == 0.5
