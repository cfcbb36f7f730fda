from __future__ import annotations

import pytest

from colorpick.input.hotkey_strings import to_pynput_hotkey
from colorpick.input.keys import direction_of, normalize


@pytest.mark.parametrize(
    "text, expected",
    [
        ("ctrl+alt+c", "<ctrl>+<alt>+c"),
        ("Ctrl + Shift + F5", "<ctrl>+<shift>+<f5>"),
        ("control-alt-c", "<ctrl>+<alt>+c"),
        ("win+space", "<cmd>+<space>"),
        ("ctrl+ctrl+p", "<ctrl>+p"),
        ("print", "<print_screen>"),
    ],
)
def test_to_pynput_hotkey(text: str, expected: str) -> None:
    assert to_pynput_hotkey(text) == expected


@pytest.mark.parametrize("text", ["", "   ", "ctrl+alt", "ctrl+f13", "ctrl+banana"])
def test_invalid_hotkeys(text: str) -> None:
    with pytest.raises(ValueError):
        to_pynput_hotkey(text)


def test_key_names() -> None:
    assert normalize(" Escape ") == "escape"
    assert direction_of("Left") == (-1, 0)
    assert direction_of("K") == (0, -1)
    assert direction_of("x") is None
