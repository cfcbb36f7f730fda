# File: colorpick/input/hotkey.py
from __future__ import annotations

from typing import Optional

from pynput import keyboard, mouse

from colorpick.pick.host import Button

SPECIAL_NAME = {
    keyboard.Key.esc: "esc",
    keyboard.Key.enter: "enter",
    keyboard.Key.tab: "tab",
    keyboard.Key.space: "space",
    keyboard.Key.backspace: "backspace",
    keyboard.Key.delete: "delete",
    keyboard.Key.insert: "insert",
    keyboard.Key.home: "home",
    keyboard.Key.end: "end",
    keyboard.Key.page_up: "pageup",
    keyboard.Key.page_down: "pagedown",
    keyboard.Key.up: "up",
    keyboard.Key.down: "down",
    keyboard.Key.left: "left",
    keyboard.Key.right: "right",
}

BUTTON_OF = {
    mouse.Button.left: Button.PRIMARY,
    mouse.Button.middle: Button.MIDDLE,
    mouse.Button.right: Button.SECONDARY,
}


def key_to_name(k) -> Optional[str]:
    # KeyCode: a-z/0-9/...
    if isinstance(k, keyboard.KeyCode):
        ch = getattr(k, "char", None)
        if isinstance(ch, str) and ch:
            return ch.lower()
        return None

    if k in SPECIAL_NAME:
        return SPECIAL_NAME[k]

    # function keys: f1..f24 etc
    name = getattr(k, "name", None)
    if isinstance(name, str) and name:
        return name.lower()
    return None


def button_of(b) -> Button:
    return BUTTON_OF.get(b, Button.OTHER)
