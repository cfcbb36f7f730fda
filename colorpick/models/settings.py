# File: colorpick/models/settings.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List

from colorpick.color.model import Format
from colorpick.models.common import as_bool, as_dict, as_int, as_pixel_list, as_str, clamp_int
from colorpick.pick.host import NotifyStyle, PreviewStyle

MENU_SIZE_MIN = 1
MENU_SIZE_MAX = 50


@dataclass(frozen=True)
class PickerSettings:
    """
    Represents settings.json root object.

    history / pinned: packed 0xRRGGBB ints, newest first, each capped at menu_size.
    """

    schema_version: int = 1

    format: Format = Format.HEX
    enable_format: bool = False

    enable_notify: bool = False
    notify_style: NotifyStyle = NotifyStyle.MESSAGE

    preview: bool = True
    preview_style: PreviewStyle = PreviewStyle.LABEL

    auto_copy: bool = True
    persist: bool = True

    menu_key: str = "m"
    quit_key: str = "q"

    menu_size: int = 8
    pin_display: bool = False
    systray: bool = True

    enable_shortcut: bool = True
    shortcut: str = "ctrl+alt+c"

    history: List[int] = field(default_factory=list)
    pinned: List[int] = field(default_factory=list)

    @property
    def session_format(self) -> Format:
        return self.format if self.enable_format else Format.HEX

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "PickerSettings":
        d = as_dict(d)
        size = clamp_int(as_int(d.get("menu_size", 8), 8), MENU_SIZE_MIN, MENU_SIZE_MAX)

        notify_style = as_int(d.get("notify_style", 0), 0)
        preview_style = as_int(d.get("preview_style", 1), 1)

        return PickerSettings(
            schema_version=as_int(d.get("schema_version", 1), 1),
            format=Format.from_ordinal(d.get("format", 0)),
            enable_format=as_bool(d.get("enable_format", False), False),
            enable_notify=as_bool(d.get("enable_notify", False), False),
            notify_style=NotifyStyle.RICH if notify_style == 1 else NotifyStyle.MESSAGE,
            preview=as_bool(d.get("preview", True), True),
            preview_style=PreviewStyle.ICON if preview_style == 0 else PreviewStyle.LABEL,
            auto_copy=as_bool(d.get("auto_copy", True), True),
            persist=as_bool(d.get("persist", True), True),
            menu_key=as_str(d.get("menu_key", "m"), "m"),
            quit_key=as_str(d.get("quit_key", "q"), "q"),
            menu_size=size,
            pin_display=as_bool(d.get("pin_display", False), False),
            systray=as_bool(d.get("systray", True), True),
            enable_shortcut=as_bool(d.get("enable_shortcut", True), True),
            shortcut=as_str(d.get("shortcut", "ctrl+alt+c"), "ctrl+alt+c"),
            history=as_pixel_list(d.get("history", []), limit=size),
            pinned=as_pixel_list(d.get("pinned", []), limit=size),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "schema_version": int(self.schema_version),
            "format": int(self.format),
            "enable_format": bool(self.enable_format),
            "enable_notify": bool(self.enable_notify),
            "notify_style": int(self.notify_style),
            "preview": bool(self.preview),
            "preview_style": int(self.preview_style),
            "auto_copy": bool(self.auto_copy),
            "persist": bool(self.persist),
            "menu_key": self.menu_key,
            "quit_key": self.quit_key,
            "menu_size": int(self.menu_size),
            "pin_display": bool(self.pin_display),
            "systray": bool(self.systray),
            "enable_shortcut": bool(self.enable_shortcut),
            "shortcut": self.shortcut,
            "history": [int(x) for x in self.history],
            "pinned": [int(x) for x in self.pinned],
        }
