# File: colorpick/errors.py
from __future__ import annotations


class ColorPickError(Exception):
    """Base class of every error raised by colorpick."""


# ---------- color input ----------

class InvalidChannel(ColorPickError, ValueError):
    def __init__(self, name: str, value: object) -> None:
        super().__init__(f"channel {name} out of range [0, 255]: {value!r}")
        self.name = name
        self.value = value


class ParseError(ColorPickError, ValueError):
    def __init__(self, text: str, fmt: str) -> None:
        super().__init__(f"cannot parse {text!r} as {fmt}")
        self.text = text
        self.fmt = fmt


# ---------- capture ----------

class SamplingUnavailable(ColorPickError):
    """Host could not sample the screen (no display, permission denied, ...)."""


class AlreadyRunningError(ColorPickError):
    """A pick session is already active; requests are never queued."""


class PickCancelledError(ColorPickError):
    """
    User aborted the pick (quit key, Esc, off-target button) or the session
    was cancelled from outside. Not related to asyncio.CancelledError.
    """

    def __init__(self, reason: str = "cancelled") -> None:
        super().__init__(f"pick cancelled: {reason}")
        self.reason = reason
