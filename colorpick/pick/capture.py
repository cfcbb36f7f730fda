from __future__ import annotations

import asyncio
import logging
import threading
from dataclasses import dataclass
from typing import Tuple

import mss
from mss.exception import ScreenShotError

from colorpick.color.model import Color
from colorpick.errors import SamplingUnavailable

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class Rect:
    left: int
    top: int
    width: int
    height: int

    @property
    def right(self) -> int:
        return self.left + self.width

    @property
    def bottom(self) -> int:
        return self.top + self.height

    def contains_abs(self, x: int, y: int) -> bool:
        return self.left <= x < self.right and self.top <= y < self.bottom


class ScreenCapture:
    """
    Screen capture helper (mss) with thread-local instance.

    - One mss.mss() per thread via threading.local(); sampling runs in
      worker threads, so each worker lazily opens its own.
    """

    def __init__(self) -> None:
        self._local = threading.local()

    def _get_sct(self) -> mss.mss:
        sct = getattr(self._local, "sct", None)
        if sct is None:
            sct = mss.mss()
            self._local.sct = sct
        return sct

    def virtual_rect(self) -> Rect:
        """Bounding box of all monitors (mss monitor 0)."""
        m = self._get_sct().monitors[0]  # type: ignore[attr-defined]
        return Rect(
            left=int(m["left"]),
            top=int(m["top"]),
            width=int(m["width"]),
            height=int(m["height"]),
        )

    def rgb_at(self, x_abs: int, y_abs: int) -> Tuple[int, int, int]:
        """
        RGB of one pixel at an absolute screen coordinate.
        Raises ValueError when the point lies outside every monitor.
        """
        rect = self.virtual_rect()
        x_abs = int(x_abs)
        y_abs = int(y_abs)
        if not rect.contains_abs(x_abs, y_abs):
            raise ValueError(f"point outside screen: ({x_abs}, {y_abs})")

        box = {"left": x_abs, "top": y_abs, "width": 1, "height": 1}
        img = self._get_sct().grab(box)
        # BGRA
        b = img.raw[0]
        g = img.raw[1]
        r = img.raw[2]
        return int(r), int(g), int(b)


class MssSamplingSource:
    """SamplingSource backed by ScreenCapture; the grab runs off the event loop."""

    def __init__(self, capture: ScreenCapture | None = None) -> None:
        self._capture = capture or ScreenCapture()

    async def sample_color_at(self, x: int, y: int) -> Color:
        try:
            r, g, b = await asyncio.to_thread(self._capture.rgb_at, x, y)
        except (ValueError, ScreenShotError) as e:
            log.debug("mss grab failed at (%s, %s)", x, y, exc_info=True)
            raise SamplingUnavailable(f"cannot sample ({x}, {y}): {e}") from e
        return Color.from_channels(r, g, b)
