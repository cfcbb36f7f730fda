from __future__ import annotations

import asyncio

import pytest
from mss.exception import ScreenShotError

from colorpick.errors import SamplingUnavailable
from colorpick.pick.capture import MssSamplingSource, ScreenCapture


class DummyShot:
    def __init__(self, bgra: bytes) -> None:
        self.raw = bgra


class DummySct:
    """mss.mss() 替身：两块横向拼接的屏幕，虚拟桌面从 (-100, 0) 开始。"""

    monitors = [{"left": -100, "top": 0, "width": 300, "height": 100}]

    def __init__(self) -> None:
        self.boxes = []
        self.fail = False

    def grab(self, box):
        if self.fail:
            raise ScreenShotError("XGetImage() failed")
        self.boxes.append(box)
        return DummyShot(bytes([30, 20, 10, 255]))


@pytest.fixture
def capture(monkeypatch):
    cap = ScreenCapture()
    sct = DummySct()
    monkeypatch.setattr(cap, "_get_sct", lambda: sct)
    return cap, sct


def test_rgb_at_reads_bgra_pixel(capture) -> None:
    cap, sct = capture
    assert cap.rgb_at(-50, 10) == (10, 20, 30)
    assert sct.boxes == [{"left": -50, "top": 10, "width": 1, "height": 1}]


def test_rgb_at_rejects_points_off_screen(capture) -> None:
    cap, _ = capture
    with pytest.raises(ValueError):
        cap.rgb_at(200, 10)
    with pytest.raises(ValueError):
        cap.rgb_at(0, -1)


def test_sampling_source_maps_failures(capture) -> None:
    cap, sct = capture
    source = MssSamplingSource(cap)

    async def scenario() -> None:
        color = await source.sample_color_at(0, 0)
        assert color.hex == "#0A141E"

        with pytest.raises(SamplingUnavailable):
            await source.sample_color_at(500, 500)

        sct.fail = True
        with pytest.raises(SamplingUnavailable) as ei:
            await source.sample_color_at(0, 0)
        assert isinstance(ei.value.__cause__, ScreenShotError)

    asyncio.run(scenario())
