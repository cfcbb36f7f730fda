from __future__ import annotations

import asyncio
from typing import List, Tuple

from colorpick.color.model import Color, Format
from colorpick.errors import SamplingUnavailable
from colorpick.pick.host import Button, PreviewStyle
from colorpick.pick.state_machine import (
    CaptureConfig,
    CaptureEnded,
    CaptureState,
    CaptureStateMachine,
    EndReason,
)

from dummies import DummyMenuView, DummyOverlay, DummyPointer, DummySource, ManualSource, settle


class Rig:
    """一台状态机 + 它的替身 + 收集到的 emitted / ended。"""

    def __init__(self, source, *, config: CaptureConfig = CaptureConfig()) -> None:
        self.source = source
        self.pointer = DummyPointer()
        self.overlay = DummyOverlay()
        self.menu_view = DummyMenuView()
        self.machine = CaptureStateMachine(
            config=config,
            source=source,
            pointer=self.pointer,
            overlay=self.overlay,
            menu_view=self.menu_view,
        )
        self.emitted: List[Color] = []
        self.ended: List[CaptureEnded] = []
        self.machine.subscribe_emitted(self.emitted.append)
        self.machine.subscribe_ended(self.ended.append)


def test_first_sample_opens_preview() -> None:
    async def scenario() -> None:
        rig = Rig(DummySource({(10, 10): (255, 0, 0)}))
        m = rig.machine
        assert m.state is CaptureState.IDLE

        m.start(10, 10)
        await settle()

        assert m.state is CaptureState.PREVIEW_OPEN
        assert m.color.hex == "#FF0000"
        assert rig.overlay.shown == [(10, 10, "#FF0000", PreviewStyle.LABEL)]

    asyncio.run(scenario())


def test_start_without_coordinates_uses_pointer_position() -> None:
    async def scenario() -> None:
        rig = Rig(DummySource())
        rig.pointer.pos = (7, 8)
        rig.machine.start()
        await settle()
        assert rig.source.calls == [(7, 8)]
        assert rig.machine.position == (7, 8)

    asyncio.run(scenario())


def test_without_preview_stays_tracking_and_samples_on_primary() -> None:
    async def scenario() -> None:
        rig = Rig(DummySource({(10, 10): (255, 0, 0)}), config=CaptureConfig(preview=False))
        m = rig.machine
        m.start(0, 0)
        await settle()
        assert m.state is CaptureState.TRACKING
        assert rig.overlay.shown == []

        m.on_motion(10, 10)
        m.on_button(Button.PRIMARY)
        await settle()

        assert [c.hex for c in rig.emitted] == ["#FF0000"]
        assert m.state is CaptureState.TRACKING

    asyncio.run(scenario())


def test_motion_is_coalesced_to_latest_request() -> None:
    async def scenario() -> None:
        src = ManualSource()
        rig = Rig(src)
        m = rig.machine
        m.start(0, 0)
        await settle()
        assert len(src.pending) == 1

        # 采样进行中：只记录坐标，不再并发采样
        m.on_motion(1, 1)
        m.on_motion(2, 2)
        await settle()
        assert len(src.pending) == 1
        assert m.sampling

        # 旧结果被丢弃，按最新坐标重采
        src.resolve(0, (0, 0, 255))
        await settle()
        assert rig.overlay.shown == []
        assert [(x, y) for x, y, _ in src.pending] == [(0, 0), (2, 2)]

        src.resolve(1, (255, 0, 0))
        await settle()
        assert rig.overlay.shown == [(2, 2, "#FF0000", PreviewStyle.LABEL)]
        assert m.color.hex == "#FF0000"
        assert not m.sampling

    asyncio.run(scenario())


def test_emit_request_survives_supersede() -> None:
    async def scenario() -> None:
        src = ManualSource()
        rig = Rig(src, config=CaptureConfig(preview=False))
        m = rig.machine
        m.start(0, 0)
        await settle()

        m.on_motion(5, 5)
        m.on_button(Button.PRIMARY)
        src.resolve(0, (1, 1, 1))
        await settle()
        assert rig.emitted == []

        src.resolve(1, (0, 255, 0))
        await settle()
        assert [c.hex for c in rig.emitted] == ["#00FF00"]

    asyncio.run(scenario())


def test_escape_cancels_in_flight_sample() -> None:
    async def scenario() -> None:
        src = ManualSource()
        rig = Rig(src)
        m = rig.machine
        m.start(0, 0)
        await settle()

        m.on_key("esc")
        await settle()

        assert m.state is CaptureState.ENDED
        assert [e.reason for e in rig.ended] == [EndReason.ESCAPE]
        assert src.pending[0][2].cancelled()
        # 结果永远不会被应用
        assert rig.overlay.shown == []
        assert rig.overlay.hidden == 1
        assert m.color == Color()

        # 终止态：后续输入全部忽略
        m.on_motion(3, 3)
        m.on_button(Button.PRIMARY)
        await settle()
        assert len(src.pending) == 1
        assert rig.emitted == []

    asyncio.run(scenario())


def test_sampling_failure_aborts_session() -> None:
    async def scenario() -> None:
        src = DummySource()
        src.fail = RuntimeError("display gone")
        rig = Rig(src)
        rig.machine.start(0, 0)
        await settle()

        assert rig.machine.is_ended
        (ev,) = rig.ended
        assert ev.reason is EndReason.ABORTED
        assert isinstance(ev.error, SamplingUnavailable)
        assert isinstance(ev.error.__cause__, RuntimeError)

    asyncio.run(scenario())


def test_direction_keys_nudge_pointer_by_one_pixel() -> None:
    async def scenario() -> None:
        rig = Rig(DummySource())
        rig.pointer.pos = (5, 5)
        m = rig.machine
        m.start(5, 5)
        await settle()

        m.on_key("right")
        m.on_key("w")
        m.on_key("j")
        await settle()

        assert rig.pointer.moves == [(1, 0), (0, -1), (0, 1)]
        assert m.position == (6, 5)
        assert rig.source.calls[-1] == (6, 5)

    asyncio.run(scenario())


class EdgePointer(DummyPointer):
    """指针停在屏幕边缘：超出 [0, 99] 的移动被钳住。"""

    def move_by(self, dx: int, dy: int) -> None:
        self.moves.append((dx, dy))
        x, y = self.pos
        self.pos = (min(max(x + dx, 0), 99), min(max(y + dy, 0), 99))


class ScreenSource(DummySource):
    async def sample_color_at(self, x: int, y: int) -> Color:
        if not (0 <= x <= 99 and 0 <= y <= 99):
            raise SamplingUnavailable(f"point outside screen: ({x}, {y})")
        return await super().sample_color_at(x, y)


def test_nudge_at_screen_edge_follows_real_pointer() -> None:
    async def scenario() -> None:
        src = ScreenSource({(0, 5): (0, 0, 255)})
        pointer = EdgePointer((0, 5))
        m = CaptureStateMachine(config=CaptureConfig(), source=src, pointer=pointer)
        m.start(0, 5)
        await settle()

        m.on_key("left")
        await settle()

        assert not m.is_ended
        assert m.position == (0, 5)
        assert pointer.moves == [(-1, 0)]
        assert src.calls == [(0, 5), (0, 5)]
        assert m.color.hex == "#0000FF"

    asyncio.run(scenario())


class BlindPointer(DummyPointer):
    def position(self) -> Tuple[int, int]:
        raise RuntimeError("no pointer query on this backend")


def test_nudge_falls_back_to_computed_position() -> None:
    async def scenario() -> None:
        src = DummySource()
        m = CaptureStateMachine(config=CaptureConfig(), source=src, pointer=BlindPointer())
        m.start(5, 5)
        await settle()

        m.on_key("down")
        await settle()

        assert m.position == (5, 6)
        assert src.calls[-1] == (5, 6)

    asyncio.run(scenario())


def test_end_keys_and_buttons() -> None:
    async def scenario() -> None:
        cases = [
            (lambda m: m.on_key("Escape"), EndReason.ESCAPE),
            (lambda m: m.on_key("q"), EndReason.QUIT_KEY),
            (lambda m: m.on_button(Button.SECONDARY), EndReason.BUTTON),
            (lambda m: m.on_button(Button.OTHER), EndReason.BUTTON),
            (lambda m: m.cancel(), EndReason.CANCELLED),
        ]
        for action, reason in cases:
            rig = Rig(DummySource())
            rig.machine.start(0, 0)
            await settle()
            action(rig.machine)
            assert [e.reason for e in rig.ended] == [reason]

    asyncio.run(scenario())


def test_menu_suspends_sampling_and_reopens_preview_on_close() -> None:
    async def scenario() -> None:
        rig = Rig(DummySource({(0, 0): (10, 20, 30)}))
        m = rig.machine
        m.start(0, 0)
        await settle()

        m.on_key("m")
        assert m.state is CaptureState.MENU_OPEN
        (menu,) = rig.menu_view.opened
        assert menu.color == Color(10, 20, 30)

        calls = len(rig.source.calls)
        m.on_motion(50, 50)
        m.on_key("left")
        await settle()
        assert len(rig.source.calls) == calls
        assert rig.pointer.moves == []

        menu.set_component("r", 255)
        m.on_button(Button.PRIMARY)
        assert [c.rgb for c in rig.emitted] == [(255, 20, 30)]
        # 持续模式：提交后菜单仍开着
        assert m.state is CaptureState.MENU_OPEN

        m.close_menu()
        await settle()
        assert m.state is CaptureState.PREVIEW_OPEN
        assert rig.source.calls[-1] == (50, 50)

    asyncio.run(scenario())


def test_late_sample_refreshes_untouched_menu() -> None:
    async def scenario() -> None:
        src = ManualSource()
        rig = Rig(src)
        m = rig.machine
        m.start(0, 0)
        await settle()
        src.resolve(0, (0, 0, 0))
        await settle()

        # 新采样还在路上时打开菜单
        m.on_motion(10, 10)
        await settle()
        m.on_button(Button.MIDDLE)
        (menu,) = rig.menu_view.opened
        assert menu.color.hex == "#000000"

        src.resolve(1, (255, 0, 0))
        await settle()
        assert m.color.hex == "#FF0000"
        assert menu.color.hex == "#FF0000"

        m.on_button(Button.PRIMARY)
        assert [c.hex for c in rig.emitted] == ["#FF0000"]

    asyncio.run(scenario())


def test_late_sample_keeps_user_adjustment() -> None:
    async def scenario() -> None:
        src = ManualSource()
        rig = Rig(src)
        m = rig.machine
        m.start(0, 0)
        await settle()
        src.resolve(0, (0, 0, 0))
        await settle()

        m.on_motion(10, 10)
        await settle()
        m.open_menu()
        (menu,) = rig.menu_view.opened
        menu.set_component("b", 255)

        src.resolve(1, (255, 0, 0))
        await settle()
        assert menu.color.hex == "#0000FF"

        m.on_button(Button.PRIMARY)
        assert [c.hex for c in rig.emitted] == ["#0000FF"]

    asyncio.run(scenario())


def test_menu_select_uses_chosen_format() -> None:
    async def scenario() -> None:
        rig = Rig(DummySource({(0, 0): (255, 0, 0)}))
        m = rig.machine
        m.start(0, 0)
        await settle()
        m.on_button(Button.MIDDLE)

        m.menu.select(Format.RGB)
        assert [c.to_text() for c in rig.emitted] == ["rgb(255, 0, 0)"]

    asyncio.run(scenario())


def test_escape_from_menu_closes_view() -> None:
    async def scenario() -> None:
        rig = Rig(DummySource())
        m = rig.machine
        m.start(0, 0)
        await settle()
        m.open_menu()
        m.on_key("esc")
        assert rig.menu_view.closed == 1
        assert m.menu is None
        assert [e.reason for e in rig.ended] == [EndReason.ESCAPE]

    asyncio.run(scenario())


def test_single_shot_ends_after_first_emission() -> None:
    async def scenario() -> None:
        rig = Rig(DummySource({(0, 0): (0, 0, 255)}), config=CaptureConfig(once=True))
        m = rig.machine
        m.start(0, 0)
        await settle()
        m.on_button(Button.PRIMARY)
        m.on_button(Button.PRIMARY)

        assert [c.hex for c in rig.emitted] == ["#0000FF"]
        assert [e.reason for e in rig.ended] == [EndReason.DONE]

    asyncio.run(scenario())


def test_non_persistent_ends_after_emission() -> None:
    async def scenario() -> None:
        rig = Rig(DummySource(), config=CaptureConfig(persist=False))
        rig.machine.start(0, 0)
        await settle()
        rig.machine.on_button(Button.PRIMARY)
        assert rig.machine.is_ended
        assert len(rig.emitted) == 1

    asyncio.run(scenario())


def test_session_format_applies_to_samples() -> None:
    async def scenario() -> None:
        rig = Rig(DummySource({(0, 0): (255, 0, 0)}), config=CaptureConfig(format=Format.HSL))
        rig.machine.start(0, 0)
        await settle()
        rig.machine.on_button(Button.PRIMARY)
        assert rig.emitted[0].to_text() == "hsl(0, 100.0%, 50.0%)"

    asyncio.run(scenario())
