# File: colorpick/pick/host.py
"""
宿主协作者接口（只定义协议，具体实现见 capture.py / input/grab.py / colorpick_qt）。
"""
from __future__ import annotations

from enum import Enum
from typing import Any, Callable, Protocol, Tuple

from colorpick.color.model import Color


class Scheduler(Protocol):
    def call_soon(self, fn: Callable[[], None]) -> None: ...


class SamplingSource(Protocol):
    async def sample_color_at(self, x: int, y: int) -> Color: ...


class PointerMover(Protocol):
    def move_by(self, dx: int, dy: int) -> None: ...

    def position(self) -> Tuple[int, int]: ...


class PreviewStyle(int, Enum):
    ICON = 0   # 光标旁的取色图标，显示原始采样色
    LABEL = 1  # 带文字的小标签


class PreviewOverlay(Protocol):
    def show_color(self, x: int, y: int, color: Color, style: PreviewStyle) -> None: ...

    def hide(self) -> None: ...


class MenuView(Protocol):
    """Adjustment menu widget; renders an AdjustmentMenu model."""

    def open_with(self, menu: Any) -> None: ...

    def close(self) -> None: ...


class Clipboard(Protocol):
    def write(self, text: str) -> None: ...

    async def read(self) -> str: ...


class NotifyStyle(int, Enum):
    MESSAGE = 0
    RICH = 1


class Notifier(Protocol):
    def notify_message(self, title: str, body: str) -> None: ...

    def notify_rich(self, icon_svg: str, title: str, body: str, timeout_s: float) -> None: ...


class StatusIndicator(Protocol):
    def set_busy(self, busy: bool) -> None: ...


class Button(int, Enum):
    PRIMARY = 1
    MIDDLE = 2
    SECONDARY = 3
    OTHER = 99


class InputTarget(Protocol):
    """Receives input forwarded by an InputGrab while the grab is held."""

    def on_motion(self, x: int, y: int) -> None: ...

    def on_button(self, button: Button) -> None: ...

    def on_key(self, name: str) -> None: ...


class InputGrab(Protocol):
    def acquire(self, target: InputTarget) -> Any: ...

    def release(self, handle: Any) -> None: ...


class NullOverlay:
    def show_color(self, x: int, y: int, color: Color, style: PreviewStyle) -> None:
        pass

    def hide(self) -> None:
        pass


class NullMenuView:
    def open_with(self, menu: Any) -> None:
        pass

    def close(self) -> None:
        pass
