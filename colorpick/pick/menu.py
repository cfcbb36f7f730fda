# File: colorpick/pick/menu.py
from __future__ import annotations

import asyncio
import logging
from typing import Callable, Dict, List, Optional, Set

from colorpick.color.model import Color, Component, Format, GradientStop
from colorpick.errors import ParseError
from colorpick.events.listeners import Listeners
from colorpick.pick.host import Clipboard

log = logging.getLogger(__name__)

SLIDERS = (Component.R, Component.G, Component.B, Component.H, Component.S, Component.L)


class AdjustmentMenu:
    """
    调色菜单的数据模型（控件本身由宿主绘制）：
    - 持有当前 Color，滑块改动通过 set_component 回写
    - select(fmt) 以指定格式“提交”颜色，交给 on_selected
    - 剪贴板读入只接受 HEX；解析失败保留原颜色
    """

    def __init__(self, color: Color, *, on_selected: Callable[[Color], None]) -> None:
        self._color = color
        self._on_selected = on_selected
        self._changed: Listeners[Color] = Listeners("menu.changed")
        self._reads: Set[asyncio.Task] = set()

    @property
    def color(self) -> Color:
        return self._color

    def subscribe_changed(self, fn: Callable[[Color], None]) -> Callable[[], None]:
        return self._changed.subscribe(fn)

    def set_color(self, color: Color) -> None:
        self._color = color
        self._changed.emit(color)

    def set_component(self, component: "Component | str", value: float) -> Color:
        self.set_color(self._color.update(component, value))
        return self._color

    def slider_values(self) -> Dict[Component, float]:
        return {c: self._color.get(c) for c in SLIDERS}

    def gradient(self, component: "Component | str") -> List[GradientStop]:
        return self._color.to_gradient_stops(component)

    def select(self, fmt: Optional[Format] = None) -> Color:
        color = self._color if fmt is None else self._color.with_format(fmt)
        self._on_selected(color)
        return color

    def copy(self, clipboard: Clipboard, fmt: Optional[Format] = None) -> str:
        text = self._color.to_text(fmt)
        clipboard.write(text)
        return text

    async def read_clipboard(self, clipboard: Clipboard) -> bool:
        text = await clipboard.read()
        try:
            color = Color.from_text(text, Format.HEX)
        except ParseError:
            log.debug("clipboard text is not a color: %r", text)
            return False
        self.set_color(color.with_format(self._color.format))
        return True

    def read_clipboard_soon(self, clipboard: Clipboard) -> asyncio.Task:
        """从同步回调（按钮点击）里发起读取；任务由菜单持有直到结束。"""
        task = asyncio.get_running_loop().create_task(self.read_clipboard(clipboard))
        self._reads.add(task)
        task.add_done_callback(self._on_read_done)
        return task

    def _on_read_done(self, task: asyncio.Task) -> None:
        self._reads.discard(task)
        if task.cancelled():
            return
        err = task.exception()
        if err is not None:
            log.warning("clipboard read failed: %s", err, exc_info=err)
