# File: colorpick/pick/session.py
from __future__ import annotations

import asyncio
import logging
from dataclasses import replace
from typing import Any, Callable, Optional

from colorpick.color.model import Color
from colorpick.errors import AlreadyRunningError, PickCancelledError
from colorpick.logging_context import log_context, new_corr_id
from colorpick.pick.host import InputGrab
from colorpick.pick.state_machine import CaptureConfig, CaptureEnded, CaptureStateMachine

log = logging.getLogger(__name__)

MachineFactory = Callable[[CaptureConfig], CaptureStateMachine]


class PickSessionRunner:
    """
    “取一个颜色”的异步封装：

    - 同一时刻最多一个活动会话；第二次请求立即抛 AlreadyRunningError，不排队
    - 会话期间持有独占输入（InputGrab），任何退出路径都在 finally 中释放且只释放一次
    - 结果：成功返回 #RRGGBB；退出/Esc/非主键/外部取消 -> PickCancelledError
    """

    def __init__(self, *, factory: MachineFactory, grab: InputGrab) -> None:
        self._factory = factory
        self._grab = grab
        self._active: Optional[CaptureStateMachine] = None

    @property
    def active(self) -> bool:
        return self._active is not None

    @property
    def machine(self) -> Optional[CaptureStateMachine]:
        return self._active

    def cancel(self) -> None:
        m = self._active
        if m is not None:
            m.cancel()

    async def pick(self, *, config: Optional[CaptureConfig] = None) -> str:
        if self._active is not None:
            raise AlreadyRunningError("a pick session is already running")

        cfg = replace(config or CaptureConfig(), once=True, persist=False)
        machine = self._factory(cfg)
        self._active = machine

        loop = asyncio.get_running_loop()
        fut: "asyncio.Future[str]" = loop.create_future()
        handle: Any = None

        def _on_emitted(color: Color) -> None:
            if not fut.done():
                fut.set_result(color.hex)

        def _on_ended(ev: CaptureEnded) -> None:
            if fut.done():
                return
            err = PickCancelledError(ev.reason.value)
            if ev.error is not None:
                err.__cause__ = ev.error
            fut.set_exception(err)

        with log_context(corr_id=new_corr_id(), action="pick_async"):
            try:
                handle = self._grab.acquire(machine)
                machine.subscribe_emitted(_on_emitted)
                machine.subscribe_ended(_on_ended)
                machine.start()
                result = await fut
                log.info("pick resolved %s", result)
                return result
            finally:
                if not machine.is_ended:
                    machine.cancel()
                if handle is not None:
                    self._release(handle)
                self._active = None

    def _release(self, handle: Any) -> None:
        try:
            self._grab.release(handle)
        except Exception:
            log.exception("input grab release failed")
