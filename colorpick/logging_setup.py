# File: colorpick/logging_setup.py
from __future__ import annotations

import logging
import logging.handlers
import queue
import sys
import threading
from dataclasses import dataclass
from pathlib import Path

from colorpick.io.json_store import ensure_dir
from colorpick.logging_context import action_var, corr_id_var, session_var

LOG_FORMAT = (
    "%(asctime)s %(levelname)s "
    "[tid=%(thread)d] "
    "%(name)s:%(funcName)s:%(lineno)d "
    "corr=%(corr_id)s session=%(session)s action=%(action)s - %(message)s"
)

# QtAsyncio 下 asyncio 的 DEBUG 输出没有价值
_QUIET_LOGGERS = ("asyncio",)


class ContextFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        # formatter 引用的字段必须永远存在
        record.corr_id = corr_id_var.get()
        record.session = session_var.get()
        record.action = getattr(record, "action", None) or action_var.get()
        return True


@dataclass
class LoggingRuntime:
    listener: logging.handlers.QueueListener
    logs_dir: Path

    def stop(self) -> None:
        try:
            self.listener.stop()
        except Exception:
            logging.getLogger(__name__).exception("logging listener stop failed")


def _daily_file(path: Path, *, level: int, keep_days: int, formatter: logging.Formatter) -> logging.Handler:
    h = logging.handlers.TimedRotatingFileHandler(
        filename=str(path),
        when="midnight",
        backupCount=int(keep_days),
        encoding="utf-8",
    )
    h.setLevel(level)
    h.setFormatter(formatter)
    return h


def setup_logging(
    *,
    app_data_dir: Path,
    level: str = "INFO",
    keep_days_app: int = 7,
    keep_days_error: int = 30,
    console: bool = False,
) -> LoggingRuntime:
    """
    root logger 只挂一个 QueueHandler；文件写入在 QueueListener 线程完成。
    pynput 监听线程、mss 采样线程和 Qt 线程都只往队列里放记录。

    logs/app.log   INFO+，按天轮转
    logs/error.log ERROR+
    """
    logs_dir = app_data_dir / "logs"
    ensure_dir(logs_dir)

    formatter = logging.Formatter(fmt=LOG_FORMAT)
    handlers: list[logging.Handler] = [
        _daily_file(logs_dir / "app.log", level=logging.INFO, keep_days=keep_days_app, formatter=formatter),
        _daily_file(logs_dir / "error.log", level=logging.ERROR, keep_days=keep_days_error, formatter=formatter),
    ]
    if console:
        ch = logging.StreamHandler(stream=sys.stderr)
        ch.setLevel(logging.DEBUG)
        ch.setFormatter(formatter)
        handlers.append(ch)

    # 上下文变量必须在产生记录的线程里读取，所以过滤器挂在 QueueHandler 上
    log_q: "queue.Queue[logging.LogRecord]" = queue.Queue(maxsize=20_000)
    qh = logging.handlers.QueueHandler(log_q)
    qh.addFilter(ContextFilter())

    root = logging.getLogger()
    root.setLevel(getattr(logging, str(level).upper(), logging.INFO))
    root.handlers.clear()
    root.addHandler(qh)
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    listener = logging.handlers.QueueListener(log_q, *handlers, respect_handler_level=True)
    listener.start()

    _install_global_exception_hooks()

    logging.getLogger(__name__).info("logging initialized level=%s dir=%s", level, logs_dir, extra={"action": "boot"})
    return LoggingRuntime(listener=listener, logs_dir=logs_dir)


def _install_global_exception_hooks() -> None:
    log = logging.getLogger("unhandled")

    def excepthook(exc_type, exc, tb):
        log.critical("unhandled exception (main thread)", exc_info=(exc_type, exc, tb))

    def th_excepthook(args: threading.ExceptHookArgs):
        # pynput 监听线程里的异常会走这里
        log.critical(
            "unhandled exception (thread %s)",
            getattr(args.thread, "name", "?"),
            exc_info=(args.exc_type, args.exc_value, args.exc_traceback),
        )

    sys.excepthook = excepthook
    threading.excepthook = th_excepthook
