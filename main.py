# main.py
from pathlib import Path
import argparse
import sys

from PySide6 import QtAsyncio
from PySide6.QtWidgets import QApplication

from colorpick.event_bus import EventBus
from colorpick.logging_setup import setup_logging
from colorpick.repos.settings_repo import SettingsRepo
from colorpick.store.settings_store import SettingsStore
from colorpick_qt.app import run_picker


def parse_args(argv=None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Screen color picker")
    p.add_argument("--data-dir", default="app_data", help="settings and logs directory")
    p.add_argument("--once", action="store_true", help="pick one color, print #RRGGBB and exit")
    p.add_argument("--log-level", default="INFO")
    return p.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    app_data_dir = Path(args.data_dir)

    # 日志
    log_rt = setup_logging(app_data_dir=app_data_dir, level=args.log_level, console=False)

    # 设置
    repo = SettingsRepo(app_data_dir)
    store = SettingsStore(repo.load_or_create(), repo=repo)
    bus = EventBus()

    # Qt 应用：托盘常驻，关掉预览 / 菜单窗口不退出
    app = QApplication(sys.argv)
    app.setQuitOnLastWindowClosed(False)

    try:
        result = QtAsyncio.run(run_picker(store=store, bus=bus, once=args.once), keep_running=False)
    finally:
        log_rt.stop()

    if args.once:
        if result is None:
            return 1
        print(result)
    return 0


if __name__ == "__main__":
    sys.exit(main())
