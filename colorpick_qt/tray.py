# colorpick_qt/tray.py
from __future__ import annotations

import logging
from typing import Callable, Dict, Optional

from PySide6.QtCore import QObject, Qt
from PySide6.QtGui import QAction, QActionGroup
from PySide6.QtWidgets import (
    QHBoxLayout,
    QMenu,
    QSystemTrayIcon,
    QToolButton,
    QWidget,
    QWidgetAction,
)

from colorpick.color.model import Color, Format
from colorpick.history.reconciler import ColorSection, HistoryEntry
from colorpick_qt.icons import color_icon, picker_icon

log = logging.getLogger(__name__)

STAR_ON = "★"
STAR_OFF = "☆"


class ColorAction:
    """
    One history/pinned row in the tray menu (EntryView).

    Holds its QWidgetAction; set_entry patches icon/text/star in place.
    """

    def __init__(
        self,
        *,
        menu: QMenu,
        before: QAction,
        on_copy: Callable[[int], None],
        on_pin: Callable[[int], None],
    ) -> None:
        self._menu = menu
        self._entry: Optional[HistoryEntry] = None

        row = QWidget(menu)
        layout = QHBoxLayout(row)
        layout.setContentsMargins(6, 1, 6, 1)
        layout.setSpacing(4)

        self._btn_copy = QToolButton(row)
        self._btn_copy.setToolButtonStyle(Qt.ToolButtonTextBesideIcon)
        self._btn_copy.setAutoRaise(True)
        self._btn_copy.clicked.connect(lambda: self._fire(on_copy))
        layout.addWidget(self._btn_copy, 1)

        self._btn_pin = QToolButton(row)
        self._btn_pin.setAutoRaise(True)
        self._btn_pin.clicked.connect(lambda: self._fire(on_pin))
        layout.addWidget(self._btn_pin)

        self._action = QWidgetAction(menu)
        self._action.setDefaultWidget(row)
        menu.insertAction(before, self._action)

    def set_entry(self, entry: HistoryEntry) -> None:
        self._entry = entry
        color = Color.from_pixel(entry.pixel)
        self._btn_copy.setIcon(color_icon(color))
        self._btn_copy.setText(color.hex)
        self._btn_pin.setText(STAR_ON if entry.pinned else STAR_OFF)

    def destroy(self) -> None:
        self._menu.removeAction(self._action)
        self._action.deleteLater()

    def _fire(self, fn: Callable[[int], None]) -> None:
        if self._entry is None:
            return
        self._menu.close()
        fn(self._entry.pixel)


class TrayIcon(QObject):
    """
    托盘图标（StatusIndicator 实现）+ 菜单：

    - 左键单击：开始取色
    - 默认格式单选组（仅在 enable_format 时显示）
    - 历史 / 收藏区：ColorSection 按索引原地更新 ColorAction
    - “只显示收藏”开关、退出
    """

    def __init__(
        self,
        *,
        on_summon: Callable[[], None],
        on_copy: Callable[[int], None],
        on_pin: Callable[[int], None],
        on_format: Callable[[Format], None],
        on_pin_display: Callable[[bool], None],
        on_quit: Callable[[], None],
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        self._on_summon = on_summon

        self._tray = QSystemTrayIcon(picker_icon(busy=False), self)
        self._tray.setToolTip("Color Picker")
        self._tray.activated.connect(self._on_activated)

        self._menu = QMenu()

        # 格式
        self._format_menu = self._menu.addMenu("Default format")
        self._format_group = QActionGroup(self)
        self._format_group.setExclusive(True)
        self._format_actions: Dict[Format, QAction] = {}
        for fmt in Format:
            act = self._format_menu.addAction(fmt.name)
            act.setCheckable(True)
            act.triggered.connect(lambda _checked=False, f=fmt: on_format(f))
            self._format_group.addAction(act)
            self._format_actions[fmt] = act
        self._sep_format = self._menu.addSeparator()

        # 历史 / 收藏
        self._sep_section = self._menu.addSeparator()
        self._section: ColorSection[ColorAction] = ColorSection(
            lambda: ColorAction(menu=self._menu, before=self._sep_section, on_copy=on_copy, on_pin=on_pin)
        )

        act_pick = self._menu.addAction("Pick color")
        act_pick.triggered.connect(lambda _checked=False: self._on_summon())

        self._act_pinned = self._menu.addAction("Show pinned only")
        self._act_pinned.setCheckable(True)
        self._act_pinned.toggled.connect(on_pin_display)

        self._menu.addSeparator()
        act_quit = self._menu.addAction("Quit")
        act_quit.triggered.connect(lambda _checked=False: on_quit())

        self._tray.setContextMenu(self._menu)

    @property
    def tray(self) -> QSystemTrayIcon:
        return self._tray

    # ---------- StatusIndicator ----------

    def set_busy(self, busy: bool) -> None:
        self._tray.setIcon(picker_icon(busy=busy))

    def set_tooltip(self, text: str) -> None:
        self._tray.setToolTip(text)

    # ---------- updates ----------

    def set_visible(self, visible: bool) -> None:
        self._tray.setVisible(bool(visible))

    def set_format(self, fmt: Format, *, enabled: bool) -> None:
        self._format_actions[fmt].setChecked(True)
        self._format_menu.menuAction().setVisible(bool(enabled))
        self._sep_format.setVisible(bool(enabled))

    def set_pin_display(self, on: bool) -> None:
        if self._act_pinned.isChecked() != bool(on):
            self._act_pinned.blockSignals(True)
            self._act_pinned.setChecked(bool(on))
            self._act_pinned.blockSignals(False)

    def set_entries(self, entries) -> None:
        ops = self._section.set_list(entries)
        if ops:
            log.debug("tray section reconciled: %d ops", len(ops))

    def _on_activated(self, reason: QSystemTrayIcon.ActivationReason) -> None:
        if reason == QSystemTrayIcon.Trigger:
            self._on_summon()
