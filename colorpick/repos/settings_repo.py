from __future__ import annotations

import logging
from pathlib import Path

from colorpick.io.json_store import JsonReadError, atomic_write_json, ensure_dir, quarantine, read_json
from colorpick.models.settings import PickerSettings

log = logging.getLogger(__name__)


class SettingsRepo:
    """
    Manages app_data/settings.json.

    Missing keys are filled with defaults on load; the file is rewritten when
    it did not exist or lacked schema_version. An unreadable file is moved
    aside and replaced with defaults, so a bad edit never stops the picker.
    """

    def __init__(self, app_data_dir: Path) -> None:
        self._app_data_dir = app_data_dir
        ensure_dir(self._app_data_dir)

    @property
    def path(self) -> Path:
        return self._app_data_dir / "settings.json"

    def load_or_create(self) -> PickerSettings:
        existed = self.path.exists()
        try:
            data = read_json(self.path, default={})
        except JsonReadError as e:
            moved = quarantine(self.path)
            log.error("settings unreadable, moved to %s: %s", moved.name, e)
            existed, data = False, {}

        settings = PickerSettings.from_dict(data)

        if (not existed) or ("schema_version" not in data):
            log.info("writing settings defaults to %s", self.path)
            self.save(settings)

        return settings

    def save(self, settings: PickerSettings) -> None:
        atomic_write_json(self.path, settings.to_dict())
