from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from PyQt5.QtCore import QSettings

from services.recommendations import SoilType
import config

logger = logging.getLogger(__name__)

KEY_REFRESH_INTERVAL = "refreshInterval"
KEY_SOIL_TYPE = "soilType"
KEY_DARK_MODE = "darkMode"


@dataclass(frozen=True)
class Settings:
    refresh_interval_s: int = config.DEFAULT_REFRESH_INTERVAL_S
    soil_type: SoilType = SoilType.UNSET
    dark_mode: bool = False


def _parse_interval(text) -> Optional[int]:
    try:
        value = int(str(text).strip())
    except ValueError:
        return None
    lo, hi = config.REFRESH_INTERVAL_RANGE
    return value if lo <= value <= hi else None


class SettingsStore:
    """
    Durable user settings on top of QSettings.

    Every value is written as a string ("30", "loamy", "true") so the file stays
    readable and independent of the QSettings backend's type handling.
    """

    def __init__(self, qsettings: Optional[QSettings] = None) -> None:
        self._qs = qsettings or QSettings(config.APP_ORGANIZATION, config.APP_NAME)

    @classmethod
    def from_file(cls, path: str) -> "SettingsStore":
        return cls(QSettings(path, QSettings.IniFormat))

    def load(self) -> Settings:
        defaults = Settings()

        raw_interval = self._qs.value(KEY_REFRESH_INTERVAL)
        interval = defaults.refresh_interval_s
        if raw_interval is not None:
            parsed = _parse_interval(raw_interval)
            if parsed is None:
                logger.warning("Ignoring stored refresh interval %r", raw_interval)
            else:
                interval = parsed

        raw_soil = self._qs.value(KEY_SOIL_TYPE)
        soil = defaults.soil_type
        if raw_soil is not None:
            try:
                soil = SoilType.parse(str(raw_soil))
            except ValueError:
                logger.warning("Ignoring stored soil type %r", raw_soil)

        raw_dark = self._qs.value(KEY_DARK_MODE)
        dark = str(raw_dark).strip().lower() == "true" if raw_dark is not None else defaults.dark_mode

        return Settings(refresh_interval_s=interval, soil_type=soil, dark_mode=dark)

    def save(self, settings: Settings) -> None:
        self._qs.setValue(KEY_REFRESH_INTERVAL, str(settings.refresh_interval_s))
        self._qs.setValue(KEY_SOIL_TYPE, settings.soil_type.value)
        self._qs.setValue(KEY_DARK_MODE, "true" if settings.dark_mode else "false")
        self._qs.sync()
