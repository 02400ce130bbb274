from __future__ import annotations

from dataclasses import replace
from typing import Optional

from PyQt5.QtCore import pyqtSignal
from PyQt5.QtWidgets import QComboBox, QGridLayout, QGroupBox, QLabel, QPushButton, QSpinBox, QWidget

from services.recommendations import SoilType
from services.settings_store import Settings
import config

SOIL_CHOICES = [
    ("Not set", SoilType.UNSET),
    ("Sandy", SoilType.SANDY),
    ("Clay", SoilType.CLAY),
    ("Loamy", SoilType.LOAMY),
    ("Silty", SoilType.SILTY),
]


class SettingsWidget(QGroupBox):
    """Refresh interval and soil type. Emits ``settings_saved`` only on an explicit save."""
    settings_saved = pyqtSignal(object)  # services.settings_store.Settings

    def __init__(self, settings: Settings, parent: Optional[QWidget] = None) -> None:
        super().__init__("Settings", parent)
        self._settings = settings
        layout = QGridLayout(self)

        self.interval_spin = QSpinBox()
        self.interval_spin.setRange(*config.REFRESH_INTERVAL_RANGE)
        self.interval_spin.setSuffix(" s")
        self.soil_combo = QComboBox()
        for text, soil in SOIL_CHOICES:
            self.soil_combo.addItem(text, soil.value)
        self.save_btn = QPushButton("Save")

        layout.addWidget(QLabel("Refresh interval"), 0, 0)
        layout.addWidget(self.interval_spin, 0, 1)
        layout.addWidget(QLabel("Soil type"), 1, 0)
        layout.addWidget(self.soil_combo, 1, 1)
        layout.addWidget(self.save_btn, 2, 0, 1, 2)

        self.save_btn.clicked.connect(self._on_save)
        self.set_settings(settings)

    def set_settings(self, settings: Settings) -> None:
        self._settings = settings
        self.interval_spin.setValue(settings.refresh_interval_s)
        idx = self.soil_combo.findData(settings.soil_type.value)
        self.soil_combo.setCurrentIndex(max(idx, 0))

    def current_settings(self) -> Settings:
        return replace(
            self._settings,
            refresh_interval_s=self.interval_spin.value(),
            soil_type=SoilType(self.soil_combo.currentData()),
        )

    def _on_save(self) -> None:
        self._settings = self.current_settings()
        self.settings_saved.emit(self._settings)
