from __future__ import annotations

from typing import List, Optional

import numpy as np
import pyqtgraph as pg

from data_model import Channel
import config


class ChannelChart(pg.PlotWidget):
    """Line chart of one channel; absent values are drawn as gaps."""

    def __init__(self, channel: Channel, parent=None) -> None:
        super().__init__(parent=parent)
        self.channel = channel
        self._labels: List[str] = []
        self._values: List[Optional[float]] = []

        unit = config.CHANNEL_UNITS[channel.value]
        self.setTitle(f"{channel.display_name} ({unit})")
        self.showGrid(x=False, y=True, alpha=0.2)
        self.setMouseEnabled(x=False, y=False)
        self.curve = self.plot(pen=pg.mkPen(config.CHART_COLORS[channel.value], width=2))

    @property
    def labels(self) -> List[str]:
        return list(self._labels)

    @property
    def values(self) -> List[Optional[float]]:
        return list(self._values)

    def set_series(self, labels: List[str], values: List[Optional[float]]) -> None:
        if len(labels) != len(values):
            raise ValueError("labels and values must have the same length")
        self._labels = list(labels)
        self._values = list(values)

        x = np.arange(len(values), dtype=float)
        y = np.array([np.nan if v is None else v for v in values], dtype=float)
        if np.isnan(y).all():
            # Nothing to draw yet; keep the time axis but no curve
            self.curve.setData([], [])
        else:
            self.curve.setData(x, y, connect="finite")

        step = max(1, -(-len(labels) // config.MAX_AXIS_LABELS))
        ticks = [(float(i), label) for i, label in enumerate(labels) if i % step == 0]
        self.getAxis("bottom").setTicks([ticks])
        if len(labels) > 1:
            self.setXRange(0, len(labels) - 1, padding=0.02)

    def apply_theme(self, styles: dict) -> None:
        self.setBackground(styles["chart_background"])
