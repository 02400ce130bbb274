from __future__ import annotations

import logging
from datetime import datetime
from typing import Dict, List, Optional, Protocol, Tuple

from data_model import Channel, SensorDataModel

logger = logging.getLogger(__name__)

Series = Tuple[List[str], List[Optional[float]]]


class SeriesView(Protocol):
    def set_series(self, labels: List[str], values: List[Optional[float]]) -> None:
        ...


def format_label(timestamp: datetime) -> str:
    return timestamp.strftime("%M:%S")


class RenderSync:
    """
    Keeps each attached chart showing exactly its channel's buffer.

    ``sync`` rebuilds the whole label/value series from the buffer snapshot, so
    a chart can never keep stale trailing points after an eviction or resize.
    A sync that would push the same series as last time is skipped.
    """

    def __init__(self, model: SensorDataModel) -> None:
        self._model = model
        self._charts: Dict[Channel, SeriesView] = {}
        self._rendered: Dict[Channel, Series] = {}

    def attach(self, channel: Channel, chart: SeriesView) -> None:
        self._charts[channel] = chart
        self._rendered.pop(channel, None)
        self.sync(channel)

    def detach(self, channel: Channel) -> None:
        self._charts.pop(channel, None)
        self._rendered.pop(channel, None)

    @property
    def channels(self) -> List[Channel]:
        return list(self._charts)

    def series(self, channel: Channel) -> Series:
        snapshot = self._model.buffer(channel).snapshot()
        labels = [format_label(ts) for ts, _ in snapshot]
        values = [value for _, value in snapshot]
        return labels, values

    def sync(self, channel: Channel) -> bool:
        """Push the channel's buffer to its chart. Returns True if the chart was updated."""
        chart = self._charts.get(channel)
        if chart is None:
            return False
        labels, values = self.series(channel)
        if self._rendered.get(channel) == (labels, values):
            return False
        chart.set_series(labels, values)
        self._rendered[channel] = (labels, values)
        return True

    def sync_all(self) -> None:
        for channel in self._charts:
            self.sync(channel)

    def rendered(self, channel: Channel) -> Optional[Series]:
        return self._rendered.get(channel)
