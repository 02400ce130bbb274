import os
from datetime import datetime, timedelta

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

T0 = datetime(2024, 5, 1, 12, 0, 0)


class RecordingChart:
    """Stands in for a chart widget; remembers every series pushed to it."""

    def __init__(self):
        self.calls = []

    def set_series(self, labels, values):
        self.calls.append((list(labels), list(values)))

    @property
    def labels(self):
        return self.calls[-1][0] if self.calls else []

    @property
    def values(self):
        return self.calls[-1][1] if self.calls else []


class FakeClock:
    def __init__(self, start=T0):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, seconds=1):
        self.now += timedelta(seconds=seconds)
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def chart():
    return RecordingChart()


@pytest.fixture
def chart_factory():
    return RecordingChart
