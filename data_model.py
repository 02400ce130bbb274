from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from typing import Deque, Dict, List, Optional, Tuple

import config


class Channel(str, Enum):
    TEMPERATURE = "temperature"
    MOISTURE = "moisture"
    PRESSURE = "pressure"
    ALTITUDE = "altitude"

    @property
    def display_name(self) -> str:
        return self.value.capitalize()


class InvalidCapacity(ValueError):
    """Raised when a timeframe outside [MIN_CAPACITY, MAX_CAPACITY] is requested."""

    def __init__(self, capacity) -> None:
        super().__init__(
            f"Capacity must be between {config.MIN_CAPACITY} and {config.MAX_CAPACITY}, got {capacity!r}"
        )
        self.capacity = capacity


class OutOfOrderSample(ValueError):
    """Raised when an appended timestamp is not later than the newest stored one."""


@dataclass(frozen=True)
class Sample:
    """One reading across all channels. ``None`` means the field was absent."""
    timestamp: datetime
    temperature: Optional[float] = None
    moisture: Optional[float] = None
    pressure: Optional[float] = None
    altitude: Optional[float] = None

    def value(self, channel: Channel) -> Optional[float]:
        return getattr(self, channel.value)


Point = Tuple[datetime, Optional[float]]


def validate_capacity(capacity) -> int:
    if isinstance(capacity, bool) or not isinstance(capacity, int):
        raise InvalidCapacity(capacity)
    if not config.MIN_CAPACITY <= capacity <= config.MAX_CAPACITY:
        raise InvalidCapacity(capacity)
    return capacity


class TimeSeriesBuffer:
    """
    Fixed-capacity FIFO of (timestamp, value) points for one channel.

    A buffer starts uninitialised (``capacity is None``) unless a capacity is
    given. Resizing always restarts the series: previous points are dropped and
    the buffer is filled with ``capacity`` empty placeholders one second apart,
    the last one at "now", so an empty chart still shows a full time axis.
    """

    def __init__(self, capacity: Optional[int] = None) -> None:
        self._points: Deque[Point] = deque()
        self._capacity: Optional[int] = None
        if capacity is not None:
            self.resize(capacity)

    @property
    def capacity(self) -> Optional[int]:
        return self._capacity

    @property
    def initialized(self) -> bool:
        return self._capacity is not None

    def __len__(self) -> int:
        return len(self._points)

    def resize(self, capacity: int, now: Optional[datetime] = None) -> None:
        capacity = validate_capacity(capacity)
        now = now or datetime.now()
        self._capacity = capacity
        # maxlen makes the deque drop the oldest point on overflow
        self._points = deque(
            ((now - timedelta(seconds=capacity - 1 - i), None) for i in range(capacity)),
            maxlen=capacity,
        )

    def append(self, timestamp: datetime, value: Optional[float]) -> None:
        if not self.initialized:
            self.resize(config.DEFAULT_CAPACITY, now=timestamp - timedelta(seconds=1))
        if self._points and timestamp <= self._points[-1][0]:
            raise OutOfOrderSample(
                f"Timestamp {timestamp.isoformat()} is not after {self._points[-1][0].isoformat()}"
            )
        self._points.append((timestamp, value))

    def snapshot(self) -> List[Point]:
        return list(self._points)

    def latest(self) -> Optional[Point]:
        return self._points[-1] if self._points else None


class SensorDataModel:
    """Manages one time-series buffer per channel, all sharing the same timeframe."""

    def __init__(self, capacity: Optional[int] = None) -> None:
        self.buffers: Dict[Channel, TimeSeriesBuffer] = {
            channel: TimeSeriesBuffer(capacity) for channel in Channel
        }

    @property
    def capacity(self) -> Optional[int]:
        return self.buffers[Channel.TEMPERATURE].capacity

    def buffer(self, channel: Channel) -> TimeSeriesBuffer:
        return self.buffers[channel]

    def resize(self, capacity: int, now: Optional[datetime] = None) -> None:
        """Restart every channel with ``capacity`` placeholders. Nothing changes if invalid."""
        validate_capacity(capacity)
        now = now or datetime.now()
        for buf in self.buffers.values():
            buf.resize(capacity, now=now)

    def latest_timestamp(self) -> Optional[datetime]:
        tails = [buf.latest()[0] for buf in self.buffers.values() if buf.latest() is not None]
        return max(tails) if tails else None

    def add_sample(self, sample: Sample) -> None:
        """Append one point per channel. Either all channels take the sample or none does."""
        for buf in self.buffers.values():
            tail = buf.latest()
            if tail is not None and sample.timestamp <= tail[0]:
                raise OutOfOrderSample(
                    f"Sample at {sample.timestamp.isoformat()} is not after {tail[0].isoformat()}"
                )
        for channel, buf in self.buffers.items():
            buf.append(sample.timestamp, sample.value(channel))
