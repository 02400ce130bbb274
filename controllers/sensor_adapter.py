from __future__ import annotations

import logging
import math
import random
from datetime import datetime
from typing import Any, Callable, Optional

import requests

import config
from data_model import Channel, Sample

logger = logging.getLogger(__name__)


class FetchError(Exception):
    """The endpoint could not be read or returned something that is not a reading."""


def _coerce(channel: Channel, raw: Any) -> Optional[float]:
    # bool is an int subclass; a JSON true is not a reading
    if raw is None or isinstance(raw, bool) or not isinstance(raw, (int, float)):
        return None
    value = float(raw)
    if math.isnan(value) or math.isinf(value):
        return None
    lo, hi = config.CHANNEL_RANGES[channel.value]
    if not lo <= value <= hi:
        logger.debug("Dropping out-of-range %s reading %s", channel.value, value)
        return None
    return value


def parse_payload(payload: Any, timestamp: Optional[datetime] = None) -> Sample:
    """
    Turn a decoded JSON body into a Sample.

    The body must be a JSON object; anything else raises FetchError. Individual
    fields that are missing, null, non-numeric or out of range become absent.
    """
    if not isinstance(payload, dict):
        raise FetchError(f"Expected a JSON object, got {type(payload).__name__}")
    values = {channel.value: _coerce(channel, payload.get(channel.value)) for channel in Channel}
    return Sample(timestamp=timestamp or datetime.now(), **values)


class SensorAdapter:
    """Reads the sensor endpoint over HTTP, one GET per fetch."""

    def __init__(
        self,
        url: str = config.API_URL,
        *,
        timeout: float = config.REQUEST_TIMEOUT_S,
        session: Optional[requests.Session] = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.url = url
        self.timeout = timeout
        self._session = session or requests.Session()
        self._clock = clock

    def fetch(self) -> Sample:
        """
        Perform one GET and return the parsed Sample.

        Raises:
            FetchError: on a transport exception, a non-2xx status, a body that
                is not valid JSON, or JSON that is not an object.
        """
        try:
            response = self._session.get(self.url, timeout=self.timeout)
        except requests.RequestException as exc:
            raise FetchError(f"Request to {self.url} failed: {exc}") from exc
        if not response.ok:
            raise FetchError(f"Endpoint returned HTTP {response.status_code}")
        try:
            payload = response.json()
        except ValueError as exc:
            raise FetchError(f"Invalid JSON from endpoint: {exc}") from exc
        return parse_payload(payload, self._clock())

    def close(self) -> None:
        self._session.close()


class MockSensorAdapter:
    """Produces plausible random readings so the dashboard can run without a device."""

    def __init__(self, seed: Optional[int] = None, clock: Callable[[], datetime] = datetime.now) -> None:
        self._rng = random.Random(seed)
        self._clock = clock

    def fetch(self) -> Sample:
        return Sample(
            timestamp=self._clock(),
            temperature=self._rng.uniform(*config.MOCK_TEMPERATURE_RANGE),
            moisture=self._rng.uniform(*config.MOCK_MOISTURE_RANGE),
        )

    def close(self) -> None:
        pass
