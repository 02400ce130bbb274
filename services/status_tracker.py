from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Callable, List, Optional

logger = logging.getLogger(__name__)


@dataclass
class StatusRecord:
    uptime_start: datetime
    online: bool = True
    last_success: Optional[datetime] = None
    error_log: List[str] = field(default_factory=list)
    samples: int = 0


def format_uptime(elapsed: timedelta) -> str:
    seconds = max(0, int(elapsed.total_seconds()))
    hours, rest = divmod(seconds, 3600)
    minutes, seconds = divmod(rest, 60)
    return f"Uptime: {hours:02d}:{minutes:02d}:{seconds:02d}"


class StatusTracker:
    """
    Connectivity and error bookkeeping for the status display.

    Connectivity and fetch failures are separate: only connectivity events move
    ``online``; failed fetches only add to ``error_log``. The log is kept for the
    whole session.
    """

    def __init__(self, clock: Callable[[], datetime] = datetime.now) -> None:
        self._clock = clock
        self.record = StatusRecord(uptime_start=clock())

    def set_online(self, online: bool) -> bool:
        """Apply a connectivity event. Returns True if the state changed."""
        changed = self.record.online != online
        self.record.online = online
        if changed:
            logger.info("Network connection %s", "restored" if online else "lost")
        return changed

    def connectivity_restored(self) -> bool:
        return self.set_online(True)

    def connectivity_lost(self) -> bool:
        return self.set_online(False)

    def record_success(self, timestamp: Optional[datetime] = None) -> None:
        self.record.last_success = timestamp or self._clock()
        self.record.samples += 1

    def record_error(self, message: str) -> str:
        entry = f"{self._clock():%H:%M:%S} {message}"
        self.record.error_log.append(entry)
        return entry

    def record_fetch_failure(self, reason: str) -> str:
        return self.record_error(f"Failed to fetch sensor data: {reason}")

    def uptime(self, now: Optional[datetime] = None) -> timedelta:
        return (now or self._clock()) - self.record.uptime_start

    def uptime_text(self, now: Optional[datetime] = None) -> str:
        return format_uptime(self.uptime(now))
