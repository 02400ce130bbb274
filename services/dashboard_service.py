from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta
from typing import Callable, List, Optional

import config
from context import AppContext
from data_model import InvalidCapacity, Sample
from services.recommendations import highlight_crop, recommend
from services.settings_store import Settings

logger = logging.getLogger(__name__)


@dataclass
class CycleResult:
    """What the window needs to repaint after one acquisition cycle."""
    ok: bool
    sample: Optional[Sample] = None
    advisories: List[str] = field(default_factory=list)
    highlight: str = ""
    error: Optional[str] = None


class DashboardService:
    """
    Applies acquisition results to the shared context.

    A successful cycle always runs in this order: buffer append, chart sync,
    recommendations, status update. Later steps read what earlier ones wrote.
    """

    def __init__(self, ctx: AppContext, clock: Callable[[], datetime] = datetime.now) -> None:
        self.ctx = ctx
        self._clock = clock

    def _stamp(self, sample: Sample) -> Sample:
        """
        Re-stamp a sample with the GUI-thread clock at the moment it is applied.

        A clock slightly behind the newest point (a resize that ran while the
        fetch was in flight) is nudged just past it. A clock stepped back further
        (DST, NTP) restarts the series at the new time instead of rejecting
        every sample until the clock catches up.
        """
        now = self._clock()
        model = self.ctx.data_model
        tail = model.latest_timestamp()
        if tail is not None and now <= tail:
            if tail - now > timedelta(seconds=config.CLOCK_STEP_TOLERANCE_S):
                logger.warning("Clock stepped back by %s, restarting series", tail - now)
                model.resize(model.capacity, now=now - timedelta(seconds=1))
            else:
                now = tail + timedelta(milliseconds=1)
        return replace(sample, timestamp=now)

    def apply_sample(self, sample: Sample) -> CycleResult:
        sample = self._stamp(sample)
        self.ctx.data_model.add_sample(sample)

        self.ctx.latest_sample = sample
        self.ctx.render_sync.sync_all()
        self.ctx.advisories = recommend(sample, self.ctx.settings.soil_type)
        self.ctx.status.record_success(sample.timestamp)
        return CycleResult(
            ok=True,
            sample=sample,
            advisories=list(self.ctx.advisories),
            highlight=highlight_crop(self.ctx.advisories),
        )

    def apply_failure(self, reason: str) -> CycleResult:
        entry = self.ctx.status.record_fetch_failure(reason)
        return CycleResult(ok=False, error=entry)

    def resize(self, capacity: int) -> None:
        """Restart all series with a new timeframe. Raises InvalidCapacity without touching data."""
        try:
            self.ctx.data_model.resize(capacity)
        except InvalidCapacity:
            logger.warning("Rejected timeframe %r", capacity)
            raise
        self.ctx.render_sync.sync_all()
        logger.info("Chart timeframe set to %d seconds", capacity)

    def update_settings(self, settings: Settings) -> List[str]:
        """Adopt new settings; advisories are recomputed since the soil type may have changed."""
        self.ctx.settings = settings
        if self.ctx.latest_sample is not None:
            self.ctx.advisories = recommend(self.ctx.latest_sample, settings.soil_type)
        return list(self.ctx.advisories)

    def set_online(self, online: bool) -> bool:
        return self.ctx.status.set_online(online)

    def record_app_error(self, message: str) -> str:
        return self.ctx.status.record_error(f"Application error: {message}")

    @property
    def highlight(self) -> str:
        return highlight_crop(self.ctx.advisories)
