from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from data_model import Sample, SensorDataModel
from services.settings_store import Settings
from services.status_tracker import StatusTracker
from ui.render_sync import RenderSync
import config


@dataclass
class AppContext:
    """Everything the dashboard shares, built once at startup and handed to each component."""
    settings: Settings
    data_model: SensorDataModel
    render_sync: RenderSync
    status: StatusTracker
    latest_sample: Optional[Sample] = None
    advisories: List[str] = field(default_factory=list)

    @classmethod
    def create(cls, settings: Optional[Settings] = None, status: Optional[StatusTracker] = None,
               capacity: int = config.DEFAULT_CAPACITY) -> "AppContext":
        model = SensorDataModel(capacity)
        return cls(
            settings=settings or Settings(),
            data_model=model,
            render_sync=RenderSync(model),
            status=status or StatusTracker(),
        )
