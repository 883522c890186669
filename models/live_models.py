"""Models for the live statistics stream."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from config.settings import AnalysisSettings, settings as default_settings


class LiveUpdateConfig(BaseModel):
    """Timer and retry configuration for live updates. Durations are in seconds."""
    update_interval: float = Field(..., gt=0, description="Seconds between ticks")
    max_retries: int = Field(..., ge=0, description="Retry attempts for a failed tick")
    retry_delay: float = Field(..., ge=0, description="Seconds before retrying a failed tick")

    @classmethod
    def from_settings(cls, settings: Optional[AnalysisSettings] = None) -> "LiveUpdateConfig":
        settings = settings or default_settings
        return cls(
            update_interval=settings.live_update_interval,
            max_retries=settings.live_max_retries,
            retry_delay=settings.live_retry_delay
        )


class RecentActivity(BaseModel):
    """A number drawn within the recent activity window."""
    number: int
    draws_since_last: int = Field(..., ge=0)
    is_new_hot: bool = False


class LiveStatsUpdate(BaseModel):
    """Snapshot of a column's hot, cold and trending numbers."""
    timestamp: datetime = Field(default_factory=datetime.now)
    column: int = Field(..., ge=1)
    hot_numbers: List[int] = Field(default_factory=list, description="Hot numbers, most recent first")
    cold_numbers: List[int] = Field(default_factory=list, description="Cold numbers, most overdue first")
    trending_up: List[int] = Field(default_factory=list, description="Numbers with an increasing trend")
    trending_down: List[int] = Field(default_factory=list, description="Numbers with a decreasing trend")
    recent_activity: List[RecentActivity] = Field(default_factory=list)
