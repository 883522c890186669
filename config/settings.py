"""Application settings for the column statistics engine using Pydantic BaseSettings."""

from pydantic_settings import BaseSettings
from pydantic import Field


class AnalysisSettings(BaseSettings):
    """Tunable thresholds and defaults for analysis, prediction and live updates."""

    # ========================================
    # GAME CONFIGURATION
    # ========================================
    primary_count: int = Field(5, ge=1)
    primary_min: int = 1
    primary_max: int = 69
    secondary_min: int = 1
    secondary_max: int = 26

    # ========================================
    # CLASSIFICATION THRESHOLDS
    # ========================================
    hot_threshold: int = Field(3, ge=0)  # Hot when drawn within this many draws
    cold_gap_multiplier: float = Field(1.5, gt=0)  # Cold when skip >= multiplier * average gap
    min_appearances_for_cold: int = Field(2, ge=2)
    trend_change_threshold: float = Field(0.2, ge=0)  # Relative gap change considered material

    # ========================================
    # PREDICTION SCORING
    # ========================================
    hot_weight: float = 0.30
    trend_weight: float = 0.25
    overdue_weight: float = 0.15
    frequency_weight: float = 0.20
    pattern_weight: float = 0.10
    alternatives_count: int = Field(3, ge=0)
    confidence_floor: float = Field(0.01, ge=0.0, le=1.0)
    pattern_window: int = Field(3, ge=1)

    # ========================================
    # LIVE UPDATES
    # ========================================
    live_top_n: int = Field(5, ge=1)
    recent_activity_window: int = Field(3, ge=0)
    live_update_interval: float = Field(30.0, gt=0)  # seconds
    live_max_retries: int = Field(3, ge=0)
    live_retry_delay: float = Field(5.0, ge=0)  # seconds
    scheduler_timezone: str = "UTC"

    # ========================================
    # LOGGING CONFIGURATION
    # ========================================
    log_level: str = "INFO"
    log_format: str = "text"

    model_config = {
        "env_file": ".env",
        "env_prefix": "LOTTO_",
        "case_sensitive": False,
        "extra": "ignore",
    }


# Default settings instance
settings = AnalysisSettings()
