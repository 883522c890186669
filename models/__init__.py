"""Models package for the column statistics engine."""

from .draws import (
    Draw,
    GameConfig,
    InvalidColumnError,
    game_from_settings,
    order_by_recency,
    draws_from_dataframe,
    draws_to_dataframe
)

from .analysis_models import (
    TrendDirection,
    NumberStat,
    PatternStat,
    StatisticalSummary,
    ColumnAnalysis,
    ColumnCorrelation,
    ColumnTrend,
    PredictionAccuracy
)

from .prediction_models import ColumnPrediction, PredictionResult
from .live_models import LiveUpdateConfig, LiveStatsUpdate, RecentActivity

__all__ = [
    # Draw data
    'Draw',
    'GameConfig',
    'InvalidColumnError',
    'game_from_settings',
    'order_by_recency',
    'draws_from_dataframe',
    'draws_to_dataframe',

    # Analysis results
    'TrendDirection',
    'NumberStat',
    'PatternStat',
    'StatisticalSummary',
    'ColumnAnalysis',
    'ColumnCorrelation',
    'ColumnTrend',
    'PredictionAccuracy',

    # Predictions and live updates
    'ColumnPrediction',
    'PredictionResult',
    'LiveUpdateConfig',
    'LiveStatsUpdate',
    'RecentActivity'
]
