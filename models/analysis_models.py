"""Pydantic models describing per-column statistics."""

import datetime as dt
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, Field, model_validator


class TrendDirection(str, Enum):
    """Recent skip trajectory of a number or pattern."""
    INCREASING = "increasing"
    DECREASING = "decreasing"
    STABLE = "stable"


class NumberStat(BaseModel):
    """Recency and frequency statistics for one number in one column."""
    column: int = Field(..., ge=1, description="Column identifier")
    number: int = Field(..., description="Number")
    total_appearances: int = Field(..., ge=0, description="Times drawn in this column")
    draws_since_last_appearance: int = Field(..., ge=0, description="Skip; 0 means drawn in the most recent draw")
    average_gap: float = Field(0.0, ge=0.0, description="Mean draws between consecutive appearances")
    max_gap: int = Field(0, ge=0, description="Longest gap between appearances")
    min_gap: int = Field(0, ge=0, description="Shortest gap between appearances")
    last_appearance: Optional[dt.date] = Field(None, description="Date of the most recent appearance")
    skip_history: List[int] = Field(default_factory=list, description="Gaps, most recent first")
    is_hot: bool = Field(False, description="Drawn within the hot threshold")
    is_cold: bool = Field(False, description="Overdue relative to its own average gap")
    trend: TrendDirection = Field(TrendDirection.STABLE, description="Recent gap trajectory")

    @model_validator(mode='after')
    def validate_hot_cold(self):
        """Hot and cold are mutually exclusive."""
        if self.is_hot and self.is_cold:
            raise ValueError('A number cannot be both hot and cold')
        return self


class PatternStat(BaseModel):
    """Recency statistics for a derived classification of a column's numbers."""
    pattern: str = Field(..., description="Pattern label")
    column: int = Field(..., ge=1, description="Column identifier")
    total_appearances: int = Field(..., ge=0, description="Draws where the pattern matched")
    draws_since_last_appearance: int = Field(..., ge=0, description="Draws since the pattern last matched")
    average_gap: float = Field(0.0, ge=0.0, description="Mean draws between consecutive matches")
    max_gap: int = Field(0, ge=0, description="Longest gap between matches")
    min_gap: int = Field(0, ge=0, description="Shortest gap between matches")
    last_appearance: Optional[dt.date] = Field(None, description="Date of the most recent match")
    skip_history: List[int] = Field(default_factory=list, description="Gaps, most recent first")
    trend: TrendDirection = Field(TrendDirection.STABLE, description="Recent gap trajectory")


class StatisticalSummary(BaseModel):
    """Aggregate figures for a column."""
    column: int = Field(..., ge=1, description="Column identifier")
    total_draws: int = Field(..., ge=0, description="Draws observed")
    unique_numbers_observed: int = Field(..., ge=0, description="Distinct numbers drawn in the column")
    average_skips_across_numbers: float = Field(0.0, description="Mean current skip over all legal numbers")
    most_frequent_number: Optional[int] = Field(None, description="Most drawn number, smallest on ties")
    least_frequent_number: Optional[int] = Field(None, description="Least drawn observed number, smallest on ties")
    max_skips: int = Field(0, description="Largest current skip")
    min_skips: int = Field(0, description="Smallest current skip")
    standard_deviation: float = Field(0.0, description="Standard deviation of current skips")
    variance: float = Field(0.0, description="Variance of current skips")
    median_skips: float = Field(0.0, description="Median current skip")
    mode_skips: int = Field(0, description="Most common current skip, smallest on ties")
    skip_range: int = Field(0, description="max_skips - min_skips")


class ColumnAnalysis(BaseModel):
    """Complete analysis of one column, derived fresh from a draw history."""
    column: int = Field(..., ge=1, description="Column identifier")
    number_stats: Dict[int, NumberStat] = Field(..., description="Statistics keyed by number")
    pattern_stats: Dict[str, PatternStat] = Field(..., description="Statistics keyed by pattern label")
    statistical_summary: StatisticalSummary

    def get_number_stat(self, number: int) -> Optional[NumberStat]:
        """Statistics for a number, or None when outside the column's range."""
        return self.number_stats.get(number)


class ColumnCorrelation(BaseModel):
    """Pearson correlation between the numbers of two columns."""
    column1: int
    column2: int
    correlation: float = Field(..., ge=-1.0, le=1.0)
    strength: str = Field(..., description="weak, moderate or strong")
    p_value: float = Field(..., ge=0.0, le=1.0)


class ColumnTrend(BaseModel):
    """Drift of a column's drawn values over time."""
    column: int
    trend: str = Field(..., description="increasing, decreasing, stable or cyclical")
    confidence: float = Field(..., ge=0.0, le=1.0)
    slope: float = 0.0
    r_squared: float = 0.0
    period: Optional[int] = None


class PredictionAccuracy(BaseModel):
    """Hit rate of past predictions for a column."""
    column: int
    total_predictions: int = 0
    correct_predictions: int = 0
    accuracy: float = 0.0
    recent_accuracy: float = 0.0
    trend: str = "stable"
