"""Column-level statistics: cross-column correlation, value drift and prediction accuracy."""

import numpy as np
import pandas as pd
from scipy import stats
from typing import List, Optional, Sequence
import logging

from models.analysis_models import ColumnCorrelation, ColumnTrend, PredictionAccuracy
from models.draws import Draw, GameConfig, order_by_recency

logger = logging.getLogger(__name__)

MIN_TREND_VALUES = 10
MIN_PERIODICITY_VALUES = 20
TREND_SLOPE_THRESHOLD = 0.1
TREND_R_SQUARED_THRESHOLD = 0.3
AUTOCORRELATION_THRESHOLD = 0.3
RECENT_ACCURACY_WINDOW = 10
ACCURACY_TREND_MARGIN = 0.05


def build_column_frame(draws: Sequence[Draw], game: GameConfig) -> pd.DataFrame:
    """One row per draw, oldest first, one integer column per game column."""
    chronological = list(reversed(order_by_recency(draws)))
    rows = [[game.extract(draw, column) for column in game.columns] for draw in chronological]
    return pd.DataFrame(rows, columns=game.columns, dtype=float)


def _correlation_strength(correlation: float) -> str:
    magnitude = abs(correlation)
    if magnitude < 0.3:
        return 'weak'
    if magnitude < 0.7:
        return 'moderate'
    return 'strong'


def calculate_column_correlation(draws: Sequence[Draw], column1: int, column2: int,
                                 game: GameConfig, frame: Optional[pd.DataFrame] = None) -> ColumnCorrelation:
    """Pearson correlation between the numbers drawn in two columns."""
    column1 = game.validate_column(column1)
    column2 = game.validate_column(column2)
    frame = frame if frame is not None else build_column_frame(draws, game)

    x = frame[column1].to_numpy()
    y = frame[column2].to_numpy()

    # pearsonr is undefined for constant input
    if len(x) < 3 or np.std(x) == 0 or np.std(y) == 0:
        return ColumnCorrelation(column1=column1, column2=column2, correlation=0.0,
                                 strength='weak', p_value=1.0)

    result = stats.pearsonr(x, y)
    correlation = float(np.clip(result[0], -1.0, 1.0))
    p_value = float(np.clip(result[1], 0.0, 1.0))
    return ColumnCorrelation(
        column1=column1,
        column2=column2,
        correlation=correlation,
        strength=_correlation_strength(correlation),
        p_value=p_value
    )


def calculate_all_column_correlations(draws: Sequence[Draw], game: GameConfig) -> List[ColumnCorrelation]:
    """Correlation for every unordered pair of columns."""
    frame = build_column_frame(draws, game)
    columns = game.columns
    return [
        calculate_column_correlation(draws, first, second, game, frame=frame)
        for i, first in enumerate(columns)
        for second in columns[i + 1:]
    ]


def _autocorrelation(values: np.ndarray, lag: int) -> float:
    n = len(values) - lag
    if n < 1:
        return 0.0
    deviations = values - values.mean()
    numerator = float(np.sum(deviations[:n] * deviations[lag:lag + n]))
    denominator = float(np.sum(deviations[:n] ** 2))
    return numerator / denominator if denominator > 0 else 0.0


def detect_periodicity(values: np.ndarray) -> Optional[int]:
    """Lag with the strongest autocorrelation above the threshold, if any."""
    if len(values) < MIN_PERIODICITY_VALUES:
        return None

    max_lag = min(50, len(values) // 3)
    best_period = None
    best_correlation = AUTOCORRELATION_THRESHOLD
    for lag in range(2, max_lag + 1):
        correlation = _autocorrelation(values, lag)
        if correlation > best_correlation:
            best_correlation = correlation
            best_period = lag
    return best_period


def detect_column_trend(draws: Sequence[Draw], column: int, game: GameConfig) -> ColumnTrend:
    """Linear drift of a column's drawn values, falling back to a cyclical check."""
    column = game.validate_column(column)
    values = build_column_frame(draws, game)[column].to_numpy()

    if len(values) < MIN_TREND_VALUES:
        return ColumnTrend(column=column, trend='stable', confidence=0.0)

    if np.std(values) == 0:
        return ColumnTrend(column=column, trend='stable', confidence=0.0)

    regression = stats.linregress(np.arange(len(values)), values)
    slope = float(regression.slope)
    r_squared = float(regression.rvalue ** 2)

    if abs(slope) > TREND_SLOPE_THRESHOLD and r_squared > TREND_R_SQUARED_THRESHOLD:
        trend = 'increasing' if slope > 0 else 'decreasing'
        period = None
    else:
        period = detect_periodicity(values)
        trend = 'cyclical' if period else 'stable'

    logger.debug(f"Column {column} trend: {trend} (slope={slope:.4f}, r2={r_squared:.4f})")
    return ColumnTrend(
        column=column,
        trend=trend,
        confidence=min(1.0, max(0.0, r_squared)),
        slope=slope,
        r_squared=r_squared,
        period=period
    )


def track_prediction_accuracy(column: int, predictions: Sequence[int],
                              actuals: Sequence[int]) -> PredictionAccuracy:
    """Exact-match hit rate of past predictions against the numbers actually drawn."""
    if len(predictions) != len(actuals) or not predictions:
        return PredictionAccuracy(column=column)

    total = len(predictions)
    correct = sum(1 for predicted, actual in zip(predictions, actuals) if predicted == actual)
    accuracy = correct / total

    recent_count = min(RECENT_ACCURACY_WINDOW, total)
    recent_pairs = zip(predictions[-recent_count:], actuals[-recent_count:])
    recent_accuracy = sum(1 for predicted, actual in recent_pairs if predicted == actual) / recent_count

    trend = 'stable'
    if recent_accuracy > accuracy + ACCURACY_TREND_MARGIN:
        trend = 'improving'
    elif recent_accuracy < accuracy - ACCURACY_TREND_MARGIN:
        trend = 'declining'

    return PredictionAccuracy(
        column=column,
        total_predictions=total,
        correct_predictions=correct,
        accuracy=accuracy,
        recent_accuracy=recent_accuracy,
        trend=trend
    )
