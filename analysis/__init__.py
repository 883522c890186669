"""Analysis package for per-column draw statistics."""

from .column_analyzer import ColumnAnalyzer, analyze_column, get_number_across_columns
from .patterns import match_patterns, pattern_labels
from .trends import classify_trend, is_hot, is_cold
from .statistics import (
    calculate_column_correlation,
    calculate_all_column_correlations,
    detect_column_trend,
    track_prediction_accuracy
)

__all__ = [
    'ColumnAnalyzer',
    'analyze_column',
    'get_number_across_columns',
    'match_patterns',
    'pattern_labels',
    'classify_trend',
    'is_hot',
    'is_cold',
    'calculate_column_correlation',
    'calculate_all_column_correlations',
    'detect_column_trend',
    'track_prediction_accuracy'
]
