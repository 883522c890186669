"""Predictions package built on column analyses."""

from .predictor_engine import (
    PredictorEngine,
    predict_next_number_for_column,
    predict_optimal_combination
)

__all__ = [
    'PredictorEngine',
    'predict_next_number_for_column',
    'predict_optimal_combination'
]
