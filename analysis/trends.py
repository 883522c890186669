"""Hot/cold classification and the skip trend classifier."""

from typing import Sequence

from models.analysis_models import TrendDirection


def classify_trend(gaps: Sequence[int], change_threshold: float) -> TrendDirection:
    """Label the recent gap trajectory of a number.

    ``gaps`` are ordered most recent first. The most recent gap is compared with
    the mean of the earlier gaps: a gap shorter by more than ``change_threshold``
    (relative) means the number is appearing more often lately (increasing), a
    gap longer by more than that means decreasing. Anything with fewer than two
    gaps, i.e. fewer than three appearances, is stable.
    """
    if len(gaps) < 2:
        return TrendDirection.STABLE

    recent = gaps[0]
    prior = gaps[1:]
    prior_mean = sum(prior) / len(prior)
    if prior_mean <= 0:
        return TrendDirection.STABLE

    if recent < prior_mean * (1 - change_threshold):
        return TrendDirection.INCREASING
    if recent > prior_mean * (1 + change_threshold):
        return TrendDirection.DECREASING
    return TrendDirection.STABLE


def is_hot(appearances: int, skip: int, hot_threshold: int) -> bool:
    """Drawn at least once and within the last ``hot_threshold`` draws."""
    return appearances > 0 and skip <= hot_threshold


def is_cold(appearances: int, skip: int, average_gap: float, gap_multiplier: float,
            min_appearances: int, hot: bool = False) -> bool:
    """Overdue relative to the number's own rhythm. Never true for a hot number."""
    if hot or appearances < min_appearances or average_gap <= 0:
        return False
    return skip >= gap_multiplier * average_gap
