"""Prediction engine that scores every number of a column and assembles a full combination."""

import numpy as np
from typing import Dict, List, Optional, Sequence, Tuple
from collections import Counter
from dataclasses import dataclass, field
import logging

from analysis.column_analyzer import ColumnAnalyzer
from analysis.patterns import is_prime
from config.settings import AnalysisSettings, settings as default_settings
from models.analysis_models import ColumnAnalysis, NumberStat, TrendDirection
from models.draws import Draw, GameConfig, order_by_recency
from models.prediction_models import ColumnPrediction, PredictionResult

logger = logging.getLogger(__name__)

INSUFFICIENT_HISTORY = "insufficient history"
REASON_HOT = "currently hot"
REASON_TRENDING_UP = "trending up"
REASON_OVERDUE = "overdue relative to average gap"
REASON_FREQUENT = "historically frequent"
REASON_PATTERN = "matches recent pattern"
REASON_NO_FACTOR = "no dominant factor"
REASON_DUPLICATE = "duplicate avoided with next-best alternative"
REASON_REPEAT = "repeated: no unused number left in range"

TREND_SCORES = {
    TrendDirection.INCREASING: 1.0,
    TrendDirection.STABLE: 0.5,
    TrendDirection.DECREASING: 0.0,
}

FREQUENT_SHARE = 0.75  # Share of the column's top count that counts as frequent
PATTERN_REASON_SCORE = 0.5


@dataclass
class NumberScore:
    """Weighted score of one candidate number."""
    number: int
    score: float
    components: Dict[str, float] = field(default_factory=dict)
    reasons: List[str] = field(default_factory=list)


class PredictorEngine:
    """Heuristic next-number scorer built on column analyses.

    Scores favour numbers that are hot or trending up, then numbers that are
    overdue relative to their own average gap, with smaller contributions from
    frequency share and continuation of the recent parity/magnitude/digit
    patterns. Confidence describes how far the top score stands out from the
    rest of the column; it is not a probability.
    """

    def __init__(self, game: Optional[GameConfig] = None, settings: Optional[AnalysisSettings] = None,
                 analyzer: Optional[ColumnAnalyzer] = None):
        self.settings = settings or default_settings
        self.analyzer = analyzer or ColumnAnalyzer(game, self.settings)
        self.game = self.analyzer.game

    def predict_next_number_for_column(self, draws: Sequence[Draw], column: int) -> ColumnPrediction:
        """Best guess for the next number of one column."""
        prediction, _ = self._predict_column(draws, column)
        return prediction

    def predict_optimal_combination(self, draws: Sequence[Draw]) -> PredictionResult:
        """Predict every primary column plus the secondary column.

        Primary numbers are kept distinct: when a column's best number is
        already used, its best unused number is taken instead and that
        column's prediction describes the number actually chosen. A column with
        no unused number left (a range narrower than the primary count) repeats
        its best number. The overall confidence is the arithmetic mean of the
        per-column confidences.
        """
        combination = []
        column_predictions = []
        reasoning = []

        for column in self.game.primary_columns:
            prediction, ranking = self._predict_column(draws, column)
            if prediction.predicted_number in combination:
                prediction = self._substitute_prediction(prediction, ranking, combination)
            combination.append(prediction.predicted_number)
            column_predictions.append(prediction)

        secondary, _ = self._predict_column(draws, self.game.secondary_column)
        column_predictions.append(secondary)

        for prediction in column_predictions:
            for reason in prediction.reasoning:
                if reason not in reasoning:
                    reasoning.append(reason)

        if all(INSUFFICIENT_HISTORY in p.reasoning for p in column_predictions):
            confidence = self.settings.confidence_floor
        else:
            confidence = float(np.mean([p.confidence for p in column_predictions]))
            confidence = min(1.0, max(self.settings.confidence_floor, confidence))

        logger.info(
            f"Predicted combination {combination} + {secondary.predicted_number} "
            f"(confidence {confidence:.3f})"
        )
        return PredictionResult(
            combination=combination,
            secondary_prediction=secondary.predicted_number,
            confidence=confidence,
            reasoning=reasoning,
            column_predictions=column_predictions
        )

    def _substitute_prediction(self, prediction: ColumnPrediction, ranking: List[NumberScore],
                               used: List[int]) -> ColumnPrediction:
        """Rebuild a column prediction around its best number not in ``used``."""
        available = [item for item in ranking if item.number not in used]
        if not available:
            logger.warning(
                f"Column {prediction.column}: every number is already used, repeating "
                f"{prediction.predicted_number}"
            )
            return prediction.model_copy(update={'reasoning': prediction.reasoning + [REASON_REPEAT]})

        chosen = available[0]
        logger.debug(f"Column {prediction.column}: {prediction.predicted_number} already used, taking {chosen.number}")

        if INSUFFICIENT_HISTORY in prediction.reasoning:
            confidence = self.settings.confidence_floor
            reasons = [INSUFFICIENT_HISTORY]
        else:
            confidence = self._calculate_confidence([item.score for item in ranking], chosen.score)
            reasons = chosen.reasons or [REASON_NO_FACTOR]

        return ColumnPrediction(
            column=prediction.column,
            predicted_number=chosen.number,
            confidence=confidence,
            alternatives=[item.number for item in available[1:1 + self.settings.alternatives_count]],
            reasoning=reasons + [REASON_DUPLICATE],
            score=chosen.score
        )

    def score_column(self, draws: Sequence[Draw], column: int,
                     analysis: Optional[ColumnAnalysis] = None) -> List[NumberScore]:
        """Every legal number of a column ranked by score, then by number."""
        column = self.game.validate_column(column)
        analysis = analysis or self.analyzer.analyze_column(draws, column)
        recent = [self.game.extract(draw, column) for draw in order_by_recency(draws)[:self.settings.pattern_window]]
        high_threshold = self.game.high_threshold(column)
        max_appearances = max(stat.total_appearances for stat in analysis.number_stats.values())

        scores = [
            self._score_number(stat, max_appearances, recent, high_threshold)
            for stat in analysis.number_stats.values()
        ]
        scores.sort(key=lambda item: (-item.score, item.number))
        return scores

    def _predict_column(self, draws: Sequence[Draw], column: int) -> Tuple[ColumnPrediction, List[NumberScore]]:
        column = self.game.validate_column(column)
        analysis = self.analyzer.analyze_column(draws, column)
        alternatives_count = self.settings.alternatives_count

        if analysis.statistical_summary.total_draws == 0:
            ranking = [NumberScore(number=n, score=0.0) for n in sorted(analysis.number_stats)]
            prediction = ColumnPrediction(
                column=column,
                predicted_number=ranking[0].number,
                confidence=self.settings.confidence_floor,
                alternatives=[item.number for item in ranking[1:1 + alternatives_count]],
                reasoning=[INSUFFICIENT_HISTORY],
                score=0.0
            )
            logger.debug(f"Column {column}: no history, returning floor confidence")
            return prediction, ranking

        ranking = self.score_column(draws, column, analysis)
        top = ranking[0]
        prediction = ColumnPrediction(
            column=column,
            predicted_number=top.number,
            confidence=self._calculate_confidence([item.score for item in ranking]),
            alternatives=[item.number for item in ranking[1:1 + alternatives_count]],
            reasoning=top.reasons or [REASON_NO_FACTOR],
            score=top.score
        )
        logger.debug(f"Column {column}: predicted {top.number} score={top.score:.3f}")
        return prediction, ranking

    def _score_number(self, stat: NumberStat, max_appearances: int, recent: List[int],
                      high_threshold: int) -> NumberScore:
        settings = self.settings
        reasons = []

        hot = 1.0 if stat.is_hot else 0.0
        if stat.is_hot:
            reasons.append(REASON_HOT)

        trend = TREND_SCORES[stat.trend]
        if stat.trend == TrendDirection.INCREASING:
            reasons.append(REASON_TRENDING_UP)

        overdue = 0.0
        if stat.total_appearances >= settings.min_appearances_for_cold and stat.average_gap > 0:
            overdue = min(1.0, stat.draws_since_last_appearance / stat.average_gap)
            if stat.is_cold or overdue >= 1.0:
                reasons.append(REASON_OVERDUE)

        frequency = stat.total_appearances / max_appearances if max_appearances > 0 else 0.0
        if stat.total_appearances > 0 and frequency >= FREQUENT_SHARE:
            reasons.append(REASON_FREQUENT)

        pattern = pattern_continuation_score(stat.number, recent, high_threshold)
        if pattern >= PATTERN_REASON_SCORE:
            reasons.append(REASON_PATTERN)

        components = {
            'hot': hot,
            'trend': trend,
            'overdue': overdue,
            'frequency': frequency,
            'pattern': pattern,
        }
        score = (
            settings.hot_weight * hot
            + settings.trend_weight * trend
            + settings.overdue_weight * overdue
            + settings.frequency_weight * frequency
            + settings.pattern_weight * pattern
        )
        return NumberScore(number=stat.number, score=max(0.0, score), components=components, reasons=reasons)

    def _calculate_confidence(self, scores: List[float], score: Optional[float] = None) -> float:
        """``score`` (the top score by default) scaled by how far it stands above the column's mean."""
        floor = self.settings.confidence_floor
        values = np.asarray(scores, dtype=float)
        top = float(values.max())
        lowest = float(values.min())
        if top <= lowest:
            return floor
        score = top if score is None else score
        separation = (score - float(values.mean())) / (top - lowest)
        return min(1.0, max(floor, score * separation))


def pattern_continuation_score(number: int, recent: Sequence[int], high_threshold: int) -> float:
    """How well ``number`` continues the majority patterns of the recent draws.

    Parity and high/low majority each add 0.3, a repeated last digit and a
    primality majority each add 0.2.
    """
    if not recent:
        return 0.0

    majority = len(recent) // 2 + 1
    score = 0.0

    parities = Counter(n % 2 for n in recent)
    if parities[number % 2] >= majority:
        score += 0.3

    magnitudes = Counter(n > high_threshold for n in recent)
    if magnitudes[number > high_threshold] >= majority:
        score += 0.3

    last_digits = Counter(n % 10 for n in recent)
    if last_digits[number % 10] >= min(2, len(recent)):
        score += 0.2

    primes = Counter(is_prime(n) for n in recent)
    if primes[is_prime(number)] >= majority:
        score += 0.2

    return min(1.0, score)


def predict_next_number_for_column(draws: Sequence[Draw], column: int, game: Optional[GameConfig] = None,
                                   settings: Optional[AnalysisSettings] = None) -> ColumnPrediction:
    """Best guess for the next number of one column."""
    return PredictorEngine(game, settings).predict_next_number_for_column(draws, column)


def predict_optimal_combination(draws: Sequence[Draw], game: Optional[GameConfig] = None,
                                settings: Optional[AnalysisSettings] = None) -> PredictionResult:
    """Predicted combination across every column."""
    return PredictorEngine(game, settings).predict_optimal_combination(draws)
