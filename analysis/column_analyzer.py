"""Per-column frequency, recency and trend statistics over a draw history."""

import numpy as np
from typing import Dict, List, Optional, Sequence
from collections import Counter
import logging

from analysis.patterns import match_patterns, pattern_labels
from analysis.recency import RecencyTrack, scan_recency
from analysis.trends import classify_trend, is_cold, is_hot
from config.settings import AnalysisSettings, settings as default_settings
from models.analysis_models import (
    ColumnAnalysis, NumberStat, PatternStat, StatisticalSummary
)
from models.draws import Draw, GameConfig, game_from_settings, order_by_recency

logger = logging.getLogger(__name__)


class ColumnAnalyzer:
    """Derives a ColumnAnalysis from a draw history on every call.

    The analyzer holds only configuration (game layout and thresholds); the
    draws are passed to each method so no statistics outlive a call.
    """

    def __init__(self, game: Optional[GameConfig] = None, settings: Optional[AnalysisSettings] = None):
        self.settings = settings or default_settings
        self.game = game or game_from_settings(self.settings)

    def analyze_column(self, draws: Sequence[Draw], column: int) -> ColumnAnalysis:
        """Analyze one column of the history."""
        column = self.game.validate_column(column)
        ordered = order_by_recency(draws)
        total_draws = len(ordered)
        values = [self.game.extract(draw, column) for draw in ordered]

        tracks = scan_recency((draw.date, (value,)) for draw, value in zip(ordered, values))
        number_stats = {
            number: self._build_number_stat(column, number, tracks.get(number), total_draws)
            for number in self.game.number_range(column)
        }
        pattern_stats = self._calculate_pattern_stats(column, ordered, values)
        summary = self._calculate_statistical_summary(column, number_stats, tracks, total_draws)

        logger.debug(
            f"Analyzed column {column}: {total_draws} draws, "
            f"{summary.unique_numbers_observed} unique numbers"
        )
        return ColumnAnalysis(
            column=column,
            number_stats=number_stats,
            pattern_stats=pattern_stats,
            statistical_summary=summary
        )

    def analyze_all_columns(self, draws: Sequence[Draw]) -> Dict[int, ColumnAnalysis]:
        """Analysis for every column, keyed by column."""
        return {column: self.analyze_column(draws, column) for column in self.game.columns}

    def get_number_across_columns(self, draws: Sequence[Draw], number: int) -> List[NumberStat]:
        """Statistics of one number in every column, ascending by column.

        Columns whose legal range excludes ``number`` still get an entry; it
        simply never appears there.
        """
        ordered = order_by_recency(draws)
        total_draws = len(ordered)
        stats = []
        for column in self.game.columns:
            tracks = scan_recency(
                (draw.date, (number,) if self.game.extract(draw, column) == number else ())
                for draw in ordered
            )
            stats.append(self._build_number_stat(column, number, tracks.get(number), total_draws))
        return stats

    def get_pattern_across_columns(self, draws: Sequence[Draw], pattern: str) -> List[PatternStat]:
        """Statistics of one pattern in every column that tracks it."""
        stats = []
        for column in self.game.columns:
            if pattern not in pattern_labels(self.game, column):
                continue
            stats.append(self.analyze_column(draws, column).pattern_stats[pattern])
        if not stats:
            raise ValueError(f"Unknown pattern: {pattern}")
        return stats

    def _build_number_stat(self, column: int, number: int, track: Optional[RecencyTrack],
                           total_draws: int) -> NumberStat:
        track = track or RecencyTrack()
        skip = track.skip(total_draws)
        average_gap = track.average_gap
        hot = is_hot(track.appearances, skip, self.settings.hot_threshold)
        cold = is_cold(
            track.appearances, skip, average_gap,
            self.settings.cold_gap_multiplier,
            self.settings.min_appearances_for_cold,
            hot=hot
        )
        return NumberStat(
            column=column,
            number=number,
            total_appearances=track.appearances,
            draws_since_last_appearance=skip,
            average_gap=average_gap,
            max_gap=track.max_gap,
            min_gap=track.min_gap,
            last_appearance=track.last_date,
            skip_history=list(track.gaps),
            is_hot=hot,
            is_cold=cold,
            trend=classify_trend(track.gaps, self.settings.trend_change_threshold)
        )

    def _calculate_pattern_stats(self, column: int, ordered: List[Draw],
                                 values: List[int]) -> Dict[str, PatternStat]:
        """Same recency scan as numbers, keyed by the labels each number matched."""
        high_threshold = self.game.high_threshold(column)
        keyed = []
        for draw, value in zip(ordered, values):
            others = self.game.other_numbers(draw, column)
            keyed.append((draw.date, match_patterns(value, high_threshold, others)))

        tracks = scan_recency(keyed)
        total_draws = len(ordered)
        stats = {}
        for label in pattern_labels(self.game, column):
            track = tracks.get(label) or RecencyTrack()
            stats[label] = PatternStat(
                pattern=label,
                column=column,
                total_appearances=track.appearances,
                draws_since_last_appearance=track.skip(total_draws),
                average_gap=track.average_gap,
                max_gap=track.max_gap,
                min_gap=track.min_gap,
                last_appearance=track.last_date,
                skip_history=list(track.gaps),
                trend=classify_trend(track.gaps, self.settings.trend_change_threshold)
            )
        return stats

    def _calculate_statistical_summary(self, column: int, number_stats: Dict[int, NumberStat],
                                       tracks: Dict[int, RecencyTrack],
                                       total_draws: int) -> StatisticalSummary:
        counts = {number: track.appearances for number, track in tracks.items()}
        skips = np.array([stat.draws_since_last_appearance for stat in number_stats.values()])

        most_frequent = min(counts, key=lambda n: (-counts[n], n)) if counts else None
        least_frequent = min(counts, key=lambda n: (counts[n], n)) if counts else None

        skip_counter = Counter(skips.tolist())
        mode_skips = min(skip_counter, key=lambda s: (-skip_counter[s], s))

        return StatisticalSummary(
            column=column,
            total_draws=total_draws,
            unique_numbers_observed=len(counts),
            average_skips_across_numbers=float(np.mean(skips)),
            most_frequent_number=most_frequent,
            least_frequent_number=least_frequent,
            max_skips=int(np.max(skips)),
            min_skips=int(np.min(skips)),
            standard_deviation=float(np.std(skips)),
            variance=float(np.var(skips)),
            median_skips=float(np.median(skips)),
            mode_skips=int(mode_skips),
            skip_range=int(np.max(skips) - np.min(skips))
        )


def analyze_column(draws: Sequence[Draw], column: int, game: Optional[GameConfig] = None,
                   settings: Optional[AnalysisSettings] = None) -> ColumnAnalysis:
    """Analyze one column of a draw history."""
    return ColumnAnalyzer(game, settings).analyze_column(draws, column)


def get_number_across_columns(draws: Sequence[Draw], number: int, game: Optional[GameConfig] = None,
                              settings: Optional[AnalysisSettings] = None) -> List[NumberStat]:
    """Statistics of one number in every column."""
    return ColumnAnalyzer(game, settings).get_number_across_columns(draws, number)
