"""Column correlation, value drift and prediction accuracy tests."""

import unittest

from analysis.statistics import (
    build_column_frame,
    calculate_all_column_correlations,
    calculate_column_correlation,
    detect_column_trend,
    track_prediction_accuracy
)
from models.draws import GameConfig

from draw_factory import make_draw, small_game


class TestColumnCorrelation(unittest.TestCase):
    def setUp(self):
        self.game = small_game()

    def test_perfect_correlation(self):
        draws = [make_draw(day, [day, day + 5], 1 + day % 5) for day in range(1, 6)]
        correlation = calculate_column_correlation(draws, 1, 2, self.game)

        self.assertAlmostEqual(correlation.correlation, 1.0, places=6)
        self.assertEqual(correlation.strength, 'strong')
        self.assertLess(correlation.p_value, 0.05)

    def test_columns_taken_from_frame(self):
        draws = [make_draw(day, [day, day + 5], 1 + day % 5) for day in range(1, 6)]
        first, second = build_column_frame(draws, self.game).columns.to_numpy()[:2]
        correlation = calculate_column_correlation(draws, first, second, self.game)

        self.assertEqual((correlation.column1, correlation.column2), (1, 2))
        self.assertAlmostEqual(correlation.correlation, 1.0, places=6)

    def test_short_history_is_weak(self):
        draws = [make_draw(day, [day, 10 - day], 1) for day in range(1, 3)]
        correlation = calculate_column_correlation(draws, 1, 2, self.game)

        self.assertEqual(correlation.correlation, 0.0)
        self.assertEqual(correlation.strength, 'weak')
        self.assertEqual(correlation.p_value, 1.0)

    def test_constant_column_is_weak(self):
        draws = [make_draw(day, [day, 4], 1) for day in range(1, 8)]
        correlation = calculate_column_correlation(draws, 1, 3, self.game)

        self.assertEqual(correlation.correlation, 0.0)
        self.assertEqual(correlation.strength, 'weak')

    def test_all_pairs(self):
        draws = [make_draw(day, [day, 11 - day], 1 + day % 5) for day in range(1, 10)]
        correlations = calculate_all_column_correlations(draws, self.game)

        self.assertEqual([(c.column1, c.column2) for c in correlations], [(1, 2), (1, 3), (2, 3)])
        self.assertAlmostEqual(correlations[0].correlation, -1.0, places=6)

    def test_frame_is_oldest_first(self):
        draws = [make_draw(2, [3, 4], 5), make_draw(1, [1, 2], 3)]
        frame = build_column_frame(draws, self.game)

        self.assertEqual(list(frame.columns), [1, 2, 3])
        self.assertEqual(frame[1].tolist(), [1.0, 3.0])


class TestColumnTrend(unittest.TestCase):
    def setUp(self):
        self.game = GameConfig()

    def test_rising_values(self):
        draws = [make_draw(day, [day, 20, 30, 40, 50], 1) for day in range(1, 13)]
        trend = detect_column_trend(draws, 1, self.game)

        self.assertEqual(trend.trend, 'increasing')
        self.assertAlmostEqual(trend.slope, 1.0)
        self.assertAlmostEqual(trend.confidence, 1.0)

    def test_short_history_is_stable(self):
        draws = [make_draw(day, [day, 20, 30, 40, 50], 1) for day in range(1, 6)]
        trend = detect_column_trend(draws, 1, self.game)

        self.assertEqual(trend.trend, 'stable')
        self.assertEqual(trend.confidence, 0.0)

    def test_repeating_values_are_cyclical(self):
        values = [1, 20, 40] * 8
        draws = [make_draw(day, [value, 2, 3, 4, 5], 1) for day, value in enumerate(values, start=1)]
        trend = detect_column_trend(draws, 1, self.game)

        self.assertEqual(trend.trend, 'cyclical')
        self.assertEqual(trend.period, 3)


class TestPredictionAccuracy(unittest.TestCase):
    def test_hit_rate(self):
        accuracy = track_prediction_accuracy(1, [1, 2, 3, 4], [1, 0, 3, 0])

        self.assertEqual(accuracy.total_predictions, 4)
        self.assertEqual(accuracy.correct_predictions, 2)
        self.assertAlmostEqual(accuracy.accuracy, 0.5)
        self.assertEqual(accuracy.trend, 'stable')

    def test_improving(self):
        predictions = list(range(20))
        actuals = [-1] * 10 + list(range(10, 20))
        accuracy = track_prediction_accuracy(2, predictions, actuals)

        self.assertAlmostEqual(accuracy.recent_accuracy, 1.0)
        self.assertEqual(accuracy.trend, 'improving')

    def test_mismatched_lengths(self):
        accuracy = track_prediction_accuracy(3, [1, 2], [1])

        self.assertEqual(accuracy.total_predictions, 0)
        self.assertEqual(accuracy.accuracy, 0.0)


if __name__ == '__main__':
    unittest.main()
