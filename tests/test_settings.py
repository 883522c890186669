"""Settings, game layout and draw conversion tests."""

import datetime as dt
import io
import json
import logging
import os
import unittest
from unittest import mock

import pandas as pd
import structlog
from pydantic import ValidationError

from config.logging_config import JSON_HANDLER_NAME, setup_logging
from config.settings import AnalysisSettings
from models.draws import (
    Draw,
    GameConfig,
    draws_from_dataframe,
    draws_to_dataframe,
    game_from_settings,
    order_by_recency
)
from models.live_models import LiveUpdateConfig

from draw_factory import analysis_settings, make_draw


class TestSettings(unittest.TestCase):
    def test_defaults(self):
        settings = analysis_settings()

        self.assertEqual(settings.hot_threshold, 3)
        self.assertEqual(settings.confidence_floor, 0.01)
        self.assertEqual(settings.live_update_interval, 30.0)

    def test_environment_override(self):
        with mock.patch.dict(os.environ, {'LOTTO_HOT_THRESHOLD': '5', 'LOTTO_PRIMARY_MAX': '45'}):
            settings = AnalysisSettings(_env_file=None)

        self.assertEqual(settings.hot_threshold, 5)
        self.assertEqual(game_from_settings(settings).primary_max, 45)

    def test_live_config_from_settings(self):
        config = LiveUpdateConfig.from_settings(analysis_settings(live_retry_delay=1.5))

        self.assertEqual(config.update_interval, 30.0)
        self.assertEqual(config.max_retries, 3)
        self.assertEqual(config.retry_delay, 1.5)

    def test_live_config_rejects_zero_interval(self):
        with self.assertRaises(ValidationError):
            LiveUpdateConfig(update_interval=0, max_retries=1, retry_delay=1)

    def tearDown(self):
        root = logging.getLogger()
        for handler in [h for h in root.handlers if h.get_name() == JSON_HANDLER_NAME]:
            root.removeHandler(handler)
        structlog.reset_defaults()
        root.setLevel(logging.WARNING)

    def json_handler(self):
        return [h for h in logging.getLogger().handlers if h.get_name() == JSON_HANDLER_NAME]

    def test_json_logging(self):
        setup_logging(analysis_settings(log_format='json', log_level='debug'))

        self.assertTrue(structlog.is_configured())
        self.assertEqual(len(self.json_handler()), 1)

    def test_json_setup_twice_keeps_one_handler(self):
        setup_logging(analysis_settings(log_format='json'))
        setup_logging(analysis_settings(log_format='json'))

        self.assertEqual(len(self.json_handler()), 1)

    def test_module_loggers_render_as_json(self):
        setup_logging(analysis_settings(log_format='json', log_level='info'))
        stream = io.StringIO()
        self.json_handler()[0].setStream(stream)

        logging.getLogger('analysis.column_analyzer').info("Analyzed column 3")

        record = json.loads(stream.getvalue().strip().splitlines()[-1])
        self.assertEqual(record['event'], "Analyzed column 3")
        self.assertEqual(record['logger'], 'analysis.column_analyzer')
        self.assertEqual(record['level'], 'info')
        self.assertIn('timestamp', record)


class TestGameConfig(unittest.TestCase):
    def test_columns(self):
        game = GameConfig()

        self.assertEqual(game.columns, [1, 2, 3, 4, 5, 6])
        self.assertEqual(game.primary_columns, [1, 2, 3, 4, 5])
        self.assertEqual(game.secondary_column, 6)
        self.assertEqual(game.high_threshold(1), 34)
        self.assertEqual(game.high_threshold(6), 13)

    def test_empty_range_rejected(self):
        with self.assertRaises(ValidationError):
            GameConfig(primary_min=10, primary_max=5)

    def test_short_draw_cannot_fill_column(self):
        game = GameConfig()
        draw = make_draw(1, [1, 2, 3], 4)

        with self.assertRaises(ValueError):
            game.extract(draw, 5)
        self.assertEqual(game.other_numbers(draw, 2), [1, 3, 4])

    def test_draws_are_immutable(self):
        draw = make_draw(1, [1, 2, 3, 4, 5], 6)

        with self.assertRaises(ValidationError):
            draw.secondary_number = 7


class TestDrawOrdering(unittest.TestCase):
    def test_most_recent_first(self):
        draws = [make_draw(3, [1], 1), make_draw(1, [2], 1), make_draw(2, [3], 1)]

        self.assertEqual([d.date.day for d in order_by_recency(draws)], [3, 2, 1])

    def test_same_date_keeps_later_input_as_more_recent(self):
        early = make_draw(1, [1], 1, multiplier='2X')
        late = make_draw(1, [2], 1, multiplier='3X')

        self.assertEqual(order_by_recency([early, late]), [late, early])


class TestDataFrameConversion(unittest.TestCase):
    def test_frame_round_trip(self):
        draws = [make_draw(1, [1, 2, 3, 4, 5], 6, multiplier='2X'), make_draw(2, [7, 8, 9, 10, 11], 12)]

        self.assertEqual(draws_from_dataframe(draws_to_dataframe(draws)), draws)

    def test_frame_with_timestamps(self):
        frame = pd.DataFrame({
            'date': pd.to_datetime(['2023-02-01']),
            'primary_numbers': [[3, 13, 23, 33, 43]],
            'secondary_number': [9],
        })
        draws = draws_from_dataframe(frame)

        self.assertEqual(draws, [Draw(date=dt.date(2023, 2, 1), primary_numbers=[3, 13, 23, 33, 43],
                                      secondary_number=9)])

    def test_missing_columns(self):
        with self.assertRaises(ValueError):
            draws_from_dataframe(pd.DataFrame({'date': ['2023-01-01']}))


if __name__ == '__main__':
    unittest.main()
