"""Scheduler that recomputes live column statistics and notifies subscribers on significant change."""

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger
from apscheduler.events import EVENT_JOB_EXECUTED, EVENT_JOB_ERROR, EVENT_JOB_MAX_INSTANCES
import itertools
import logging
import threading
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, List, Optional, Sequence, Union

from analysis.column_analyzer import ColumnAnalyzer
from config.settings import AnalysisSettings, settings as default_settings
from models.analysis_models import ColumnAnalysis, TrendDirection
from models.draws import Draw, GameConfig
from models.live_models import LiveStatsUpdate, LiveUpdateConfig, RecentActivity

logger = logging.getLogger(__name__)

LIVE_JOB_ID = 'live_column_stats'
RETRY_JOB_ID = 'live_column_stats_retry'

DrawSource = Union[Sequence[Draw], Callable[[], Sequence[Draw]]]
UpdateCallback = Callable[[LiveStatsUpdate], Any]


class LiveUpdateScheduler:
    """Periodic live statistics for every column of a draw history.

    Each tick recomputes a LiveStatsUpdate per column and keeps it only when it
    differs meaningfully from the last accepted one for that column: the hot set
    changed, the cold set changed, or a number has just become hot. Accepted
    updates are pushed to every subscriber.
    """

    def __init__(self, draws: DrawSource, config: Optional[LiveUpdateConfig] = None,
                 game: Optional[GameConfig] = None, settings: Optional[AnalysisSettings] = None,
                 analyzer: Optional[ColumnAnalyzer] = None):
        self.settings = settings or default_settings
        self.config = config or LiveUpdateConfig.from_settings(self.settings)
        self.analyzer = analyzer or ColumnAnalyzer(game, self.settings)
        self.game = self.analyzer.game

        self._draws = draws
        self._last_updates: Dict[int, LiveStatsUpdate] = {}
        self._subscribers: Dict[int, UpdateCallback] = {}
        self._tokens = itertools.count(1)
        self._subscribers_lock = threading.Lock()
        self._tick_lock = threading.RLock()

        self.scheduler: Optional[BackgroundScheduler] = None
        self.is_running = False

    def _setup_event_listeners(self):
        """Setup event listeners for job monitoring."""
        def job_executed(event):
            logger.debug(f"Job {event.job_id} executed")

        def job_error(event):
            logger.error(f"Job {event.job_id} failed: {event.exception}")

        def job_skipped(event):
            logger.warning(f"Job {event.job_id} skipped: previous tick still running")

        self.scheduler.add_listener(job_executed, EVENT_JOB_EXECUTED)
        self.scheduler.add_listener(job_error, EVENT_JOB_ERROR)
        self.scheduler.add_listener(job_skipped, EVENT_JOB_MAX_INSTANCES)

    def start_live_updates(self):
        """Start ticking every ``update_interval`` seconds."""
        if self.is_running:
            logger.warning("Live updates already running")
            return

        try:
            self.scheduler = BackgroundScheduler(timezone=self.settings.scheduler_timezone)
            self._setup_event_listeners()
            self.scheduler.add_job(
                func=self._scheduled_tick,
                trigger=IntervalTrigger(seconds=self.config.update_interval),
                id=LIVE_JOB_ID,
                name='Live Column Statistics',
                max_instances=1,
                coalesce=True,
                replace_existing=True
            )
            self.scheduler.start()
            self.is_running = True
            logger.info(f"Live updates started (interval {self.config.update_interval}s)")
        except Exception as e:
            logger.error(f"Failed to start live updates: {e}")
            raise

    def stop_live_updates(self):
        """Stop scheduling ticks. A tick already running is allowed to finish."""
        if not self.is_running:
            return

        try:
            self.scheduler.shutdown(wait=False)
            logger.info("Live updates stopped")
        except Exception as e:
            logger.error(f"Error stopping live updates: {e}")
        finally:
            self.is_running = False
            self.scheduler = None

    def is_active(self) -> bool:
        return self.is_running

    def on_update(self, callback: UpdateCallback) -> Callable[[], None]:
        """Register a subscriber and return a function that unregisters it."""
        with self._subscribers_lock:
            token = next(self._tokens)
            self._subscribers[token] = callback

        def unsubscribe():
            with self._subscribers_lock:
                self._subscribers.pop(token, None)

        return unsubscribe

    def force_update(self) -> List[LiveStatsUpdate]:
        """Run one tick now, on the calling thread, and return the accepted updates."""
        return self._tick()

    def update_draws(self, draws: DrawSource):
        """Replace the history read by subsequent ticks."""
        with self._tick_lock:
            self._draws = draws
        logger.debug("Live draw history replaced")

    def get_current_stats(self, column: int) -> Optional[LiveStatsUpdate]:
        """Last accepted update for a column, if any."""
        column = self.game.validate_column(column)
        with self._tick_lock:
            return self._last_updates.get(column)

    def get_stats(self) -> Dict[str, Any]:
        """Status of the live update loop."""
        with self._subscribers_lock:
            subscriber_count = len(self._subscribers)
        with self._tick_lock:
            last_updates = dict(self._last_updates)

        next_run = None
        scheduler = self.scheduler
        if scheduler is not None:
            job = scheduler.get_job(LIVE_JOB_ID)
            if job is not None and job.next_run_time:
                next_run = job.next_run_time.isoformat()

        return {
            'is_running': self.is_running,
            'update_interval': self.config.update_interval,
            'subscriber_count': subscriber_count,
            'next_run_time': next_run,
            'last_updates': {
                column: update.timestamp.isoformat()
                for column, update in sorted(last_updates.items())
            }
        }

    def _current_draws(self) -> Sequence[Draw]:
        if callable(self._draws):
            return self._draws()
        return self._draws

    def _scheduled_tick(self, attempt: int = 0):
        """Timer entry point: a failing tick is logged and retried later."""
        try:
            self._tick(raise_errors=True)
        except Exception as e:
            logger.error(f"Live update tick failed (attempt {attempt + 1}): {e}")
            self._schedule_retry(attempt + 1)

    def _schedule_retry(self, attempt: int):
        if attempt > self.config.max_retries:
            logger.warning(f"Giving up on live update after {self.config.max_retries} retries")
            return

        scheduler = self.scheduler
        if not self.is_running or scheduler is None:
            return

        run_date = datetime.now(timezone.utc) + timedelta(seconds=self.config.retry_delay)
        try:
            scheduler.add_job(
                func=self._scheduled_tick,
                trigger='date',
                run_date=run_date,
                args=[attempt],
                id=RETRY_JOB_ID,
                name='Live Column Statistics Retry',
                replace_existing=True
            )
            logger.info(f"Scheduled live update retry {attempt}/{self.config.max_retries} at {run_date}")
        except Exception as e:
            logger.error(f"Failed to schedule live update retry: {e}")

    def _tick(self, raise_errors: bool = False) -> List[LiveStatsUpdate]:
        accepted = []
        with self._tick_lock:
            try:
                draws = self._current_draws()
                for column in self.game.columns:
                    analysis = self.analyzer.analyze_column(draws, column)
                    update = self._build_live_update(analysis)
                    previous = self._last_updates.get(column)
                    if self.is_significant_change(previous, update):
                        self._last_updates[column] = update
                        accepted.append(update)
            except Exception as e:
                if raise_errors:
                    raise
                logger.error(f"Live update failed: {e}")
                return []

            if accepted:
                logger.info(f"Live update accepted for columns {[u.column for u in accepted]}")
            for update in accepted:
                self._notify(update)
        return accepted

    def _build_live_update(self, analysis: ColumnAnalysis) -> LiveStatsUpdate:
        top_n = self.settings.live_top_n
        stats = list(analysis.number_stats.values())

        hot = sorted((s for s in stats if s.is_hot), key=lambda s: (s.draws_since_last_appearance, s.number))
        cold = sorted((s for s in stats if s.is_cold), key=lambda s: (-s.draws_since_last_appearance, s.number))

        previous = self._last_updates.get(analysis.column)
        already_fresh = set()
        if previous is not None:
            already_fresh = {a.number for a in previous.recent_activity if a.draws_since_last == 0}

        recent = sorted(
            (s for s in stats
             if s.total_appearances > 0
             and s.draws_since_last_appearance <= self.settings.recent_activity_window),
            key=lambda s: (s.draws_since_last_appearance, s.number)
        )
        recent_activity = [
            RecentActivity(
                number=s.number,
                draws_since_last=s.draws_since_last_appearance,
                is_new_hot=(
                    s.is_hot
                    and s.draws_since_last_appearance == 0
                    and s.number not in already_fresh
                )
            )
            for s in recent
        ]

        return LiveStatsUpdate(
            column=analysis.column,
            hot_numbers=[s.number for s in hot[:top_n]],
            cold_numbers=[s.number for s in cold[:top_n]],
            trending_up=sorted(s.number for s in stats if s.trend == TrendDirection.INCREASING),
            trending_down=sorted(s.number for s in stats if s.trend == TrendDirection.DECREASING),
            recent_activity=recent_activity
        )

    @staticmethod
    def is_significant_change(previous: Optional[LiveStatsUpdate], current: LiveStatsUpdate) -> bool:
        """Whether ``current`` is worth replacing ``previous`` and notifying subscribers."""
        if previous is None:
            return True
        if set(previous.hot_numbers) != set(current.hot_numbers):
            return True
        if set(previous.cold_numbers) != set(current.cold_numbers):
            return True
        return any(activity.is_new_hot for activity in current.recent_activity)

    def _notify(self, update: LiveStatsUpdate):
        with self._subscribers_lock:
            callbacks = list(self._subscribers.values())

        for callback in callbacks:
            try:
                callback(update)
            except Exception as e:
                logger.error(f"Live update subscriber failed for column {update.column}: {e}")
