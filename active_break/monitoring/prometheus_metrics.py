"""Prometheus metrics definitions and helpers"""
import logging
import time
from contextlib import contextmanager
from prometheus_client import Counter, Histogram, start_http_server
from active_break.config import ENABLE_PROMETHEUS, PROMETHEUS_PORT

logger = logging.getLogger(__name__)


class PrometheusMetrics:
    """Container for all Prometheus metrics"""

    def __init__(self, enabled: bool = ENABLE_PROMETHEUS):
        self._enabled = enabled
        if not enabled:
            logger.info("Prometheus metrics disabled")
            return

        # Achievement Metrics
        self.achievement_evaluations_total = Counter(
            'achievement_evaluations_total',
            'Total achievement evaluation passes',
        )

        self.achievements_unlocked_total = Counter(
            'achievements_unlocked_total',
            'Total achievements unlocked',
            ['metric_type']
        )

        self.achievement_evaluation_failures_total = Counter(
            'achievement_evaluation_failures_total',
            'Achievements that failed to evaluate',
            ['metric_type', 'error_type']
        )

        self.metric_query_duration_seconds = Histogram(
            'metric_query_duration_seconds',
            'Achievement metric query latency',
            ['metric_type'],
            buckets=[0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1.0]
        )

        # Activity Metrics
        self.check_ins_total = Counter(
            'check_ins_total',
            'Total daily check-ins recorded',
        )

        self.activities_logged_total = Counter(
            'activities_logged_total',
            'Total activity records logged',
            ['activity_type_id']
        )

        # Reminder Metrics
        self.reminder_checks_total = Counter(
            'reminder_checks_total',
            'Total reminder checks',
            ['status']  # success / error
        )

        self.reminders_sent_total = Counter(
            'reminders_sent_total',
            'Total exercise reminders sent',
        )

        logger.info("Prometheus metrics initialized")

    @property
    def enabled(self) -> bool:
        """Check if metrics are enabled"""
        return self._enabled


# Global metrics instance
metrics = PrometheusMetrics()


def start_metrics_server(port: int = PROMETHEUS_PORT) -> bool:
    """
    Serve /metrics over HTTP from a background thread

    Returns:
        True if the exporter was started, False when metrics are disabled
    """
    if not metrics.enabled:
        return False

    start_http_server(port)
    logger.info(f"Prometheus metrics exposed on port {port}")
    return True


@contextmanager
def track_metric_query(metric_type: str):
    """Track latency of one achievement metric query"""
    if not metrics.enabled:
        yield
        return

    start_time = time.time()

    try:
        yield
    finally:
        duration = time.time() - start_time
        metrics.metric_query_duration_seconds.labels(
            metric_type=metric_type
        ).observe(duration)


def record_evaluation(unlocked_metric_types: list[str], failures: list[tuple[str, str]]) -> None:
    """
    Record one evaluation pass

    Args:
        unlocked_metric_types: Metric type of each newly unlocked achievement
        failures: (metric_type, error_type) of each failed achievement
    """
    if not metrics.enabled:
        return

    metrics.achievement_evaluations_total.inc()
    for metric_type in unlocked_metric_types:
        metrics.achievements_unlocked_total.labels(metric_type=metric_type).inc()
    for metric_type, error_type in failures:
        metrics.achievement_evaluation_failures_total.labels(
            metric_type=metric_type,
            error_type=error_type
        ).inc()


def record_reminder_check(success: bool, reminders_sent: int = 0) -> None:
    if not metrics.enabled:
        return

    metrics.reminder_checks_total.labels(status="success" if success else "error").inc()
    if reminders_sent:
        metrics.reminders_sent_total.inc(reminders_sent)


def record_check_in() -> None:
    if metrics.enabled:
        metrics.check_ins_total.inc()


def record_activity_logged(activity_type_id: int) -> None:
    if metrics.enabled:
        metrics.activities_logged_total.labels(activity_type_id=str(activity_type_id)).inc()
