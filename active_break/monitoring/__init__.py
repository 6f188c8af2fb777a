"""Monitoring infrastructure for active-break"""
from active_break.monitoring.sentry_config import init_sentry, capture_exception, set_user_context
from active_break.monitoring.prometheus_metrics import (
    metrics,
    start_metrics_server,
    track_metric_query,
    record_evaluation,
    record_reminder_check,
    record_check_in,
    record_activity_logged,
)

__all__ = [
    "init_sentry",
    "capture_exception",
    "set_user_context",
    "metrics",
    "start_metrics_server",
    "track_metric_query",
    "record_evaluation",
    "record_reminder_check",
    "record_check_in",
    "record_activity_logged",
]
