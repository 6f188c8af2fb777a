"""Sentry configuration and helpers"""
import logging
from typing import Any
import sentry_sdk
from sentry_sdk.integrations.logging import LoggingIntegration
from active_break.config import ENABLE_SENTRY, SENTRY_DSN, SENTRY_ENVIRONMENT, SENTRY_TRACES_SAMPLE_RATE

logger = logging.getLogger(__name__)


def init_sentry() -> bool:
    """
    Initialize Sentry SDK

    Returns:
        True if Sentry was initialized
    """
    if not ENABLE_SENTRY:
        logger.info("Sentry monitoring disabled")
        return False

    if not SENTRY_DSN:
        logger.warning("Sentry enabled but SENTRY_DSN not configured")
        return False

    sentry_sdk.init(
        dsn=SENTRY_DSN,
        environment=SENTRY_ENVIRONMENT,
        traces_sample_rate=SENTRY_TRACES_SAMPLE_RATE,
        integrations=[
            LoggingIntegration(
                level=logging.INFO,
                event_level=logging.ERROR
            ),
        ],
    )

    logger.info(
        f"Sentry initialized: environment={SENTRY_ENVIRONMENT}, "
        f"sample_rate={SENTRY_TRACES_SAMPLE_RATE}"
    )
    return True


def set_user_context(user_id: int) -> None:
    """Set user context for Sentry events"""
    if not ENABLE_SENTRY:
        return

    sentry_sdk.set_user({"id": str(user_id)})


def capture_exception(exception: Exception, **extra_context: Any) -> None:
    """Capture exception with custom context as tags"""
    if not ENABLE_SENTRY:
        return

    sentry_sdk.capture_exception(
        exception,
        tags={key: str(value) for key, value in extra_context.items()}
    )
