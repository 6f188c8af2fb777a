"""Main entry point for the active-break reminder service"""
import logging
import asyncio
from active_break.config import validate_config, LOG_LEVEL
from active_break.db import Database
from active_break.db import queries
from active_break.db.schema import init_schema
from active_break.exceptions import ConfigurationError
from active_break.monitoring import init_sentry, start_metrics_server
from active_break.services import ServiceContainer

# Configure logging
logging.basicConfig(
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    level=getattr(logging, LOG_LEVEL)
)

logger = logging.getLogger(__name__)


async def main() -> None:
    """Main application entry point"""
    db = Database()
    stop_event = asyncio.Event()
    try:
        # Validate configuration
        logger.info("Validating configuration...")
        try:
            validate_config()
        except ValueError as e:
            raise ConfigurationError(str(e), operation="startup") from e

        init_sentry()
        start_metrics_server()

        # Initialize database
        logger.info("Initializing database connection pool...")
        await db.init_pool()

        logger.info("Applying schema and seeding catalogs...")
        await init_schema(db)

        container = ServiceContainer(db=db)

        async def users_with_reminders() -> list[int]:
            return await queries.get_users_with_active_reminders(db)

        # Keep running until interrupted
        logger.info("Reminder service is running. Press Ctrl+C to stop.")
        await container.reminder_scheduler.run_periodic(users_with_reminders, stop_event)

    except (KeyboardInterrupt, asyncio.CancelledError):
        logger.info("Shutting down...")
    except Exception as e:
        logger.error(f"Fatal error: {e}", exc_info=True)
    finally:
        stop_event.set()

        logger.info("Closing database connection...")
        await db.close_pool()

        logger.info("Shutdown complete")


def run() -> None:
    """Console script entry point"""
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    run()
