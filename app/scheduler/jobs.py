"""APScheduler jobs: periodic purge of consumed one-time tokens past their expiry."""

from datetime import datetime, timezone

import pytz
import structlog
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from app.config import get_settings
from app.infrastructure.database import SessionLocal
from app.infrastructure.repositories.used_token_repository import SQLAlchemyUsedTokenRepository

settings = get_settings()
logger = structlog.get_logger(__name__)
tz = pytz.timezone(settings.TIMEZONE)

scheduler = AsyncIOScheduler(timezone=tz)


def purge_used_tokens_job(session_factory=SessionLocal) -> int:
    """Drop used-token rows whose token has expired; an expired token fails verification on its own."""
    db = session_factory()
    try:
        repo = SQLAlchemyUsedTokenRepository(db)
        removed = repo.purge_expired(datetime.now(timezone.utc))
        logger.info("Used tokens purged", removed=removed)
        return removed
    except Exception:
        db.rollback()
        logger.exception("Used token purge failed")
        return 0
    finally:
        db.close()


def start_scheduler():
    """Start the APScheduler with the used-token purge job."""
    scheduler.add_job(
        purge_used_tokens_job,
        trigger=IntervalTrigger(minutes=settings.USED_TOKEN_PURGE_INTERVAL_MINUTES, timezone=tz),
        id="purge_used_tokens",
        name="Purge expired used tokens",
        replace_existing=True,
    )

    scheduler.start()
    logger.info(
        "Scheduler started",
        purge_interval_minutes=settings.USED_TOKEN_PURGE_INTERVAL_MINUTES,
        timezone=settings.TIMEZONE,
    )


def stop_scheduler():
    """Stop the scheduler gracefully."""
    if scheduler.running:
        scheduler.shutdown(wait=False)
        logger.info("Scheduler stopped")
