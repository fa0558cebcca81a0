"""APScheduler jobs: session expiry sweep and recuperation token cleanup."""

import pytz
import structlog
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from app.config import get_settings
from app.infrastructure.database import SessionLocal

settings = get_settings()
logger = structlog.get_logger(__name__)
tz = pytz.timezone(settings.TIMEZONE)

scheduler = AsyncIOScheduler(timezone=tz)


def expire_sessions_job(session_factory=SessionLocal) -> int:
    """Mark sessions past their refresh expiry as inactive."""
    from app.interfaces.deps import get_session_service

    db = session_factory()
    try:
        count = get_session_service(db).mark_expired_inactive()
        logger.info("Session expiry sweep finished", deactivated=count)
        return count
    except Exception:
        logger.exception("Session expiry sweep failed")
        raise
    finally:
        db.close()


def clear_recuperation_tokens_job(session_factory=SessionLocal) -> int:
    """Drop recuperation tokens whose validity window has passed."""
    from app.interfaces.deps import get_credential_service, get_password_hasher

    db = session_factory()
    try:
        count = get_credential_service(db, get_password_hasher()).clean_expired_recuperation_tokens()
        logger.info("Recuperation token cleanup finished", cleared=count)
        return count
    except Exception:
        logger.exception("Recuperation token cleanup failed")
        raise
    finally:
        db.close()


def start_scheduler():
    """Start the APScheduler with the session and token maintenance jobs."""
    scheduler.add_job(
        expire_sessions_job,
        trigger=IntervalTrigger(minutes=settings.SESSION_CLEANUP_MINUTES, timezone=tz),
        id="expire_sessions",
        name=f"Expire sessions (every {settings.SESSION_CLEANUP_MINUTES} mins)",
        replace_existing=True,
    )

    scheduler.add_job(
        clear_recuperation_tokens_job,
        trigger=IntervalTrigger(hours=1, timezone=tz),
        id="clear_recuperation_tokens",
        name="Clear expired recuperation tokens (hourly)",
        replace_existing=True,
    )

    scheduler.start()
    logger.info("Scheduler started", timezone=settings.TIMEZONE, session_sweep_minutes=settings.SESSION_CLEANUP_MINUTES)


def stop_scheduler():
    """Stop the scheduler gracefully."""
    if scheduler.running:
        scheduler.shutdown(wait=False)
        logger.info("Scheduler stopped")
