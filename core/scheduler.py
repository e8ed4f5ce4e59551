"""
core/scheduler.py — APScheduler in-process daily refresh

Re-warms the picks cache at 00:01 local time every day.
Designed for Streamlit: guarded against re-initialization on every rerun.

Usage in app.py:
    from core.scheduler import start_scheduler, stop_scheduler, get_status
    if "scheduler_started" not in st.session_state:
        start_scheduler()
        st.session_state["scheduler_started"] = True
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from apscheduler.events import EVENT_JOB_ERROR, EVENT_JOB_EXECUTED
from apscheduler.schedulers.background import BackgroundScheduler

from core.config import Settings, load_settings
from core.fixture_cache import warm_cache

logger = logging.getLogger(__name__)

REFRESH_HOUR: int = 0
REFRESH_MINUTE: int = 1

# ---------------------------------------------------------------------------
# Module-level state — persists across Streamlit reruns in the same process
# ---------------------------------------------------------------------------
_scheduler: Optional[BackgroundScheduler] = None
_settings: Optional[Settings] = None
_last_refresh_time: Optional[datetime] = None
_last_refresh_count: int = 0
_refresh_error_count: int = 0
_refresh_errors: list = []     # last N error strings (capped at 10)


# ---------------------------------------------------------------------------
# Internal refresh job
# ---------------------------------------------------------------------------
def _refresh_picks(settings: Optional[Settings] = None) -> None:
    """
    Called by APScheduler once a day.
    warm_cache() never raises; an "error" key in its snapshot counts as a failure.
    """
    global _last_refresh_time, _last_refresh_count, _refresh_error_count

    snapshot = warm_cache(settings or _settings)
    _last_refresh_time = datetime.now(timezone.utc)
    _last_refresh_count = snapshot.get("count", 0)

    if snapshot.get("error"):
        _refresh_error_count += 1
        _refresh_errors.append(f"{_last_refresh_time.isoformat()} — {snapshot['error']}")
        if len(_refresh_errors) > 10:
            _refresh_errors.pop(0)
        logger.error("Refresh error #%d: %s", _refresh_error_count, snapshot["error"])
    else:
        logger.info("Refresh complete: %d rows", _last_refresh_count)


def _on_job_event(event) -> None:
    """Log APScheduler job events for observability."""
    if event.exception:
        logger.error("Job %s raised: %s", event.job_id, event.exception)
    else:
        logger.debug("Job %s executed OK", event.job_id)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------
def start_scheduler(settings: Optional[Settings] = None) -> None:
    """
    Start the background scheduler.

    Safe to call multiple times — returns immediately if already running.

    Args:
        settings: Override environment settings (useful for testing).
    """
    global _scheduler, _settings

    if _scheduler is not None and _scheduler.running:
        logger.debug("Scheduler already running — skipping re-init")
        return

    _settings = settings or load_settings()

    _scheduler = BackgroundScheduler(
        job_defaults={"misfire_grace_time": 300},
        timezone=_settings.tz,
    )
    _scheduler.add_listener(_on_job_event, EVENT_JOB_EXECUTED | EVENT_JOB_ERROR)
    _scheduler.add_job(
        _refresh_picks,
        trigger="cron",
        hour=REFRESH_HOUR,
        minute=REFRESH_MINUTE,
        id="daily_refresh",
        replace_existing=True,
        kwargs={"settings": _settings},
    )
    _scheduler.start()
    logger.info("Scheduler started (daily at %02d:%02d %s)", REFRESH_HOUR, REFRESH_MINUTE, _settings.tz)


def stop_scheduler() -> None:
    """
    Gracefully shut down the scheduler.
    Safe to call even if not running.
    """
    global _scheduler

    if _scheduler is not None and _scheduler.running:
        _scheduler.shutdown(wait=False)
        logger.info("Scheduler stopped")
    _scheduler = None


def trigger_refresh_now(settings: Optional[Settings] = None) -> int:
    """
    Run an immediate refresh outside the daily schedule.
    Used by the UI "Refresh Now" button.

    Returns:
        Number of rows in the new snapshot.
    """
    _refresh_picks(settings)
    return _last_refresh_count


def get_status() -> dict:
    """
    Return scheduler observability state for the UI status bar.

    Returns:
        {
            "running": bool,
            "last_refresh_time": datetime | None,
            "last_refresh_count": int,
            "refresh_error_count": int,
            "recent_errors": [str],
        }
    """
    return {
        "running": _scheduler is not None and _scheduler.running,
        "last_refresh_time": _last_refresh_time,
        "last_refresh_count": _last_refresh_count,
        "refresh_error_count": _refresh_error_count,
        "recent_errors": list(_refresh_errors),
    }


def is_running() -> bool:
    """Convenience predicate — True if scheduler is active."""
    return _scheduler is not None and _scheduler.running


def reset_state() -> None:
    """
    Reset all module-level state.
    Intended for testing only — never call from production code.
    """
    global _scheduler, _settings, _last_refresh_time, _last_refresh_count
    global _refresh_error_count, _refresh_errors

    if _scheduler is not None and _scheduler.running:
        _scheduler.shutdown(wait=False)

    _scheduler = None
    _settings = None
    _last_refresh_time = None
    _last_refresh_count = 0
    _refresh_error_count = 0
    _refresh_errors = []
