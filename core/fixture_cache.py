"""
core/fixture_cache.py — In-memory daily picks cache

One snapshot per local calendar day: fetch fixtures → predict each one →
merge duplicates across sources → optionally hide rows without a pick.

The scheduler re-warms just after midnight; get_today() also re-warms lazily
when the cached date is stale. Nothing is persisted.

Usage:
    from core.fixture_cache import get_today
    snapshot = get_today()
    snapshot["rows"]   # list of FixtureRow dicts, sorted by kickoff
"""

import json
import logging
import threading
from datetime import datetime, timezone
from typing import Optional

from core.config import PredictionConfig, Settings, load_settings
from core.fixture_source import FixtureRow, fetch_fixtures_today, merge_fixtures, today_ymd
from core.market_selector import LOW_EDGE_NOTE, edge_pct, format_pick, predict

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Module-level state — persists across Streamlit reruns in the same process
# ---------------------------------------------------------------------------
_lock = threading.Lock()
_cache: dict = {"date": None, "rows": [], "count": 0, "saved_at": None}


def attach_predictions(rows: list[FixtureRow], config: Optional[PredictionConfig] = None) -> list[FixtureRow]:
    """
    Run the prediction engine once per fixture and fill the display fields.

    Rows missing a team name are left without a prediction.
    """
    for row in rows:
        if not row.home or not row.away:
            continue
        pair = predict(row.home, row.away, row.league, config)
        row.prediction = format_pick(pair.top)
        row.alt_prediction = format_pick(pair.second)
        row.primary_edge_pct = edge_pct(pair.top)
        row.alt_edge_pct = edge_pct(pair.second)
        row.low_edge = pair.top.note == LOW_EDGE_NOTE
    return rows


def build_snapshot(
    settings: Settings,
    rows: list[FixtureRow],
    now: Optional[datetime] = None,
) -> dict:
    """Predict, merge and filter raw rows into a cache snapshot."""
    attach_predictions(rows, settings.prediction)
    merged = merge_fixtures(rows, settings.start_hour, settings.end_hour)
    if settings.hide_predictionless:
        merged = [r for r in merged if r.prediction]

    stamp = now or datetime.now(timezone.utc)
    return {
        "date": today_ymd(settings.tz, stamp),
        "rows": [r.to_dict() for r in merged],
        "count": len(merged),
        "saved_at": stamp.isoformat(),
    }


def warm_cache(settings: Optional[Settings] = None, now: Optional[datetime] = None) -> dict:
    """
    Refresh the cache for today. Never raises.

    On failure the cache holds an empty row list with an "error" string.
    """
    global _cache

    cfg = settings or load_settings()
    try:
        raw = fetch_fixtures_today(cfg, now=now)
        snapshot = build_snapshot(cfg, raw, now)
        logger.info("warm_cache: %d rows for %s", snapshot["count"], snapshot["date"])
    except Exception as exc:  # noqa: BLE001
        stamp = now or datetime.now(timezone.utc)
        snapshot = {
            "date": today_ymd(cfg.tz, stamp),
            "rows": [],
            "count": 0,
            "saved_at": stamp.isoformat(),
            "error": str(exc),
        }
        logger.error("warm_cache error: %s", exc)

    with _lock:
        _cache = snapshot
    return dict(snapshot)


def get_today(settings: Optional[Settings] = None, now: Optional[datetime] = None) -> dict:
    """Cached snapshot for today, re-warming first if the cache is from another day."""
    cfg = settings or load_settings()
    with _lock:
        cached_date = _cache.get("date")
    if cached_date != today_ymd(cfg.tz, now):
        return warm_cache(cfg, now)
    with _lock:
        return dict(_cache)


def cache_status() -> dict:
    """Lightweight view for the sidebar."""
    with _lock:
        return {
            "date": _cache.get("date"),
            "count": _cache.get("count", 0),
            "saved_at": _cache.get("saved_at"),
            "error": _cache.get("error"),
        }


def to_json() -> str:
    """Current snapshot as a JSON document."""
    with _lock:
        return json.dumps(_cache, ensure_ascii=False, indent=2)


def reset_state() -> None:
    """
    Reset the cache.
    Intended for testing only — never call from production code.
    """
    global _cache
    with _lock:
        _cache = {"date": None, "rows": [], "count": 0, "saved_at": None}
