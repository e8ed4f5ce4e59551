"""
core/fixture_source.py — BetEstimate
=====================================
Today's fixtures from two sources. No betting math, no UI.

Sources:
- ESPN soccer schedule page (HTML). Only tables with MATCH and TIME header
  columns are read. Opt-in via ENABLE_ESPN=1.
- football-data.org v4 /matches (JSON). Needs FOOTBALL_DATA_KEY.

Both return FixtureRow lists with empty prediction fields; predictions are
attached by core.fixture_cache. A failing source logs and yields [] so the
other one still populates the day.

Parsing (parse_espn_schedule, parse_football_data) is pure and takes the raw
payload, so tests never touch the network.

Single attempt per request with a timeout. No retry loop.
"""

import logging
import re
from dataclasses import asdict, dataclass
from datetime import datetime, timedelta
from typing import Optional
from zoneinfo import ZoneInfo

import requests
from bs4 import BeautifulSoup

from core.config import Settings

logger = logging.getLogger(__name__)

FOOTBALL_DATA_URL = "https://api.football-data.org/v4/matches"
FOOTBALL_DATA_STATUSES = "SCHEDULED,IN_PLAY,PAUSED,FINISHED"

UNKNOWN_LEAGUE = "Unknown Competition"
REQUEST_TIMEOUT = 8

ESPN_HEADERS = {
    "user-agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
    ),
    "accept": "text/html,application/xhtml+xml",
    "accept-language": "en-US,en;q=0.8",
}

_WS = re.compile(r"\s+")
_VERSUS = re.compile(r"\sv\s", re.IGNORECASE)
_DASH = re.compile(r"\s[-–—]\s")
_ODDS_NOISE = re.compile(r"^line:|^o/u|espnbet", re.IGNORECASE)
_KICKOFF = re.compile(r"(\d{4}-\d{2}-\d{2})\s+(\d{1,2}):(\d{2})")


@dataclass
class FixtureRow:
    league: str
    kickoff: str            # "YYYY-MM-DD HH:MM" local, or "YYYY-MM-DD" when time unknown
    home: str
    away: str
    source: str             # "ESPN" or "FD"
    kickoff_iso: str = ""
    prediction: str = ""
    alt_prediction: str = ""
    primary_edge_pct: int = 0
    alt_edge_pct: int = 0
    low_edge: bool = False

    def to_dict(self) -> dict:
        return asdict(self)


# ---------------------------------------------------------------------------
# Date helpers
# ---------------------------------------------------------------------------

def today_ymd(tz: str, now: Optional[datetime] = None) -> str:
    """Today's date in the given timezone as YYYY-MM-DD."""
    current = now or datetime.now(ZoneInfo("UTC"))
    return current.astimezone(ZoneInfo(tz)).strftime("%Y-%m-%d")


def local_kickoff(iso: str, tz: str) -> Optional[datetime]:
    """Parse an ISO-8601 UTC timestamp ('...Z' allowed) into local time."""
    try:
        dt = datetime.fromisoformat(iso.replace("Z", "+00:00"))
    except (AttributeError, ValueError):
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=ZoneInfo("UTC"))
    return dt.astimezone(ZoneInfo(tz))


# ---------------------------------------------------------------------------
# ESPN HTML parsing
# ---------------------------------------------------------------------------

def looks_odds_noise(text: str) -> bool:
    """
    Betting-line rows that sit inside schedule tables.

    >>> looks_odds_noise("Line: ARS -1.5")
    True
    >>> looks_odds_noise("Arsenal v Chelsea")
    False
    """
    return bool(_ODDS_NOISE.search(text))


def clean_teams(text: str) -> tuple[str, str]:
    """
    Split a MATCH cell into (home, away). ('', '') when ambiguous.

    >>> clean_teams("Arsenal  v  Chelsea")
    ('Arsenal', 'Chelsea')
    >>> clean_teams("Roma – Lazio")
    ('Roma', 'Lazio')
    >>> clean_teams("Arsenal")
    ('', '')
    """
    collapsed = _WS.sub(" ", text).strip()
    for splitter in (_VERSUS, _DASH):
        parts = splitter.split(collapsed)
        if len(parts) == 2:
            return parts[0].strip(), parts[1].strip()
    return "", ""


def normalize_time(text: str) -> str:
    """
    12-hour clock → 24-hour HH:MM. Unparseable text is returned unchanged.

    >>> normalize_time("11:00 PM")
    '23:00'
    >>> normalize_time("7:30")
    '07:30'
    """
    for fmt in ("%I:%M %p", "%H:%M"):
        try:
            return datetime.strptime(text.strip().upper(), fmt).strftime("%H:%M")
        except ValueError:
            continue
    return text


def _header_index(table) -> dict[str, int]:
    idx = {"match": -1, "time": -1}
    for i, th in enumerate(table.select("thead th")):
        head = th.get_text(strip=True).upper()
        if "MATCH" in head:
            idx["match"] = i
        if "TIME" in head:
            idx["time"] = i
    return idx


def _nearest_league(table) -> str:
    heading = table.find_previous_sibling(["h1", "h2", "h3", "h4"])
    if heading is not None and heading.get_text(strip=True):
        return heading.get_text(strip=True)

    node = table
    for _ in range(5):
        if node is None or node.name == "[document]":
            break
        aria = node.get("aria-label")
        if aria and aria.strip():
            return aria.strip()
        node = node.parent
    return ""


def parse_espn_schedule(html: str, today: str, loose: bool = False) -> list[FixtureRow]:
    """
    Extract fixtures from an ESPN schedule page.

    Args:
        html:  Raw page HTML.
        today: Local date (YYYY-MM-DD) stamped onto every kickoff.
        loose: Keep tables whose league could not be identified.

    Returns:
        De-duplicated FixtureRow list sorted by kickoff.
    """
    soup = BeautifulSoup(html or "", "html.parser")
    rows: list[FixtureRow] = []

    for table in soup.find_all("table"):
        idx = _header_index(table)
        if idx["match"] == -1 or idx["time"] == -1:
            continue

        league = _nearest_league(table) or UNKNOWN_LEAGUE
        if league.lower().startswith("unknown") and not loose:
            continue

        for tr in table.select("tbody tr"):
            cells = tr.find_all("td")
            if len(cells) < 2 or max(idx.values()) >= len(cells):
                continue
            match_text = _WS.sub(" ", cells[idx["match"]].get_text(" ")).strip()
            time_text = _WS.sub(" ", cells[idx["time"]].get_text(" ")).strip()
            if not match_text or looks_odds_noise(match_text):
                continue

            home, away = clean_teams(match_text)
            if not home or not away:
                continue

            has_time = any(ch.isdigit() for ch in time_text)
            kickoff = f"{today} {normalize_time(time_text)}" if has_time else today
            rows.append(FixtureRow(league=league, kickoff=kickoff, home=home, away=away, source="ESPN"))

    unique: dict[tuple, FixtureRow] = {}
    for row in rows:
        unique.setdefault((row.league, row.home, row.away, row.kickoff), row)
    return sorted(unique.values(), key=lambda r: r.kickoff)


def fetch_espn_schedule(
    settings: Settings,
    session: Optional[requests.Session] = None,
    now: Optional[datetime] = None,
) -> list[FixtureRow]:
    """
    Fetch and parse today's ESPN schedule page.

    Returns [] when disabled or on any request failure.
    """
    if not settings.enable_espn:
        return []

    today = today_ymd(settings.tz, now)
    url = f"{settings.espn_schedule_url}/_/date/{today.replace('-', '')}"
    requester = session or requests

    try:
        resp = requester.get(url, headers=ESPN_HEADERS, timeout=REQUEST_TIMEOUT, allow_redirects=True)
        html = resp.text
    except requests.exceptions.RequestException as exc:
        logger.warning("ESPN fetch failed for %s: %s", url, exc)
        return []

    rows = parse_espn_schedule(html, today, loose=settings.espn_loose)
    unknown = sum(1 for r in rows if r.league.lower().startswith("unknown"))
    if settings.espn_debug:
        logger.info("ESPN %s: %d rows (%d unknown league) sample=%s", url, len(rows), unknown, rows[:5])
    else:
        logger.debug("ESPN %s: %d rows", url, len(rows))
    return rows


# ---------------------------------------------------------------------------
# football-data.org
# ---------------------------------------------------------------------------

def parse_football_data(
    payload: dict,
    tz: str,
    start_hour: int = 0,
    end_hour: int = 24,
) -> list[FixtureRow]:
    """
    Build FixtureRows from a football-data.org /matches response body.

    Matches whose local kickoff hour is outside [start_hour, end_hour) or
    whose timestamp cannot be parsed are dropped.
    """
    matches = payload.get("matches") if isinstance(payload, dict) else None
    if not isinstance(matches, list):
        return []

    rows: list[FixtureRow] = []
    for match in matches:
        competition = match.get("competition") or {}
        area = (competition.get("area") or {}).get("name") or ""
        league = f"{area} {competition.get('name') or ''}".strip()

        kickoff_iso = match.get("utcDate") or ""
        local = local_kickoff(kickoff_iso, tz)
        if local is None or not start_hour <= local.hour < end_hour:
            continue

        rows.append(FixtureRow(
            league=league,
            kickoff=local.strftime("%Y-%m-%d %H:%M"),
            home=(match.get("homeTeam") or {}).get("name") or "",
            away=(match.get("awayTeam") or {}).get("name") or "",
            source="FD",
            kickoff_iso=kickoff_iso,
        ))

    rows.sort(key=lambda r: r.kickoff)
    return rows


def fetch_football_data(
    settings: Settings,
    session: Optional[requests.Session] = None,
    now: Optional[datetime] = None,
) -> list[FixtureRow]:
    """
    Fetch today's and tomorrow's matches from football-data.org.

    Returns [] without an API key or on any request/parse failure.
    """
    if not settings.football_data_key:
        return []

    current = now or datetime.now(ZoneInfo("UTC"))
    params = {
        "dateFrom": today_ymd(settings.tz, current),
        "dateTo": today_ymd(settings.tz, current + timedelta(days=1)),
        "status": FOOTBALL_DATA_STATUSES,
    }
    headers = {"X-Auth-Token": settings.football_data_key, "accept": "application/json"}
    requester = session or requests

    try:
        resp = requester.get(FOOTBALL_DATA_URL, params=params, headers=headers, timeout=REQUEST_TIMEOUT)
    except requests.exceptions.RequestException as exc:
        logger.warning("football-data request failed: %s", exc)
        return []

    if resp.status_code != 200:
        logger.warning("football-data HTTP %d: %s", resp.status_code, resp.text[:300])
        return []

    try:
        payload = resp.json()
    except ValueError:
        logger.warning("football-data returned non-JSON body: %s", resp.text[:300])
        return []

    rows = parse_football_data(payload, settings.tz, settings.start_hour, settings.end_hour)
    logger.info("football-data: %d rows", len(rows))
    return rows


# ---------------------------------------------------------------------------
# Merge
# ---------------------------------------------------------------------------

def _pick_score(row: FixtureRow) -> float:
    score = 0.0
    if row.prediction:
        score += 2
    if row.league and not row.league.lower().startswith("unknown"):
        score += 1
    if row.source == "FD":
        score += 0.5
    return score


def in_hour_window(kickoff: str, start_hour: int, end_hour: int = 24) -> bool:
    """
    True when the kickoff label's hour is in [start_hour, end_hour).
    Labels without a clock time always pass.

    >>> in_hour_window("2026-10-19 18:30", 12)
    True
    >>> in_hour_window("2026-10-19 09:00", 12)
    False
    >>> in_hour_window("2026-10-19", 12)
    True
    """
    m = _KICKOFF.search(kickoff or "")
    if not m:
        return True
    return start_hour <= int(m.group(2)) < end_hour


def merge_fixtures(rows: list[FixtureRow], start_hour: int = 0, end_hour: int = 24) -> list[FixtureRow]:
    """
    Hour-window filter, then one row per (kickoff, home, away).

    When two sources list the same match, keep the row with a prediction,
    then a known league, then the football-data row. First seen wins ties.
    """
    best: dict[tuple, FixtureRow] = {}
    for row in rows:
        if not in_hour_window(row.kickoff, start_hour, end_hour):
            continue
        key = (row.kickoff, row.home.lower(), row.away.lower())
        current = best.get(key)
        if current is None or _pick_score(row) > _pick_score(current):
            best[key] = row
    return sorted(best.values(), key=lambda r: r.kickoff)


def fetch_fixtures_today(
    settings: Settings,
    session: Optional[requests.Session] = None,
    now: Optional[datetime] = None,
) -> list[FixtureRow]:
    """Raw rows from every enabled source, un-merged and without predictions."""
    combined: list[FixtureRow] = []
    for name, fetcher in (("ESPN", fetch_espn_schedule), ("FD", fetch_football_data)):
        try:
            combined.extend(fetcher(settings, session=session, now=now))
        except Exception as exc:  # noqa: BLE001
            logger.error("%s source error: %s", name, exc)
    return combined
