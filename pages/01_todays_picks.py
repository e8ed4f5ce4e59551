"""
pages/01_todays_picks.py — Today's Picks

Cached daily fixtures with the model's primary and alternate pick.

Pipeline (all in core.fixture_cache):
1. Fetch today's fixtures (ESPN schedule page, football-data.org)
2. Predict each fixture (Poisson model → top/second market)
3. Merge cross-source duplicates, hide rows without a pick

UI:
- One table, rows tinted by primary edge tier (strong ≥10, medium ≥5, low)
- League filter + "hide low-edge" toggle
- JSON download of the full snapshot
"""

import html
import sys
from pathlib import Path

import streamlit as st

ROOT = Path(__file__).parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from core.fixture_cache import get_today, to_json
from core.market_selector import edge_tier

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------
TIER_BACKGROUNDS = {
    "strong": "rgba(16,185,129,.15)",
    "medium": "rgba(253,224,71,.12)",
    "low":    "rgba(229,231,235,.06)",
    "muted":  "rgba(229,231,235,.04)",
}
COLUMNS = ["Kickoff", "League", "Home", "Away", "Prediction", "Alt"]


def _row_html(row: dict) -> str:
    tier = edge_tier(row.get("primary_edge_pct", 0), bool(row.get("prediction")))
    bg = TIER_BACKGROUNDS[tier]
    color = "#9ca3af" if tier == "muted" else "#e5e7eb"
    cells = [
        row.get("kickoff", ""),
        row.get("league", ""),
        row.get("home", ""),
        row.get("away", ""),
        row.get("prediction", ""),
        row.get("alt_prediction", ""),
    ]
    tds = "".join(
        f'<td style="padding:6px 8px; {"font-weight:600;" if i == 2 else ""}'
        f'{"opacity:.8;" if i == 5 else ""}">{html.escape(str(c))}</td>'
        for i, c in enumerate(cells)
    )
    return f'<tr style="background:{bg}; color:{color}; border-bottom:1px solid #1f2937;">{tds}</tr>'


def _table_html(rows: list[dict]) -> str:
    head = "".join(
        f'<th style="text-align:left; padding:8px; background:#1e293b; position:sticky; top:0;">{c}</th>'
        for c in COLUMNS
    )
    body = "".join(_row_html(r) for r in rows)
    return f"""
    <div style="overflow-x:auto; border:1px solid #1f2937; border-radius:12px;">
        <table style="min-width:100%; font-size:13px; border-collapse:collapse; color:#e5e7eb;">
            <thead><tr>{head}</tr></thead>
            <tbody>{body}</tbody>
        </table>
    </div>
    """


# ---------------------------------------------------------------------------
# Page
# ---------------------------------------------------------------------------
st.title("Today's AI Football Picks")
st.markdown(
    '<span style="font-size:0.85rem; color:#9ca3af;">'
    "Statistical predictions for 1X2, Over/Under 2.5 and BTTS from a Poisson goals model."
    "</span>",
    unsafe_allow_html=True,
)

snapshot = get_today()
rows = snapshot.get("rows", [])

if snapshot.get("error"):
    st.error(f"Last refresh failed: {snapshot['error']}")

leagues = sorted({r.get("league", "") for r in rows if r.get("league")})
col_league, col_toggle, col_dl = st.columns([3, 2, 1])
with col_league:
    chosen = st.multiselect("League", leagues, default=[])
with col_toggle:
    hide_low = st.toggle("Hide low-edge picks", value=False)
with col_dl:
    st.download_button(
        "JSON",
        data=to_json(),
        file_name=f"picks_{snapshot.get('date') or 'today'}.json",
        mime="application/json",
    )

visible = [
    r for r in rows
    if (not chosen or r.get("league") in chosen) and not (hide_low and r.get("low_edge"))
]

if not visible:
    st.info("No fixtures with predictions for today yet.")
else:
    st.html(_table_html(visible))
    st.caption(f"{len(visible)} of {snapshot.get('count', 0)} fixtures · {snapshot.get('date') or ''}")
