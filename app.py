"""
app.py — BetEstimate Streamlit Entry Point

Multi-page navigation via st.navigation() (Streamlit 1.36+).
Scheduler initialized once per process via st.session_state guard.

Design principles:
- Dark terminal aesthetic: #0e1117 bg, cyan accent (#22d3ee)
- st.html() for custom cards (not st.markdown — style tags sandboxed)
- Every pick shows its probability and edge, nothing else

Run: streamlit run app.py
"""

import logging
import sys
from pathlib import Path

import streamlit as st

# ---------------------------------------------------------------------------
# Path setup — allow 'from core.xxx import' regardless of cwd
# ---------------------------------------------------------------------------
ROOT = Path(__file__).parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

# ---------------------------------------------------------------------------
# Logging setup — write to logs/app.log
# ---------------------------------------------------------------------------
LOG_DIR = ROOT / "logs"
LOG_DIR.mkdir(exist_ok=True)

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
    handlers=[
        logging.FileHandler(LOG_DIR / "app.log"),
        logging.StreamHandler(),
    ],
)
logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Page config — must be first Streamlit call
# ---------------------------------------------------------------------------
st.set_page_config(
    page_title="BetEstimate — Today's Football Picks",
    page_icon="⚽",
    layout="wide",
    initial_sidebar_state="expanded",
    menu_items={
        "Get Help": None,
        "Report a bug": None,
        "About": "BetEstimate — statistical football predictions (1X2, Over/Under 2.5, BTTS)",
    },
)


# ---------------------------------------------------------------------------
# Scheduler initialization — guarded against Streamlit reruns
# ---------------------------------------------------------------------------
def _init_scheduler() -> None:
    """
    Start the daily refresh scheduler exactly once per process.
    The session_state flag survives reruns but not process restarts.
    """
    if st.session_state.get("scheduler_started"):
        return

    try:
        from core.scheduler import start_scheduler
        start_scheduler()
        st.session_state["scheduler_started"] = True
        logger.info("Scheduler initialized from app.py")
    except Exception as exc:  # noqa: BLE001
        logger.error("Scheduler init failed: %s", exc)
        st.session_state["scheduler_started"] = False
        st.session_state["scheduler_error"] = str(exc)


_init_scheduler()

st.markdown(
    """
    <style>
    [data-testid="stSidebar"] {
        background-color: #0f172a;
    }
    .block-container {
        padding-top: 1.5rem;
        padding-bottom: 2rem;
    }
    footer { visibility: hidden; }
    </style>
    """,
    unsafe_allow_html=True,
)

# ---------------------------------------------------------------------------
# Sidebar — brand + refresh status
# ---------------------------------------------------------------------------
with st.sidebar:
    st.html(
        """
        <div style="padding:12px 0 8px 0; border-bottom:1px solid #1f2937; margin-bottom:12px;">
            <span style="font-size:1.1rem; font-weight:800; color:#e5e7eb;">BetEstimate</span><span
                  style="font-size:1.1rem; font-weight:800; color:#22d3ee;">.com</span>
        </div>
        """
    )

    from core.fixture_cache import cache_status
    from core.scheduler import get_status
    from core.status_card import status_card_html

    st.html(
        status_card_html(
            cache_status(),
            running=get_status()["running"],
            scheduler_error=bool(st.session_state.get("scheduler_error")),
        )
    )

    if st.button("↺  Refresh Now", use_container_width=True, type="secondary"):
        from core.scheduler import trigger_refresh_now
        with st.spinner("Fetching fixtures..."):
            n_rows = trigger_refresh_now()
        st.success(f"{n_rows} picks cached")

    st.markdown("---")
    st.caption("Use the data at your own risk. Informational only — no guarantees.")

# ---------------------------------------------------------------------------
# Multi-page navigation — programmatic (st.navigation, Streamlit 1.36+)
# ---------------------------------------------------------------------------
pages = [
    st.Page("pages/01_todays_picks.py", title="Today's Picks", icon="⚽", default=True),
    st.Page("pages/02_match_lab.py",    title="Match Lab",     icon="🧪"),
    st.Page("pages/03_about.py",        title="About",         icon="ℹ️"),
]

pg = st.navigation(pages)
pg.run()
