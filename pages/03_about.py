"""
pages/03_about.py — About / Privacy / Contact
"""

import streamlit as st

st.title("About BetEstimate")

st.markdown(
    """
BetEstimate provides **statistical football predictions** based on a Poisson
expected-goals model. Team strengths come from a small hand-curated rating
table, adjusted for home advantage and each league's typical scoring rate.

**Markets:** 1X2, Over/Under 2.5, Both Teams To Score.

**Leagues:** Premier League, La Liga, Serie A, Bundesliga, Ligue 1,
Eredivisie, Primeira Liga, Süper Lig and more.

**Edge** is the pick's probability minus the probability of a blind guess
(1/3 for 1X2, 1/2 for two-way markets). Picks flagged *low-edge* showed no
meaningful separation between outcomes.
"""
)

st.subheader("Privacy")
st.markdown(
    "No account, no tracking beyond standard hosting logs. Predictions are for "
    "entertainment and information only."
)

st.subheader("Contact")
st.markdown("contact@betestimate.com")

st.caption("Use the data at your own risk. Informational only — no guarantees.")
