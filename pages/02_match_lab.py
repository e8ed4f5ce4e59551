"""
pages/02_match_lab.py — Match Lab

Run the prediction engine on any matchup. No live data required.

Shows:
- Resolved seed ratings and league baseline
- Expected goals (λH, λA)
- 1X2 stacked bar (sharpened), totals and BTTS probabilities
- Scoreline probability heatmap
- Top / second pick with edge
"""

import sys
from pathlib import Path

import plotly.graph_objects as go
import streamlit as st

ROOT = Path(__file__).parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from core.config import PredictionConfig
from core.expected_goals import HOME_ADVANTAGE, estimate_goals
from core.league_baseline import resolve_baseline
from core.market_selector import edge_pct, format_pick, select_predictions
from core.poisson_model import compute_market_probabilities, score_matrix
from core.team_ratings import canonical_key, list_rated_teams, resolve_strength

# ---------------------------------------------------------------------------
# Plotly layout defaults
# ---------------------------------------------------------------------------
PLOTLY_BASE = dict(
    paper_bgcolor="#0b1220",
    plot_bgcolor="#0f172a",
    font=dict(color="#d1d5db", size=11, family="monospace"),
    margin=dict(l=45, r=20, t=35, b=40),
    xaxis=dict(gridcolor="#1f2937", linecolor="#1f2937"),
    yaxis=dict(gridcolor="#1f2937", linecolor="#1f2937"),
    hoverlabel=dict(bgcolor="#111827", bordercolor="#1f2937", font_color="#f3f4f6"),
)


def _build_1x2_bar(p_home: float, p_draw: float, p_away: float) -> go.Figure:
    """Horizontal stacked bar: home / draw / away (sharpened)."""
    fig = go.Figure()
    for label, val, color in [
        ("1", p_home * 100, "#22c55e"),
        ("X", p_draw * 100, "#f59e0b"),
        ("2", p_away * 100, "#ef4444"),
    ]:
        fig.add_trace(go.Bar(
            x=[val],
            y=["1X2"],
            name=f"{label} {val:.1f}%",
            orientation="h",
            marker_color=color,
            text=f"{label}<br>{val:.1f}%",
            textposition="inside",
            insidetextanchor="middle",
            textfont=dict(size=11, color="#fff"),
        ))

    layout = dict(PLOTLY_BASE)
    layout["title"] = dict(text="1X2 (sharpened)", font=dict(size=12, color="#9ca3af"), x=0)
    layout["height"] = 110
    layout["barmode"] = "stack"
    layout["showlegend"] = False
    layout["margin"] = dict(l=45, r=20, t=35, b=10)
    layout["xaxis"] = dict(**PLOTLY_BASE["xaxis"], range=[0, 100], ticksuffix="%")
    layout["yaxis"] = dict(**PLOTLY_BASE["yaxis"], showticklabels=False)
    fig.update_layout(**layout)
    return fig


def _build_score_heatmap(lam_home: float, lam_away: float, max_goals: int = 6) -> go.Figure:
    """P(home=i, away=j) for i, j in [0, max_goals]."""
    grid = score_matrix(lam_home, lam_away, max_goals)
    z = [[p * 100 for p in row] for row in grid]
    text = [[f"{v:.1f}%" for v in row] for row in z]
    labels = [str(g) for g in range(max_goals + 1)]

    fig = go.Figure(go.Heatmap(
        z=z,
        x=labels,
        y=labels,
        text=text,
        texttemplate="%{text}",
        colorscale=[
            [0.0, "#0b1220"],
            [0.10, "#1e3a5f"],
            [0.40, "#0891b2"],
            [1.0, "#a5f3fc"],
        ],
        colorbar=dict(title=dict(text="P(%)"), thickness=12, len=0.8),
        hovertemplate="Home %{y} – Away %{x}: %{text}<extra></extra>",
        textfont=dict(size=9),
    ))

    layout = dict(PLOTLY_BASE)
    layout["title"] = dict(
        text=f"Scoreline Probability Matrix (λH={lam_home:.2f}, λA={lam_away:.2f})",
        font=dict(size=12, color="#9ca3af"),
        x=0,
    )
    layout["height"] = 360
    layout["xaxis"] = dict(**PLOTLY_BASE["xaxis"], title="Away Goals", side="top")
    layout["yaxis"] = dict(**PLOTLY_BASE["yaxis"], title="Home Goals", autorange="reversed")
    fig.update_layout(**layout)
    return fig


def _pick_card(title: str, text: str, edge_points: int, note: str = "") -> str:
    note_html = (
        f'<div style="font-size:0.65rem; color:#fca5a5; margin-top:4px;">⚠ {note}</div>' if note else ""
    )
    return f"""
    <div style="background:#111827; border:1px solid #1f2937; border-radius:8px; padding:12px 14px;">
        <div style="font-size:0.6rem; color:#6b7280; letter-spacing:0.1em;">{title}</div>
        <div style="font-size:1.2rem; font-weight:700; color:#e5e7eb; margin-top:4px;">{text}</div>
        <div style="font-size:0.7rem; color:#22d3ee;">edge {edge_points} pts</div>
        {note_html}
    </div>
    """


# ---------------------------------------------------------------------------
# Page
# ---------------------------------------------------------------------------
st.title("Match Lab")

rated = list_rated_teams()
col_home, col_away, col_league = st.columns(3)
with col_home:
    home = st.text_input("Home team", value="Manchester City", help=f"Rated: {', '.join(rated)}")
with col_away:
    away = st.text_input("Away team", value="Liverpool")
with col_league:
    league = st.text_input("League", value="Premier League")

with st.expander("Model tunables"):
    c1, c2, c3 = st.columns(3)
    tau = c1.slider("Sharpening τ (1X2)", 0.5, 2.0, 1.25, 0.05)
    tilt = c2.slider("Strong-gap tilt (rating pts)", 50, 500, 220, 10)
    edge_min = c3.slider("Low-edge threshold", 0.0, 0.25, 0.08, 0.01)

config = PredictionConfig(sharpen_tau=tau, strong_diff_tilt=float(tilt), edge_min=edge_min)

xg = estimate_goals(home, away, league, config)
probs = compute_market_probabilities(xg.lambda_home, xg.lambda_away, config.sharpen_tau)
pair = select_predictions(xg.lambda_home, xg.lambda_away, config)

m1, m2, m3, m4 = st.columns(4)
m1.metric(f"Home ({canonical_key(home) or '—'})", f"{resolve_strength(home):.0f}", f"+{HOME_ADVANTAGE:.0f} home")
m2.metric(f"Away ({canonical_key(away) or '—'})", f"{resolve_strength(away):.0f}")
m3.metric("League baseline", f"{resolve_baseline(league):.2f} g/m")
m4.metric("λH / λA", f"{xg.lambda_home:.2f} / {xg.lambda_away:.2f}")

p1, p2 = st.columns(2)
with p1:
    st.html(_pick_card("PRIMARY", format_pick(pair.top), edge_pct(pair.top), pair.top.note or ""))
with p2:
    st.html(_pick_card("ALTERNATE", format_pick(pair.second), edge_pct(pair.second)))

st.markdown("")
bar_col, heat_col = st.columns([1, 2])
with bar_col:
    st.plotly_chart(
        _build_1x2_bar(probs.p_home, probs.p_draw, probs.p_away),
        use_container_width=True,
        config={"displayModeBar": False},
    )
    st.html(
        f"""
        <div style="background:#111827; border:1px solid #1f2937; border-radius:6px; padding:12px 14px;
                    font-size:0.7rem; color:#9ca3af; line-height:1.8; font-family:monospace;">
            <div>Over 2.5:  <strong style="color:#22d3ee;">{probs.p_over_2_5:.1%}</strong></div>
            <div>Under 2.5: <strong style="color:#22d3ee;">{probs.p_under_2_5:.1%}</strong></div>
            <div>BTTS Yes:  <strong style="color:#f59e0b;">{probs.p_btts_yes:.1%}</strong></div>
            <div>BTTS No:   <strong style="color:#f59e0b;">{probs.p_btts_no:.1%}</strong></div>
        </div>
        """
    )
with heat_col:
    st.plotly_chart(
        _build_score_heatmap(xg.lambda_home, xg.lambda_away),
        use_container_width=True,
        config={"displayModeBar": False},
    )
