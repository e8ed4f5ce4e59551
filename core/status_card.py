"""
core/status_card.py — BetEstimate
==================================
Sidebar refresh-status card markup. Pure string building, no Streamlit calls,
so app.py stays a thin script.

Every value taken from the cache is HTML-escaped: the error field carries raw
exception text.
"""

import html


def status_badge(running: bool, scheduler_error: bool) -> tuple[str, str]:
    """
    (dot colour, label) for the scheduler state.

    >>> status_badge(True, False)
    ('#22c55e', 'SCHEDULED')
    >>> status_badge(False, True)
    ('#ef4444', 'ERROR')
    """
    if running:
        return "#22c55e", "SCHEDULED"
    if scheduler_error:
        return "#ef4444", "ERROR"
    return "#6b7280", "IDLE"


def status_card_html(cache: dict, running: bool, scheduler_error: bool = False) -> str:
    """Card body for the sidebar, built from cache_status() output."""
    dot_color, label = status_badge(running, scheduler_error)
    saved = cache["saved_at"][:16].replace("T", " ") if cache.get("saved_at") else "—"
    date = html.escape(str(cache.get("date") or "—"))
    error_html = (
        f'<div style="color:#ef4444;">⚠ {html.escape(str(cache["error"]))}</div>'
        if cache.get("error") else ""
    )
    return f"""
    <div style="background:#111827; border:1px solid #1f2937; border-radius:6px; padding:10px 12px;">
        <div style="display:flex; align-items:center; gap:6px; margin-bottom:6px;">
            <div style="width:8px; height:8px; border-radius:50%; background:{dot_color};"></div>
            <span style="font-size:0.65rem; font-weight:600; color:{dot_color}; letter-spacing:0.1em;">{label}</span>
        </div>
        <div style="font-size:0.65rem; color:#9ca3af; line-height:1.6;">
            <div>Refresh: daily 00:01</div>
            <div>Cache date: {date}</div>
            <div>Rows: {int(cache.get("count") or 0)}</div>
            <div>Saved: {html.escape(saved)} UTC</div>
            {error_html}
        </div>
    </div>
    """
