# careshift_project_root/visualization/ui_elements.py
# THEME-AWARE UI COMPONENTS

import html
import logging
from pathlib import Path
from typing import Optional, Union

import streamlit as st

from analytics.shift_digest import IncidentSummary, ShiftDigest

logger = logging.getLogger(__name__)

NO_HANDOVER_NOTES_TEXT = "No handover notes available."
NO_INCIDENTS_TEXT = "No significant incidents noted recently."
NO_RESIDENTS_TEXT = "No specific residents flagged for close observation."


@st.cache_resource
def load_and_inject_css(css_path: Union[str, Path]):
    """Loads a CSS file and injects it into the Streamlit application."""
    path = Path(css_path)
    if not path.is_file():
        logger.warning(f"CSS file not found at: {path}. UI may not be styled correctly.")
        return
    try:
        with path.open("r", encoding="utf-8") as f:
            st.markdown(f'<style>{f.read()}</style>', unsafe_allow_html=True)
        logger.debug(f"Successfully loaded and injected CSS from {path}.")
    except OSError as e:
        logger.error(f"Error loading CSS from {path}: {e}", exc_info=True)


def format_incident_time(incident: IncidentSummary) -> str:
    """Clock time like '2:30 PM'."""
    ts = incident.timestamp
    return f"{ts.hour % 12 or 12}:{ts.strftime('%M %p')}"


def format_incident_line(incident: IncidentSummary) -> str:
    return f"{incident.type} - {incident.display_name} ({format_incident_time(incident)})"


def render_shift_digest(digest: Optional[ShiftDigest]) -> None:
    """Renders the three handover sections, with placeholders for empty ones."""
    if digest is None:
        return

    st.markdown('<div class="shift-summary-title">Shift Summary</div>', unsafe_allow_html=True)

    with st.container(border=True):
        st.markdown("**Previous Shift Handover**")
        notes = digest.previous_shift_notes
        if notes:
            st.markdown(f'<div class="notes-text">{html.escape(notes)}</div>', unsafe_allow_html=True)
        else:
            st.caption(NO_HANDOVER_NOTES_TEXT)

    with st.container(border=True):
        st.markdown("**Recent Incidents**")
        if digest.recent_incidents:
            for incident in digest.recent_incidents:
                st.markdown(
                    f'<div class="item-title">{html.escape(format_incident_line(incident))}</div>'
                    f'<div class="item-description">{html.escape(incident.description or "")}</div>',
                    unsafe_allow_html=True,
                )
        else:
            st.caption(NO_INCIDENTS_TEXT)

    with st.container(border=True):
        st.markdown("**Residents to Watch**")
        if digest.residents_to_watch:
            for resident in digest.residents_to_watch:
                st.markdown(
                    f'<div class="item-title">{html.escape(resident.name)} ({html.escape(resident.id)})</div>'
                    f'<div class="item-description">Reason: {html.escape(resident.reason)}</div>',
                    unsafe_allow_html=True,
                )
        else:
            st.caption(NO_RESIDENTS_TEXT)
