# careshift_project_root/app.py
# APPLICATION ENTRY POINT - NURSE CHAT

import html
import logging
import sys
from pathlib import Path

try:
    _project_root = Path(__file__).resolve().parent
    if str(_project_root) not in sys.path:
        sys.path.insert(0, str(_project_root))

    import pandas as pd
    import streamlit as st
    from analytics import ChatAssistant
    from config import settings
    from data_processing import FacilityDataError
    from data_processing.cached import get_cached_facility_data
    from visualization import (load_and_inject_css, plot_weekly_counts,
                               render_shift_digest, set_plotly_theme)

except ImportError as e:
    print("FATAL ERROR in app.py: A core module failed to import.", file=sys.stderr)
    print("1. Install the project first: `pip install -e .`", file=sys.stderr)
    print("2. Run the app from the project root: `streamlit run app.py`", file=sys.stderr)
    print(f"\nPython Path: {sys.path}\nOriginal ImportError: {e}", file=sys.stderr)
    sys.exit(1)

# --- Global Configuration ---
logging.basicConfig(
    level=settings.LOG_LEVEL,
    format=settings.LOG_FORMAT,
    datefmt=settings.LOG_DATE_FORMAT,
    handlers=[logging.StreamHandler(sys.stdout)],
    force=True
)
logger = logging.getLogger(__name__)
logging.getLogger("urllib3").setLevel(logging.WARNING)

st.set_page_config(
    page_title=f"{settings.APP_NAME}",
    page_icon="🩺",
    layout="centered",
    menu_items={
        "Get Help": f"mailto:{settings.SUPPORT_CONTACT_INFO}",
        "Report a bug": f"mailto:{settings.SUPPORT_CONTACT_INFO}?subject=Bug Report - {settings.APP_NAME} v{settings.APP_VERSION}",
        "About": f"### {settings.APP_NAME} (v{settings.APP_VERSION})\n{settings.APP_FOOTER_TEXT}"
    }
)

load_and_inject_css(settings.STYLE_CSS_PATH)
set_plotly_theme()

try:
    facility_data = get_cached_facility_data()
except FacilityDataError as e:
    logger.critical(f"Facility data unavailable: {e}")
    st.error(f"Facility data could not be loaded: {e}")
    st.stop()

assistant = ChatAssistant(facility_data)

# --- Presentation state: history and the per-turn attachments ---
if "messages" not in st.session_state:
    st.session_state.messages = []
if "attachments" not in st.session_state:
    st.session_state.attachments = {}

# --- Header ---
st.title(settings.APP_NAME)
st.caption(pd.Timestamp.now(tz=settings.FACILITY_TIMEZONE).strftime("%B %d, %Y").replace(" 0", " "))
st.divider()


def _render_attachment(message_id: str) -> None:
    turn = st.session_state.attachments.get(message_id)
    if turn is None:
        return
    if turn.digest is not None:
        render_shift_digest(turn.digest)
    if turn.chart is not None:
        fig = plot_weekly_counts(turn.chart.buckets, turn.chart.title, turn.chart.data_type_label)
        st.plotly_chart(fig, use_container_width=True)


if not st.session_state.messages:
    st.info(f"Ask {html.escape(settings.ASSISTANT_NAME)} about residents, request a **shift summary**, or ask for a **weekly chart of falls** for a resident.")

for message in st.session_state.messages:
    with st.chat_message(message.sender):
        st.markdown(message.text)
        _render_attachment(message.id)

user_text = st.chat_input("Ask about residents, incidents or shifts...")
if user_text and user_text.strip():
    history = list(st.session_state.messages)
    with st.chat_message("user"):
        st.markdown(user_text.strip())

    with st.chat_message("assistant"):
        with st.spinner("Thinking..."):
            turn = assistant.respond(history, user_text)
        if turn.reply is not None:
            st.markdown(turn.reply.text)
        has_attachment = turn.chart is not None or turn.digest is not None

    st.session_state.messages.append(turn.user_message)
    if turn.reply is not None:
        st.session_state.messages.append(turn.reply)
        if has_attachment:
            st.session_state.attachments[turn.reply.id] = turn
    st.rerun()

with st.sidebar:
    st.header(f"{settings.APP_NAME}")
    st.caption(f"v{settings.APP_VERSION}")
    st.divider()
    if st.button("Clear conversation", use_container_width=True):
        st.session_state.messages = []
        st.session_state.attachments = {}
        st.rerun()
    st.divider()
    st.markdown(f"**{html.escape(settings.ORGANIZATION_NAME)}**")
    st.caption(settings.APP_FOOTER_TEXT)

logger.debug("Chat page rendered.")
