"""Streamlit web application for YouTube visual notes."""

import streamlit as st
import sys
from pathlib import Path

# Add the project root to the path so we can import yt2notes modules
try:
    project_root = Path(__file__).parent.resolve()
    if str(project_root) not in sys.path:
        sys.path.insert(0, str(project_root))
except Exception:
    # If path setup fails, continue anyway
    pass

from yt2notes.config import Config
from yt2notes.controller import ImageStatus, InputMode, NotesSession, Step
from yt2notes.formatter import notes_to_markdown


# Page configuration
st.set_page_config(
    page_title="AI Visual Notes",
    page_icon="🎨",
    layout="wide",
    initial_sidebar_state="collapsed"
)

SECRET_KEYS = (
    "OPENAI_API_KEY", "NOTES_MODEL", "IMAGE_MODEL", "FAL_API_KEY",
    "SUPADATA_API_KEY", "PROXY_BASE_URL", "ALT_TRANSCRIPT_API_URL",
)


# Load secrets from Streamlit Cloud and update Config
# This happens AFTER page config when st.secrets is safe to access
def load_streamlit_secrets():
    """Load secrets from Streamlit Cloud into Config."""
    try:
        if not hasattr(st, 'secrets'):
            return
        if not st.secrets:
            return
        for key in SECRET_KEYS:
            if key in st.secrets:
                setattr(Config, key, st.secrets[key])
    except (AttributeError, TypeError, KeyError, ValueError, FileNotFoundError):
        # No secrets file - use .env / environment values
        pass

load_streamlit_secrets()

st.markdown("""
    <style>
    .main-header {
        font-size: 2.5rem;
        font-weight: bold;
        text-align: center;
        margin-bottom: 0.5rem;
    }
    .stButton>button {
        width: 100%;
    }
    .visual-badge {
        display: inline-block;
        padding: 0.1rem 0.5rem;
        border-radius: 0.4rem;
        background-color: #eef2ff;
        color: #3730a3;
        font-size: 0.8rem;
    }
    </style>
""", unsafe_allow_html=True)

# Initialize session state
if 'notes_session' not in st.session_state:
    st.session_state.notes_session = NotesSession()
if 'input_mode' not in st.session_state:
    st.session_state.input_mode = InputMode.URL.value

session: NotesSession = st.session_state.notes_session


def render_input_step():
    """URL / manual transcript form."""
    st.markdown('<div class="main-header">Transform any content into visual notes</div>', unsafe_allow_html=True)
    st.caption("Convert YouTube videos or pasted transcripts into organized visual notes with AI-generated diagrams.")

    mode = st.radio(
        "Source",
        options=[InputMode.URL.value, InputMode.MANUAL.value],
        format_func=lambda m: "📺 YouTube Video" if m == InputMode.URL.value else "📄 Manual Transcript",
        horizontal=True,
        key="input_mode",
    )

    if mode == InputMode.URL.value:
        value = st.text_input(
            "YouTube Video URL",
            placeholder="https://www.youtube.com/watch?v=...",
            help="We'll automatically extract the transcript and generate visual notes."
        )
    else:
        value = st.text_area(
            "Transcript",
            height=220,
            placeholder="Paste your transcript here... (from Zoom meetings, podcasts, lectures, etc.)",
        )

    if session.error:
        st.error(session.error)

    col1, col2 = st.columns([1, 4])
    with col1:
        submitted = st.button("✨ Create Visual Notes", type="primary", use_container_width=True)

    if submitted:
        with st.spinner("Creating your visual notes..."):
            session.process(InputMode(mode), value)
        st.rerun()


def render_card(index: int):
    """One note section with its illustration controls."""
    card = session.cards[index]
    note = card.note

    with st.container(border=True):
        st.subheader(note.title)
        st.markdown(f'<span class="visual-badge">{note.visual.type}</span>', unsafe_allow_html=True)
        st.write(note.summary)
        st.markdown("\n".join(f"- {point}" for point in note.key_points))

        card.image_prompt = st.text_area(
            "Image prompt", value=card.image_prompt, key=f"prompt_{index}", height=90
        )
        card.colorful = st.toggle("Colorful style", value=card.colorful, key=f"colorful_{index}")

        if not card.auto_generated and session.auto_generate_images:
            with st.spinner("Generating image..."):
                session.on_card_rendered(index)

        if card.status == ImageStatus.SUCCEEDED and card.image_ref:
            st.image(card.image_ref, use_container_width=True)
        elif card.status == ImageStatus.FAILED:
            st.warning(card.error_message)

        label = "🔄 Regenerate" if card.status != ImageStatus.UNREQUESTED else "🖼️ Generate image"
        if st.button(label, key=f"generate_{index}", disabled=card.busy):
            with st.spinner("Generating image..."):
                session.generate_card_image(index)
            st.rerun()


def render_results_step():
    """Generated notes, one card per section."""
    header_col, action_col = st.columns([4, 1])
    with header_col:
        st.header(session.video_title)
        if session.source:
            st.caption(f"Transcript source: {session.source}")
    with action_col:
        if st.button("↩️ Start over"):
            session.start_over()
            st.rerun()
        st.download_button(
            "📥 Download notes",
            notes_to_markdown(session.video_title, [card.note for card in session.cards]),
            file_name="visual_notes.md",
            mime="text/markdown",
        )

    columns = st.columns(2)
    for index in range(len(session.cards)):
        with columns[index % 2]:
            render_card(index)


if session.step == Step.RESULTS:
    render_results_step()
else:
    render_input_step()
