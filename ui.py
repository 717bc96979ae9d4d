# ui.py — helpers shared by the Streamlit pages
import streamlit as st
import streamlit.components.v1 as components

from app_state import AppState
from config import Settings, configure_logging
from game_session import ManualScheduler
from speech import speak_html


@st.cache_resource
def shared_app() -> AppState:
    """Word store, mirror and sync worker: one set per server process."""
    settings = Settings.from_env()
    configure_logging(settings.log_level)
    return AppState.bootstrap(settings)


def get_app() -> AppState:
    """This browser session's game on top of the shared words."""
    if "app" not in st.session_state:
        st.session_state.app = shared_app().new_session(scheduler=ManualScheduler())
    if "speak" not in st.session_state:
        st.session_state.speak = []
    return st.session_state.app


def queue_speech(text: str) -> None:
    st.session_state.speak.append(text)


def flush_speech(lang: str) -> None:
    """Speak everything queued since the last run (last phrase wins)."""
    if not st.session_state.speak:
        return
    text = st.session_state.speak[-1]
    st.session_state.speak = []
    components.html(speak_html(text, lang=lang), height=0)


STYLE = """
<style>
header, footer {visibility: hidden;}
.word-picture {
    display: block;
    margin: 0 auto 12px auto;
    max-height: 280px;
    max-width: 100%;
    border-radius: 22px;
    box-shadow: 0 14px 30px rgba(0,0,0,0.25);
}
.answer-row {
    display: flex;
    align-items: center;
    justify-content: center;
    gap: 10px;
    margin: 10px 0 4px 0;
}
.answer-slot {
    display: inline-flex;
    align-items: center;
    justify-content: center;
    width: 56px;
    height: 64px;
    border-radius: 14px;
    border: 3px solid #1b4d2b;
    background: #ffffffee;
    color: #1b4d2b;
    font-size: 36px;
    font-weight: 800;
}
.hint-letter {
    margin-left: 18px;
    font-size: 40px;
    font-weight: 800;
    color: #94a3b8;
}
.game-message {
    text-align: center;
    font-size: 26px;
    font-weight: 800;
    min-height: 40px;
}
.no-words {
    text-align: center;
    font-size: 20px;
    padding: 40px 0;
}
</style>
"""
