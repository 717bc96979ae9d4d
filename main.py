# main.py — Picture Spelling: game screen
import html
import time

import streamlit as st

from game_session import Outcome, State
from ui import STYLE, flush_speech, get_app, queue_speech

st.set_page_config(
    page_title="Picture Spelling",
    page_icon="🔤",
    layout="centered",
    initial_sidebar_state="collapsed",
)

LETTERS = "ABCDEFGHIJKLMNOPQRSTUVWXYZ"
KEYS_PER_ROW = 7

app = get_app()
app.refresh()
session = app.session

st.markdown(STYLE, unsafe_allow_html=True)


# ---------------------------------------------------------------------
# CALLBACKS
# ---------------------------------------------------------------------
def on_letter(letter: str):
    outcome = app.submit_letter(letter)
    if outcome is Outcome.IGNORED:
        return
    queue_speech(letter)
    if outcome is Outcome.CORRECT:
        queue_speech(session.current_word.word)


def on_filter_change():
    app.set_filter(st.session_state.category_filter)


# ---------------------------------------------------------------------
# CATEGORY FILTER
# ---------------------------------------------------------------------
choices = app.category_choices()
current = session.category_filter if session.category_filter in choices else "ALL"
st.session_state.category_filter = current
st.selectbox(
    "Category",
    choices,
    key="category_filter",
    on_change=on_filter_change,
)

# ---------------------------------------------------------------------
# PICTURE + SLOTS
# ---------------------------------------------------------------------
if session.state is State.EMPTY:
    st.markdown(
        "<div class='no-words'>🖼️ No words yet. Ask a grown-up to add some in "
        "<b>Settings</b>.</div>",
        unsafe_allow_html=True,
    )
else:
    word = session.current_word
    st.markdown(
        f"<img class='word-picture' src='{html.escape(word.image, quote=True)}' alt='' />",
        unsafe_allow_html=True,
    )
    slots = "".join(
        f"<span class='answer-slot'>{html.escape(ch)}</span>" for ch in session.slots
    )
    st.markdown(
        f"<div class='answer-row'>{slots}"
        f"<span class='hint-letter'>{html.escape(session.hint)}</span></div>",
        unsafe_allow_html=True,
    )

st.markdown(
    f"<div class='game-message'>{html.escape(session.message)}</div>",
    unsafe_allow_html=True,
)

# ---------------------------------------------------------------------
# KEYBOARD
# ---------------------------------------------------------------------
for start in range(0, len(LETTERS), KEYS_PER_ROW):
    row = LETTERS[start:start + KEYS_PER_ROW]
    cols = st.columns(KEYS_PER_ROW)
    for letter, col in zip(row, cols):
        with col:
            st.button(
                letter,
                key=f"key_{letter}",
                on_click=on_letter,
                args=(letter,),
                use_container_width=True,
            )

if app.sync_status == "error":
    st.caption("⚠️ Words could not be synced. Open Settings to retry.")

flush_speech(app.settings.voice_lang)

# ---------------------------------------------------------------------
# DELAYED ROUND CHANGES
# ---------------------------------------------------------------------
# the feedback is on screen now; wait, then clear or move on
scheduler = session.scheduler
if scheduler.pending:
    time.sleep(scheduler.next_delay)
    scheduler.run_pending()
    st.rerun()
