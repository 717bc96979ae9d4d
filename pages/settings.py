# pages/settings.py — caregiver settings: add and remove words

import html

import streamlit as st

from errors import AssetFetchError, ValidationError
from ui import get_app

st.set_page_config(
    page_title="Picture Spelling – Settings",
    page_icon="⚙️",
    layout="centered",
    initial_sidebar_state="collapsed",
)

app = get_app()

st.title("⚙️ Settings")
st.caption("Add a word with a picture. Words are saved on this computer.")

# ---------------------------------------------------------------------
# ADD WORD
# ---------------------------------------------------------------------
with st.form("add_word", clear_on_submit=True):
    category = st.text_input("Category", placeholder="GENERAL")
    word = st.text_input("Word", placeholder="CAT")
    source = st.radio("Picture from", ["Upload", "Web address"], horizontal=True)
    upload = st.file_uploader("Picture", type=["png", "jpg", "jpeg", "gif", "webp"])
    url = st.text_input("Picture web address", placeholder="https://…")
    submitted = st.form_submit_button("➕ Add word")

if submitted:
    try:
        if source == "Upload":
            entry = app.add_word_from_upload(
                word,
                category,
                upload.getvalue() if upload else None,
                upload.type if upload else None,
            )
        else:
            entry = app.add_word_from_url(word, category, url)
    except (ValidationError, AssetFetchError) as e:
        st.error(str(e))
    else:
        st.success(f"Added {entry.word} ({entry.category})")

# ---------------------------------------------------------------------
# WORD LIST
# ---------------------------------------------------------------------
st.subheader("Saved words")

words = app.words
if not words:
    st.info("No words saved yet.")

for w in words:
    cols = st.columns([1, 4, 1])
    with cols[0]:
        st.markdown(
            f"<img src='{html.escape(w.image, quote=True)}' style='height:40px; border-radius:8px;' />",
            unsafe_allow_html=True,
        )
    with cols[1]:
        st.write(f"{w.word} ({w.category})")
    with cols[2]:
        st.button("🗑", key=f"del_{w.id}", on_click=app.delete_word, args=(w.id,))

# ---------------------------------------------------------------------
# SYNC STATUS
# ---------------------------------------------------------------------
st.subheader("Online copy")

status = app.sync_status
if status == "disabled":
    st.caption(
        "Not configured. Set GITHUB_OWNER, GITHUB_REPO, GITHUB_PATH, "
        "GITHUB_BRANCH and GITHUB_TOKEN in `.env` to keep a copy on GitHub."
    )
elif status == "error":
    st.warning(f"Sync error: {app.sync.last_error or app.mirror.last_error}")
    if st.button("🔄 Retry sync"):
        app.retry_sync()
        st.rerun()
else:
    st.caption(f"Sync status: {status}")
