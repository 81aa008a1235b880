import logging

import streamlit as st

from config.env_var import (
    GOOGLE_API_KEY,
    LLM_MODEL,
    LOG_LEVEL,
    CONTEXT_TOKEN_LIMIT,
    ALLOWED_EXTENSIONS,
    MIN_TEMPERATURE,
    MAX_TEMPERATURE,
    MIN_OUTPUT_TOKENS,
    MAX_OUTPUT_TOKENS,
)
from utils.gemini_utils import GenerationError, MissingCredentialError
from utils.pdf_utils import read_uploaded_files
from utils.session_utils import SessionBusyError, SessionState

logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

LANGUAGE_LABELS = {"en": "English", "am": "አማርኛ (Amharic)"}

# Session state
if "session" not in st.session_state:
    st.session_state.session = SessionState()
if "api_key" not in st.session_state:
    st.session_state.api_key = GOOGLE_API_KEY
if "uploader_key" not in st.session_state:
    st.session_state.uploader_key = 0

session: SessionState = st.session_state.session

st.set_page_config(page_title="Gemini Long-Context RAG", layout="wide")

with st.sidebar:
    st.title("RAG Chatbot")
    st.caption(f"Powered by {LLM_MODEL}")

    st.header("Knowledge Base")
    uploaded = st.file_uploader(
        "Upload documents",
        type=ALLOWED_EXTENSIONS,
        accept_multiple_files=True,
        key=f"uploader_{st.session_state.uploader_key}",
    )
    if uploaded:
        with st.spinner("Reading documents..."):
            session.add_documents(read_uploaded_files(uploaded))
        # fresh uploader so the same files are not added again on rerun
        st.session_state.uploader_key += 1
        st.rerun()

    if session.documents:
        for doc in session.documents:
            name_col, remove_col = st.columns([4, 1])
            name_col.write(f"**{doc.name}**  \n{doc.tokens:,} tokens")
            if remove_col.button("🗑️", key=f"remove_{doc.id}", help=f"Remove {doc.name}"):
                session.remove_document(doc.id)
                st.rerun()
    else:
        st.write("_No documents uploaded._")
    st.caption(f"Total context: {session.total_tokens:,} / {CONTEXT_TOKEN_LIMIT:,} tokens")
    if session.total_tokens > CONTEXT_TOKEN_LIMIT:
        st.warning("Documents exceed the context limit; later documents will be truncated or skipped.")

    st.markdown("---")
    st.header("Model Settings")
    temperature = st.slider(
        "Temperature", MIN_TEMPERATURE, MAX_TEMPERATURE, session.model_config.temperature, step=0.1
    )
    max_tokens = st.slider(
        "Max tokens", MIN_OUTPUT_TOKENS, MAX_OUTPUT_TOKENS, session.model_config.max_output_tokens, step=100
    )
    session.update_config(temperature=temperature, max_output_tokens=max_tokens)

    language = st.radio(
        "Response language",
        list(LANGUAGE_LABELS),
        index=list(LANGUAGE_LABELS).index(session.language),
        format_func=LANGUAGE_LABELS.get,
        horizontal=True,
    )
    session.set_language(language)

    st.session_state.api_key = st.text_input(
        "Gemini API Key", value=st.session_state.api_key, type="password", placeholder="AIzaSy..."
    )
    if not st.session_state.api_key:
        st.info("Get your key at https://aistudio.google.com/app/apikey")

    st.markdown("---")
    if st.button("New Chat Session", use_container_width=True):
        session.clear_chat()
        st.rerun()

st.header("Chat Session")
st.caption(f"Context: {len(session.documents)} document(s) loaded")

if not st.session_state.api_key:
    st.error("Please provide a Gemini API Key in the sidebar to continue.")

for message in session.messages:
    with st.chat_message("user" if message.role == "user" else "assistant"):
        st.markdown(message.content)
        if message.sources:
            st.caption("Sources: " + ", ".join(message.sources))

placeholder = "Ask a question about your documents..." if session.documents else "Upload a document to start RAG..."
# Streamlit runs one script at a time per session; ask() also refuses while is_loading is set
user_q = st.chat_input(placeholder)
if user_q and user_q.strip():
    with st.chat_message("user"):
        st.markdown(user_q)
    try:
        with st.chat_message("assistant"):
            with st.spinner("Analyzing documents..."):
                reply = session.ask(user_q, st.session_state.api_key)
            st.markdown(reply.content)
            if reply.sources:
                st.caption("Sources: " + ", ".join(reply.sources))
    except (MissingCredentialError, GenerationError, SessionBusyError) as e:
        st.error(str(e))
elif session.last_error:
    st.error(session.last_error)

st.caption("Gemini may display inaccurate info, including about people, so double-check its responses.")
