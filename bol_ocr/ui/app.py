"""
app.py

Streamlit page for the BOL OCR service.

Run with:
    streamlit run bol_ocr/ui/app.py

The page only uploads, previews and displays. Extraction happens
in the service at BACKEND_URL.
"""

from typing import Optional

import streamlit as st

from bol_ocr.config import load_settings
from bol_ocr.ui.api_client import BOLServiceClient, ServiceError
from bol_ocr.ui.form import (
    FormState,
    MessageKind,
    accept_file,
    apply_response,
    apply_transport_error,
    clear,
)

FIELD_KEYS = {
    "bol_number": "bol_number_input",
    "weight": "weight_input",
    "weight_type": "weight_type_input",
}

MESSAGE_RENDERERS = {
    MessageKind.INFO: st.info,
    MessageKind.SUCCESS: st.success,
    MessageKind.ERROR: st.error,
}


@st.cache_data(ttl=30, show_spinner=False)
def _service_status(backend_url: str) -> Optional[str]:
    # Cached so typing in the fields does not hit the service on every rerun
    try:
        return BOLServiceClient(backend_url).health().get("status", "ok")
    except ServiceError:
        return None


def _session() -> FormState:
    if "form" not in st.session_state:
        st.session_state.form = FormState()
        st.session_state.uploader_key = 0
        st.session_state.last_upload = None
        st.session_state.raw_ocr_text = ""
    return st.session_state.form


def _push_fields(state: FormState) -> None:
    # Widget values live in session_state under their keys
    for attr, key in FIELD_KEYS.items():
        st.session_state[key] = getattr(state, attr)


def _on_clear() -> None:
    state = _session()
    clear(state)
    _push_fields(state)
    st.session_state.raw_ocr_text = ""
    st.session_state.last_upload = None
    # A new key gives a fresh, empty uploader
    st.session_state.uploader_key += 1


def _process(client: BOLServiceClient, state: FormState, uploaded) -> None:
    data = uploaded.getvalue()
    if not accept_file(state, uploaded.name, uploaded.type, data):
        return

    _push_fields(state)
    with st.spinner("Processing image... This may take 10-30 seconds"):
        try:
            payload = client.process_image(uploaded.name, data, uploaded.type)
        except ServiceError as error:
            apply_transport_error(state, error)
        else:
            apply_response(state, payload)
            st.session_state.raw_ocr_text = (payload.get("data") or {}).get("rawOcrText", "")
    _push_fields(state)


st.set_page_config(page_title="BOL OCR Processor", layout="centered")

settings = load_settings()
client = BOLServiceClient(settings.backend_url)
state = _session()

with st.sidebar:
    st.caption(f"Service: {settings.backend_url}")
    status = _service_status(settings.backend_url)
    if status:
        st.success(status)
    else:
        st.error("Service unreachable")

st.title("BOL OCR Processor")
st.write("Drop an image of a Bill of Lading to extract BOL number and weight information")

uploaded = st.file_uploader(
    "Drop your BOL image here",
    key=f"uploader_{st.session_state.uploader_key}",
    help="Supports PNG, JPG, JPEG, GIF, BMP",
)

if uploaded is not None:
    upload_id = (uploaded.name, uploaded.size)
    if upload_id != st.session_state.last_upload:
        st.session_state.last_upload = upload_id
        _process(client, state, uploaded)

if state.preview:
    st.subheader("Uploaded Image:")
    st.image(state.preview, caption="Uploaded BOL")

if state.message:
    MESSAGE_RENDERERS[state.message_kind](state.message)

state.bol_number = st.text_input(
    "BOL Number",
    key=FIELD_KEYS["bol_number"],
    placeholder="BOL number will appear here...",
)

state.weight = st.text_input(
    "Weight",
    key=FIELD_KEYS["weight"],
    placeholder="Weight will appear here...",
)

state.weight_type = st.text_input(
    "Weight Type",
    key=FIELD_KEYS["weight_type"],
    placeholder="Net Weight, Shipping Weight, Gross Weight...",
)

if st.session_state.raw_ocr_text:
    with st.expander("Raw OCR text"):
        st.text(st.session_state.raw_ocr_text)

if state.has_content:
    st.button("Clear All", on_click=_on_clear, use_container_width=True)

st.markdown(
    """
**Tips for best results:**
- Use high-quality, well-lit images
- Ensure text is clearly visible and not blurry
- BOL documents work best when the entire document is visible
- Processing typically takes 10-30 seconds
"""
)
