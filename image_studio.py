import streamlit as st
import logging

from studio_errors import MissingApiKeyError
from image_service import ImageServiceClient, ASPECT_RATIOS
from studio_state import (
    StudioState,
    MODE_GENERATE,
    MODE_EDIT,
    switch_mode,
    switch_to_edit,
    dismiss_error,
    set_prompt,
    set_edit_prompt,
    set_aspect_ratio,
    run_generate,
    run_edit,
    run_upload,
)

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def commit(state):
    st.session_state.studio = state


def on_upload():
    uploaded = st.session_state.get("upload")
    if uploaded is None:
        return
    logger.info(f"📂 Upload selected: {uploaded.name} ({uploaded.type})")
    commit(run_upload(st.session_state.studio, uploaded, commit))


# --- Streamlit UI ---
st.set_page_config(page_title="AI Image Studio", layout="wide")

if 'studio' not in st.session_state:
    st.session_state.studio = StudioState()

if 'service' not in st.session_state:
    try:
        st.session_state.service = ImageServiceClient()
    except MissingApiKeyError as e:
        st.error(f"❌ {e}")
        st.stop()

studio = st.session_state.studio
service = st.session_state.service

st.title("✨ AI Image Studio")
st.caption("Generate and edit images with the power of AI.")

controls_col, image_col = st.columns([1, 2])

with controls_col:
    tab_generate, tab_edit = st.columns(2)
    with tab_generate:
        if st.button("✨ Generate", key="mode_generate", use_container_width=True,
                     type="primary" if studio.mode == MODE_GENERATE else "secondary"):
            commit(switch_mode(studio, MODE_GENERATE))
            st.rerun()
    with tab_edit:
        if st.button("✏️ Edit", key="mode_edit", use_container_width=True,
                     type="primary" if studio.mode == MODE_EDIT else "secondary"):
            commit(switch_mode(studio, MODE_EDIT))
            st.rerun()

    if studio.error:
        err_col, close_col = st.columns([0.85, 0.15])
        with err_col:
            st.error(studio.error)
        with close_col:
            if st.button("✖", key="dismiss_error", help="Dismiss"):
                commit(dismiss_error(studio))
                st.rerun()

    if studio.mode == MODE_GENERATE:
        prompt = st.text_area(
            "Prompt",
            value=studio.prompt,
            height=120,
            placeholder="e.g., A majestic lion wearing a crown, studio lighting",
            key="prompt_input"
        )

        ratio_labels = list(ASPECT_RATIOS.keys())
        current_label = next(
            (label for label, ratio in ASPECT_RATIOS.items() if ratio == studio.aspect_ratio),
            ratio_labels[0]
        )
        aspect_label = st.selectbox(
            "Aspect Ratio",
            options=ratio_labels,
            index=ratio_labels.index(current_label),
            key="aspect_ratio_input"
        )

        studio = set_aspect_ratio(set_prompt(studio, prompt), ASPECT_RATIOS[aspect_label])
        commit(studio)

        if st.button("✨ Generate Image", key="generate", type="primary",
                     disabled=studio.is_loading, use_container_width=True):
            with st.spinner("Generating..."):
                commit(run_generate(studio, service, commit))
            st.rerun()

    else:
        st.file_uploader(
            "Upload New Image" if studio.has_image else "Upload Image",
            key="upload",
            on_change=on_upload,
            disabled=studio.is_loading
        )

        if studio.has_image:
            edit_prompt = st.text_area(
                "Editing Instruction",
                value=studio.edit_prompt,
                height=120,
                placeholder="e.g., Add a futuristic city in the background",
                key="edit_prompt_input"
            )
            studio = set_edit_prompt(studio, edit_prompt)
            commit(studio)

            if st.button("✏️ Apply Edit", key="apply_edit", type="primary",
                         disabled=studio.is_loading, use_container_width=True):
                with st.spinner("Applying Edit..."):
                    commit(run_edit(studio, service, commit))
                st.rerun()

with image_col:
    if studio.is_loading:
        st.info("⏳ AI is thinking...")
    elif studio.current_image is not None:
        payload = studio.current_image
        st.image(payload.raw_bytes, caption=studio.prompt or None)

        dl_col, edit_col = st.columns(2)
        with dl_col:
            st.download_button(
                label="📥 Download",
                data=payload.raw_bytes,
                file_name=payload.download_name,
                mime=payload.mime_type,
                key="download",
                use_container_width=True
            )
        with edit_col:
            if st.button("✏️ Edit this Image", key="switch_to_edit", use_container_width=True):
                commit(switch_to_edit(studio))
                st.rerun()
    else:
        st.info("🖼️ Your generated image will appear here")
