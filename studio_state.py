"""
Session state and transitions for the image studio page.

Every transition takes a StudioState and returns a new one; nothing here
touches Streamlit. The run_* drivers perform one remote call each and publish
the intermediate loading state through the ``commit`` callback so the page
can render it (and tests can observe it) while the call is outstanding.
"""

import logging
from dataclasses import dataclass, replace
from typing import Optional

from studio_errors import StudioError, ValidationError
from file_utils import ImagePayload, file_to_base64, is_image_type
from image_service import GENERATE_MIME_TYPE, EDIT_MIME_TYPE

logger = logging.getLogger(__name__)

MODE_GENERATE = "generate"
MODE_EDIT = "edit"
MODES = (MODE_GENERATE, MODE_EDIT)

DEFAULT_ASPECT_RATIO = "1:1"


@dataclass(frozen=True)
class StudioState:
    mode: str = MODE_GENERATE
    prompt: str = ""
    edit_prompt: str = ""
    aspect_ratio: str = DEFAULT_ASPECT_RATIO
    # Displayed image, also the source of the next edit
    current_image: Optional[ImagePayload] = None
    is_loading: bool = False
    error: Optional[str] = None

    @property
    def has_image(self) -> bool:
        return self.current_image is not None


def _noop(state):
    pass


def switch_mode(state: StudioState, mode: str) -> StudioState:
    if mode not in MODES:
        raise ValueError(f"Unknown mode: {mode}")
    return replace(state, mode=mode, error=None)


def switch_to_edit(state: StudioState) -> StudioState:
    if not state.has_image:
        return state
    return replace(state, mode=MODE_EDIT)


def dismiss_error(state: StudioState) -> StudioState:
    return replace(state, error=None)


def set_prompt(state: StudioState, prompt: str) -> StudioState:
    return replace(state, prompt=prompt)


def set_edit_prompt(state: StudioState, edit_prompt: str) -> StudioState:
    return replace(state, edit_prompt=edit_prompt)


def set_aspect_ratio(state: StudioState, aspect_ratio: str) -> StudioState:
    return replace(state, aspect_ratio=aspect_ratio)


def ensure_idle(state: StudioState):
    """Raise if a request is already outstanding for this session"""
    if state.is_loading:
        raise ValidationError("Another request is already in progress.")


def validate_generate(state: StudioState):
    ensure_idle(state)
    if not state.prompt:
        raise ValidationError("Please enter a prompt to generate an image.")


def validate_edit(state: StudioState):
    ensure_idle(state)
    if not state.edit_prompt:
        raise ValidationError("Please enter an editing instruction.")
    if not state.has_image:
        raise ValidationError("No image loaded for editing.")


def _reject(state: StudioState, error: ValidationError) -> StudioState:
    logger.warning(f"⚠️ Action rejected: {error}")
    if state.is_loading:
        # The outstanding call owns the error slot
        return state
    return replace(state, error=str(error))


def _fail(state: StudioState, error: StudioError) -> StudioState:
    return replace(state, error=str(error), is_loading=False)


def begin_generate(state: StudioState) -> StudioState:
    return replace(state, error=None, is_loading=True, current_image=None)


def finish_generate(state: StudioState, image_base64: str) -> StudioState:
    return replace(
        state,
        current_image=ImagePayload(base64=image_base64, mime_type=GENERATE_MIME_TYPE),
        is_loading=False,
    )


def begin_edit(state: StudioState) -> StudioState:
    return replace(state, error=None, is_loading=True)


def finish_edit(state: StudioState, image_base64: str) -> StudioState:
    return replace(
        state,
        current_image=ImagePayload(base64=image_base64, mime_type=EDIT_MIME_TYPE),
        is_loading=False,
    )


def run_generate(state: StudioState, service, commit=_noop) -> StudioState:
    try:
        validate_generate(state)
    except ValidationError as e:
        return _reject(state, e)

    logger.info(f"🚀 Generate: {state.prompt!r} ({state.aspect_ratio})")
    state = begin_generate(state)
    commit(state)

    try:
        image_base64 = service.generate_image(state.prompt, state.aspect_ratio)
    except StudioError as e:
        logger.error("❌ GENERATION FAILED")
        return _fail(state, e)

    logger.info("✅ GENERATION SUCCESSFUL")
    return finish_generate(state, image_base64)


def run_edit(state: StudioState, service, commit=_noop) -> StudioState:
    try:
        validate_edit(state)
    except ValidationError as e:
        return _reject(state, e)

    logger.info(f"✏️ Edit: {state.edit_prompt!r} (source: {state.current_image.mime_type})")
    state = begin_edit(state)
    commit(state)

    source = state.current_image
    try:
        image_base64 = service.edit_image(state.edit_prompt, source.base64, source.mime_type)
    except StudioError as e:
        logger.error("❌ EDIT FAILED")
        return _fail(state, e)

    logger.info("✅ EDIT SUCCESSFUL")
    return finish_edit(state, image_base64)


def run_upload(state: StudioState, file, commit=_noop) -> StudioState:
    try:
        ensure_idle(state)
        if not is_image_type(getattr(file, "type", None)):
            raise ValidationError("Please select an image file.")
    except ValidationError as e:
        return _reject(state, e)

    state = replace(state, error=None, is_loading=True)
    commit(state)

    try:
        payload = file_to_base64(file)
    except StudioError as e:
        return _fail(state, e)

    return replace(state, current_image=payload, mode=MODE_EDIT, is_loading=False)
