"""Handlers for mode, configuration and source-image changes."""

import logging
from dataclasses import fields

from instantart.core.errors import ValidationError
from instantart.core.gateway import detect_mime_type
from instantart.core.prompt_builder import build_prompt

from ..models import APP_MODES, SessionState

logger = logging.getLogger(__name__)


def set_mode(state: SessionState, mode: str) -> SessionState:
    """Switch between "generate" and "edit".

    Raises:
        ValidationError: If ``mode`` is not a known mode
    """
    if mode not in APP_MODES:
        raise ValidationError(f"Unknown mode: {mode}")
    state.mode = mode
    return state


def update_config(state: SessionState, **changes: str) -> SessionState:
    """Update one or more GenerationConfig fields.

    Values are stored as given, including empty strings; fallbacks are
    applied only when the prompt is composed.  Unknown ids are stored too
    and resolve to the first catalog entry at composition time.

    Raises:
        ValidationError: If a field name is not part of GenerationConfig
    """
    known = {f.name for f in fields(state.config)}
    unknown = sorted(set(changes) - known)
    if unknown:
        raise ValidationError(f"Unknown setting(s): {', '.join(unknown)}")

    for name, value in changes.items():
        setattr(state.config, name, value)

    logger.debug(f"Config updated: {state.config}")
    return state


def set_source_image(state: SessionState, data: bytes, mime_type: str | None = None) -> SessionState:
    """Attach an uploaded source image and switch to edit mode.

    Args:
        state: Session state
        data: Raw image bytes
        mime_type: Declared mime type; sniffed from the bytes when omitted

    Raises:
        ValidationError: If ``data`` is empty
    """
    if not data:
        raise ValidationError("Uploaded image is empty.")

    state.source_image = data
    state.source_mime_type = mime_type or detect_mime_type(data)
    state.mode = "edit"
    logger.info(f"Source image attached ({len(data)} bytes, {state.source_mime_type})")
    return state


def clear_source_image(state: SessionState) -> SessionState:
    """Drop the uploaded source image (mode is left unchanged)."""
    state.source_image = None
    state.source_mime_type = None
    return state


def preview_prompt(state: SessionState, prompt: str) -> str:
    """Return the text that would be sent for ``prompt`` in the current mode."""
    if state.mode == "edit":
        return prompt
    return build_prompt(prompt, state.config)
