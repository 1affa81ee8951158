"""Validation of user submissions before any gateway call."""

import logging

from instantart.core.errors import ValidationError

from .models import SessionState

logger = logging.getLogger(__name__)


def validate_prompt_content(prompt: str) -> None:
    """Ensure the prompt has non-whitespace content.

    Raises:
        ValidationError: If the prompt is empty
    """
    if not prompt or not prompt.strip():
        raise ValidationError("Please enter a prompt.")


def validate_submission(state: SessionState, prompt: str) -> None:
    """Validate a submission for the session's current mode.

    Args:
        state: Session state (mode and source image are checked)
        prompt: Prompt text or edit instruction

    Raises:
        ValidationError: If the prompt is empty, or edit mode has no source image
    """
    validate_prompt_content(prompt)

    if state.mode == "edit" and not state.source_image:
        raise ValidationError("Please upload an image to edit.")
