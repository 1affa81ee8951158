"""Submission boundary: turns a prompt into a new gallery entry.

All validation, configuration and gateway errors are caught here and turned
into ``state.error``.  The gallery is only touched after the gateway has
returned image bytes, and the busy flag is always cleared on the way out.
"""

import asyncio
import logging
import sqlite3
import time

from instantart.core.errors import ConfigurationError, GenerationFailure, ValidationError
from instantart.core.gateway import DEFAULT_MIME_TYPE, GenerationGateway, detect_mime_type
from instantart.core.history import GalleryStore
from instantart.core.models import GeneratedImage, make_data_url, new_image_id
from instantart.core.prompt_builder import build_prompt

from ..models import DEFAULT_FAILURE_MESSAGE, SessionState
from ..validation import validate_submission

logger = logging.getLogger(__name__)


async def submit_prompt(
    state: SessionState,
    prompt: str,
    store: GalleryStore,
    gateway: GenerationGateway,
) -> GeneratedImage | None:
    """Run one generate or edit request for the session.

    In generate mode the prompt goes through :func:`build_prompt`; in edit
    mode the instruction is sent to the gateway unchanged together with the
    uploaded source image.  The blocking gateway call runs in a worker
    thread so the event loop stays responsive.

    Args:
        state: Session state (mode, config, source image, history)
        prompt: Prompt text or edit instruction as typed by the user
        store: Gallery store used to persist the new entry
        gateway: Image generation gateway

    Returns:
        The new gallery entry, or None if the submission was rejected or failed
        (``state.error`` then holds the reason)
    """
    if state.is_generating:
        logger.warning("Submission ignored: a request is already in flight")
        return None

    state.prompt = prompt

    try:
        validate_submission(state, prompt)
    except ValidationError as e:
        state.error = str(e)
        return None

    state.is_generating = True
    state.error = None

    try:
        mode = state.mode
        if mode == "generate":
            final_prompt = build_prompt(prompt, state.config)
            logger.info(f"Sending prompt: {final_prompt}")
            image_data = await asyncio.to_thread(gateway.generate, final_prompt)
        else:
            final_prompt = prompt
            logger.info(f"Sending edit instruction: {final_prompt}")
            image_data = await asyncio.to_thread(
                gateway.edit,
                state.source_image,
                final_prompt,
                state.source_mime_type or DEFAULT_MIME_TYPE,
            )

        image = GeneratedImage(
            id=new_image_id(entry.id for entry in state.history),
            url=make_data_url(image_data, detect_mime_type(image_data)),
            prompt=final_prompt,
            timestamp=time.time(),
            # Edits do not use the template, so no style/ratio is recorded.
            style=state.config.style_id if mode == "generate" else None,
            aspect_ratio=state.config.aspect_ratio if mode == "generate" else None,
            is_edited=mode == "edit",
        )

        state.history = store.add(state.history, image)
        state.current_image_id = image.id
        logger.info(f"Added image {image.id} to gallery ({len(state.history)} total)")
        return image

    except (ConfigurationError, GenerationFailure) as e:
        logger.error(f"Generation failed: {e}", exc_info=True)
        state.error = str(e) or DEFAULT_FAILURE_MESSAGE
        return None

    except (OSError, sqlite3.Error) as e:
        logger.error(f"Could not save gallery: {e}", exc_info=True)
        state.error = "The image was generated but could not be saved to the gallery."
        return None

    except Exception as e:
        logger.error(f"Unexpected error during generation: {e}", exc_info=True)
        state.error = str(e) or DEFAULT_FAILURE_MESSAGE
        return None

    finally:
        state.is_generating = False
