"""Session initialization for InstantArt.

A session starts from the persisted gallery: the history is loaded once and
the newest entry becomes the current selection.
"""

import logging

from instantart.core.history import GalleryStore

from .models import SessionState

logger = logging.getLogger(__name__)


def initialize_session(store: GalleryStore, state: SessionState | None = None) -> SessionState:
    """Create (or refresh) a session from the persisted gallery.

    Args:
        store: Gallery store to load history from
        state: Existing session to refresh, or None for a new one

    Returns:
        Session with history loaded and the newest image selected
    """
    if state is None:
        logger.info("Creating new SessionState")
        state = SessionState()

    state.history = store.load()
    state.current_image_id = state.history[0].id if state.history else None

    logger.info(f"Session initialized: {state!r}")
    return state
