"""Gallery selection, clearing and export handlers."""

import logging
import mimetypes

from instantart.core.history import GalleryStore, select_current
from instantart.core.models import GeneratedImage

from ..models import SessionState

logger = logging.getLogger(__name__)


def select_image(state: SessionState, image_id: str) -> GeneratedImage | None:
    """Make ``image_id`` the current selection.

    Selecting an id that is not in the gallery leaves the session with no
    current image; this is not an error.

    Args:
        state: Session state
        image_id: Id of the gallery entry

    Returns:
        The selected entry, or None
    """
    image = select_current(state.history, image_id)
    state.current_image_id = image.id if image else None
    if image is None:
        logger.info(f"No gallery entry with id {image_id}; selection cleared")
    return image


def clear_history(state: SessionState, store: GalleryStore) -> SessionState:
    """Remove every gallery entry and the persisted snapshot.

    Args:
        state: Session state
        store: Gallery store

    Returns:
        Updated state with an empty gallery and no selection
    """
    state.history = store.clear()
    state.current_image_id = None
    return state


def export_filename(image: GeneratedImage) -> str:
    """Download name for an entry, e.g. ``instantArt-1718000000000.png``."""
    extension = mimetypes.guess_extension(image.mime_type) or ".png"
    return f"instantArt-{image.id}{extension}"


def export_image(image: GeneratedImage) -> tuple[bytes, str, str]:
    """Prepare a gallery entry for download.

    Args:
        image: Gallery entry to export

    Returns:
        Tuple of (image_bytes, mime_type, filename)

    Raises:
        ValueError: If the entry's url is not a base64 data URI
    """
    return image.image_bytes(), image.mime_type, export_filename(image)
