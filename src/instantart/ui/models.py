"""Session state for the InstantArt front end."""

import logging
from dataclasses import dataclass, field

from instantart.core.history import select_current
from instantart.core.models import AppMode, GeneratedImage, GenerationConfig

logger = logging.getLogger(__name__)

APP_MODES: tuple[str, ...] = ("generate", "edit")

DEFAULT_FAILURE_MESSAGE = "Failed to generate image. Please try again."


@dataclass
class SessionState:
    """Everything the front end needs to render one user session.

    Attributes
    ----------
    prompt : str
        Last submitted prompt or edit instruction
    mode : AppMode
        "generate" (templated prompt) or "edit" (raw instruction + source image)
    config : GenerationConfig
        Style, aspect ratio and free-text settings
    history : list[GeneratedImage]
        Gallery, newest first
    current_image_id : str | None
        Id of the selected gallery entry
    source_image : bytes | None
        Uploaded image used in edit mode
    source_mime_type : str | None
        Mime type of ``source_image``
    is_generating : bool
        True while a gateway call is outstanding; gates new submissions
    error : str | None
        User-visible message from the last failed submission
    """

    prompt: str = ""
    mode: AppMode = "generate"
    config: GenerationConfig = field(default_factory=GenerationConfig)
    history: list[GeneratedImage] = field(default_factory=list)
    current_image_id: str | None = None
    source_image: bytes | None = None
    source_mime_type: str | None = None
    is_generating: bool = False
    error: str | None = None

    @property
    def current_image(self) -> GeneratedImage | None:
        """The selected gallery entry, or None."""
        return select_current(self.history, self.current_image_id)

    def __repr__(self) -> str:
        """String representation for debugging."""
        return (
            f"SessionState(mode={self.mode}, images={len(self.history)}, "
            f"current={self.current_image_id}, generating={self.is_generating})"
        )
