"""Error types shared across InstantArt.

Validation and gateway errors are raised by the core and caught at the
submission boundary (:func:`instantart.ui.handlers.generation.submit_prompt`),
where they become a single user-visible message.  ``PersistenceWarning`` is
never raised; it is emitted through :mod:`warnings` when a corrupt gallery
snapshot is discarded.
"""

from __future__ import annotations


class InstantArtError(Exception):
    """Base class for all InstantArt errors."""


class ConfigurationError(InstantArtError):
    """A required setting (the API credential) is missing."""


class ValidationError(InstantArtError):
    """User-friendly validation error.

    Raised before any gateway call.  The message is intended to be displayed
    directly to the user.
    """


class GenerationFailure(InstantArtError):
    """The generation gateway returned no usable image or the call failed.

    Attributes:
        status_code: HTTP status reported by the upstream service, if any.
        details: Extra diagnostic text from the upstream service, if any.
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        details: str | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.details = details


class PersistenceWarning(UserWarning):
    """The persisted gallery snapshot was unreadable and has been ignored."""
