"""Pydantic request models for the InstantArt API.

Models
------
SubmitRequest
    Payload for ``POST /api/generate`` — the prompt or edit instruction.
CompileRequest
    Payload for ``POST /api/prompt/compile`` — preview text, with optional
    config overrides.
ConfigUpdateRequest
    Payload for ``PUT /api/session/config`` — any subset of the
    GenerationConfig fields.
ModeRequest
    Payload for ``PUT /api/session/mode``.
SourceImageRequest
    Payload for ``POST /api/session/source-image`` — base64 image bytes.
RelayGenerateRequest / RelayEditRequest
    Payloads for the hosted relay routes under ``/api/relay``.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field


class SubmitRequest(BaseModel):
    """Request body for ``POST /api/generate``.

    Attributes:
        prompt: Scene description (generate mode) or edit instruction (edit
            mode).  Emptiness is checked by the session, not here, so that
            an empty prompt becomes a user-visible message rather than a 422.
    """

    prompt: str = Field(
        default="",
        description="Prompt text (generate mode) or raw edit instruction (edit mode).",
    )


class ConfigUpdateRequest(BaseModel):
    """Request body for ``PUT /api/session/config``.

    Every field is optional; only the fields present in the payload are
    changed.  Empty strings are accepted and stored as-is.
    """

    aspect_ratio: str | None = Field(default=None, description="Aspect ratio id (e.g. '16:9').")
    style_id: str | None = Field(default=None, description="Style preset id (e.g. 'anime').")
    camera_type: str | None = Field(default=None, description="Free-text camera description.")
    lighting: str | None = Field(default=None, description="Free-text lighting description.")
    mood: str | None = Field(default=None, description="Free-text mood description.")


class CompileRequest(ConfigUpdateRequest):
    """Request body for ``POST /api/prompt/compile``.

    Config fields override the session's current settings for this preview
    only; the session itself is not modified.
    """

    prompt: str = Field(default="", description="Prompt text to compile.")


class ModeRequest(BaseModel):
    """Request body for ``PUT /api/session/mode``."""

    mode: Literal["generate", "edit"] = Field(..., description="'generate' or 'edit'.")


class SourceImageRequest(BaseModel):
    """Request body for ``POST /api/session/source-image``.

    Attributes:
        image_base64: Base64 image bytes.  A ``data:image/...;base64,``
            prefix is accepted and stripped.
        mime_type: Optional mime type; sniffed from the bytes when omitted.
    """

    image_base64: str = Field(..., min_length=1, description="Base64-encoded image bytes.")
    mime_type: str | None = Field(default=None, description="Mime type of the image.")


class RelayGenerateRequest(BaseModel):
    """Request body for ``POST /api/relay/generate``."""

    prompt: str = Field(default="", description="Fully composed prompt.")


class RelayEditRequest(BaseModel):
    """Request body for ``POST /api/relay/edit``."""

    prompt: str = Field(default="", description="Raw edit instruction.")
    image_base64: str = Field(default="", description="Base64-encoded source image.")
    mime_type: str = Field(default="image/png", description="Mime type of the source image.")
