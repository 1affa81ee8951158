"""Generation gateway: the remote image model behind InstantArt.

The gateway is the only part of the system that talks to the network.  Each
call is a single request/response carrying its full input; no state is kept
between calls, nothing is streamed, and nothing is retried.

Operations
----------
generate(prompt)
    Text-to-image from an already composed prompt.
edit(source_image, instruction, mime_type)
    Instruction-driven edit of an existing image.  The instruction is sent
    exactly as given.

Both return raw image bytes or raise:

- :class:`~instantart.core.errors.ConfigurationError` when no credential was
  supplied (checked at call time, so the application can still start and
  show its gallery without a key)
- :class:`~instantart.core.errors.GenerationFailure` when the service fails
  or answers without image data

Usage
-----
::

    gateway = GeminiGateway(api_key=config.api_key, model_id=config.model_id)
    png_bytes = gateway.generate("Create a square image (1:1 aspect ratio). ...")
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from io import BytesIO

import httpx
from google import genai
from google.genai import errors as genai_errors
from google.genai import types
from PIL import Image, UnidentifiedImageError
from pydantic import SecretStr

from instantart.core.config import InstantArtConfig
from instantart.core.errors import ConfigurationError, GenerationFailure

logger = logging.getLogger(__name__)

DEFAULT_MIME_TYPE = "image/png"


class GenerationGateway(ABC):
    """Abstract image generation/editing service."""

    @abstractmethod
    def generate(self, prompt: str) -> bytes:
        """Generate an image from a fully composed prompt."""

    @abstractmethod
    def edit(self, source_image: bytes, instruction: str, mime_type: str = DEFAULT_MIME_TYPE) -> bytes:
        """Edit ``source_image`` according to ``instruction``."""


class GeminiGateway(GenerationGateway):
    """Gateway backed by a Gemini image model through the ``google-genai`` SDK.

    Attributes:
        model_id: Gemini model used for both operations.
    """

    def __init__(
        self,
        api_key: SecretStr | str | None,
        model_id: str = "gemini-2.5-flash-image",
    ) -> None:
        """Create the gateway.

        No network traffic happens here.  A missing key is accepted and
        reported when the first call is made.

        Args:
            api_key: Gemini API key.
            model_id: Gemini image model identifier.
        """
        if isinstance(api_key, SecretStr):
            api_key = api_key.get_secret_value()
        self.model_id = model_id
        self._client: genai.Client | None = genai.Client(api_key=api_key) if api_key else None

    @classmethod
    def from_config(cls, config: InstantArtConfig) -> GeminiGateway:
        return cls(api_key=config.api_key, model_id=config.model_id)

    def generate(self, prompt: str) -> bytes:
        contents = [types.Part.from_text(text=prompt)]
        return self._request(contents, "No image data returned from Gemini.")

    def edit(self, source_image: bytes, instruction: str, mime_type: str = DEFAULT_MIME_TYPE) -> bytes:
        contents = [
            types.Part.from_bytes(data=source_image, mime_type=mime_type),
            types.Part.from_text(text=instruction),
        ]
        return self._request(contents, "No edited image data returned from Gemini.")

    def _request(self, contents: list, empty_message: str) -> bytes:
        if self._client is None:
            raise ConfigurationError("API key is missing")

        try:
            response = self._client.models.generate_content(
                model=self.model_id,
                contents=contents,
                config=types.GenerateContentConfig(response_modalities=["IMAGE"]),
            )
        except genai_errors.APIError as e:
            logger.error(f"Gemini request failed ({e.code}): {e.message}")
            raise GenerationFailure(
                e.message or "Gemini request failed",
                status_code=e.code,
                details=e.status,
            ) from e
        except httpx.HTTPError as e:
            logger.error(f"Gemini transport error: {e}")
            raise GenerationFailure("Could not reach the image service", details=str(e)) from e

        image_data = extract_image_data(response)
        if image_data is None:
            raise GenerationFailure(empty_message)
        return image_data


def extract_image_data(response) -> bytes | None:
    """Return the first inline image payload of a ``generate_content`` response."""
    candidates = getattr(response, "candidates", None) or []
    if not candidates:
        return None

    content = getattr(candidates[0], "content", None)
    for part in getattr(content, "parts", None) or []:
        inline_data = getattr(part, "inline_data", None)
        if inline_data is not None and inline_data.data:
            return inline_data.data
    return None


def detect_mime_type(data: bytes, default: str = DEFAULT_MIME_TYPE) -> str:
    """Guess the mime type of image bytes from their header.

    Only the header is inspected (``Image.open`` is lazy); pixel data is not
    decoded.  Unrecognised data falls back to ``default``.
    """
    try:
        with Image.open(BytesIO(data)) as image:
            image_format = image.format
    except (UnidentifiedImageError, OSError):
        return default
    if image_format is None:
        return default
    return Image.MIME.get(image_format, default)
