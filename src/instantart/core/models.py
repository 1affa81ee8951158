"""Data models for generation settings and gallery entries."""

from __future__ import annotations

import base64
import time
from collections.abc import Iterable
from dataclasses import asdict, dataclass, field
from typing import Literal

AppMode = Literal["generate", "edit"]

# Default free-text settings for a fresh session.
DEFAULT_ASPECT_RATIO = "1:1"
DEFAULT_STYLE_ID = "cinematic"
DEFAULT_CAMERA_TYPE = "50mm prime, f/1.8"
DEFAULT_LIGHTING = "soft studio lighting"
DEFAULT_MOOD = "cinematic and dramatic"


@dataclass
class GenerationConfig:
    """User-selected settings for the prompt template.

    Every field can be edited independently.  Empty free-text fields are kept
    as-is here; the prompt builder applies its own fallbacks when composing.
    """

    aspect_ratio: str = DEFAULT_ASPECT_RATIO
    style_id: str = DEFAULT_STYLE_ID
    camera_type: str = DEFAULT_CAMERA_TYPE
    lighting: str = DEFAULT_LIGHTING
    mood: str = DEFAULT_MOOD

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class GeneratedImage:
    """A single gallery entry.

    Attributes:
        id: Unique identifier (millisecond timestamp string).
        url: ``data:`` URI holding the image bytes.
        prompt: Exact text sent to the gateway.
        timestamp: Creation time in epoch seconds.
        style: Style id used, or ``None`` for edited images.
        aspect_ratio: Aspect-ratio id used, or ``None`` for edited images.
        is_edited: ``True`` when produced in edit mode.
    """

    id: str
    url: str
    prompt: str
    timestamp: float = field(default_factory=time.time)
    style: str | None = None
    aspect_ratio: str | None = None
    is_edited: bool = False

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> GeneratedImage:
        """Rebuild an entry from its serialised form.

        Raises:
            KeyError: If a required field is missing.
            TypeError, ValueError: If a field has the wrong type.
        """
        image_id = data["id"]
        url = data["url"]
        prompt = data["prompt"]
        if not isinstance(image_id, str) or not isinstance(url, str) or not isinstance(prompt, str):
            raise TypeError("id, url and prompt must be strings")

        style = data.get("style")
        aspect_ratio = data.get("aspect_ratio")
        is_edited = data.get("is_edited", False)
        if style is not None and not isinstance(style, str):
            raise TypeError("style must be a string or null")
        if aspect_ratio is not None and not isinstance(aspect_ratio, str):
            raise TypeError("aspect_ratio must be a string or null")
        if not isinstance(is_edited, bool):
            raise TypeError("is_edited must be a boolean")

        return cls(
            id=image_id,
            url=url,
            prompt=prompt,
            timestamp=float(data["timestamp"]),
            style=style,
            aspect_ratio=aspect_ratio,
            is_edited=is_edited,
        )

    @property
    def mime_type(self) -> str:
        """Mime type declared by the data URI (``image/png`` if not a data URI)."""
        if self.url.startswith("data:") and ";" in self.url:
            return self.url[5 : self.url.index(";")]
        return "image/png"

    def image_bytes(self) -> bytes:
        """Decode the payload of the data URI.

        Raises:
            ValueError: If ``url`` is not a base64 data URI.
        """
        header, sep, payload = self.url.partition(",")
        if not sep or not header.startswith("data:") or not header.endswith(";base64"):
            raise ValueError(f"Image {self.id} is not stored as a base64 data URI")
        return base64.b64decode(payload)


def make_data_url(data: bytes, mime_type: str = "image/png") -> str:
    """Wrap raw image bytes in a base64 ``data:`` URI."""
    return f"data:{mime_type};base64,{base64.b64encode(data).decode('ascii')}"


def new_image_id(existing_ids: Iterable[str] = ()) -> str:
    """Return a millisecond-timestamp id not present in ``existing_ids``.

    Two submissions in the same millisecond would collide, so the candidate
    is bumped until it is free.
    """
    taken = set(existing_ids)
    candidate = time.time_ns() // 1_000_000
    while str(candidate) in taken:
        candidate += 1
    return str(candidate)
