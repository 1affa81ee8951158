"""Prompt template compilation for InstantArt.

Generate mode sends the image model a single instruction string composed
from the user's text and the selected configuration.  Aspect-ratio wording
comes first because the model follows shape instructions more reliably when
they lead the prompt.

Template::

    Create a {orientation} image ({ratio id} aspect ratio). {user text}.
    Render details: {style modifier}, Camera: {camera}, Lighting: {lighting},
    Mood: {mood}. Output specs: {width}x{height} resolution, PNG.

(shown wrapped; the real output is a single line with single spaces)

Edit mode does not use this module: the instruction is forwarded to the
gateway exactly as typed, so edits read as direct imperatives ("add a cat").

Usage
-----
::

    compiled = build_prompt("a red fox in snow", GenerationConfig())
"""

from __future__ import annotations

from instantart.core.catalog import get_aspect_ratio, get_style
from instantart.core.models import GenerationConfig

# Fallbacks for empty free-text fields.
FALLBACK_CAMERA = "standard lens"
FALLBACK_LIGHTING = "natural lighting"
FALLBACK_MOOD = "neutral"


def build_prompt(user_text: str, config: GenerationConfig) -> str:
    """Compile the final generation prompt.

    The function is pure: identical inputs always give identical output.
    ``user_text`` is inserted untouched (an empty string yields an empty
    sentence).  Unknown style or aspect-ratio ids fall back to the first
    catalog entry.

    Args:
        user_text: The scene description typed by the user.
        config: Current generation settings.

    Returns:
        The single-line prompt string.
    """
    style = get_style(config.style_id)
    ratio = get_aspect_ratio(config.aspect_ratio)

    camera = config.camera_type or FALLBACK_CAMERA
    lighting = config.lighting or FALLBACK_LIGHTING
    mood = config.mood or FALLBACK_MOOD

    return (
        f"Create a {ratio.orientation} image ({ratio.id} aspect ratio). {user_text}. "
        f"Render details: {style.prompt_modifier}, Camera: {camera}, "
        f"Lighting: {lighting}, Mood: {mood}. "
        f"Output specs: {ratio.width}x{ratio.height} resolution, PNG."
    )
