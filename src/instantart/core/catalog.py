"""Style and aspect-ratio presets.

Both catalogs are fixed at import time and exposed as tuples so callers
cannot mutate them.  Lookups never fail: an unknown id resolves to the
first entry of the catalog, so the prompt builder always has something to
render with.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass


@dataclass(frozen=True)
class StylePreset:
    """A selectable rendering style.

    Attributes:
        id: Unique key within the catalog.
        label: Display name.
        prompt_modifier: Fragment injected into the "Render details" part of
            the composed prompt.
        description: Short human description.
    """

    id: str
    label: str
    prompt_modifier: str
    description: str

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class AspectRatioPreset:
    """A selectable output shape.

    Attributes:
        id: Unique key within the catalog (e.g. ``"16:9"``).
        label: Display name.
        width: Target width in pixels.
        height: Target height in pixels.
        orientation: Descriptive phrase used in the prompt ("wide landscape").
    """

    id: str
    label: str
    width: int
    height: int
    orientation: str

    def to_dict(self) -> dict:
        return asdict(self)


STYLE_PRESETS: tuple[StylePreset, ...] = (
    StylePreset(
        id="cinematic",
        label="Cinematic",
        prompt_modifier="cinematic photorealistic, 8k, highly detailed, dramatic lighting, movie still",
        description="Movie-like visual quality with dramatic lighting",
    ),
    StylePreset(
        id="anime",
        label="Anime",
        prompt_modifier=(
            "anime style, studio ghibli inspired, cel shaded, vibrant colors, detailed background"
        ),
        description="High-quality Japanese animation style",
    ),
    StylePreset(
        id="photorealistic",
        label="Photorealistic",
        prompt_modifier=(
            "photorealistic, raw photo, 8k uhd, dslr, soft lighting, high quality, "
            "film grain, Fujifilm XT3"
        ),
        description="Indistinguishable from a real photograph",
    ),
    StylePreset(
        id="digital-art",
        label="Digital Art",
        prompt_modifier=(
            "digital art, trending on artstation, concept art, smooth, sharp focus, illustration"
        ),
        description="Clean, modern digital illustration",
    ),
    StylePreset(
        id="oil-painting",
        label="Oil Painting",
        prompt_modifier=(
            "oil painting, impasto, textured canvas, classical art style, visible brushstrokes"
        ),
        description="Classic textured oil on canvas",
    ),
    StylePreset(
        id="cyberpunk",
        label="Cyberpunk",
        prompt_modifier=(
            "cyberpunk, synthwave, neon lights, futuristic city, high tech, sci-fi, "
            "chromatic aberration"
        ),
        description="Neon, futuristic, high-tech aesthetic",
    ),
)

ASPECT_RATIOS: tuple[AspectRatioPreset, ...] = (
    AspectRatioPreset("1:1", "Square (1:1)", 1024, 1024, "square"),
    AspectRatioPreset("16:9", "Landscape (16:9)", 1920, 1080, "wide landscape"),
    AspectRatioPreset("9:16", "Portrait (9:16)", 1080, 1920, "tall portrait"),
    AspectRatioPreset("4:3", "Standard (4:3)", 1440, 1080, "standard landscape"),
)


def get_style(style_id: str | None) -> StylePreset:
    """Return the style preset with ``style_id``, or the first preset."""
    return next((s for s in STYLE_PRESETS if s.id == style_id), STYLE_PRESETS[0])


def get_aspect_ratio(ratio_id: str | None) -> AspectRatioPreset:
    """Return the aspect-ratio preset with ``ratio_id``, or the first preset."""
    return next((r for r in ASPECT_RATIOS if r.id == ratio_id), ASPECT_RATIOS[0])
