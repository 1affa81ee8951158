"""InstantArt - prompt-templated image generation and editing with a local gallery."""

__version__ = "0.1.0"

from instantart.core.catalog import ASPECT_RATIOS, STYLE_PRESETS
from instantart.core.config import InstantArtConfig, config
from instantart.core.prompt_builder import build_prompt

__all__ = [
    "ASPECT_RATIOS",
    "STYLE_PRESETS",
    "InstantArtConfig",
    "build_prompt",
    "config",
]
