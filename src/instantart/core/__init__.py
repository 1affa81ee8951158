"""Core functionality for InstantArt.

- **catalog**: Style and aspect-ratio presets with fallback lookups
- **prompt_builder**: The generate-mode prompt template
- **models**: GenerationConfig and GeneratedImage data models
- **history**: Gallery store and pluggable snapshot repositories
- **gateway**: Gemini-backed generation/edit gateway
- **config**: InstantArtConfig (Pydantic Settings, INSTANTART_ prefix)
- **errors**: Error and warning types

Usage Example
-------------
    from instantart.core import GalleryStore, GeminiGateway, build_prompt, config
    from instantart.core.history import create_history_repository
    from instantart.core.models import GenerationConfig

    prompt = build_prompt("a lighthouse at dusk", GenerationConfig(style_id="oil-painting"))
    gateway = GeminiGateway.from_config(config)
    image_bytes = gateway.generate(prompt)
"""

from instantart.core.catalog import ASPECT_RATIOS, STYLE_PRESETS, get_aspect_ratio, get_style
from instantart.core.config import InstantArtConfig, config
from instantart.core.errors import (
    ConfigurationError,
    GenerationFailure,
    InstantArtError,
    PersistenceWarning,
    ValidationError,
)
from instantart.core.gateway import GeminiGateway, GenerationGateway
from instantart.core.history import GalleryStore, HistoryRepository
from instantart.core.models import GeneratedImage, GenerationConfig
from instantart.core.prompt_builder import build_prompt

__all__ = [
    "ASPECT_RATIOS",
    "STYLE_PRESETS",
    "ConfigurationError",
    "GalleryStore",
    "GeminiGateway",
    "GeneratedImage",
    "GenerationConfig",
    "GenerationFailure",
    "GenerationGateway",
    "HistoryRepository",
    "InstantArtConfig",
    "InstantArtError",
    "PersistenceWarning",
    "ValidationError",
    "build_prompt",
    "config",
    "get_aspect_ratio",
    "get_style",
]
