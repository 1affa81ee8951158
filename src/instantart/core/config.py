"""Configuration management for InstantArt.

This module provides centralized configuration management using Pydantic Settings.
All configuration is loaded from environment variables with the INSTANTART_ prefix,
allowing easy customization without code changes.

Environment Variable Loading
-----------------------------
Configuration values are loaded in the following priority order:
1. Environment variables (INSTANTART_* prefix)
2. .env file in the project root
3. Default values defined in InstantArtConfig

Example .env file:
    INSTANTART_API_KEY=your-gemini-key
    INSTANTART_MODEL_ID=gemini-2.5-flash-image
    INSTANTART_HISTORY_BACKEND=sqlite
    INSTANTART_DATA_DIR=data

Global Configuration Instance
------------------------------
A global `config` instance is created automatically at module import time.
The credential it holds is handed to the generation gateway explicitly at
construction; no other module reads it from the environment.

Usage Example
-------------
    from instantart.core.config import config

    print(config.model_id)
    print(config.data_dir)

    # The API key is a SecretStr and is never printed in full
    print(config.api_key)  # SecretStr('**********')
"""

from pathlib import Path
from typing import Literal

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

# Front-end assets ship inside the package next to this module's parent.
_PACKAGE_DIR = Path(__file__).resolve().parent.parent


class InstantArtConfig(BaseSettings):
    """Main configuration for InstantArt.

    Attributes
    ----------
    Gateway Settings:
        api_key : SecretStr | None
            Credential for the Gemini API.  May be absent at startup; the
            gateway reports a ConfigurationError at the first call instead.
        model_id : str
            Gemini image model used for both generation and editing

    History Settings:
        history_backend : Literal["file", "sqlite", "memory"]
            Storage medium for the gallery snapshot
        history_key : str
            Name of the persisted snapshot
        data_dir : Path
            Directory holding the snapshot file or database

    Paths:
        static_dir : Path
            Static front-end assets (JS)
        templates_dir : Path
            Directory containing index.html

    Server Settings:
        server_host : str
            Bind address for uvicorn
        server_port : int
            Port for uvicorn (1024-65535)
        log_level : str
            Root logging level used by the CLI entry point

    Examples
    --------
        >>> custom_config = InstantArtConfig(
        ...     api_key="test-key",
        ...     history_backend="memory",
        ... )
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="INSTANTART_",
        case_sensitive=False,
    )

    # Gateway settings
    api_key: SecretStr | None = Field(
        default=None,
        description="Gemini API key (required for generation and editing)",
    )
    model_id: str = Field(
        default="gemini-2.5-flash-image",
        description="Gemini image model identifier",
    )

    # History settings
    history_backend: Literal["file", "sqlite", "memory"] = Field(
        default="file",
        description="Where the gallery snapshot is stored",
    )
    history_key: str = Field(
        default="instantArt_history",
        description="Name of the persisted gallery snapshot",
        min_length=1,
    )
    data_dir: Path = Field(
        default=Path("data"),
        description="Directory for the gallery snapshot",
    )

    # Paths
    static_dir: Path = Field(
        default=_PACKAGE_DIR / "static",
        description="Directory of static front-end assets",
    )
    templates_dir: Path = Field(
        default=_PACKAGE_DIR / "templates",
        description="Directory containing index.html",
    )

    # Server settings
    server_host: str = Field(
        default="0.0.0.0",
        description="Server bind address (0.0.0.0 for local network)",
    )
    server_port: int = Field(
        default=7860,
        description="Server port",
        ge=1024,
        le=65535,
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Logging level for the application",
    )

    def __init__(self, **kwargs):
        """Initialize configuration and create the data directory.

        Args:
            **kwargs: Configuration overrides (typically from environment variables)
        """
        super().__init__(**kwargs)

        self.data_dir.mkdir(parents=True, exist_ok=True)

    @property
    def has_api_key(self) -> bool:
        """Whether a non-empty credential is configured."""
        return self.api_key is not None and bool(self.api_key.get_secret_value())


# Global configuration instance
# Loads values from environment variables (INSTANTART_* prefix) and .env file.
config = InstantArtConfig()
