"""Shared pytest fixtures for InstantArt tests."""

import shutil
import tempfile
from collections.abc import Generator
from io import BytesIO
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from PIL import Image

from instantart.core.config import InstantArtConfig
from instantart.core.errors import GenerationFailure
from instantart.core.gateway import GenerationGateway
from instantart.core.history import GalleryStore, InMemoryHistoryRepository
from instantart.core.models import GeneratedImage
from instantart.ui.models import SessionState


def make_png(width: int = 4, height: int = 4, color: str = "red") -> bytes:
    """Return the bytes of a tiny PNG image."""
    buffer = BytesIO()
    Image.new("RGB", (width, height), color).save(buffer, format="PNG")
    return buffer.getvalue()


class StubGateway(GenerationGateway):
    """In-process gateway that records calls and returns a fixed image.

    Set ``failure`` to an exception instance to make every call raise it.
    """

    def __init__(self, image: bytes | None = None) -> None:
        self.image = image if image is not None else make_png()
        self.failure: Exception | None = None
        self.generate_calls: list[str] = []
        self.edit_calls: list[tuple[bytes, str, str]] = []

    def generate(self, prompt: str) -> bytes:
        self.generate_calls.append(prompt)
        if self.failure is not None:
            raise self.failure
        return self.image

    def edit(self, source_image: bytes, instruction: str, mime_type: str = "image/png") -> bytes:
        self.edit_calls.append((source_image, instruction, mime_type))
        if self.failure is not None:
            raise self.failure
        return self.image

    @property
    def call_count(self) -> int:
        return len(self.generate_calls) + len(self.edit_calls)


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files.

    Yields:
        Path to temporary directory

    Cleanup:
        Directory is removed after test completes
    """
    temp_path = Path(tempfile.mkdtemp())
    try:
        yield temp_path
    finally:
        shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def test_config(temp_dir: Path) -> InstantArtConfig:
    """Create a test configuration with a temporary data directory.

    Args:
        temp_dir: Temporary directory from fixture

    Returns:
        InstantArtConfig instance for testing
    """
    return InstantArtConfig(
        _env_file=None,
        api_key="test-key",
        data_dir=temp_dir / "data",
        history_backend="file",
    )


@pytest.fixture
def png_bytes() -> bytes:
    """Bytes of a small valid PNG."""
    return make_png()


@pytest.fixture
def stub_gateway() -> StubGateway:
    """Gateway double returning a small PNG."""
    return StubGateway()


@pytest.fixture
def failing_gateway() -> StubGateway:
    """Gateway double whose calls all fail."""
    gateway = StubGateway()
    gateway.failure = GenerationFailure("No image data returned from Gemini.")
    return gateway


@pytest.fixture
def memory_repository() -> InMemoryHistoryRepository:
    """Empty in-memory snapshot repository."""
    return InMemoryHistoryRepository()


@pytest.fixture
def gallery_store(memory_repository: InMemoryHistoryRepository) -> GalleryStore:
    """Gallery store over an in-memory repository."""
    return GalleryStore(memory_repository, key="test_history")


@pytest.fixture
def session() -> SessionState:
    """Fresh session with default settings."""
    return SessionState()


@pytest.fixture
def sample_images() -> list[GeneratedImage]:
    """Three gallery entries, newest first."""
    return [
        GeneratedImage(
            id="1700000000300",
            url="data:image/png;base64,iVBORw0KGgo=",
            prompt="Create a square image (1:1 aspect ratio). a cat. Render details: ...",
            timestamp=1700000000.3,
            style="cinematic",
            aspect_ratio="1:1",
        ),
        GeneratedImage(
            id="1700000000200",
            url="data:image/png;base64,iVBORw0KGgo=",
            prompt="add a hat",
            timestamp=1700000000.2,
            is_edited=True,
        ),
        GeneratedImage(
            id="1700000000100",
            url="data:image/jpeg;base64,/9j/4AAQ",
            prompt="Create a wide landscape image (16:9 aspect ratio). a dog. Render details: ...",
            timestamp=1700000000.1,
            style="anime",
            aspect_ratio="16:9",
        ),
    ]


@pytest.fixture
def test_client(
    test_config: InstantArtConfig,
    stub_gateway: StubGateway,
    memory_repository: InMemoryHistoryRepository,
) -> Generator[TestClient, None, None]:
    """FastAPI TestClient wired to a stub gateway and in-memory gallery."""
    from instantart.api.main import create_app

    app = create_app(test_config, gateway=stub_gateway, repository=memory_repository)
    with TestClient(app) as client:
        yield client
