"""Tests for instantart.core.gateway — Gemini gateway with a mocked client."""

from __future__ import annotations

from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import httpx
import pytest
from google.genai import errors as genai_errors
from pydantic import SecretStr

from instantart.core.errors import ConfigurationError, GenerationFailure
from instantart.core.gateway import GeminiGateway, detect_mime_type, extract_image_data


def _response_with(data: bytes | None) -> SimpleNamespace:
    """Build a minimal generate_content response holding one inline image."""
    part = SimpleNamespace(inline_data=SimpleNamespace(data=data, mime_type="image/png"))
    return SimpleNamespace(candidates=[SimpleNamespace(content=SimpleNamespace(parts=[part]))])


@pytest.fixture
def gateway() -> GeminiGateway:
    """Gateway with its SDK client replaced by a mock."""
    gw = GeminiGateway(api_key="test-key", model_id="gemini-test-image")
    gw._client = MagicMock()
    return gw


class TestConstruction:
    """Credential handling."""

    def test_secret_str_is_unwrapped(self):
        with patch("instantart.core.gateway.genai.Client") as MockClient:
            GeminiGateway(api_key=SecretStr("secret"))
        MockClient.assert_called_once_with(api_key="secret")

    def test_missing_key_builds_no_client(self):
        with patch("instantart.core.gateway.genai.Client") as MockClient:
            gw = GeminiGateway(api_key=None)
        MockClient.assert_not_called()
        assert gw._client is None

    def test_from_config(self, test_config):
        with patch("instantart.core.gateway.genai.Client"):
            gw = GeminiGateway.from_config(test_config)
        assert gw.model_id == test_config.model_id


class TestMissingCredential:
    """A missing key fails at call time with ConfigurationError."""

    def test_generate(self):
        with pytest.raises(ConfigurationError):
            GeminiGateway(api_key=None).generate("a cat")

    def test_edit(self, png_bytes):
        with pytest.raises(ConfigurationError):
            GeminiGateway(api_key="").edit(png_bytes, "add a hat")


class TestGenerate:
    """Text-to-image requests."""

    def test_returns_image_bytes(self, gateway, png_bytes):
        gateway._client.models.generate_content.return_value = _response_with(png_bytes)
        assert gateway.generate("a cat") == png_bytes

    def test_sends_prompt_and_model(self, gateway, png_bytes):
        gateway._client.models.generate_content.return_value = _response_with(png_bytes)

        gateway.generate("the full prompt")

        kwargs = gateway._client.models.generate_content.call_args.kwargs
        assert kwargs["model"] == "gemini-test-image"
        assert [part.text for part in kwargs["contents"]] == ["the full prompt"]
        assert kwargs["config"].response_modalities == ["IMAGE"]

    def test_no_image_data(self, gateway):
        gateway._client.models.generate_content.return_value = _response_with(None)
        with pytest.raises(GenerationFailure, match="No image data"):
            gateway.generate("a cat")

    def test_no_candidates(self, gateway):
        gateway._client.models.generate_content.return_value = SimpleNamespace(candidates=None)
        with pytest.raises(GenerationFailure):
            gateway.generate("a cat")

    def test_api_error_keeps_status_code(self, gateway):
        gateway._client.models.generate_content.side_effect = genai_errors.ClientError(
            429,
            {"error": {"code": 429, "message": "Quota exceeded", "status": "RESOURCE_EXHAUSTED"}},
        )
        with pytest.raises(GenerationFailure) as exc_info:
            gateway.generate("a cat")
        assert exc_info.value.status_code == 429

    def test_transport_error(self, gateway):
        gateway._client.models.generate_content.side_effect = httpx.ConnectError("refused")
        with pytest.raises(GenerationFailure, match="Could not reach"):
            gateway.generate("a cat")


class TestEdit:
    """Image edit requests."""

    def test_instruction_sent_verbatim_with_image(self, gateway, png_bytes):
        gateway._client.models.generate_content.return_value = _response_with(b"edited")

        result = gateway.edit(png_bytes, "add a cat", "image/png")

        assert result == b"edited"
        contents = gateway._client.models.generate_content.call_args.kwargs["contents"]
        assert contents[0].inline_data.data == png_bytes
        assert contents[0].inline_data.mime_type == "image/png"
        assert contents[1].text == "add a cat"

    def test_no_image_data(self, gateway, png_bytes):
        gateway._client.models.generate_content.return_value = _response_with(b"")
        with pytest.raises(GenerationFailure, match="No edited image data"):
            gateway.edit(png_bytes, "add a cat")


class TestHelpers:
    """extract_image_data and detect_mime_type."""

    def test_extract_skips_text_parts(self):
        text_part = SimpleNamespace(inline_data=None, text="here you go")
        image_part = SimpleNamespace(inline_data=SimpleNamespace(data=b"img"))
        response = SimpleNamespace(
            candidates=[SimpleNamespace(content=SimpleNamespace(parts=[text_part, image_part]))]
        )
        assert extract_image_data(response) == b"img"

    def test_extract_empty_response(self):
        assert extract_image_data(SimpleNamespace(candidates=[])) is None

    def test_detect_png(self, png_bytes):
        assert detect_mime_type(png_bytes) == "image/png"

    def test_detect_unknown_falls_back(self):
        assert detect_mime_type(b"not an image") == "image/png"
        assert detect_mime_type(b"not an image", default="image/webp") == "image/webp"
