"""Unit tests for mode, configuration and source-image handlers."""

import pytest

from instantart.core.errors import ValidationError
from instantart.ui.handlers.prompt import (
    clear_source_image,
    preview_prompt,
    set_mode,
    set_source_image,
    update_config,
)


class TestSetMode:
    """Tests for set_mode."""

    def test_switch_to_edit(self, session):
        set_mode(session, "edit")
        assert session.mode == "edit"

    def test_unknown_mode(self, session):
        with pytest.raises(ValidationError):
            set_mode(session, "inpaint")
        assert session.mode == "generate"


class TestUpdateConfig:
    """Tests for update_config."""

    def test_single_field(self, session):
        update_config(session, mood="melancholic")
        assert session.config.mood == "melancholic"
        assert session.config.lighting == "soft studio lighting"

    def test_empty_value_kept(self, session):
        """Fallbacks are applied at prompt time, not when editing config."""
        update_config(session, camera_type="")
        assert session.config.camera_type == ""

    def test_unknown_id_stored(self, session):
        update_config(session, style_id="watercolour")
        assert session.config.style_id == "watercolour"

    def test_unknown_field_rejected(self, session):
        with pytest.raises(ValidationError, match="seed"):
            update_config(session, seed="42")


class TestSourceImage:
    """Tests for set_source_image and clear_source_image."""

    def test_upload_switches_to_edit(self, session, png_bytes):
        set_source_image(session, png_bytes)
        assert session.mode == "edit"
        assert session.source_image == png_bytes
        assert session.source_mime_type == "image/png"

    def test_declared_mime_type_wins(self, session, png_bytes):
        set_source_image(session, png_bytes, "image/webp")
        assert session.source_mime_type == "image/webp"

    def test_empty_upload_rejected(self, session):
        with pytest.raises(ValidationError):
            set_source_image(session, b"")
        assert session.mode == "generate"

    def test_clear_keeps_mode(self, session, png_bytes):
        set_source_image(session, png_bytes)
        clear_source_image(session)
        assert session.source_image is None
        assert session.source_mime_type is None
        assert session.mode == "edit"


class TestPreviewPrompt:
    """Tests for preview_prompt."""

    def test_generate_mode_templates(self, session):
        assert preview_prompt(session, "a cat").startswith("Create a square image")

    def test_edit_mode_is_verbatim(self, session):
        session.mode = "edit"
        assert preview_prompt(session, "add a cat") == "add a cat"
