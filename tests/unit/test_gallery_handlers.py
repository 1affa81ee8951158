"""Unit tests for gallery handler functions."""

import pytest

from instantart.core.models import GeneratedImage, make_data_url
from instantart.ui.handlers.gallery import clear_history, export_filename, export_image, select_image
from instantart.ui.models import SessionState
from instantart.ui.state import initialize_session


@pytest.fixture
def populated_state(sample_images) -> SessionState:
    """Session holding the sample gallery with the newest entry selected."""
    return SessionState(history=list(sample_images), current_image_id=sample_images[0].id)


class TestSelectImage:
    """Tests for select_image."""

    def test_select_existing(self, populated_state, sample_images):
        image = select_image(populated_state, sample_images[2].id)
        assert image == sample_images[2]
        assert populated_state.current_image_id == sample_images[2].id

    def test_select_missing_clears_selection(self, populated_state):
        assert select_image(populated_state, "missing") is None
        assert populated_state.current_image_id is None
        assert populated_state.current_image is None

    def test_select_does_not_persist(self, populated_state, gallery_store, memory_repository, sample_images):
        select_image(populated_state, sample_images[1].id)
        assert "test_history" not in memory_repository


class TestClearHistory:
    """Tests for clear_history."""

    def test_clear(self, populated_state, gallery_store, sample_images):
        gallery_store.persist(sample_images)

        clear_history(populated_state, gallery_store)

        assert populated_state.history == []
        assert populated_state.current_image_id is None
        assert gallery_store.load() == []

    def test_clear_removes_snapshot(self, populated_state, gallery_store, memory_repository, sample_images):
        gallery_store.persist(sample_images)
        clear_history(populated_state, gallery_store)
        assert "test_history" not in memory_repository


class TestExport:
    """Tests for export_image and export_filename."""

    def test_export_png(self, png_bytes):
        image = GeneratedImage(id="1700000000123", url=make_data_url(png_bytes), prompt="p")

        data, mime_type, filename = export_image(image)

        assert data == png_bytes
        assert mime_type == "image/png"
        assert filename == "instantArt-1700000000123.png"

    def test_filename_follows_mime_type(self):
        image = GeneratedImage(id="42", url="data:image/jpeg;base64,/9j/4AAQ", prompt="p")
        assert export_filename(image).startswith("instantArt-42.")
        assert export_filename(image) != "instantArt-42.png"

    def test_non_data_url_rejected(self):
        image = GeneratedImage(id="1", url="https://example.com/x.png", prompt="p")
        with pytest.raises(ValueError):
            export_image(image)


class TestInitializeSession:
    """Tests for initialize_session."""

    def test_empty_gallery(self, gallery_store):
        state = initialize_session(gallery_store)
        assert state.history == []
        assert state.current_image_id is None

    def test_selects_newest(self, gallery_store, sample_images):
        gallery_store.persist(sample_images)

        state = initialize_session(gallery_store)

        assert state.history == sample_images
        assert state.current_image_id == sample_images[0].id

    def test_refreshes_existing_state(self, gallery_store, sample_images):
        gallery_store.persist(sample_images)
        existing = SessionState(mode="edit")

        state = initialize_session(gallery_store, existing)

        assert state is existing
        assert state.mode == "edit"
        assert len(state.history) == 3

    def test_corrupt_snapshot_starts_empty(self, gallery_store, memory_repository):
        memory_repository.persist("test_history", "not json")
        with pytest.warns(UserWarning):
            state = initialize_session(gallery_store)
        assert state.history == []
