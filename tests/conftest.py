"""Shared pytest fixtures for the snapshare test suite."""

from unittest.mock import Mock

import pytest
from PIL import Image

from snapshare.capture import Capture
from snapshare.config import settings
from snapshare.exporters.availability import DestinationAvailability
from snapshare.exporters.base import ExportContext
from snapshare.language import Language


@pytest.fixture(autouse=True)
def isolated_temp_path(tmp_path, monkeypatch):
    """Write temporary capture files under the test's tmp_path."""
    temp_dir = tmp_path / "snapshare-tmp"
    monkeypatch.setattr(settings, "SNAP_TEMP_PATH", temp_dir)
    return temp_dir


@pytest.fixture
def image():
    """A small in-memory RGBA image."""
    return Image.new("RGBA", (16, 12), (255, 0, 0, 128))


@pytest.fixture
def capture(image):
    """A capture that was never saved to disk."""
    return Capture(image=image, title="Quarterly report")


@pytest.fixture
def saved_capture(image, tmp_path):
    """An unmodified capture backed by a PNG file."""
    path = tmp_path / "saved.png"
    image.save(path)
    return Capture(image=image, title="Saved capture", filename=path)


@pytest.fixture
def export_context():
    """A fresh export context with its own presentation context."""
    return ExportContext()


@pytest.fixture
def language():
    """The default English message templates."""
    return Language()


@pytest.fixture
def word_availability():
    """Availability with only the Word destination active."""
    return DestinationAvailability.of("Word")


@pytest.fixture
def word_automation():
    """Mock word processor automation with three open documents."""
    automation = Mock()
    automation.get_documents.return_value = ["Report", "analysis", "Budget"]
    automation.insert_into_existing_document.return_value = None
    automation.insert_into_new_document.return_value = None
    return automation
