"""Tests for the top-level export entry points."""

import asyncio
import logging
from unittest.mock import AsyncMock, Mock, patch

from snapshare.exporters import (
    ImgurDestination,
    WordDestination,
    build_registry,
    export_capture,
)
from snapshare.exporters.availability import DestinationAvailability
from snapshare.exporters.base import CancellationToken, Notification, NotificationType
from snapshare.exporters.registry import DestinationRegistry


class TestBuildRegistry:
    """Test build_registry()."""

    def test_registers_builtin_destinations(self, word_automation):
        """Test that Word and Imgur are registered and initialized."""
        registry = build_registry(
            word_automation=word_automation,
            imgur_client=Mock(),
            availability=DestinationAvailability.of("Word", "Imgur"),
        )

        word = registry.get("Word")
        imgur = registry.get("Imgur")
        assert isinstance(word, WordDestination)
        assert isinstance(imgur, ImgurDestination)
        assert word.text == "Export to Word"
        assert [d.designation for d in registry.get_active_destinations()] == [
            "Word",
            "Imgur",
        ]

    def test_word_skipped_without_automation(self):
        """Test that Word is not registered without an automation object."""
        registry = build_registry(availability=DestinationAvailability.of("Word"))

        assert registry.get("Word") is None
        assert registry.get("Imgur") is not None
        assert registry.get_active_destinations() == []

    def test_probes_when_no_availability(self, word_automation):
        """Test that availability is probed once when not given."""
        with patch(
            "snapshare.exporters.probe_availability",
            return_value=DestinationAvailability.of("Imgur"),
        ) as mock_probe:
            registry = build_registry(word_automation=word_automation)

        mock_probe.assert_called_once()
        assert [d.designation for d in registry.get_active_destinations()] == [
            "Imgur"
        ]

    def test_logs_active_destinations(self, caplog):
        """Test that the active destinations are logged."""
        caplog.set_level(logging.INFO)
        build_registry(availability=DestinationAvailability.of("Imgur"))
        assert "Active export destination(s): Imgur" in caplog.text


class TestExportCapture:
    """Test export_capture()."""

    @staticmethod
    def make_registry(result):
        registry = Mock(spec=DestinationRegistry)
        registry.export = AsyncMock(return_value=result)
        return registry

    def test_success(self, capture, caplog):
        """Test a successful export is returned and logged."""
        caplog.set_level(logging.INFO)
        registry = self.make_registry(Notification.success("Word", "Exported to Word"))

        result = asyncio.run(export_capture(capture, "Word", registry=registry))

        assert result.type is NotificationType.SUCCESS
        assert "Exported 'Quarterly report' to Word" in caplog.text

    def test_failure(self, capture, caplog):
        """Test a failed export is returned and logged as an error."""
        registry = self.make_registry(
            Notification.fail("Word", "Word export failed", "Word is not responding")
        )

        result = asyncio.run(export_capture(capture, "Word", registry=registry))

        assert result.type is NotificationType.FAIL
        assert any(
            r.levelno == logging.ERROR and "Word is not responding" in r.getMessage()
            for r in caplog.records
        )

    def test_cancelled(self, capture, caplog):
        """Test a cancelled export gives None."""
        caplog.set_level(logging.INFO)
        registry = self.make_registry(None)
        token = CancellationToken()

        result = asyncio.run(
            export_capture(capture, "Word", registry=registry, token=token)
        )

        assert result is None
        assert "was cancelled" in caplog.text
        assert registry.export.await_args.args[3] is token

    def test_end_to_end(self, word_automation, saved_capture):
        """Test an export through a real registry to a mock word processor."""
        registry = build_registry(
            word_automation=word_automation,
            availability=DestinationAvailability.of("Word"),
        )

        result = asyncio.run(export_capture(saved_capture, "Word", registry=registry))

        assert result.succeeded
        word_automation.insert_into_new_document.assert_called_once()

    def test_inactive_destination(self, saved_capture):
        """Test that exporting to an unavailable destination fails cleanly."""
        registry = build_registry(availability=DestinationAvailability())

        result = asyncio.run(export_capture(saved_capture, "Imgur", registry=registry))

        assert result.type is NotificationType.FAIL
        assert result.error_text == "Destination Imgur is not available"
