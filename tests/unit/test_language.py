"""Unit tests for the export message templates."""

import pytest
from pydantic import ValidationError

from snapshare.language import Language


class TestLanguage:
    """Test the Language model."""

    def test_defaults(self):
        """Test the English default messages."""
        language = Language()
        assert language.export_failed("Word") == "Word export failed"
        assert language.export_succeeded("Word") == "Exported to Word"

    @pytest.mark.parametrize(
        "template", ["{designation} failed", "{1} failed", "{0 failed"]
    )
    def test_invalid_template_rejected(self, template):
        """Test that a template not fillable with one designation is rejected."""
        with pytest.raises(ValidationError, match="Invalid message template"):
            Language(destination_export_failed=template)
        with pytest.raises(ValidationError, match="Invalid message template"):
            Language(exported_to=template)

    def test_template_without_placeholder(self):
        """Test that a template may leave out the designation."""
        assert Language(exported_to="Done").export_succeeded("Word") == "Done"

    def test_unvalidated_template_falls_back(self, caplog):
        """Test that a broken template that skipped validation gives the default."""
        language = Language.model_construct(
            destination_export_failed="{designation} failed",
            exported_to="{designation} done",
        )

        assert language.export_failed("Word") == "Word export failed"
        assert language.export_succeeded("Word") == "Exported to Word"
        assert "Invalid message template" in caplog.text
