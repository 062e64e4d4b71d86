"""Message templates shown to the user after an export.

The templates come from the settings so they can be swapped for a
translation without touching the exporters. Only the destination
designation is ever filled in.
"""

from __future__ import annotations

import logging

from pydantic import BaseModel, Field, field_validator

from snapshare.config import check_message_template, settings

_logger = logging.getLogger(__name__)

DEFAULT_EXPORT_FAILED = "{0} export failed"
DEFAULT_EXPORTED_TO = "Exported to {0}"


class Language(BaseModel):
    """Localized message templates used by the export framework."""

    destination_export_failed: str = Field(
        DEFAULT_EXPORT_FAILED,
        description="Shown when an export failed; ``{0}`` is the designation",
    )
    exported_to: str = Field(
        DEFAULT_EXPORTED_TO,
        description="Shown when an export succeeded; ``{0}`` is the designation",
    )

    model_config = {"frozen": True}

    @field_validator("destination_export_failed", "exported_to")
    @classmethod
    def validate_template(cls, v: str) -> str:
        """Ensure a template only uses the ``{0}`` placeholder."""
        return check_message_template(v)

    @classmethod
    def from_settings(cls) -> Language:
        """Build the templates configured in the application settings."""
        return cls(
            destination_export_failed=settings.SNAP_LANG_DESTINATION_EXPORT_FAILED,
            exported_to=settings.SNAP_LANG_EXPORTED_TO,
        )

    def export_failed(self, designation: str) -> str:
        """Format the failure message for ``designation``."""
        return _format(
            self.destination_export_failed, DEFAULT_EXPORT_FAILED, designation
        )

    def export_succeeded(self, designation: str) -> str:
        """Format the success message for ``designation``."""
        return _format(self.exported_to, DEFAULT_EXPORTED_TO, designation)


def _format(template: str, default: str, designation: str) -> str:
    # templates that skipped validation (model_construct) fall back to English
    try:
        return template.format(designation)
    except (KeyError, IndexError, ValueError):
        _logger.warning("Invalid message template %r, using the default", template)
        return default.format(designation)
