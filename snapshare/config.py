"""
Centralized environment variable management for snapshare.

This module uses `pydantic-settings` to define, validate, and access
application settings from environment variables and .env files.
It provides a single source of truth for configuration, ensuring
type safety and simplifying access throughout the application.
"""

import logging
import tempfile
from pathlib import Path
from typing import Literal

from pydantic import (
    AnyHttpUrl,
    Field,
    FilePath,
    ValidationError,
    field_validator,
)
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

ImageFormat = Literal["png", "gif", "jpg", "jpeg", "tiff", "bmp"]


def check_message_template(template: str) -> str:
    """
    Check that a message template can be filled in with a designation.

    Parameters
    ----------
    template
        A :py:meth:`str.format` template whose only placeholder is ``{0}``

    Returns
    -------
    str
        The unchanged template

    Raises
    ------
    ValueError
        If formatting the template with a single argument fails
    """
    try:
        template.format("X")
    except (KeyError, IndexError, ValueError) as e:
        msg = f"Invalid message template {template!r}: {e!r}"
        raise ValueError(msg) from e
    return template


class Settings(BaseSettings):
    """
    Manage application settings loaded from environment variables and `.env` files.

    Every field has a default, so an unconfigured installation starts with
    only the destinations that need no credentials (the probes in
    :py:mod:`snapshare.exporters.availability` decide which ones are active).
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",  # Ignore extra environment variables not defined here
    )

    SNAP_TEMP_PATH: Path = Field(
        Path(tempfile.gettempdir()),
        description=(
            "Directory in which temporary image files are written when a "
            "capture has to be materialized before it can be exported. "
            "Defaults to the system temporary directory."
        ),
    )
    SNAP_OUTPUT_FORMAT: ImageFormat = Field(
        "png",
        description="Image format used when a capture is materialized to disk.",
    )
    SNAP_JPEG_QUALITY: int = Field(
        80,
        ge=1,
        le=100,
        description="Quality (1-100) used when materializing JPEG files.",
    )
    SNAP_REDUCE_COLORS: bool = Field(
        False,  # noqa: FBT003
        description="Quantize materialized images down to 256 colours.",
    )
    SNAP_FILENAME_PATTERN: str = Field(
        "{title}_{taken:%Y-%m-%d_%H-%M-%S}",
        description=(
            "Python format string used to name temporary and uploaded files. "
            "Available fields are ``title`` and ``taken`` (a datetime)."
        ),
    )
    SNAP_EXPORT_RETRIES: int = Field(
        1,
        ge=0,
        description=(
            "How many times a failed transfer to an external application is "
            "retried before the export is reported as failed."
        ),
    )
    SNAP_WORD_EXECUTABLE: FilePath | None = Field(
        None,
        description=(
            "Explicit path to the word processor executable. If not set, the "
            "executable is looked up on the PATH at startup."
        ),
    )
    SNAP_WORD_TEMPLATE: str | None = Field(
        None,
        description="Template used when a capture is exported to a new document.",
    )
    SNAP_WORD_STYLE: str | None = Field(
        None,
        description="Paragraph style applied to images inserted into a new document.",
    )
    SNAP_IMGUR_CLIENT_ID: str | None = Field(
        None,
        description=(
            "Client ID of a registered Imgur application. The Imgur destination "
            "is only offered when this is set."
        ),
    )
    SNAP_IMGUR_API_URL: AnyHttpUrl = Field(
        "https://api.imgur.com/3/",
        description="Root of the Imgur API, with trailing slash included.",
    )
    SNAP_IMGUR_UPLOAD_FORMAT: ImageFormat = Field(
        "png",
        description="Image format used for uploads to Imgur.",
    )
    SNAP_IMGUR_JPEG_QUALITY: int = Field(
        80,
        ge=1,
        le=100,
        description="Quality (1-100) used when uploading JPEG files to Imgur.",
    )
    SNAP_IMGUR_REDUCE_COLORS: bool = Field(
        False,  # noqa: FBT003
        description="Quantize images uploaded to Imgur down to 256 colours.",
    )
    SNAP_IMGUR_USE_PAGE_LINK: bool = Field(
        False,  # noqa: FBT003
        description=(
            "Report the Imgur page link instead of the direct image link in "
            "the export notification."
        ),
    )
    SNAP_CERT_BUNDLE_FILE: FilePath | None = Field(
        None,
        description=(
            "If needed, a custom SSL certificate CA bundle can be used to verify "
            "requests to image hosting services. Certificates in the bundle are "
            "appended to the certifi bundle for all requests made by snapshare."
        ),
    )
    SNAP_CERT_BUNDLE: str | None = Field(
        None,
        description=(
            "As an alternative to SNAP_CERT_BUNDLE_FILE, the entire certificate "
            "bundle as a single string. Takes precedence over "
            "SNAP_CERT_BUNDLE_FILE if both are defined."
        ),
    )
    SNAP_DISABLE_SSL_VERIFY: bool = Field(
        False,  # noqa: FBT003
        description=(
            "(development setting) Disable SSL certificate verification for all "
            "HTTP requests."
        ),
    )
    SNAP_LANG_DESTINATION_EXPORT_FAILED: str = Field(
        "{0} export failed",
        description=(
            "Message template for a failed export; ``{0}`` is replaced by the "
            "destination designation."
        ),
    )
    SNAP_LANG_EXPORTED_TO: str = Field(
        "Exported to {0}",
        description=(
            "Message template for a successful export; ``{0}`` is replaced by "
            "the destination designation."
        ),
    )

    @field_validator(
        "SNAP_LANG_DESTINATION_EXPORT_FAILED", "SNAP_LANG_EXPORTED_TO"
    )
    @classmethod
    def validate_message_template(cls, v: str) -> str:
        """Ensure a message template only uses the ``{0}`` placeholder."""
        return check_message_template(v)

    @field_validator("SNAP_IMGUR_API_URL")
    @classmethod
    def validate_trailing_slash(cls, v: AnyHttpUrl) -> AnyHttpUrl:
        """Ensure the API address has a trailing slash."""
        if not str(v).endswith("/"):
            msg = "Imgur API URL must end with a trailing slash"
            raise ValueError(msg)
        return v


# Instantiate the settings object to be imported throughout the application
try:
    settings = Settings()
except ValidationError:
    logger.exception("Configuration validation error")
    raise
