"""Capture and output settings handed to export destinations.

A :py:class:`Capture` is owned by the caller. Destinations only ever read it,
or ask :py:func:`snapshare.utils.images.save_temporary_file` to write a
derived copy to disk.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING

from snapshare.config import settings

if TYPE_CHECKING:
    from pathlib import Path

    from PIL import Image


@dataclass(frozen=True)
class Capture:
    """An in-memory image plus the metadata needed to export it.

    Parameters
    ----------
    image
        The captured image
    title
        Title of the capture (usually the captured window title)
    filename
        Backing file of the capture, if it was already saved or opened from disk
    modified
        Whether the image has unsaved edits since it was captured or loaded
    taken
        When the capture was made
    """

    image: Image.Image
    title: str = "capture"
    filename: Path | None = None
    modified: bool = False
    taken: datetime = field(default_factory=datetime.now)


@dataclass(frozen=True)
class OutputSettings:
    """How a capture is written when it has to be materialized to a file.

    Parameters
    ----------
    format
        File format (and extension) to write
    jpeg_quality
        Quality used for JPEG output
    reduce_colors
        Quantize the image down to 256 colours before saving
    """

    format: str = "png"
    jpeg_quality: int = 80
    reduce_colors: bool = False

    @classmethod
    def from_settings(cls) -> OutputSettings:
        """Build the default output settings from the application settings."""
        return cls(
            format=settings.SNAP_OUTPUT_FORMAT,
            jpeg_quality=settings.SNAP_JPEG_QUALITY,
            reduce_colors=settings.SNAP_REDUCE_COLORS,
        )
