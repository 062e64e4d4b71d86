"""Image file utilities for snapshare.

Decides whether an existing capture file can be handed to an external
application as-is, and otherwise writes the capture to a temporary file in
one of the accepted raster formats.
"""

from __future__ import annotations

import logging
import re
import tempfile
from pathlib import Path
from typing import TYPE_CHECKING

from snapshare.config import settings

if TYPE_CHECKING:
    from PIL import Image

    from snapshare.capture import Capture, OutputSettings

_logger = logging.getLogger(__name__)

ACCEPTED_FORMAT_PATTERN = re.compile(r".*\.(png|gif|jpg|jpeg|tiff|bmp)$", re.IGNORECASE)

# Pillow format names, keyed by file extension
_PIL_FORMATS = {
    "png": "PNG",
    "gif": "GIF",
    "jpg": "JPEG",
    "jpeg": "JPEG",
    "tiff": "TIFF",
    "bmp": "BMP",
}

_INVALID_FILENAME_CHARS = re.compile(r'[\\/:*?"<>|\x00-\x1f]+')


class MaterializationError(Exception):
    """A capture could not be written to a temporary file."""


def is_accepted_format(path: Path | str) -> bool:
    """Check whether a filename has one of the accepted raster extensions.

    Parameters
    ----------
    path
        Path or filename to check (only the suffix matters)

    Returns
    -------
    bool
        True for ``.png``, ``.gif``, ``.jpg``, ``.jpeg``, ``.tiff`` and ``.bmp``
        (in any case), False otherwise
    """
    return ACCEPTED_FORMAT_PATTERN.match(str(path)) is not None


def can_reuse_file(capture: Capture) -> bool:
    """Whether the capture's backing file can be exported without re-saving it.

    The file is reused only if it exists, the image has not been edited since
    it was captured or loaded, and the file is in an accepted format.
    """
    if capture.filename is None or capture.modified:
        return False
    if not is_accepted_format(capture.filename):
        return False
    return Path(capture.filename).is_file()


def format_filename(capture: Capture, extension: str) -> str:
    """Build a filename for ``capture`` from ``SNAP_FILENAME_PATTERN``.

    Characters that are not allowed in filenames are replaced with ``_``.
    If the pattern is invalid, the capture title is used on its own.
    """
    try:
        stem = settings.SNAP_FILENAME_PATTERN.format(
            title=capture.title,
            taken=capture.taken,
        )
    except (KeyError, IndexError, ValueError):
        _logger.warning(
            "Invalid SNAP_FILENAME_PATTERN %r, falling back to the capture title",
            settings.SNAP_FILENAME_PATTERN,
        )
        stem = capture.title
    stem = _INVALID_FILENAME_CHARS.sub("_", stem).strip(" .") or "capture"
    return f"{stem}.{extension.lower()}"


def _prepare_image(image: Image.Image, output_settings: OutputSettings) -> Image.Image:
    """Apply colour reduction and mode conversion for the output format."""
    if output_settings.reduce_colors:
        image = image.quantize(colors=256)
    if _PIL_FORMATS[output_settings.format.lower()] == "JPEG" and image.mode not in (
        "RGB",
        "L",
    ):
        # JPEG has no alpha channel or palette
        image = image.convert("RGB")
    return image


def save_temporary_file(capture: Capture, output_settings: OutputSettings) -> Path:
    """Write a capture to a new file in the temporary directory.

    Parameters
    ----------
    capture
        The capture to write; it is not modified
    output_settings
        Format, quality and colour reduction for the written file

    Returns
    -------
    Path
        Path to the newly written file. The caller is responsible for it.

    Raises
    ------
    MaterializationError
        If the output format is not accepted or the image could not be written
    """
    extension = output_settings.format.lower()
    if extension not in _PIL_FORMATS:
        msg = f"Unsupported output format: {output_settings.format}"
        raise MaterializationError(msg)

    filename = format_filename(capture, extension)
    temp_dir = Path(settings.SNAP_TEMP_PATH)
    temp_dir.mkdir(parents=True, exist_ok=True)

    with tempfile.NamedTemporaryFile(
        dir=temp_dir,
        prefix=f"{Path(filename).stem}_",
        suffix=f".{extension}",
        delete=False,
    ) as tmp:
        out_path = Path(tmp.name)
        try:
            image = _prepare_image(capture.image, output_settings)
            save_kwargs = {}
            if _PIL_FORMATS[extension] == "JPEG":
                save_kwargs["quality"] = output_settings.jpeg_quality
            image.save(tmp, format=_PIL_FORMATS[extension], **save_kwargs)
        except (OSError, ValueError) as e:
            tmp.close()
            out_path.unlink(missing_ok=True)
            msg = f"Could not write {out_path.name}: {e}"
            raise MaterializationError(msg) from e

    _logger.debug("Wrote capture %r to %s", capture.title, out_path)
    return out_path
