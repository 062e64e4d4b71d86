"""Imgur export destination.

Uploads captures to Imgur and reports the link of the uploaded image in the
export notification.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from snapshare.capture import OutputSettings
from snapshare.config import settings
from snapshare.exporters.base import AbstractDestination, CancellationToken
from snapshare.exporters.orchestrator import ExportOrchestrator
from snapshare.exporters.retry import RetryPolicy
from snapshare.utils.images import format_filename
from snapshare.utils.imgur import get_imgur_client

if TYPE_CHECKING:
    from pathlib import Path

    from snapshare.capture import Capture
    from snapshare.exporters.availability import DestinationAvailability
    from snapshare.exporters.base import ExportContext, Notification
    from snapshare.language import Language
    from snapshare.utils.imgur import ImgurClient

_logger = logging.getLogger(__name__)


class ImgurDestination(AbstractDestination):
    """Imgur export destination.

    Attributes
    ----------
    designation : str
        Destination identifier: "Imgur"
    priority : int
        Presentation priority: 50 (after the office destinations)
    """

    designation = "Imgur"
    priority = 50

    def __init__(
        self,
        client: ImgurClient | None = None,
        *,
        availability: DestinationAvailability | None = None,
        language: Language | None = None,
        orchestrator: ExportOrchestrator | None = None,
    ):
        super().__init__(availability=availability, language=language)
        self._client = client
        self.orchestrator = orchestrator or ExportOrchestrator(
            retry_policy=RetryPolicy.from_settings(),
            language=self.language,
        )

    @classmethod
    def probe(cls) -> bool:
        """Check that an Imgur client ID is configured."""
        return bool(settings.SNAP_IMGUR_CLIENT_ID)

    @property
    def client(self) -> ImgurClient:
        """The Imgur client, built from the settings on first use."""
        if self._client is None:
            self._client = get_imgur_client()
        return self._client

    @staticmethod
    def output_settings() -> OutputSettings:
        """Output settings for uploads, from the SNAP_IMGUR_* settings.

        Uploads are always encoded with these, even when the capture has an
        unmodified file of its own.
        """
        return OutputSettings(
            format=settings.SNAP_IMGUR_UPLOAD_FORMAT,
            jpeg_quality=settings.SNAP_IMGUR_JPEG_QUALITY,
            reduce_colors=settings.SNAP_IMGUR_REDUCE_COLORS,
        )

    def _initialize(self) -> None:
        self.text = f"Upload to {self.designation}"
        self.icon = "imgur"
        self.export_operation = self._export_capture

    def _upload(self, capture: Capture, path: Path) -> str:
        """Upload the file at ``path`` and return the link to report."""
        info = self.client.upload_image(
            path,
            title=capture.title,
            filename=format_filename(capture, path.suffix.lstrip(".")),
        )
        if settings.SNAP_IMGUR_USE_PAGE_LINK:
            return info.page
        return info.original

    async def _export_capture(
        self,
        context: ExportContext,
        capture: Capture,
        token: CancellationToken,
    ) -> Notification | None:
        return await self.orchestrator.run(
            self.designation,
            lambda path: self._upload(capture, path),
            context,
            capture,
            token,
            output_settings=self.output_settings(),
            reuse_file=False,
        )
