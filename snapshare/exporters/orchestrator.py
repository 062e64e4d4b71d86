"""Drive a single export from capture to notification.

The :py:class:`ExportOrchestrator` is shared by all destinations. It decides
which file to hand to the external application, runs the destination's
transfer operation under the retry policy, and turns the outcome into a
:py:class:`~snapshare.exporters.base.Notification`. It never raises.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from snapshare.capture import OutputSettings
from snapshare.exporters.base import CancellationToken, Notification
from snapshare.exporters.retry import (
    DEFAULT_RETRY_POLICY,
    OperationCancelledError,
    RetryPolicy,
    run_with_retry,
)
from snapshare.language import Language
from snapshare.utils.images import can_reuse_file, save_temporary_file

if TYPE_CHECKING:
    from collections.abc import Callable

    from snapshare.capture import Capture
    from snapshare.exporters.base import ExportContext

_logger = logging.getLogger(__name__)


class ExportOrchestrator:
    """Turn one export request into exactly one notification.

    Parameters
    ----------
    retry_policy
        Policy applied to the transfer operation
    language
        Message templates for the notification text
    """

    def __init__(
        self,
        *,
        retry_policy: RetryPolicy = DEFAULT_RETRY_POLICY,
        language: Language | None = None,
    ):
        self.retry_policy = retry_policy
        self.language = language or Language.from_settings()

    async def resolve_payload(
        self,
        context: ExportContext,
        capture: Capture,
        output_settings: OutputSettings | None = None,
        *,
        reuse_file: bool = True,
    ) -> Path:
        """Get the file to send: the capture's own file, or a temporary copy.

        The capture's file is reused if ``reuse_file`` is set and the file
        exists, is unmodified, and is in an accepted raster format. Otherwise
        the capture is written to a new temporary file (off the event loop)
        with ``output_settings``.
        """
        if reuse_file and can_reuse_file(capture):
            _logger.debug("Reusing capture file %s", capture.filename)
            return Path(capture.filename)
        output_settings = output_settings or OutputSettings.from_settings()
        return await context.run_blocking(
            save_temporary_file, capture, output_settings
        )

    async def run(
        self,
        designation: str,
        transfer: Callable[[Path], str | None],
        context: ExportContext,
        capture: Capture,
        token: CancellationToken | None = None,
        *,
        output_settings: OutputSettings | None = None,
        reuse_file: bool = True,
    ) -> Notification | None:
        """Export ``capture`` with ``transfer`` and report the outcome.

        Parameters
        ----------
        designation
            Designation of the destination, used in messages
        transfer
            Blocking operation bound to the destination instance (e.g. insert
            into a named document, or into a new one). Called with the path of
            the payload file; may return an URI for the exported capture.
        context
            Export context of the caller
        capture
            The capture to export
        token
            Cancellation signal, checked before each step
        output_settings
            Used if the capture has to be written to a temporary file
        reuse_file
            Whether the capture's own file may be sent as-is. Destinations
            that need a specific encoding pass False.

        Returns
        -------
        Notification | None
            SUCCESS or FAIL notification, or None if the export was cancelled
        """
        token = token or CancellationToken()
        if token.cancelled:
            _logger.debug("Export to %s cancelled before it started", designation)
            return None

        try:
            payload = await self.resolve_payload(
                context, capture, output_settings, reuse_file=reuse_file
            )
        except Exception as e:
            _logger.exception(
                "Could not prepare image %r for export to %s",
                capture.title,
                designation,
            )
            return self._failed(designation, e)

        try:
            uri = await run_with_retry(
                self.retry_policy,
                lambda: context.run_blocking(transfer, payload),
                token=token,
                description=f"Export to {designation}",
            )
        except OperationCancelledError:
            _logger.debug("Export to %s cancelled", designation)
            return None
        except Exception as e:
            _logger.exception("Error exporting image to %s", designation)
            return self._failed(designation, e)

        _logger.info("Exported %r to %s", capture.title, designation)
        return Notification.success(
            designation,
            self.language.export_succeeded(designation),
            uri=uri,
        )

    def _failed(self, designation: str, error: Exception) -> Notification:
        return Notification.fail(
            designation,
            self.language.export_failed(designation),
            str(error),
        )
