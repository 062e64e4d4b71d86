"""Export framework for snapshare captures.

This package provides a uniform contract for sending a capture to external
destinations (a word processor, an image host, ...), so callers never deal
with destination-specific details.

The main entry point is export_capture(), which:
1. Looks up the destination in the registry
2. Runs its export (payload preparation, transfer with retry)
3. Returns the resulting Notification (or None if cancelled)

Example
-------
>>> from snapshare.exporters import build_registry, export_capture
>>> registry = build_registry(word_automation=automation)
>>> notification = await export_capture(capture, "Word", registry=registry)
>>> if notification.succeeded:
...     print(notification.text)
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from snapshare.exporters.availability import (
    DestinationAvailability,
    probe_availability,
)
from snapshare.exporters.base import (
    AbstractDestination,
    CancellationToken,
    Destination,
    DiscoveryResult,
    ExportContext,
    Notification,
    NotificationSourceKind,
    NotificationType,
)
from snapshare.exporters.destinations import (
    DESTINATION_CLASSES,
    ImgurDestination,
    WordDestination,
)
from snapshare.exporters.registry import (
    DestinationRegistry,
    get_registry,
    set_registry,
)

if TYPE_CHECKING:
    from snapshare.capture import Capture
    from snapshare.exporters.destinations.word import WordAutomation
    from snapshare.utils.imgur import ImgurClient

_logger = logging.getLogger(__name__)


def build_registry(
    *,
    word_automation: WordAutomation | None = None,
    imgur_client: ImgurClient | None = None,
    availability: DestinationAvailability | None = None,
) -> DestinationRegistry:
    """Probe the destinations and register the built-in ones.

    Meant to be called once at startup. The availability probe runs here,
    unless an availability is passed in.

    Parameters
    ----------
    word_automation
        Automation object for the word processor; the Word destination is
        only registered if one is given
    imgur_client
        Imgur client to use instead of one built from the settings
    availability
        Pre-computed availability (skips probing)

    Returns
    -------
    DestinationRegistry
        Registry with the built-in destinations
    """
    availability = availability or probe_availability(DESTINATION_CLASSES)
    registry = DestinationRegistry(availability)

    if word_automation is not None:
        registry.register(WordDestination(word_automation, availability=availability))
    else:
        _logger.debug("No word processor automation supplied; skipping Word")
    registry.register(ImgurDestination(imgur_client, availability=availability))

    _logger.info(
        "Active export destination(s): %s",
        ", ".join(d.designation for d in registry.get_active_destinations()) or "none",
    )
    return registry


async def export_capture(
    capture: Capture,
    designation: str,
    *,
    context: ExportContext | None = None,
    token: CancellationToken | None = None,
    registry: DestinationRegistry | None = None,
) -> Notification | None:
    """Export a capture to the destination with ``designation``.

    Parameters
    ----------
    capture
        The capture to export
    designation
        Designation of a registered top-level destination (e.g. "Word")
    context
        Export context; a fresh one is created if not given
    token
        Cancellation signal
    registry
        Registry to use; defaults to the process-wide one

    Returns
    -------
    Notification | None
        Outcome of the export, or None if it was cancelled
    """
    registry = registry or get_registry()
    context = context or ExportContext()

    _logger.info("Exporting %r to %s", capture.title, designation)
    notification = await registry.export(designation, capture, context, token)

    if notification is None:
        _logger.info("Export of %r to %s was cancelled", capture.title, designation)
    elif notification.succeeded:
        _logger.info("Exported %r to %s", capture.title, designation)
    else:
        _logger.error(
            "Export of %r to %s failed: %s",
            capture.title,
            designation,
            notification.error_text,
        )
    return notification


# Public API
__all__ = [
    "AbstractDestination",
    "CancellationToken",
    "Destination",
    "DestinationAvailability",
    "DestinationRegistry",
    "DiscoveryResult",
    "ExportContext",
    "ImgurDestination",
    "Notification",
    "NotificationSourceKind",
    "NotificationType",
    "WordDestination",
    "build_registry",
    "export_capture",
    "get_registry",
    "probe_availability",
    "set_registry",
]
