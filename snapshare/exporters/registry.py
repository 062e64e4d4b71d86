"""Registry of export destinations.

This module provides the DestinationRegistry that holds the destination
instances handed to snapshare (loading them is the caller's business), and
a process-wide holder for it.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from snapshare.exporters.availability import DestinationAvailability
from snapshare.exporters.base import CancellationToken, Notification
from snapshare.language import Language

if TYPE_CHECKING:
    from collections.abc import Iterable

    from snapshare.capture import Capture
    from snapshare.exporters.base import Destination, ExportContext

_logger = logging.getLogger(__name__)


class DestinationRegistry:
    """Registry of the destinations available to callers.

    Attributes
    ----------
    availability : DestinationAvailability
        Result of the startup probe; decides which destinations are active
    _destinations : dict[str, Destination]
        Registered top-level destinations, keyed by designation
    """

    def __init__(
        self,
        availability: DestinationAvailability | None = None,
        destinations: Iterable[Destination] = (),
        *,
        language: Language | None = None,
    ):
        """Initialize a registry, optionally with some destinations."""
        self.availability = availability or DestinationAvailability()
        self.language = language or Language.from_settings()
        self._destinations: dict[str, Destination] = {}
        for destination in destinations:
            self.register(destination)

    def register(self, destination: Destination) -> None:
        """Initialize and register a top-level destination.

        Raises
        ------
        ValueError
            If a destination with the same designation is already registered
        """
        if destination.designation in self._destinations:
            msg = f"Destination already registered: {destination.designation}"
            raise ValueError(msg)
        destination.initialize()
        self._destinations[destination.designation] = destination
        _logger.debug(
            "Registered export destination: %s (priority=%d, active=%s)",
            destination.designation,
            destination.priority,
            self.availability.is_active(destination.designation),
        )

    def get(self, designation: str) -> Destination | None:
        """Get a registered destination by designation."""
        return self._destinations.get(designation)

    def get_active_destinations(self) -> list[Destination]:
        """Get active destinations sorted by priority (descending).

        Returns
        -------
        list[Destination]
            Destinations whose designation passed the startup probe
        """
        active = [
            d
            for d in self._destinations.values()
            if self.availability.is_active(d.designation)
        ]
        return sorted(active, key=lambda d: d.priority, reverse=True)

    async def export(
        self,
        designation: str,
        capture: Capture,
        context: ExportContext,
        token: CancellationToken | None = None,
    ) -> Notification | None:
        """Export to the top-level destination with ``designation``.

        Unknown or inactive destinations give a FAIL notification.
        """
        destination = self.get(designation)
        if destination is None or not self.availability.is_active(designation):
            _logger.warning("Destination %s is not available", designation)
            return Notification.fail(
                designation,
                self.language.export_failed(designation),
                f"Destination {designation} is not available",
            )
        return await destination.export(context, capture, token or CancellationToken())


# Singleton instance stored in a dict to avoid using `global` statement
_registry_holder: dict[str, DestinationRegistry] = {}


def get_registry() -> DestinationRegistry:
    """Get the process-wide DestinationRegistry.

    Returns
    -------
    DestinationRegistry
        The registry set with :py:func:`set_registry`, or an empty one
    """
    if "instance" not in _registry_holder:
        _registry_holder["instance"] = DestinationRegistry()
    return _registry_holder["instance"]


def set_registry(registry: DestinationRegistry) -> None:
    """Install ``registry`` as the process-wide registry."""
    _registry_holder["instance"] = registry
