"""Startup probe of which destinations can be used on this system.

Whether a destination is offered at all (is the word processor installed?
is an Imgur client ID configured?) is decided once, when the application
starts, and never changes afterwards. The result is an immutable
:py:class:`DestinationAvailability` that is handed to the registry and to
every destination, so it can be read from any thread.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DestinationAvailability:
    """Designations of the destinations found usable at startup."""

    active: frozenset[str] = frozenset()

    def is_active(self, designation: str) -> bool:
        """Whether the destination with ``designation`` can be used."""
        return designation in self.active

    @classmethod
    def of(cls, *designations: str) -> DestinationAvailability:
        """Build an availability with exactly ``designations`` active."""
        return cls(active=frozenset(designations))


def probe_availability(destination_classes: Iterable[type]) -> DestinationAvailability:
    """Run the ``probe()`` of every destination class once.

    A probe that raises counts as "not available"; the error is logged.

    Parameters
    ----------
    destination_classes
        Destination classes with a ``designation`` attribute and a
        ``probe()`` classmethod

    Returns
    -------
    DestinationAvailability
        The designations whose probe returned True
    """
    active = set()
    for cls in destination_classes:
        try:
            usable = bool(cls.probe())
        except Exception:
            _logger.exception("Availability probe failed for %s", cls.designation)
            usable = False
        if usable:
            active.add(cls.designation)
        _logger.info(
            "Destination %s is %s",
            cls.designation,
            "available" if usable else "not available",
        )
    return DestinationAvailability(active=frozenset(active))
