"""Base protocols and data structures for export destinations.

This module defines the core interfaces and data structures for the
snapshare export framework, which sends a capture to one of several
destinations (a word processor, an image host, ...) through a uniform
contract:

- :py:class:`Notification` is the immutable outcome of one export attempt
- :py:class:`ExportContext` is what a caller hands to a destination
- :py:class:`Destination` is the protocol every destination satisfies
- :py:class:`AbstractDestination` implements the parts shared by all of them
"""

from __future__ import annotations

import asyncio
import logging
import threading
from collections.abc import Awaitable, Callable
from concurrent.futures import Executor
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, Any, Protocol, TypeVar

from snapshare.exporters.presentation import PresentationContext
from snapshare.language import Language

if TYPE_CHECKING:
    from snapshare.capture import Capture
    from snapshare.exporters.availability import DestinationAvailability

_logger = logging.getLogger(__name__)

T = TypeVar("T")


class NotificationType(Enum):
    """Outcome of an export attempt."""

    SUCCESS = "success"
    FAIL = "fail"


class NotificationSourceKind(Enum):
    """What kind of component produced a notification."""

    DESTINATION = "destination"


@dataclass(frozen=True)
class Notification:
    """Result of a single export attempt.

    Created fresh for every export and never modified afterwards.

    Parameters
    ----------
    type
        Whether the export succeeded or failed
    source
        Designation of the destination that produced this notification
    text
        Human-readable message
    error_text
        Message of the underlying error, if the export failed
    uri
        Where the exported capture can be found, if the destination knows
        (e.g. the page of an uploaded image)
    source_kind
        Kind of component that produced the notification
    timestamp
        When the notification was created
    """

    type: NotificationType
    source: str
    text: str
    error_text: str | None = None
    uri: str | None = None
    source_kind: NotificationSourceKind = NotificationSourceKind.DESTINATION
    timestamp: datetime = field(default_factory=datetime.now)

    @classmethod
    def success(cls, source: str, text: str, uri: str | None = None) -> Notification:
        """Create a success notification."""
        return cls(type=NotificationType.SUCCESS, source=source, text=text, uri=uri)

    @classmethod
    def fail(cls, source: str, text: str, error_text: str | None) -> Notification:
        """Create a failure notification."""
        return cls(
            type=NotificationType.FAIL,
            source=source,
            text=text,
            error_text=error_text,
        )

    @property
    def succeeded(self) -> bool:
        """Whether this notification reports a successful export."""
        return self.type is NotificationType.SUCCESS

    def __repr__(self):
        """Return string representation of Notification."""
        return (
            f"Notification(source={self.source}, "
            f"type={self.type.name}, "
            f"text={self.text!r})"
        )


class CancellationToken:
    """Thread-safe signal used to cancel an export or a refresh.

    Cancellation is a normal outcome: operations that observe it return
    early without raising.
    """

    def __init__(self):
        self._event = threading.Event()

    def cancel(self) -> None:
        """Request cancellation."""
        self._event.set()

    @property
    def cancelled(self) -> bool:
        """Whether cancellation has been requested."""
        return self._event.is_set()


@dataclass(frozen=True)
class DiscoveryResult:
    """Outcome of refreshing the children of a destination.

    Parameters
    ----------
    names
        Live target names that were turned into child destinations, in order
    error
        Message of the error raised while enumerating live targets, if any.
        Distinguishes "discovery failed" from "no live targets".
    cancelled
        Whether the refresh was cancelled before children were added
    """

    names: tuple[str, ...] = ()
    error: str | None = None
    cancelled: bool = False

    @property
    def ok(self) -> bool:
        """True if the refresh ran to completion without an error."""
        return self.error is None and not self.cancelled


@dataclass
class ExportContext:
    """Context passed to export destinations.

    Parameters
    ----------
    presentation
        The context that owns presentation state (destination children).
        All changes to ``children`` are submitted to it.
    executor
        Executor used for blocking work (automation calls, uploads, file
        writes). ``None`` means the event loop's default executor.
    metadata
        Additional caller-supplied metadata
    """

    presentation: PresentationContext = field(default_factory=PresentationContext)
    executor: Executor | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    async def run_blocking(self, fn: Callable[..., T], *args: Any) -> T:
        """Run a blocking callable off the event loop and await its result."""
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(self.executor, fn, *args)


ExportOperation = Callable[
    [ExportContext, "Capture", CancellationToken],
    Awaitable["Notification | None"],
]


class Destination(Protocol):
    """Protocol for export destinations.

    Attributes
    ----------
    designation : str
        Stable identifier of the destination kind (e.g. "Word"); never changes
    priority : int
        Presentation order among top-level destinations (higher first)
    text : str
        Human-readable label; discovered children carry the live target name
    icon : str | None
        Opaque presentational handle
    children : list[Destination]
        Discovered child destinations, in presentation order
    """

    designation: str
    priority: int
    text: str
    icon: str | None
    children: list[Destination]

    @property
    def is_active(self) -> bool:
        """Whether the destination is offered at all (probed once at startup)."""
        ...

    def initialize(self) -> None:
        """Set up display metadata and bind the export operation (idempotent)."""
        ...

    async def export(
        self,
        context: ExportContext,
        capture: Capture,
        token: CancellationToken | None = None,
    ) -> Notification | None:
        """Export a capture to this destination.

        CRITICAL: This method MUST NOT raise exceptions. All errors must
        be caught and returned as a FAIL notification. Returns None when the
        export was cancelled.
        """
        ...

    async def refresh(
        self,
        context: ExportContext,
        token: CancellationToken | None = None,
    ) -> DiscoveryResult:
        """Repopulate ``children`` from the live targets of this destination."""
        ...


class AbstractDestination:
    """Behaviour shared by all destinations.

    Subclasses set ``designation`` and ``priority`` and implement
    :py:meth:`_initialize`, which fills in the display metadata and binds
    ``export_operation``.
    """

    designation: str = ""
    priority: int = 0

    def __init__(
        self,
        *,
        availability: DestinationAvailability | None = None,
        language: Language | None = None,
    ):
        self.availability = availability
        self.language = language or Language.from_settings()
        self.text: str = self.designation
        self.icon: str | None = None
        self.export_operation: ExportOperation | None = None
        self.children: list[AbstractDestination] = []
        self._initialized = False

    @classmethod
    def probe(cls) -> bool:
        """Check whether this kind of destination can be used on this system.

        Called once at startup by
        :py:func:`~snapshare.exporters.availability.probe_availability`.
        """
        return True

    @property
    def is_active(self) -> bool:
        """Whether this destination was found usable at startup."""
        if self.availability is None:
            return False
        return self.availability.is_active(self.designation)

    def initialize(self) -> None:
        """Run the one-time setup for this destination; safe to call again."""
        if self._initialized:
            return
        self._initialize()
        self._initialized = True

    def _initialize(self) -> None:
        """Set display metadata and bind ``export_operation``."""
        self.text = self.designation

    async def export(
        self,
        context: ExportContext,
        capture: Capture,
        token: CancellationToken | None = None,
    ) -> Notification | None:
        """Run the bound export operation.

        Never raises: anything escaping the bound operation is logged and
        returned as a FAIL notification.

        Parameters
        ----------
        context
            Export context of the caller
        capture
            The capture to export
        token
            Cancellation signal

        Returns
        -------
        Notification | None
            Outcome of the export, or None if it was cancelled
        """
        self.initialize()
        token = token or CancellationToken()
        if token.cancelled:
            return None
        if self.export_operation is None:
            return Notification.fail(
                self.designation,
                self.language.export_failed(self.designation),
                "No export operation bound",
            )
        try:
            return await self.export_operation(context, capture, token)
        except Exception as e:
            _logger.exception("Unexpected error exporting to %s", self.designation)
            return Notification.fail(
                self.designation,
                self.language.export_failed(self.designation),
                str(e),
            )

    async def refresh(
        self,
        context: ExportContext,  # noqa: ARG002
        token: CancellationToken | None = None,  # noqa: ARG002
    ) -> DiscoveryResult:
        """Refresh children; destinations without live targets have none."""
        return DiscoveryResult()

    def __repr__(self):
        """Return string representation of the destination."""
        return (
            f"{type(self).__name__}(designation={self.designation}, "
            f"text={self.text!r}, children={len(self.children)})"
        )
