"""Word export destination.

Inserts captures into a word processor document, either a new one or one of
the documents currently open. The open documents are discovered with
:py:meth:`WordDestination.refresh` and offered as child destinations.

Talking to the application itself (COM automation or similar) is not done
here: an object satisfying the :py:class:`WordAutomation` protocol is
supplied by the caller.
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import TYPE_CHECKING, Protocol

from snapshare.config import settings
from snapshare.exporters.base import (
    AbstractDestination,
    CancellationToken,
    DiscoveryResult,
)
from snapshare.exporters.discovery import refresh_children
from snapshare.exporters.orchestrator import ExportOrchestrator
from snapshare.exporters.retry import RetryPolicy

if TYPE_CHECKING:
    from snapshare.capture import Capture
    from snapshare.exporters.availability import DestinationAvailability
    from snapshare.exporters.base import ExportContext, Notification
    from snapshare.language import Language

_logger = logging.getLogger(__name__)

WORD_EXECUTABLES = ("WINWORD.EXE", "WINWORD", "winword")


class WordAutomation(Protocol):
    """Calls into the word processor.

    All calls are blocking, may raise on failure, and are safe to repeat.
    """

    def insert_into_existing_document(self, caption: str, path: Path) -> None:
        """Insert the image at ``path`` into the open document ``caption``."""
        ...

    def insert_into_new_document(
        self,
        path: Path,
        template: str | None = None,
        style: str | None = None,
    ) -> None:
        """Create a new document and insert the image at ``path`` into it."""
        ...

    def get_documents(self) -> list[str]:
        """Captions of the documents that are currently open."""
        ...


class WordDestination(AbstractDestination):
    """Word export destination.

    The top-level instance exports into a new document; its children (one
    per open document, see :py:meth:`refresh`) export into that document.

    Attributes
    ----------
    designation : str
        Destination identifier: "Word"
    priority : int
        Presentation priority: 100
    document_caption : str | None
        Caption of the open document this instance exports to, or None to
        create a new document
    """

    designation = "Word"
    priority = 100

    def __init__(
        self,
        automation: WordAutomation,
        *,
        document_caption: str | None = None,
        availability: DestinationAvailability | None = None,
        language: Language | None = None,
        orchestrator: ExportOrchestrator | None = None,
    ):
        super().__init__(availability=availability, language=language)
        self.automation = automation
        self.document_caption = document_caption
        self.orchestrator = orchestrator or ExportOrchestrator(
            retry_policy=RetryPolicy.from_settings(),
            language=self.language,
        )

    @classmethod
    def probe(cls) -> bool:
        """Check that the word processor is installed.

        Returns
        -------
        bool
            True if SNAP_WORD_EXECUTABLE points at an existing file, or a
            word processor executable is on the PATH
        """
        if settings.SNAP_WORD_EXECUTABLE is not None:
            return Path(settings.SNAP_WORD_EXECUTABLE).is_file()
        return any(shutil.which(name) for name in WORD_EXECUTABLES)

    def _initialize(self) -> None:
        if self.document_caption is None:
            self.text = f"Export to {self.designation}"
            self.icon = "office-word"
        else:
            self.text = self.document_caption
            self.icon = "page-word"
        self.export_operation = self._export_capture

    def _transfer(self, path: Path) -> None:
        """Insert the file at ``path`` into the target document."""
        if self.document_caption is not None:
            self.automation.insert_into_existing_document(self.document_caption, path)
        else:
            self.automation.insert_into_new_document(
                path,
                settings.SNAP_WORD_TEMPLATE,
                settings.SNAP_WORD_STYLE,
            )

    async def _export_capture(
        self,
        context: ExportContext,
        capture: Capture,
        token: CancellationToken,
    ) -> Notification | None:
        return await self.orchestrator.run(
            self.designation,
            self._transfer,
            context,
            capture,
            token,
        )

    async def refresh(
        self,
        context: ExportContext,
        token: CancellationToken | None = None,
    ) -> DiscoveryResult:
        """Load the currently open documents as child destinations.

        Parameters
        ----------
        context
            Export context; children are replaced on its presentation context
        token
            Cancellation signal

        Returns
        -------
        DiscoveryResult
            The captions of the documents that were added, or why none were
        """
        if self.document_caption is not None:
            # a single document has nothing below it
            return DiscoveryResult()
        return await refresh_children(
            self,
            enumerate_names=self.automation.get_documents,
            leaf_factory=document_destination,
            context=context,
            token=token,
        )


def document_destination(parent: WordDestination, caption: str) -> WordDestination:
    """Build the child destination for the open document ``caption``.

    The child shares the automation, availability, language and orchestrator
    of ``parent`` and exports into that document only.
    """
    return WordDestination(
        parent.automation,
        document_caption=caption,
        availability=parent.availability,
        language=parent.language,
        orchestrator=parent.orchestrator,
    )

