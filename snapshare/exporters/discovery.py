"""Discovery of live child destinations.

Some destinations address an application that has several live targets,
e.g. the documents currently open in a word processor. A refresh replaces
the destination's ``children`` with one leaf destination per live target:

1. the current children are cleared (visible immediately)
2. live target names are enumerated off the event loop and sorted
3. a leaf is built for every name with the destination's leaf factory
4. the leaves are put into ``children`` on the presentation context

If the cancellation token fires, no children are added. If enumeration
fails, the error is logged and returned in the
:py:class:`~snapshare.exporters.base.DiscoveryResult`; ``children`` stays
empty. Nothing is raised in either case.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, TypeVar

from snapshare.exporters.base import CancellationToken, DiscoveryResult

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from snapshare.exporters.base import AbstractDestination, ExportContext

_logger = logging.getLogger(__name__)

D = TypeVar("D", bound="AbstractDestination")


def sort_names(names: Iterable[str]) -> list[str]:
    """Order live target names for presentation.

    Plain code-point ordering of the names (so upper case sorts before lower
    case); duplicates are kept.
    """
    return sorted(names)


async def refresh_children(
    parent: D,
    *,
    enumerate_names: Callable[[], Iterable[str]],
    leaf_factory: Callable[[D, str], D],
    context: ExportContext,
    token: CancellationToken | None = None,
) -> DiscoveryResult:
    """Replace ``parent.children`` with a leaf for every live target.

    Parameters
    ----------
    parent
        The container destination whose children are refreshed
    enumerate_names
        Blocking call returning the names of the live targets
    leaf_factory
        Builds the leaf destination for ``(parent, name)``
    context
        Export context providing the presentation context and executor
    token
        Cancellation signal

    Returns
    -------
    DiscoveryResult
        The names that were added, or why none were
    """
    token = token or CancellationToken()
    await context.presentation.submit(parent.children.clear)

    if token.cancelled:
        _logger.debug("Refresh of %s cancelled", parent.designation)
        return DiscoveryResult(cancelled=True)

    try:
        names = sort_names(await context.run_blocking(enumerate_names))
    except Exception as e:
        _logger.exception(
            "Could not enumerate live targets for %s", parent.designation
        )
        return DiscoveryResult(error=str(e))

    if token.cancelled:
        _logger.debug("Refresh of %s cancelled", parent.designation)
        return DiscoveryResult(cancelled=True)

    leaves = [leaf_factory(parent, name) for name in names]
    for leaf in leaves:
        leaf.initialize()

    def _replace_children():
        parent.children[:] = leaves

    await context.presentation.submit(_replace_children)
    _logger.debug(
        "Refreshed %s: %d live target(s)", parent.designation, len(leaves)
    )
    return DiscoveryResult(names=tuple(names))
