"""Export destination implementations.

Destinations are not discovered automatically: the application builds the
instances it wants (see :py:func:`snapshare.exporters.build_registry`) and
registers them with a :py:class:`~snapshare.exporters.registry.DestinationRegistry`.

To add a new destination, subclass
:py:class:`~snapshare.exporters.base.AbstractDestination`, set ``designation``
and ``priority``, implement ``probe()`` and ``_initialize()``, and run the
transfer through an :py:class:`~snapshare.exporters.orchestrator.ExportOrchestrator`.
"""

from snapshare.exporters.destinations.imgur import ImgurDestination
from snapshare.exporters.destinations.word import WordDestination

DESTINATION_CLASSES = (WordDestination, ImgurDestination)

__all__ = ["DESTINATION_CLASSES", "ImgurDestination", "WordDestination"]
