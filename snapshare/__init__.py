"""snapshare: send captured images to pluggable export destinations.

The interesting part lives in :py:mod:`snapshare.exporters`, which provides
the destination contract, the export orchestrator with its retry policy,
discovery of live child destinations, and the notification model used to
report outcomes back to the caller.
"""
