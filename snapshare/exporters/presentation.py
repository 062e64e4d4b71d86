"""Single execution context that owns destination presentation state.

Destination ``children`` collections (and anything else a user interface
binds to) are only ever changed from one place: the worker task of a
:py:class:`PresentationContext`. Other code submits callables to it and
awaits their results; the callables run one at a time in submission order.

Example
-------
>>> async with PresentationContext() as presentation:
...     await presentation.submit(destination.children.clear)
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any, TypeVar

if TYPE_CHECKING:
    from collections.abc import Callable

_logger = logging.getLogger(__name__)

T = TypeVar("T")

_STOP = object()


class PresentationContext:
    """Serialize changes to presentation state through one worker task.

    The worker is started lazily by the first :py:meth:`submit` (or
    explicitly with :py:meth:`start`) on the running event loop.
    """

    def __init__(self):
        self._queue: asyncio.Queue | None = None
        self._worker: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        """Whether the worker task is alive."""
        return self._worker is not None and not self._worker.done()

    def is_current(self) -> bool:
        """Whether the calling code is running on the worker task."""
        try:
            return self.running and asyncio.current_task() is self._worker
        except RuntimeError:
            return False

    async def start(self) -> None:
        """Start the worker task on the running loop (no-op if running)."""
        if self.running:
            return
        self._queue = asyncio.Queue()
        self._worker = asyncio.get_running_loop().create_task(
            self._run(), name="snapshare-presentation"
        )
        _logger.debug("Started presentation context worker")

    async def stop(self) -> None:
        """Drain the queue and stop the worker task."""
        if not self.running:
            return
        await self._queue.put(_STOP)
        await self._worker
        self._worker = None
        self._queue = None

    async def submit(self, fn: Callable[..., T], *args: Any) -> T:
        """Run ``fn(*args)`` on the worker task and return its result.

        Exceptions raised by ``fn`` are re-raised in the caller.
        """
        await self.start()
        future = asyncio.get_running_loop().create_future()
        await self._queue.put((fn, args, future))
        return await future

    async def _run(self) -> None:
        while True:
            item = await self._queue.get()
            if item is _STOP:
                self._queue.task_done()
                return
            fn, args, future = item
            try:
                result = fn(*args)
            except Exception as e:  # noqa: BLE001
                if not future.cancelled():
                    future.set_exception(e)
            else:
                if not future.cancelled():
                    future.set_result(result)
            finally:
                self._queue.task_done()

    async def __aenter__(self) -> PresentationContext:
        await self.start()
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.stop()
