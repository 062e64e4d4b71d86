"""Unit tests for the PresentationContext task queue."""

import asyncio

import pytest

from snapshare.exporters.presentation import PresentationContext


class TestPresentationContext:
    """Test PresentationContext."""

    def test_not_running_initially(self):
        """Test that the worker is started lazily."""
        presentation = PresentationContext()
        assert presentation.running is False
        assert presentation.is_current() is False

    def test_submit_returns_result(self):
        """Test that submit() returns what the callable returns."""

        async def main():
            async with PresentationContext() as presentation:
                return await presentation.submit(lambda a, b: a + b, 2, 3)

        assert asyncio.run(main()) == 5

    def test_submit_starts_worker(self):
        """Test that submit() starts the worker when needed."""

        async def main():
            presentation = PresentationContext()
            await presentation.submit(lambda: None)
            running = presentation.running
            await presentation.stop()
            return running, presentation.running

        assert asyncio.run(main()) == (True, False)

    def test_runs_in_submission_order(self):
        """Test that concurrently submitted callables run in order, one at a time."""
        order = []

        async def main():
            async with PresentationContext() as presentation:
                await asyncio.gather(
                    *(presentation.submit(order.append, i) for i in range(10))
                )

        asyncio.run(main())
        assert order == list(range(10))

    def test_runs_on_worker(self):
        """Test that callables run on the worker task, not the caller."""

        async def main():
            async with PresentationContext() as presentation:
                inside = await presentation.submit(presentation.is_current)
                return inside, presentation.is_current()

        assert asyncio.run(main()) == (True, False)

    def test_exception_propagates(self):
        """Test that errors are re-raised in the caller and the worker survives."""

        def explode():
            msg = "bad state"
            raise RuntimeError(msg)

        async def main():
            async with PresentationContext() as presentation:
                with pytest.raises(RuntimeError, match="bad state"):
                    await presentation.submit(explode)
                return await presentation.submit(lambda: "still alive")

        assert asyncio.run(main()) == "still alive"

    def test_stop_is_idempotent(self):
        """Test that stop() can be called when not running."""

        async def main():
            presentation = PresentationContext()
            await presentation.stop()
            await presentation.start()
            await presentation.stop()
            await presentation.stop()
            return presentation.running

        assert asyncio.run(main()) is False

    def test_reusable_across_event_loops(self):
        """Test that a context can be used again from a new event loop."""
        presentation = PresentationContext()

        async def main(value):
            return await presentation.submit(lambda: value)

        assert asyncio.run(main(1)) == 1
        assert asyncio.run(main(2)) == 2
