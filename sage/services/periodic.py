"""PeriodicJob: a cancellable asyncio task that runs a coroutine on a fixed interval."""

import asyncio
from collections.abc import Awaitable, Callable

import structlog

logger = structlog.get_logger(__name__)


class PeriodicJob:
    """Runs ``func`` every ``interval`` seconds until stopped.

    The first cycle runs one interval after ``start()``. A cycle never overlaps
    the previous one: the next sleep begins only once the current cycle has
    finished. Exceptions raised by ``func`` are logged and do not stop the job.
    """

    def __init__(self, func: Callable[[], Awaitable[object]], interval: float, name: str = "periodic_job") -> None:
        if interval <= 0:
            raise ValueError(f"interval must be positive, got {interval}")
        self._func = func
        self._interval = interval
        self._name = name
        self._task: asyncio.Task[None] | None = None

    @property
    def interval(self) -> float:
        return self._interval

    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self) -> None:
        """Schedule the background task. A second call while running is a no-op."""
        if self.is_running():
            return
        self._task = asyncio.create_task(self._run(), name=self._name)

    async def stop(self) -> None:
        """Cancel the background task and wait for it to finish."""
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        except Exception:
            logger.warning("periodic_job_stop_unexpected_error", job=self._name, exc_info=True)
        self._task = None

    async def run_once(self) -> bool:
        """Run a single cycle. Returns False if the cycle raised (the error is logged)."""
        try:
            await self._func()
        except asyncio.CancelledError:
            raise
        except Exception:
            logger.exception("periodic_job_failed", job=self._name)
            return False
        return True

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self._interval)
            await self.run_once()
