"""Background degradation scheduler.

One ``DegradationScheduler`` per signed-in user, owned by the host's
session: ``start()`` on login, ``stop()`` on logout. Each instance runs an
asyncio task that calls ``CreatureService.degrade`` immediately and then on
every interval. There is no process-wide instance.

The degradation pass is gated by ``last_degradation_time``, so a scheduler
restarted a few minutes after the previous run does not degrade twice.
"""

from __future__ import annotations

import asyncio
from datetime import datetime
from typing import Callable, Optional

from .config import Config
from .logging_utils import log_error, log_info
from .service import CreatureService


class DegradationScheduler:
    """Runs hourly degradation for one user until stopped."""

    def __init__(
        self,
        service: CreatureService,
        user_id: str,
        *,
        interval_seconds: Optional[float] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self.service = service
        self.user_id = user_id
        self.interval_seconds = (
            Config.DEGRADATION_INTERVAL_SECONDS if interval_seconds is None else interval_seconds
        )
        if self.interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")
        self.clock = clock or service.clock
        self.passes_run = 0
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Start the background task.

        Raises:
            RuntimeError: if the task is already running (use ``restart``)
        """
        if self.running:
            raise RuntimeError(f"Scheduler for {self.user_id} is already running")
        self._task = asyncio.create_task(
            self._run(), name=f"habitpet-degradation-{self.user_id}"
        )
        log_info(
            f"[{self.user_id}] degradation scheduler started "
            f"(every {self.interval_seconds:g}s)"
        )

    async def stop(self) -> None:
        """Cancel the background task and wait for it to finish."""
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        self.service.release_user(self.user_id)
        log_info(f"[{self.user_id}] degradation scheduler stopped")

    async def restart(self) -> None:
        """Stop the current task (waiting for it to finish) and start anew."""
        await self.stop()
        self.start()

    async def run_once(self) -> None:
        """Run a single degradation pass now.

        Failures are logged and swallowed so one bad pass does not kill the
        schedule; the next interval tries again.
        """
        try:
            await self.service.degrade(self.user_id, self.clock())
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            log_error(f"[{self.user_id}] degradation failed: {exc}")
        finally:
            self.passes_run += 1

    async def __aenter__(self) -> "DegradationScheduler":
        self.start()
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.stop()

    async def _run(self) -> None:
        while True:
            await self.run_once()
            await asyncio.sleep(self.interval_seconds)
