"""
Fixed-interval scheduler for refresh cycles.
The clock and sleep functions are injectable so cycles can be driven
without waiting on real time.
"""

import asyncio
import time
from typing import Awaitable, Callable, Optional
from loguru import logger


class RefreshScheduler:
    """Run an async job every ``interval`` seconds"""

    def __init__(
        self,
        interval: float,
        job: Callable[[], Awaitable[object]],
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        name: str = "refresh",
    ):
        """
        Args:
            interval: Seconds between the starts of consecutive runs
            job: Coroutine function run once per cycle
            clock: Monotonic time source in seconds
            sleep: Coroutine used to wait between cycles
            name: Label used in log messages
        """
        if interval <= 0:
            raise ValueError("interval must be greater than 0")
        self.interval = interval
        self.job = job
        self.clock = clock
        self.sleep = sleep
        self.name = name
        self.cycles = 0
        self.last_run: Optional[float] = None
        self._task: Optional[asyncio.Task] = None

    async def run_once(self):
        """
        Run the job once.

        Job exceptions are logged and swallowed so the schedule keeps going.
        """
        self.last_run = self.clock()
        self.cycles += 1
        try:
            return await self.job()
        except Exception:
            logger.exception(f"{self.name} cycle {self.cycles} failed")
            return None

    def _delay_until_next(self) -> float:
        elapsed = self.clock() - self.last_run
        return max(0.0, self.interval - elapsed)

    async def run_forever(self, max_cycles: Optional[int] = None) -> None:
        """
        Run immediately, then every interval.

        A cycle that takes longer than the interval is followed at once by
        the next one. Runs never overlap.

        Args:
            max_cycles: Stop after this many runs (None runs until cancelled)
        """
        logger.info(f"Starting {self.name} loop every {self.interval}s")
        runs = 0
        while max_cycles is None or runs < max_cycles:
            await self.run_once()
            runs += 1
            if max_cycles is not None and runs >= max_cycles:
                break
            delay = self._delay_until_next()
            if delay == 0.0:
                logger.warning(f"{self.name} cycle took longer than {self.interval}s")
            await self.sleep(delay)

    def start(self) -> asyncio.Task:
        """Start the loop as a background task on the running event loop"""
        if self.running:
            return self._task
        self._task = asyncio.create_task(self.run_forever())
        logger.debug(f"{self.name} task started")
        return self._task

    def stop(self) -> None:
        """Cancel the background task"""
        if self._task is not None and not self._task.done():
            self._task.cancel()
            logger.debug(f"{self.name} task cancelled")
        self._task = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()
