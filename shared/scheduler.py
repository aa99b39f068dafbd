"""
Background scheduler firing catalog jobs on independent fixed-rate loops.
"""

import asyncio
import random
from collections import Counter
from typing import Iterable, List, Optional

from .logging import get_logger


class SimulationScheduler:
    """Runs each job in its own asyncio task for the life of the service.

    A disabled scheduler holds no jobs at all. Jobs share nothing but the
    engine, so one slow or failing job never delays or stops another.
    """

    def __init__(self, engine, jobs: Iterable, enabled: bool = True, rng: Optional[random.Random] = None):
        self.engine = engine
        self.enabled = enabled
        self.jobs = list(jobs) if enabled else []
        self.rng = rng or random.Random()
        self.logger = get_logger(f"{engine.catalog.namespace}.scheduler")
        self.firings: Counter = Counter()
        self.tasks: List[asyncio.Task] = []
        self.running = False

    async def start(self):
        """Start one task per job."""
        if self.running:
            return
        self.running = True
        self.tasks = [
            asyncio.create_task(self._run_job(job), name=f"simulation:{job.name}")
            for job in self.jobs
        ]
        self.logger.info("Simulation scheduler started", enabled=self.enabled, jobs=len(self.jobs))

    async def stop(self):
        """Cancel every job task and wait for them to finish."""
        self.running = False
        for task in self.tasks:
            task.cancel()
        if self.tasks:
            await asyncio.gather(*self.tasks, return_exceptions=True)
        self.tasks = []

        self.logger.info("Simulation scheduler stopped", firings=sum(self.firings.values()))

    async def _run_job(self, job):
        """Fire ``job`` at a fixed rate, starting immediately."""
        loop = asyncio.get_running_loop()
        next_run = loop.time()
        while self.running:
            await self.fire(job)
            next_run += job.period_seconds
            await asyncio.sleep(max(0.0, next_run - loop.time()))

    async def fire(self, job) -> bool:
        """Run a single firing of ``job`` with failures isolated to that firing."""
        self.firings[job.name] += 1
        try:
            performed = await job.fire(self.engine, self.rng)
            self.logger.debug("Simulation job fired", job=job.name, activities=performed)
            return True
        except asyncio.CancelledError:
            self.logger.warning("Simulation job interrupted", job=job.name)
            raise
        except Exception as e:
            self.logger.error("Error during simulation job", job=job.name, error=str(e), exc_info=True)
            return False
