# roomchat/infrastructure/scheduler.py
import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field

Job = Callable[[], Awaitable[object]]


@dataclass
class PeriodicJob:
    name: str
    interval_seconds: float
    func: Job
    task: asyncio.Task | None = field(default=None, repr=False)


class PeriodicScheduler:
    """Runs registered coroutines on fixed intervals until stopped."""

    def __init__(self, logger: logging.Logger):
        self.logger = logger
        self.jobs: list[PeriodicJob] = []

    def add_job(self, name: str, interval_seconds: float, func: Job) -> None:
        self.jobs.append(PeriodicJob(name, interval_seconds, func))

    async def run_job(self, job: PeriodicJob) -> None:
        try:
            result = await job.func()
            self.logger.info(f"Job '{job.name}' finished: {result}")
        except Exception:
            # the loop keeps its schedule; the next tick runs the job again
            self.logger.exception(f"Job '{job.name}' failed")

    async def _loop(self, job: PeriodicJob) -> None:
        while True:
            await asyncio.sleep(job.interval_seconds)
            await self.run_job(job)

    def start(self) -> None:
        for job in self.jobs:
            if job.task is None or job.task.done():
                job.task = asyncio.create_task(self._loop(job), name=job.name)
                self.logger.info(
                    f"Scheduled job '{job.name}' every {job.interval_seconds}s"
                )

    async def stop(self) -> None:
        tasks = [job.task for job in self.jobs if job.task is not None]
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        for job in self.jobs:
            job.task = None
