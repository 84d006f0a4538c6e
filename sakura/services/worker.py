"""Single-consumer reply worker.

Jobs are drained by at most one asyncio task at a time. The task is started
lazily by ``enqueue`` when the worker is idle and exits once the queue is
empty, so nothing runs while there is no work.
"""

import asyncio
import logging
from typing import Optional

from sakura.logging_config import LoggerAdapter, get_logger
from sakura.services.completion_service import CompletionGateway
from sakura.services.job_queue import Job, JobQueue
from sakura.services.line_service import Delivery, DeliveryTarget
from sakura.services.worker_state import WorkerState, finish_draining, start_draining

logger = get_logger("worker")


class ReplyWorker:
    def __init__(self, queue: JobQueue, gateway: CompletionGateway, delivery: Delivery):
        self.queue = queue
        self.gateway = gateway
        self.delivery = delivery
        self.state = WorkerState.IDLE
        self._task: Optional[asyncio.Task] = None

    def enqueue(self, job: Job) -> None:
        """Queue a job and start a drain cycle if none is running.

        Must be called from inside the running event loop.
        """
        self.queue.push(job)
        if self.state is WorkerState.DRAINING:
            return

        loop = asyncio.get_running_loop()
        self.state = start_draining(self.state)
        try:
            self._task = loop.create_task(self._drain())
        except BaseException:
            self.state = finish_draining(self.state)
            raise
        self._task.add_done_callback(self._release_if_stuck)

    def _release_if_stuck(self, task: asyncio.Task) -> None:
        # A task cancelled before its first step never enters _drain's finally.
        if task is self._task and self.state is WorkerState.DRAINING:
            logger.warning("Drain task ended without releasing the worker, resetting to idle")
            self.state = finish_draining(self.state)

    async def wait_idle(self) -> None:
        """Wait until no drain cycle is running."""
        while self._task is not None and not self._task.done():
            await asyncio.wait({self._task})

    async def _drain(self) -> None:
        processed = 0
        try:
            while True:
                job = self.queue.pop()
                if job is None:
                    break
                await self._process_safely(job)
                processed += 1
        finally:
            # no await between the empty pop and this reset
            self.state = finish_draining(self.state)
            logger.debug("Drain cycle finished", extra={"context": {"processed": processed}})

    async def _process_safely(self, job: Job) -> None:
        job_logger = LoggerAdapter(logger, {"user_id": job.user_id})
        try:
            await self.process(job, job_logger)
        except Exception:
            job_logger.exception("Reply job failed")

    async def process(self, job: Job, job_logger: logging.LoggerAdapter) -> None:
        """Generate a reply for one job and push it to the sender."""
        reply = await self.gateway.complete(job.user_id, job.text)
        result = await self.delivery.send(DeliveryTarget.for_user(job.user_id), reply)
        if not result.ok:
            job_logger.error(
                "Reply delivery failed, dropping job",
                context=result.describe(),
            )
            return
        job_logger.info("Reply delivered", context={"ai_enabled": self.gateway.ai_enabled})
