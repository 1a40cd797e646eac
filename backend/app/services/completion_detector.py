"""
Completion detection for deployment jobs
Finalizes jobs on 100%, on backend errors, and on inactivity timeouts
"""
import asyncio
from datetime import timedelta
from typing import List, Optional, Tuple
import logging
from app.models.jobs import Job, JobStatus
from app.services.job_registry import JobNotFound, JobRegistry, job_registry
from app.core.config import settings

logger = logging.getLogger(__name__)

TIMEOUT_MESSAGE = "deployment timed out"


class CompletionDetector:
    """
    Decides when a job is finished.

    evaluate() runs inside every progress update. The timeout sweep runs as
    a background task on its own cadence and never waits for a client poll.
    """

    def __init__(
        self,
        registry: JobRegistry,
        timeout_seconds: float = settings.DEPLOY_TIMEOUT_SECONDS,
        retention_seconds: float = settings.JOB_RETENTION_SECONDS,
        sweep_interval: float = settings.SWEEP_INTERVAL_SECONDS
    ):
        self._registry = registry
        self._timeout = timedelta(seconds=timeout_seconds)
        self._retention = timedelta(seconds=retention_seconds)
        self._sweep_interval = sweep_interval
        self._task: Optional[asyncio.Task] = None
        self._running = False
        registry.add_completion_check(self.evaluate)

    def evaluate(self, job: Job) -> Optional[Tuple[JobStatus, str]]:
        if job.percent >= 100:
            return JobStatus.SUCCEEDED, job.message or "Deployment complete"
        return None

    def report_error(self, job_id: str, message: str) -> Job:
        """
        Fail a job on an explicit backend error, keeping the error text
        """
        logger.warning(f"Backend reported error for job {job_id}: {message}")
        return self._registry.mark_terminal(job_id, JobStatus.FAILED, message)

    def sweep(self) -> List[Job]:
        """
        Fail every unfinished job without progress inside the timeout window.
        Returns the jobs failed by this pass.
        """
        cutoff = self._registry.now() - self._timeout
        timed_out = []

        for job in self._registry.list_jobs():
            if job.status.is_terminal or job.updated_at >= cutoff:
                continue
            try:
                updated = self._registry.mark_terminal(
                    job.id,
                    JobStatus.FAILED,
                    TIMEOUT_MESSAGE,
                    stale_before=cutoff
                )
            except JobNotFound:
                continue
            if updated.status == JobStatus.FAILED and updated.message == TIMEOUT_MESSAGE and updated is not job:
                logger.warning(f"Job {job.id} timed out after {self._timeout.total_seconds():.0f}s without progress")
                timed_out.append(updated)

        return timed_out

    def collect_garbage(self) -> int:
        """
        Drop finished jobs past the retention window
        """
        return self._registry.remove_expired(self._registry.now() - self._retention)

    async def start(self) -> None:
        self._running = True
        self._task = asyncio.create_task(self._sweep_loop())
        logger.info(f"Completion sweep started: timeout={self._timeout.total_seconds():.0f}s, interval={self._sweep_interval}s")

    async def stop(self) -> None:
        self._running = False
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None

    async def _sweep_loop(self) -> None:
        while self._running:
            try:
                self.sweep()
                self.collect_garbage()
            except Exception as e:
                logger.error(f"Error in completion sweep: {e}", exc_info=True)
            await asyncio.sleep(self._sweep_interval)


# Global instance
completion_detector = CompletionDetector(job_registry)
