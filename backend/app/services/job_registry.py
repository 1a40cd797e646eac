"""
In-memory deployment job registry
Owns every Job record and serializes writes per job
"""
import threading
import uuid
from datetime import datetime
from typing import Callable, Dict, List, Optional, Tuple
import logging
from app.models.deploy import DeployRequest
from app.models.jobs import Job, JobStatus

logger = logging.getLogger(__name__)

CompletionCheck = Callable[[Job], Optional[Tuple[JobStatus, str]]]


class JobRegistryError(Exception):
    """Base error for registry operations"""

    code = "JOB_REGISTRY_ERROR"

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.field = field


class InvalidSpec(JobRegistryError):
    """Deploy spec is missing required fields"""

    code = "INVALID_SPEC"


class JobNotFound(JobRegistryError):
    """No job with the given id"""

    code = "JOB_NOT_FOUND"

    def __init__(self, job_id: str):
        super().__init__(f"Job {job_id} not found", field="job_id")
        self.job_id = job_id


class JobRegistry:
    """
    Stores job snapshots keyed by id.

    Writers take the per-job lock and swap in a new immutable snapshot;
    readers take no lock and always get a complete snapshot.
    """

    REQUIRED_FIELDS = ("edition", "version")

    def __init__(self, clock: Optional[Callable[[], datetime]] = None):
        self._jobs: Dict[str, Job] = {}
        self._locks: Dict[str, threading.Lock] = {}
        self._registry_lock = threading.Lock()
        self._clock = clock or datetime.now
        self._completion_checks: List[CompletionCheck] = []

    def now(self) -> datetime:
        return self._clock()

    def add_completion_check(self, check: CompletionCheck) -> None:
        """
        Register a check run on every progress update, inside the job lock.
        A check returning (status, message) finalizes the job in the same write.
        """
        self._completion_checks.append(check)

    def create_job(self, spec: DeployRequest) -> Job:
        """
        Validate the spec and store a new pending job
        """
        for field in self.REQUIRED_FIELDS:
            value = getattr(spec, field)
            if value is None or not str(value).strip():
                raise InvalidSpec(f"Field '{field}' is required", field=field)

        normalized = spec.with_defaults()
        now = self.now()
        job = Job(
            id=str(uuid.uuid4()),
            status=JobStatus.PENDING,
            percent=0,
            message="Deployment queued",
            spec=normalized,
            created_at=now,
            updated_at=now
        )

        with self._registry_lock:
            self._locks[job.id] = threading.Lock()
            self._jobs[job.id] = job

        logger.info(f"Created job {job.id}: edition={normalized.edition}, version={normalized.version}, server={normalized.server_name}")
        return job

    def get_job(self, job_id: str) -> Job:
        """
        Read-only lookup, never blocks on writers
        """
        job = self._jobs.get(job_id)
        if job is None:
            raise JobNotFound(job_id)
        return job

    def list_jobs(self) -> List[Job]:
        return list(self._jobs.values())

    def update_progress(self, job_id: str, percent: int, message: str) -> Job:
        """
        Apply a progress update.

        Lower percents than the stored one and updates to terminal jobs are
        ignored and the current snapshot is returned.
        """
        if percent < 0 or percent > 100:
            raise ValueError(f"percent must be between 0 and 100, got {percent}")

        with self._lock_for(job_id):
            current = self.get_job(job_id)
            if current.status.is_terminal:
                logger.debug(f"Ignoring progress for finished job {job_id}")
                return current
            if percent < current.percent:
                logger.debug(f"Ignoring stale progress for job {job_id}: {percent} < {current.percent}")
                return current

            updated = current.model_copy(update={
                "status": JobStatus.RUNNING,
                "percent": percent,
                "message": message,
                "updated_at": self.now()
            })
            for check in self._completion_checks:
                outcome = check(updated)
                if outcome is not None:
                    status, final_message = outcome
                    updated = self._finalize(updated, status, final_message)
                    break

            self._jobs[job_id] = updated

        if updated.status.is_terminal:
            logger.info(f"Job {job_id} finished: status={updated.status.value}, message={updated.message}")
        return updated

    def mark_terminal(
        self,
        job_id: str,
        status: JobStatus,
        message: str,
        stale_before: Optional[datetime] = None
    ) -> Job:
        """
        Move a job to succeeded or failed.

        The first terminal transition wins; later calls return the stored
        snapshot untouched. With stale_before set, the transition only
        happens if the job has not been updated since that instant.
        """
        if not status.is_terminal:
            raise ValueError(f"{status.value} is not a terminal status")

        with self._lock_for(job_id):
            current = self.get_job(job_id)
            if current.status.is_terminal:
                return current
            if stale_before is not None and current.updated_at >= stale_before:
                return current

            updated = self._finalize(current, status, message)
            self._jobs[job_id] = updated

        logger.info(f"Job {job_id} finished: status={status.value}, message={message}")
        return updated

    def remove_expired(self, updated_before: datetime) -> int:
        """
        Drop terminal jobs last updated before the given instant
        """
        with self._registry_lock:
            expired = [
                job_id for job_id, job in self._jobs.items()
                if job.status.is_terminal and job.updated_at < updated_before
            ]
            for job_id in expired:
                del self._jobs[job_id]
                self._locks.pop(job_id, None)

        for job_id in expired:
            logger.info(f"Cleaned up expired job {job_id}")
        return len(expired)

    def _lock_for(self, job_id: str) -> threading.Lock:
        with self._registry_lock:
            lock = self._locks.get(job_id)
        if lock is None:
            raise JobNotFound(job_id)
        return lock

    def _finalize(self, job: Job, status: JobStatus, message: str) -> Job:
        update = {"status": status, "message": message, "updated_at": self.now()}
        if status == JobStatus.SUCCEEDED:
            update["percent"] = 100
        return job.model_copy(update=update)


# Global instance
job_registry = JobRegistry()
