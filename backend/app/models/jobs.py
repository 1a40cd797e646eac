"""
Deployment job models
"""
from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from enum import Enum
from datetime import datetime
from app.models.deploy import DeployRequest


class JobStatus(str, Enum):
    """Job status enumeration"""
    PENDING = "pending"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (JobStatus.SUCCEEDED, JobStatus.FAILED)


class Job(BaseModel):
    """
    Snapshot of a deployment job.

    Instances are immutable; the registry replaces the stored snapshot on
    every change, so a reader holding one never sees a half-applied update.
    """
    model_config = ConfigDict(frozen=True)

    id: str
    status: JobStatus = JobStatus.PENDING
    percent: int = 0
    message: str = ""
    spec: DeployRequest = Field(default_factory=DeployRequest)
    created_at: datetime
    updated_at: datetime


class JobProgress(BaseModel):
    """Polling contract consumed by the deploy wizard"""
    percent: int
    message: str
    status: JobStatus

    @classmethod
    def from_job(cls, job: Job) -> "JobProgress":
        return cls(percent=job.percent, message=job.message, status=job.status)


class ProgressEvent(BaseModel):
    """Progress push from the provisioning backend"""
    model_config = ConfigDict(populate_by_name=True)

    job_id: str = Field(..., alias="jobId", min_length=1)
    percent: int = Field(..., ge=0, le=100)
    message: str = ""
    error: Optional[str] = None


class ProgressEventAck(BaseModel):
    """Callback acknowledgement"""
    accepted: bool
    status: Optional[JobStatus] = None
