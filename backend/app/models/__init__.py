from .deploy import DeployRequest, DeployResponse, LoadingScreen
from .jobs import Job, JobStatus, JobProgress, ProgressEvent, ProgressEventAck

__all__ = [
    "DeployRequest",
    "DeployResponse",
    "LoadingScreen",
    "Job",
    "JobStatus",
    "JobProgress",
    "ProgressEvent",
    "ProgressEventAck"
]
