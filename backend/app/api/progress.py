"""
Progress polling endpoints
Pure snapshot reads, safe to call at any cadence
"""
from fastapi import APIRouter, status
from fastapi.responses import JSONResponse
import logging

from app.models.jobs import Job, JobProgress
from app.services.job_registry import JobNotFound, job_registry

logger = logging.getLogger(__name__)

router = APIRouter()


def _not_found(e: JobNotFound) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content={
            "code": e.code,
            "message": e.message,
            "field": e.field
        }
    )


@router.get("/progress/{job_id}", response_model=JobProgress)
async def get_progress(job_id: str):
    """
    Get {percent, message, status} for a job
    """
    try:
        job = job_registry.get_job(job_id)
    except JobNotFound as e:
        return _not_found(e)

    return JobProgress.from_job(job)


@router.get("/jobs/{job_id}", response_model=Job)
async def get_job(job_id: str):
    """
    Get the full job record
    """
    try:
        return job_registry.get_job(job_id)
    except JobNotFound as e:
        return _not_found(e)
