"""
Provisioning backend callback endpoints
"""
from fastapi import APIRouter, Header, status
from fastapi.responses import JSONResponse
from typing import Optional
import logging

from app.models.jobs import ProgressEvent, ProgressEventAck
from app.services.progress_reporter import progress_reporter
from app.core.config import settings

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "/callbacks/progress",
    response_model=ProgressEventAck,
    status_code=status.HTTP_202_ACCEPTED
)
async def receive_progress(
    event: ProgressEvent,
    x_api_key: Optional[str] = Header(None)
):
    """
    Accept a progress event pushed by the provisioning backend
    """
    if settings.CALLBACK_API_KEY and x_api_key != settings.CALLBACK_API_KEY:
        logger.warning(f"Rejected progress callback for job {event.job_id}: bad API key")
        return JSONResponse(
            status_code=status.HTTP_401_UNAUTHORIZED,
            content={
                "code": "UNAUTHORIZED",
                "message": "Invalid callback API key",
                "field": "x-api-key"
            }
        )

    job = progress_reporter.report(event)
    if job is None:
        return ProgressEventAck(accepted=False)

    return ProgressEventAck(accepted=True, status=job.status)
