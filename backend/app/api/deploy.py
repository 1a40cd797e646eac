"""
Deploy API endpoints
"""
from fastapi import APIRouter, status
from fastapi.responses import JSONResponse
import logging

from app.models.deploy import DeployRequest, DeployResponse
from app.models.jobs import JobStatus
from app.services.job_registry import InvalidSpec, job_registry
from app.services.completion_detector import completion_detector
from app.services.provisioner_client import ProvisionerError, provisioner_client
from app.core.config import settings

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/deploy", response_model=DeployResponse)
async def create_deployment(request: DeployRequest):
    """
    Create a deployment job and hand it to the provisioning backend
    """
    try:
        job = job_registry.create_job(request)
    except InvalidSpec as e:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={
                "code": e.code,
                "message": e.message,
                "field": e.field
            }
        )

    if provisioner_client.enabled:
        try:
            await provisioner_client.dispatch(job)
        except ProvisionerError as e:
            completion_detector.report_error(job.id, e.message)
            return JSONResponse(
                status_code=status.HTTP_502_BAD_GATEWAY,
                content={
                    "success": False,
                    "serverId": job.id,
                    "status": JobStatus.FAILED.value,
                    "message": f"Provisioning failed: {e.message}",
                    "code": "PROVISIONER_ERROR"
                }
            )

    return DeployResponse(
        success=True,
        server_id=job.id,
        status=job.status.value,
        message="Deployment started",
        progress_url=settings.progress_url(job.id),
        logs_url=settings.LOGS_URL_TEMPLATE.format(server_id=job.id),
        command_url=settings.COMMAND_URL_TEMPLATE.format(server_id=job.id)
    )
