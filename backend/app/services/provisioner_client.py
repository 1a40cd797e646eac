"""
Client for the remote provisioning API
Hands new deployment jobs to the service that actually builds the server
"""
import httpx
from typing import Any, Dict, Optional
import logging
from app.models.jobs import Job
from app.core.config import settings

logger = logging.getLogger(__name__)


class ProvisionerError(Exception):
    """Provisioning API unreachable or rejected the request"""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class ProvisionerClient:
    """Posts deploy specs to the provisioning API"""

    def __init__(
        self,
        url: Optional[str] = None,
        api_key: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self._url = url if url is not None else settings.PROVISIONER_URL
        self._api_key = api_key if api_key is not None else settings.PROVISIONER_API_KEY
        self._timeout = timeout if timeout is not None else settings.PROVISIONER_TIMEOUT_SECONDS
        self._transport = transport

    @property
    def enabled(self) -> bool:
        return bool(self._url)

    async def dispatch(self, job: Job) -> Dict[str, Any]:
        """
        Send the job spec with its id so progress callbacks can refer to it.
        Returns the decoded JSON body of the provisioning API, if any.
        """
        payload = {**job.spec.model_dump(by_alias=True), "jobId": job.id}
        headers = {"Content-Type": "application/json"}
        if self._api_key:
            headers["x-api-key"] = self._api_key

        logger.info(f"Dispatching job {job.id} to provisioner at {self._url}")
        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                response = await client.post(self._url, json=payload, headers=headers)
        except httpx.HTTPError as e:
            logger.error(f"Provisioner request failed for job {job.id}: {e}")
            raise ProvisionerError(f"Provisioner unreachable: {e}") from e

        if response.status_code >= 400:
            logger.error(f"Provisioner rejected job {job.id}: {response.status_code} {response.text}")
            raise ProvisionerError(
                response.text or f"Provisioner returned {response.status_code}",
                status_code=response.status_code
            )

        if not response.content:
            return {}
        try:
            return response.json()
        except ValueError:
            logger.warning(f"Provisioner returned a non-JSON body for job {job.id}")
            return {}


# Global instance
provisioner_client = ProvisionerClient()
