"""
Deployment trigger client
Fires the one-shot webhook that starts a deployment
"""

import asyncio
import logging
from typing import Optional

import httpx

from shared.models import DeploymentResult, DeploymentStatus
from shared.config import get_settings

logger = logging.getLogger(__name__)

DEPLOYMENT_KEY_HEADER = "x-deployment-key"


class DeploymentTriggerError(Exception):
    """Raised when the deployment webhook could not be reached"""


class DeploymentClient:
    """Posts to the deployment webhook. The response body and status are not inspected."""

    def __init__(self, endpoint: str = None, deployment_key: str = None,
                 timeout: float = None,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        settings = get_settings()
        self.endpoint = endpoint if endpoint is not None else settings.deploy_api_endpoint
        self.deployment_key = deployment_key if deployment_key is not None else settings.deployment_key
        self.timeout = timeout if timeout is not None else settings.deploy_request_timeout
        self.transport = transport

    async def trigger(self) -> DeploymentResult:
        """Send a single POST to the deployment endpoint; no retries"""
        if not self.endpoint:
            raise DeploymentTriggerError("Deployment endpoint is not configured")

        loop = asyncio.get_running_loop()
        start_time = loop.time()
        logger.info(f"Triggering deployment via {self.endpoint}")

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(
                    self.endpoint,
                    headers={DEPLOYMENT_KEY_HEADER: self.deployment_key}
                )
        except httpx.HTTPError as e:
            logger.error(f"Deployment trigger failed: {e}")
            raise DeploymentTriggerError(str(e) or e.__class__.__name__) from e

        duration_ms = (loop.time() - start_time) * 1000
        logger.info(f"Deployment webhook responded with {response.status_code} in {duration_ms:.0f}ms")

        return DeploymentResult(
            status=DeploymentStatus.TRIGGERED,
            status_code=response.status_code,
            duration_ms=round(duration_ms, 2)
        )
