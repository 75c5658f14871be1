"""
Client for the Arborist authorization service.
"""

import logging
from typing import List, Optional

import httpx

logger = logging.getLogger(__name__)


class ArboristClient:
    """Lists the resources a user may access."""

    def __init__(
        self,
        arborist_endpoint: str,
        timeout: float = 10.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        """
        Initialize Arborist client.

        Args:
            arborist_endpoint: Base URL of the Arborist service
            timeout: Request timeout in seconds
            transport: Optional httpx transport (used by tests)
        """
        self.base_endpoint = arborist_endpoint.rstrip("/")
        self.timeout = timeout
        self.transport = transport

    def list_authorized_resources(self, jwt: Optional[str]) -> List[str]:
        """
        Get the resource paths the token's user is authorized for.

        A missing token or a failed request yields no resources, so the
        caller falls back to the most restrictive filter.

        Args:
            jwt: The caller's access token

        Returns:
            Authorized resource paths
        """
        if not jwt:
            logger.error("no JWT in the context; returning no resources")
            return []

        resources_endpoint = f"{self.base_endpoint}/auth/resources"
        logger.debug("[ArboristClient] listAuthorizedResources for %s", resources_endpoint)
        try:
            with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
                response = client.post(resources_endpoint, json={"user": {"token": jwt}})
                response.raise_for_status()
                data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.error("[ArboristClient] request failed: %s", e)
            return []

        if isinstance(data, dict):
            return list(data.get("resources", []))
        return list(data)
