"""
Best-effort client for the EC2 instance metadata service (IMDSv2).

IMDSv2 requires a session token: a PUT to /latest/api/token returns one, and
every metadata GET must present it in the X-aws-ec2-metadata-token header.
Nothing here raises; unavailable facts come back as the 'N/A' placeholder.
"""
from __future__ import annotations

import logging
from typing import Optional

import httpx

from .schemas import METADATA_PLACEHOLDER, InstanceMetadata
from .settings import get_settings

logger = logging.getLogger(__name__)

TOKEN_PATH = "/latest/api/token"
METADATA_PATH = "/latest/meta-data/"
TOKEN_TTL_HEADER = "X-aws-ec2-metadata-token-ttl-seconds"
TOKEN_HEADER = "X-aws-ec2-metadata-token"


class InstanceMetadataClient:
    """Two-step token-then-query fetcher for instance identity facts."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 2.0,
        token_ttl: int = 21600,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.token_ttl = token_ttl
        self._transport = transport

    def _client(self) -> httpx.Client:
        return httpx.Client(base_url=self.base_url, timeout=self.timeout, transport=self._transport)

    def fetch_token(self, client: httpx.Client) -> Optional[str]:
        """Request an IMDSv2 session token; None when the service is unreachable."""
        try:
            res = client.put(TOKEN_PATH, headers={TOKEN_TTL_HEADER: str(self.token_ttl)})
            res.raise_for_status()
        except httpx.HTTPError as e:
            logger.debug(f"IMDS token request failed: {e}")
            return None
        return res.text.strip() or None

    def get(self, client: httpx.Client, path: str, token: str) -> str:
        """Fetch one metadata path, falling back to the placeholder on any failure."""
        try:
            res = client.get(METADATA_PATH + path.lstrip("/"), headers={TOKEN_HEADER: token})
            res.raise_for_status()
        except httpx.HTTPError as e:
            logger.debug(f"IMDS request for {path} failed: {e}")
            return METADATA_PLACEHOLDER
        return res.text.strip() or METADATA_PLACEHOLDER

    def describe_instance(self) -> InstanceMetadata:
        """Return instance id, availability zone and private IP."""
        with self._client() as client:
            token = self.fetch_token(client)
            if token is None:
                return InstanceMetadata()
            return InstanceMetadata(
                instance_id=self.get(client, "instance-id", token),
                availability_zone=self.get(client, "placement/availability-zone", token),
                private_ip=self.get(client, "local-ipv4", token),
            )


# PUBLIC_INTERFACE
def get_metadata_client() -> InstanceMetadataClient:
    """FastAPI dependency returning a client configured from settings."""
    settings = get_settings()
    return InstanceMetadataClient(
        settings.imds_base_url,
        timeout=settings.imds_timeout_seconds,
        token_ttl=settings.imds_token_ttl_seconds,
    )
