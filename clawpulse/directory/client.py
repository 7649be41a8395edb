"""Agent directory lookups for display names and reputation.

The directory is an optional enrichment source. Any failure (timeout,
non-2xx, bad JSON) returns None and is never surfaced to the caller.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any
from urllib.parse import quote

import httpx

from clawpulse.config.settings import get_settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AgentProfile:
    address: str
    name: str | None = None
    reputation: float | None = None


class AgentDirectoryClient:
    """
    Async client for the agent directory.

    Example:
        async with AgentDirectoryClient() as directory:
            profile = await directory.get_agent("0xabc")
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        settings = get_settings()
        self._base_url = (base_url or settings.directory_url).rstrip("/")
        self._timeout = timeout or settings.directory_timeout
        self._client = client
        self._owns_client = client is None

    async def __aenter__(self) -> "AgentDirectoryClient":
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._timeout)
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()

    async def close(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def get_agent(self, address: str) -> AgentProfile | None:
        """Look up one agent; None when unknown or the directory is down."""
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._timeout)

        url = f"{self._base_url}/api/agents/{quote(address, safe='')}"
        try:
            response = await self._client.get(url)
            if response.status_code != 200:
                return None
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.debug("Directory lookup failed for %s: %s", address, e)
            return None

        if not isinstance(data, dict):
            return None

        reputation = data.get("reputation")
        name = data.get("name")
        return AgentProfile(
            address=address,
            name=name if isinstance(name, str) else None,
            reputation=float(reputation)
            if isinstance(reputation, (int, float)) and not isinstance(reputation, bool)
            else None,
        )

    async def get_names(self, addresses: list[str]) -> dict[str, str | None]:
        """Resolve display names for several agents concurrently."""
        profiles = await asyncio.gather(*(self.get_agent(a) for a in addresses))
        return {
            address: profile.name if profile else None
            for address, profile in zip(addresses, profiles)
        }
