"""Source inspector: fetch a small batch of URLs and extract plain text.

Each URL is fetched at most once with a bounded time budget and no
retries. A failing URL yields an empty string for that URL and never
affects the rest of the batch.
"""

import asyncio
import html
import logging
import re

import httpx
from bs4 import BeautifulSoup

from clawpulse.inspector.config import InspectorConfig
from clawpulse.observability.metrics import get_metrics

logger = logging.getLogger(__name__)

_STRIP_TAGS = ["script", "style", "nav", "footer", "header", "noscript"]
_WHITESPACE = re.compile(r"\s+")


class InspectorError(Exception):
    """Raised when a batch cannot be inspected at all."""


def extract_page_text(html_content: str, body_chars: int = 2000) -> str:
    """
    Extract labeled plain text from an HTML page.

    Produces up to three newline-joined pieces, omitting empty ones:
    ``Title: ...``, ``Description: ...`` and the first ``body_chars``
    characters of visible body text.

    Args:
        html_content: Raw HTML string
        body_chars: Maximum body characters to keep

    Returns:
        Extracted text, or "" for an empty page
    """
    if not html_content:
        return ""

    soup = BeautifulSoup(html_content, "html.parser")

    title = ""
    if soup.title is not None:
        title = _collapse(soup.title.get_text())

    description = ""
    meta = soup.find("meta", attrs={"name": "description"})
    if meta is not None and meta.get("content"):
        description = _collapse(str(meta["content"]))

    for element in soup(_STRIP_TAGS):
        element.decompose()

    body = soup.body if soup.body is not None else soup
    body_text = _collapse(body.get_text(separator=" "))[:body_chars]

    pieces = [
        f"Title: {title}" if title else "",
        f"Description: {description}" if description else "",
        body_text,
    ]
    return "\n".join(p for p in pieces if p)


def _collapse(text: str) -> str:
    return _WHITESPACE.sub(" ", html.unescape(text)).strip()


class SourceInspector:
    """
    Fetches source pages with bounded concurrency.

    Usage:
        inspector = SourceInspector()
        texts = await inspector.fetch(["https://example.com/story"])
        texts["https://example.com/story"]  # "" if unreachable
    """

    def __init__(
        self,
        config: InspectorConfig | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._config = config or InspectorConfig()
        self._client = client

    @property
    def config(self) -> InspectorConfig:
        return self._config

    async def fetch(self, urls: list[str]) -> dict[str, str]:
        """
        Fetch and extract every URL in the batch.

        Args:
            urls: URLs to inspect; duplicates are fetched once

        Returns:
            Mapping url -> extracted text ("" means unreachable or empty)

        Raises:
            InspectorError: If the batch exceeds ``max_urls`` or the HTTP
                client cannot be created
        """
        unique = list(dict.fromkeys(urls))
        if not unique:
            return {}
        if len(unique) > self._config.max_urls:
            raise InspectorError(
                f"Maximum {self._config.max_urls} URLs per batch, got {len(unique)}"
            )

        semaphore = asyncio.Semaphore(self._config.max_concurrency)

        async def _bounded(client: httpx.AsyncClient, url: str) -> str:
            async with semaphore:
                return await self._fetch_one(client, url)

        if self._client is not None:
            texts = await asyncio.gather(*(_bounded(self._client, u) for u in unique))
        else:
            try:
                client = httpx.AsyncClient(
                    timeout=self._config.request_timeout,
                    follow_redirects=True,
                    headers={"User-Agent": self._config.user_agent},
                )
            except Exception as e:
                raise InspectorError(f"Could not create HTTP client: {e}") from e
            async with client:
                texts = await asyncio.gather(*(_bounded(client, u) for u in unique))

        results = dict(zip(unique, texts))
        logger.info(
            "Inspected %d source URLs (%d reachable)",
            len(results),
            sum(1 for t in results.values() if t),
        )
        return results

    async def _fetch_one(self, client: httpx.AsyncClient, url: str) -> str:
        """Fetch one URL; every failure maps to an empty string."""
        metrics = get_metrics()
        try:
            response = await asyncio.wait_for(
                client.get(url),
                timeout=self._config.request_timeout,
            )
            response.raise_for_status()
            text = extract_page_text(response.text, self._config.body_chars)
        except (
            httpx.HTTPError,
            httpx.InvalidURL,
            asyncio.TimeoutError,
            UnicodeDecodeError,
        ) as e:
            logger.debug("Source fetch failed for %s: %s", url, e)
            metrics.record_fetch("error")
            return ""

        metrics.record_fetch("ok" if text else "empty")
        return text
