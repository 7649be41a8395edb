"""OpenAI-backed credibility oracle.

The SDK import is deferred to first use so the package imports without an
API key configured. Every failure mode (timeout, provider error, open
circuit, malformed JSON, schema mismatch) surfaces as
``OracleUnavailableError``; callers must treat it as "try again", never as
a verdict.
"""

import json
import logging
import time
from typing import Any

from pydantic import ValidationError

from clawpulse.credibility.circuit_breaker import CircuitBreaker, CircuitOpenError
from clawpulse.credibility.config import CredibilityConfig
from clawpulse.credibility.prompts import ASSESSMENT_PROMPT, SYSTEM_PROMPT
from clawpulse.credibility.schemas import CredibilityVerdict
from clawpulse.observability.metrics import get_metrics

logger = logging.getLogger(__name__)


class OracleUnavailableError(Exception):
    """The oracle could not produce a well-formed verdict."""


class CredibilityOracle:
    """Credibility verdicts from an OpenAI chat model in JSON mode.

    Args:
        config: Oracle configuration with API key, model and timeouts.
        client: Optional pre-built ``openai.AsyncOpenAI``-compatible client.
    """

    def __init__(
        self,
        config: CredibilityConfig | None = None,
        client: Any = None,
    ) -> None:
        self._config = config or CredibilityConfig()
        self._client: Any = client
        self._breaker = CircuitBreaker(
            failure_threshold=self._config.circuit_failure_threshold,
            recovery_timeout=self._config.circuit_recovery_timeout,
            name="credibility-openai",
        )

    def _get_client(self) -> Any:
        """Lazy-initialize OpenAI async client."""
        if self._client is None:
            import openai

            api_key = self._config.openai_api_key
            key_str = api_key.get_secret_value() if api_key else None
            self._client = openai.AsyncOpenAI(
                api_key=key_str,
                timeout=self._config.llm_timeout,
                max_retries=self._config.max_retries,
            )
        return self._client

    @property
    def breaker(self) -> CircuitBreaker:
        return self._breaker

    async def assess(
        self,
        headline: str,
        summary: str,
        category: str,
        sources_text: str,
    ) -> CredibilityVerdict:
        """Judge whether the sources support the story.

        Raises:
            OracleUnavailableError: On any call or parse failure.
        """
        prompt = ASSESSMENT_PROMPT.format(
            headline=headline,
            summary=summary,
            category=category,
            sources_text=sources_text[: self._config.max_source_chars],
        )

        try:
            self._breaker.before_call()
        except CircuitOpenError as e:
            raise OracleUnavailableError(str(e)) from e

        start = time.perf_counter()
        try:
            client = self._get_client()
            response = await client.chat.completions.create(
                model=self._config.model,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": prompt},
                ],
                temperature=0,
                response_format={"type": "json_object"},
            )
        except Exception as e:
            self._breaker.record_failure()
            logger.warning("Credibility oracle call failed: %s", e)
            raise OracleUnavailableError(f"Oracle call failed: {e}") from e
        finally:
            get_metrics().record_oracle_latency(time.perf_counter() - start)

        self._breaker.record_success()
        choices = getattr(response, "choices", None) or []
        raw = choices[0].message.content if choices else None
        return parse_verdict(raw)

    async def close(self) -> None:
        """Clean up the SDK client."""
        if self._client is not None:
            await self._client.close()
            self._client = None


def parse_verdict(raw: str | None) -> CredibilityVerdict:
    """Parse a raw JSON response into a CredibilityVerdict.

    Raises:
        OracleUnavailableError: If the payload is empty, not JSON, or not
            the expected shape.
    """
    if not raw:
        raise OracleUnavailableError("Empty oracle response")
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        logger.warning("Failed to parse oracle response as JSON")
        raise OracleUnavailableError("Oracle response is not JSON") from e

    if not isinstance(data, dict) or not isinstance(data.get("credible"), bool):
        raise OracleUnavailableError("Oracle response missing boolean 'credible'")

    try:
        return CredibilityVerdict.model_validate(data)
    except ValidationError as e:
        logger.warning("Failed to validate oracle response: %s", e)
        raise OracleUnavailableError("Oracle response has unexpected shape") from e
