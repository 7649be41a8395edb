"""Story validator: field checks, source inspection, then credibility.

Checks run strictly in order and stop at the first failure. Transient
failures (inspector outage, oracle outage) come back as retryable
rejections so an agent can resubmit instead of treating them as an
editorial decision.
"""

import logging

from clawpulse.credibility.oracle import CredibilityOracle, OracleUnavailableError
from clawpulse.feed.config import FeedConfig
from clawpulse.inspector.service import InspectorError, SourceInspector
from clawpulse.observability.metrics import get_metrics
from clawpulse.validation.schemas import (
    HEADLINE_TOO_SHORT,
    INVALID_CATEGORY,
    NO_SOURCES,
    ORACLE_UNAVAILABLE,
    SCRAPE_FAILED,
    SOURCES_UNREACHABLE,
    SUMMARY_TOO_SHORT,
    UNREACHABLE_LABEL,
    StorySubmission,
    ValidationResult,
)

logger = logging.getLogger(__name__)


def format_sources(texts: dict[str, str]) -> str:
    """Label each URL's extracted content for the oracle prompt."""
    blocks = []
    for idx, (url, text) in enumerate(texts.items(), start=1):
        blocks.append(f"[Source {idx}] {url}\n{text or UNREACHABLE_LABEL}")
    return "\n\n".join(blocks)


class StoryValidator:
    """Single pass/fail verdict for a submitted story.

    Args:
        inspector: Fetches source pages.
        oracle: Judges credibility of the story against its sources.
        feed_config: Category set and minimum field lengths.
    """

    def __init__(
        self,
        inspector: SourceInspector,
        oracle: CredibilityOracle,
        feed_config: FeedConfig | None = None,
    ) -> None:
        self._inspector = inspector
        self._oracle = oracle
        self._feed_config = feed_config or FeedConfig()

    def check_fields(self, story: StorySubmission) -> ValidationResult | None:
        """Run the local field checks.

        Returns:
            A rejection for the first failing check, or None if all pass.
        """
        config = self._feed_config
        if len(story.headline.strip()) < config.min_headline_length:
            return ValidationResult.reject(
                HEADLINE_TOO_SHORT.format(min_length=config.min_headline_length)
            )
        if len(story.summary.strip()) < config.min_summary_length:
            return ValidationResult.reject(
                SUMMARY_TOO_SHORT.format(min_length=config.min_summary_length)
            )
        if not config.is_valid_category(story.category):
            return ValidationResult.reject(
                INVALID_CATEGORY.format(
                    category=story.category,
                    valid=", ".join(config.categories),
                )
            )
        if not [u for u in story.source_urls if u.strip()]:
            return ValidationResult.reject(NO_SOURCES)
        return None

    async def validate(self, story: StorySubmission) -> ValidationResult:
        """Validate a story end to end. Never raises for external failures."""
        result = await self._validate(story)
        if result.valid:
            outcome = "accepted"
        elif result.retryable:
            outcome = "retryable"
        else:
            outcome = "rejected"
        get_metrics().record_validation(outcome)
        return result

    async def _validate(self, story: StorySubmission) -> ValidationResult:
        failed = self.check_fields(story)
        if failed is not None:
            return failed

        urls = [u.strip() for u in story.source_urls if u.strip()]
        urls = list(dict.fromkeys(urls))[: self._inspector.config.max_urls]

        try:
            texts = await self._inspector.fetch(urls)
        except InspectorError as e:
            logger.warning("Source inspection failed: %s", e)
            return ValidationResult.reject(SCRAPE_FAILED, retryable=True)

        if not any(texts.get(u) for u in urls):
            return ValidationResult.reject(SOURCES_UNREACHABLE)

        sources_text = format_sources({u: texts.get(u, "") for u in urls})

        try:
            verdict = await self._oracle.assess(
                story.headline,
                story.summary,
                story.category,
                sources_text,
            )
        except OracleUnavailableError as e:
            logger.warning("Credibility oracle unavailable: %s", e)
            return ValidationResult.reject(ORACLE_UNAVAILABLE, retryable=True)

        confidence = round(verdict.confidence, 2)
        if verdict.credible:
            return ValidationResult(
                valid=True,
                notes=f"Verified (confidence: {confidence}): {verdict.rationale}",
                confidence=confidence,
            )
        return ValidationResult(
            valid=False,
            notes=f"Rejected: {verdict.rationale}",
            confidence=confidence,
        )
