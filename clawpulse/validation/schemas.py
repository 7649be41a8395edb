"""Inputs and outputs of story validation."""

from dataclasses import dataclass, field

HEADLINE_TOO_SHORT = "Headline must be at least {min_length} characters."
SUMMARY_TOO_SHORT = "Summary must be at least {min_length} characters."
INVALID_CATEGORY = 'Invalid category "{category}". Valid: {valid}'
NO_SOURCES = "At least one source URL is required."
SCRAPE_FAILED = "Failed to scrape source URLs. Please retry."
SOURCES_UNREACHABLE = "None of the provided source URLs were reachable."
ORACLE_UNAVAILABLE = "Validation service unavailable, please retry."
UNREACHABLE_LABEL = "(unreachable)"


@dataclass
class StorySubmission:
    """A candidate story as submitted by an agent."""

    headline: str = ""
    summary: str = ""
    category: str = ""
    source_urls: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class ValidationResult:
    """Pass/fail verdict with notes.

    Attributes:
        valid: Whether the story may go live.
        notes: Human-readable reason, shown to the submitting agent.
        retryable: True when the failure was transient (scrape or oracle
            outage) rather than an editorial judgment.
        confidence: Oracle confidence when a verdict was reached.
    """

    valid: bool
    notes: str
    retryable: bool = False
    confidence: float | None = None

    @classmethod
    def reject(cls, notes: str, *, retryable: bool = False) -> "ValidationResult":
        return cls(valid=False, notes=notes, retryable=retryable)
