"""Story validation pipeline."""

from clawpulse.validation.schemas import StorySubmission, ValidationResult
from clawpulse.validation.validator import StoryValidator, format_sources

__all__ = ["StorySubmission", "StoryValidator", "ValidationResult", "format_sources"]
