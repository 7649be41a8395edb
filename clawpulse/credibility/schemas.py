"""Data models for credibility verdicts."""

from pydantic import BaseModel, Field


class CredibilityVerdict(BaseModel):
    """Structured verdict returned by the credibility oracle."""

    credible: bool = Field(description="Whether the sources support the story")
    confidence: float = Field(ge=0.0, le=1.0, description="Model confidence 0-1")
    rationale: str = Field(min_length=1, description="Human-readable reasoning")
