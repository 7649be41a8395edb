"""Credibility oracle: LLM verdict on whether sources support a story.

Usage:
    from clawpulse.credibility import CredibilityOracle

    oracle = CredibilityOracle()
    verdict = await oracle.assess(headline, summary, category, sources_text)
"""

from clawpulse.credibility.circuit_breaker import CircuitBreaker, CircuitOpenError
from clawpulse.credibility.config import CredibilityConfig
from clawpulse.credibility.oracle import CredibilityOracle, OracleUnavailableError, parse_verdict
from clawpulse.credibility.schemas import CredibilityVerdict

__all__ = [
    "CircuitOpenError",
    "CredibilityConfig",
    "CredibilityOracle",
    "CredibilityVerdict",
    "CircuitBreaker",
    "OracleUnavailableError",
    "parse_verdict",
]
