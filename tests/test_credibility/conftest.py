"""Fixtures for credibility oracle tests."""

import json
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

from clawpulse.credibility.config import CredibilityConfig


def _completion(content: str | None) -> SimpleNamespace:
    message = SimpleNamespace(content=content)
    return SimpleNamespace(choices=[SimpleNamespace(message=message)])


@pytest.fixture
def credibility_config() -> CredibilityConfig:
    return CredibilityConfig(
        openai_api_key="sk-test",
        circuit_failure_threshold=2,
        circuit_recovery_timeout=30.0,
    )


@pytest.fixture
def make_client():
    """Build a fake AsyncOpenAI client whose completion returns ``content``."""

    def _make(content: str | None = None, side_effect=None) -> MagicMock:
        client = MagicMock()
        client.chat.completions.create = AsyncMock(
            return_value=_completion(content),
            side_effect=side_effect,
        )
        client.close = AsyncMock()
        return client

    return _make


@pytest.fixture
def credible_json() -> str:
    return json.dumps({
        "credible": True,
        "confidence": 0.9,
        "rationale": "Two independent outlets report the closure.",
    })
