"""Tests for the credibility oracle and verdict parsing."""

import json
from unittest.mock import patch

import pytest

from clawpulse.credibility.circuit_breaker import CircuitState
from clawpulse.credibility.oracle import (
    CredibilityOracle,
    OracleUnavailableError,
    parse_verdict,
)
from clawpulse.credibility.prompts import ASSESSMENT_PROMPT


class TestParseVerdict:
    def test_valid(self, credible_json):
        verdict = parse_verdict(credible_json)
        assert verdict.credible is True
        assert verdict.confidence == 0.9
        assert verdict.rationale.startswith("Two independent")

    @pytest.mark.parametrize(
        "raw",
        [
            None,
            "",
            "not json",
            "[]",
            json.dumps({"confidence": 0.5, "rationale": "r"}),
            json.dumps({"credible": "yes", "confidence": 0.5, "rationale": "r"}),
            json.dumps({"credible": True, "confidence": 1.5, "rationale": "r"}),
            json.dumps({"credible": True, "confidence": 0.5, "rationale": ""}),
            json.dumps({"credible": True, "rationale": "r"}),
        ],
    )
    def test_malformed_is_unavailable(self, raw):
        with pytest.raises(OracleUnavailableError):
            parse_verdict(raw)


class TestAssess:
    async def test_returns_verdict(self, credibility_config, make_client, credible_json):
        client = make_client(credible_json)
        oracle = CredibilityOracle(credibility_config, client=client)

        verdict = await oracle.assess(
            "Port closed overnight",
            "Authorities closed the port after a fire.",
            "breaking",
            "[Source 1] https://a.example\nTitle: Port closed",
        )

        assert verdict.credible
        kwargs = client.chat.completions.create.call_args.kwargs
        assert kwargs["model"] == "gpt-4o-mini"
        assert kwargs["temperature"] == 0
        assert kwargs["response_format"] == {"type": "json_object"}
        user_message = kwargs["messages"][1]["content"]
        assert "Port closed overnight" in user_message
        assert "[Source 1] https://a.example" in user_message

    async def test_sources_text_is_capped(self, make_client, credible_json):
        from clawpulse.credibility.config import CredibilityConfig

        config = CredibilityConfig(openai_api_key="sk-test", max_source_chars=500)
        client = make_client(credible_json)
        oracle = CredibilityOracle(config, client=client)

        await oracle.assess("h" * 10, "s" * 20, "tech", "x" * 5000)

        user_message = client.chat.completions.create.call_args.kwargs["messages"][1]["content"]
        assert "x" * 500 in user_message
        assert "x" * 501 not in user_message

    async def test_provider_error_is_unavailable(self, credibility_config, make_client):
        client = make_client(side_effect=RuntimeError("503 from provider"))
        oracle = CredibilityOracle(credibility_config, client=client)

        with pytest.raises(OracleUnavailableError, match="503"):
            await oracle.assess("headline", "summary", "tech", "sources")

    async def test_malformed_response_is_unavailable(self, credibility_config, make_client):
        oracle = CredibilityOracle(credibility_config, client=make_client("{}"))
        with pytest.raises(OracleUnavailableError):
            await oracle.assess("headline", "summary", "tech", "sources")

    async def test_empty_choices_is_unavailable(self, credibility_config, make_client):
        client = make_client()
        client.chat.completions.create.return_value.choices = []
        oracle = CredibilityOracle(credibility_config, client=client)
        with pytest.raises(OracleUnavailableError, match="Empty"):
            await oracle.assess("headline", "summary", "tech", "sources")

    async def test_open_circuit_fails_fast(self, credibility_config, make_client):
        client = make_client(side_effect=RuntimeError("down"))
        oracle = CredibilityOracle(credibility_config, client=client)

        for _ in range(2):
            with pytest.raises(OracleUnavailableError):
                await oracle.assess("headline", "summary", "tech", "sources")
        assert oracle.breaker.state == CircuitState.OPEN

        with pytest.raises(OracleUnavailableError, match="OPEN"):
            await oracle.assess("headline", "summary", "tech", "sources")
        assert client.chat.completions.create.await_count == 2

    async def test_close_releases_client(self, credibility_config, make_client):
        client = make_client()
        oracle = CredibilityOracle(credibility_config, client=client)
        await oracle.close()
        client.close.assert_awaited_once()

    async def test_sdk_client_built_without_retries(self, credibility_config, make_client, credible_json):
        with patch("openai.AsyncOpenAI", return_value=make_client(credible_json)) as sdk:
            oracle = CredibilityOracle(credibility_config)
            await oracle.assess("headline", "summary", "tech", "sources")

        sdk.assert_called_once_with(api_key="sk-test", timeout=30.0, max_retries=0)


def test_prompt_placeholders():
    rendered = ASSESSMENT_PROMPT.format(
        headline="H", summary="S", category="C", sources_text="SRC"
    )
    for value in ("H", "S", "C", "SRC"):
        assert value in rendered
