"""Tests for the clawpulse CLI commands."""

import json
from unittest.mock import AsyncMock, patch

import pytest
from click.testing import CliRunner

from clawpulse.cli import main
from clawpulse.config.settings import get_settings
from clawpulse.coordinator.schemas import OutgoingNotification, ProcessResult


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def no_llm_key(monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "")
    get_settings.cache_clear()


class TestServe:
    def test_refuses_without_llm_key(self, runner, no_llm_key):
        with patch("uvicorn.run") as mock_run:
            result = runner.invoke(main, ["serve"])

        assert result.exit_code == 1
        assert "OPENAI_API_KEY is required" in result.output
        mock_run.assert_not_called()

    def test_starts_uvicorn_factory(self, runner):
        with patch("uvicorn.run") as mock_run, patch(
            "clawpulse.cli.get_metrics"
        ) as mock_metrics:
            result = runner.invoke(main, ["serve", "--port", "9000", "--metrics-port", "9001"])

        assert result.exit_code == 0, result.output
        mock_metrics.return_value.start_server.assert_called_once_with(port=9001)
        args, kwargs = mock_run.call_args
        assert args[0] == "clawpulse.api.app:create_app"
        assert kwargs["factory"] is True
        assert kwargs["port"] == 9000


class TestInitDb:
    def test_creates_tables_and_closes(self, runner):
        mock_db = AsyncMock()

        with patch("clawpulse.storage.database.Database", return_value=mock_db), patch(
            "clawpulse.feed.repository.FeedRepository.create_tables",
            new_callable=AsyncMock,
        ) as create_tables:
            result = runner.invoke(main, ["init-db"])

        assert result.exit_code == 0, result.output
        assert "Database initialized successfully" in result.output
        create_tables.assert_awaited_once()
        mock_db.close.assert_awaited_once()

    def test_closes_db_on_error(self, runner):
        mock_db = AsyncMock()

        with patch("clawpulse.storage.database.Database", return_value=mock_db), patch(
            "clawpulse.feed.repository.FeedRepository.create_tables",
            new_callable=AsyncMock,
            side_effect=RuntimeError("permission denied"),
        ):
            result = runner.invoke(main, ["init-db"])

        assert result.exit_code != 0
        mock_db.close.assert_awaited_once()


class TestHealth:
    def test_all_healthy(self, runner):
        mock_db = AsyncMock()
        mock_db.health_check.return_value = True

        with patch("clawpulse.storage.database.Database", return_value=mock_db):
            result = runner.invoke(main, ["health"])

        assert result.exit_code == 0, result.output
        assert "postgres: True" in result.output
        assert "llm_configured: True" in result.output

    def test_database_down(self, runner):
        mock_db = AsyncMock()
        mock_db.connect.side_effect = OSError("connection refused")

        with patch("clawpulse.storage.database.Database", return_value=mock_db):
            result = runner.invoke(main, ["health"])

        assert result.exit_code == 1
        assert "postgres: False" in result.output


class TestAct:
    def test_prints_outgoing(self, runner):
        coordinator = AsyncMock()
        coordinator.process.return_value = ProcessResult(
            outgoing=[OutgoingNotification(to_address="0xa", action="close", terminal=True)],
            thread_id="t-1",
            applied=True,
        )

        with patch(
            "clawpulse.api.dependencies.get_coordinator",
            AsyncMock(return_value=coordinator),
        ), patch("clawpulse.api.dependencies.cleanup_dependencies", AsyncMock()) as cleanup:
            result = runner.invoke(
                main,
                ["act", "close", "--from", "0xa", "--payload", '{"threadId": "t-1"}'],
            )

        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["threadId"] == "t-1"
        assert data["outgoing"][0]["terminal"] is True
        coordinator.process.assert_awaited_once_with("0xa", "close", {"threadId": "t-1"})
        cleanup.assert_awaited_once()

    def test_rejects_bad_payload(self, runner):
        result = runner.invoke(main, ["act", "close", "--from", "0xa", "--payload", "[1]"])
        assert result.exit_code == 2
        assert "must be a JSON object" in result.output


class TestScrape:
    def test_prints_each_url(self, runner):
        with patch(
            "clawpulse.inspector.service.SourceInspector.fetch",
            new_callable=AsyncMock,
            return_value={"https://a.example": "Title: A", "https://b.example": ""},
        ):
            result = runner.invoke(main, ["scrape", "https://a.example", "https://b.example"])

        assert result.exit_code == 0, result.output
        assert "Title: A" in result.output
        assert "(unreachable)" in result.output
