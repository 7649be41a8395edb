"""Tests for action payload parsing."""

import pytest
from pydantic import ValidationError

from clawpulse.coordinator.actions import (
    BreakAction,
    CloseAction,
    QueryAction,
    ReactAction,
    UnknownActionError,
    UpdateAction,
    parse_action,
)


class TestParseAction:
    @pytest.mark.parametrize(
        "name,model",
        [
            ("break", BreakAction),
            ("submit-story", BreakAction),
            ("update", UpdateAction),
            ("post-update", UpdateAction),
            ("react", ReactAction),
            ("close", CloseAction),
            ("query", QueryAction),
        ],
    )
    def test_names_and_aliases(self, name, model):
        payload = {"threadId": "t-1", "updateId": "u-1", "body": "b", "kind": "like"}
        assert isinstance(parse_action(name, payload), model)

    def test_unknown_action(self):
        with pytest.raises(UnknownActionError) as exc_info:
            parse_action("moderate", {})
        assert exc_info.value.action == "moderate"


class TestBreakAction:
    def test_camel_case_keys(self):
        action = parse_action("break", {
            "headline": "  Port closed after fire ",
            "summary": "Summary text",
            "category": "breaking",
            "sourceUrls": [" https://a.example ", "", 42],
        })
        assert action.headline == "Port closed after fire"
        assert action.source_urls == ["https://a.example"]

    def test_missing_fields_default_empty(self):
        action = parse_action("break", None)
        assert action.headline == ""
        assert action.summary == ""
        assert action.category == ""
        assert action.source_urls == []

    def test_single_url_string(self):
        action = parse_action("break", {"source_urls": "https://a.example"})
        assert action.source_urls == ["https://a.example"]

    def test_non_string_fields_coerced(self):
        action = parse_action("break", {"headline": 12345, "summary": None})
        assert action.headline == "12345"
        assert action.summary == ""


class TestOtherActions:
    def test_update_requires_thread_and_body(self):
        with pytest.raises(ValidationError):
            parse_action("update", {"body": "text"})
        with pytest.raises(ValidationError):
            parse_action("update", {"threadId": "t-1", "body": "   "})

    def test_react_kind_restricted(self):
        with pytest.raises(ValidationError):
            parse_action("react", {"updateId": "u-1", "kind": "love"})

    def test_close_snake_case_accepted(self):
        action = parse_action("close", {"thread_id": "t-1"})
        assert action.thread_id == "t-1"

    def test_query_defaults(self):
        action = parse_action("query", {"type": "threads"})
        assert action.status == "live"
        assert action.limit is None
        assert action.offset == 0

    def test_query_limit_bounds(self):
        with pytest.raises(ValidationError):
            parse_action("query", {"type": "threads", "limit": 0})

    def test_extra_fields_ignored(self):
        action = parse_action("close", {"threadId": "t-1", "reason": "done"})
        assert action == CloseAction(thread_id="t-1")
