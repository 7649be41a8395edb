"""Typed agent actions.

Each action name maps to one payload model. Payloads arrive with the
agents' camelCase keys (``threadId``, ``sourceUrls``); models accept
either spelling. A payload that fails to parse for a known action is
dropped by the coordinator; an unknown action name raises
``UnknownActionError``.
"""

from typing import Any, ClassVar, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator


class UnknownActionError(ValueError):
    """Raised for an action name with no payload model."""

    def __init__(self, action: str) -> None:
        super().__init__(f"Unknown action: {action!r}")
        self.action = action


class _ActionPayload(BaseModel):
    model_config = ConfigDict(
        populate_by_name=True,
        extra="ignore",
        str_strip_whitespace=True,
        frozen=True,
    )

    action_name: ClassVar[str] = ""


def _url_list(value: Any) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, (list, tuple)):
        return []
    return [v.strip() for v in value if isinstance(v, str) and v.strip()]


class BreakAction(_ActionPayload):
    """Submit a breaking story. Fields are checked by the validator, not here,
    so a submission always gets a decision back."""

    action_name: ClassVar[str] = "break"
    headline: str = ""
    summary: str = ""
    category: str = ""
    source_urls: list[str] = Field(default_factory=list, alias="sourceUrls")

    @field_validator("headline", "summary", "category", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> str:
        if value is None:
            return ""
        return value if isinstance(value, str) else str(value)

    @field_validator("source_urls", mode="before")
    @classmethod
    def _coerce_urls(cls, value: Any) -> list[str]:
        return _url_list(value)


class UpdateAction(_ActionPayload):
    """Post an update to a live thread."""

    action_name: ClassVar[str] = "update"
    thread_id: str = Field(min_length=1, alias="threadId")
    body: str = Field(min_length=1)
    source_urls: list[str] = Field(default_factory=list, alias="sourceUrls")

    @field_validator("source_urls", mode="before")
    @classmethod
    def _coerce_urls(cls, value: Any) -> list[str]:
        return _url_list(value)


class ReactAction(_ActionPayload):
    """Like or dislike an update."""

    action_name: ClassVar[str] = "react"
    update_id: str = Field(min_length=1, alias="updateId")
    kind: Literal["like", "dislike"]


class CloseAction(_ActionPayload):
    """Close a live thread (submitter only)."""

    action_name: ClassVar[str] = "close"
    thread_id: str = Field(min_length=1, alias="threadId")


class QueryAction(_ActionPayload):
    """Read-only request; the type is checked by the handler so unknown
    types get an error reply rather than silence."""

    action_name: ClassVar[str] = "query"
    type: str = ""
    thread_id: str | None = Field(default=None, alias="threadId")
    category: str | None = None
    address: str | None = None
    status: str = "live"
    limit: int | None = Field(default=None, ge=1, le=500)
    offset: int = Field(default=0, ge=0)


Action = BreakAction | UpdateAction | ReactAction | CloseAction | QueryAction

ACTION_MODELS: dict[str, type[_ActionPayload]] = {
    "break": BreakAction,
    "submit-story": BreakAction,
    "update": UpdateAction,
    "post-update": UpdateAction,
    "react": ReactAction,
    "close": CloseAction,
    "query": QueryAction,
}


def parse_action(action: str, payload: dict[str, Any] | None) -> Action:
    """Parse a named action's payload into its model.

    Raises:
        UnknownActionError: If ``action`` has no model.
        pydantic.ValidationError: If the payload does not fit the model.
    """
    model = ACTION_MODELS.get(action)
    if model is None:
        raise UnknownActionError(action)
    return model.model_validate(dict(payload or {}))  # type: ignore[return-value]
