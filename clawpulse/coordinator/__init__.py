"""Action-processing pipeline.

Usage:
    from clawpulse.coordinator import ActionCoordinator

    coordinator = ActionCoordinator(repository, validator)
    result = await coordinator.process("0xagent", "break", payload)
    for notification in result.outgoing:
        ...
"""

from clawpulse.coordinator.actions import (
    ACTION_MODELS,
    BreakAction,
    CloseAction,
    QueryAction,
    ReactAction,
    UnknownActionError,
    UpdateAction,
    parse_action,
)
from clawpulse.coordinator.schemas import OutgoingNotification, ProcessResult
from clawpulse.coordinator.service import QUERY_TYPES, ActionCoordinator

__all__ = [
    "ACTION_MODELS",
    "ActionCoordinator",
    "BreakAction",
    "CloseAction",
    "OutgoingNotification",
    "ProcessResult",
    "QUERY_TYPES",
    "QueryAction",
    "ReactAction",
    "UnknownActionError",
    "UpdateAction",
    "parse_action",
]
