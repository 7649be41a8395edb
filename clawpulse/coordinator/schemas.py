"""Coordinator results and outgoing notifications."""

from dataclasses import dataclass, field
from typing import Any


@dataclass
class OutgoingNotification:
    """A message back to an agent.

    ``terminal`` marks the end of a thread's lifecycle for the receiver.
    """

    to_address: str
    action: str
    payload: dict[str, Any] = field(default_factory=dict)
    terminal: bool = False

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "toAddress": self.to_address,
            "action": self.action,
            "payload": self.payload,
        }
        if self.terminal:
            data["terminal"] = True
        return data


@dataclass
class ProcessResult:
    """Outcome of one ``ActionCoordinator.process`` call.

    ``applied`` is True when the action changed stored state.
    """

    outgoing: list[OutgoingNotification] = field(default_factory=list)
    thread_id: str | None = None
    applied: bool = False

    @classmethod
    def dropped(cls) -> "ProcessResult":
        return cls()
