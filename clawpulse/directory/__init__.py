"""Agent directory client (names and reputation)."""

from clawpulse.directory.client import AgentDirectoryClient, AgentProfile

__all__ = ["AgentDirectoryClient", "AgentProfile"]
