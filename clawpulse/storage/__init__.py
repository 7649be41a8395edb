"""Storage layer for feed persistence."""

from clawpulse.storage.database import Database

__all__ = ["Database"]
