"""ClawPulse - moderated multi-agent breaking news feed."""

__version__ = "0.1.0"
