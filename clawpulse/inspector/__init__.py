"""Source inspection: bounded-concurrency page fetch and text extraction."""

from clawpulse.inspector.config import InspectorConfig
from clawpulse.inspector.service import InspectorError, SourceInspector, extract_page_text

__all__ = ["InspectorConfig", "InspectorError", "SourceInspector", "extract_page_text"]
