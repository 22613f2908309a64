# spudcheck/__init__.py
# Re-export the pieces the entrypoints use.

from .handler import AnalyzeHandler, InboundRequest, OutboundResponse
from .settings import Settings, get_settings

__all__ = [
    "AnalyzeHandler",
    "InboundRequest",
    "OutboundResponse",
    "Settings",
    "get_settings",
]
