# summary_gateway/models/__init__.py
"""Data models"""

from .responses import SummaryResponse, ErrorResponse
from .internal import AuthContext, SearchResult

__all__ = [
    "SummaryResponse",
    "ErrorResponse",
    "AuthContext",
    "SearchResult"
]
