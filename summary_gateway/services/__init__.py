# summary_gateway/services/__init__.py
"""Service layer modules"""

from .search_engine import BraveSearchClient
from .result_formatter import NO_RESULTS_CONTEXT, format_results
from .llm_backends import (
    SummaryBackend,
    OllamaBackend,
    OpenAICompatibleBackend,
    create_backend
)

__all__ = [
    "BraveSearchClient",
    "NO_RESULTS_CONTEXT",
    "format_results",
    "SummaryBackend",
    "OllamaBackend",
    "OpenAICompatibleBackend",
    "create_backend"
]
