# summary_gateway/core/__init__.py

from .exceptions import (
    CustomHTTPException,
    SearchEngineException,
    LLMAnalysisException,
    AuthenticationException,
    InvalidAPIKeyException,
    ValidationException
)

__all__ = [
    "CustomHTTPException",
    "SearchEngineException",
    "LLMAnalysisException",
    "AuthenticationException",
    "InvalidAPIKeyException",
    "ValidationException"
]
