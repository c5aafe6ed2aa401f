# summary_gateway/core/exceptions.py
from fastapi import HTTPException

class CustomHTTPException(HTTPException):
    def __init__(self, status_code: int, detail: str, error_code: str = None):
        super().__init__(status_code=status_code, detail=detail)
        self.error_code = error_code

class SearchEngineException(Exception):
    """Exception raised during search engine operations"""
    pass

class LLMAnalysisException(Exception):
    """Exception raised when the language-model backend fails"""
    pass

class AuthenticationException(CustomHTTPException):
    def __init__(self, detail: str = "Missing or invalid API key"):
        super().__init__(status_code=401, detail=detail, error_code="MISSING_API_KEY")

class InvalidAPIKeyException(CustomHTTPException):
    def __init__(self, detail: str = "Invalid API key"):
        super().__init__(status_code=403, detail=detail, error_code="INVALID_API_KEY")

class ValidationException(CustomHTTPException):
    def __init__(self, detail: str = "Validation error"):
        super().__init__(status_code=400, detail=detail, error_code="VALIDATION_ERROR")
