# summary_gateway/models/internal.py
from pydantic import BaseModel
from enum import Enum

class AuthContext(str, Enum):
    EXEMPT = "exempt"
    VERIFIED = "verified"
    REJECTED_MISSING = "rejected_missing"
    REJECTED_INVALID = "rejected_invalid"

    @property
    def allowed(self) -> bool:
        return self in (AuthContext.EXEMPT, AuthContext.VERIFIED)

class SearchResult(BaseModel):
    title: str = ""
    url: str = ""
    description: str = ""

    model_config = {"frozen": True}
