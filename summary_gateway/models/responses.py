# summary_gateway/models/responses.py
from pydantic import BaseModel, Field
from typing import Optional

class SummaryResponse(BaseModel):
    summary: str = Field(..., description="AI-generated summary of the search results")

class ErrorResponse(BaseModel):
    error: str = Field(..., description="Error message")
    error_code: Optional[str] = Field(None, description="Error code")
