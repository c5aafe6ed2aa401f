# summary_gateway/config/settings.py
from functools import lru_cache
from typing import List, Literal
import logging

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings

logger = logging.getLogger(__name__)

BRAVE_SEARCH_URL = "https://api.search.brave.com/res/v1/web/search"


class Settings(BaseSettings):
    # API Configuration
    API_HOST: str = "0.0.0.0"
    PORT: int = 8000
    API_KEY: str = Field(..., min_length=1, description="Shared secret expected in the Bearer header")

    # Search provider
    BRAVE_API_KEY: str = Field(..., min_length=1)
    BRAVE_SEARCH_URL: str = BRAVE_SEARCH_URL

    # LLM Configuration
    LLM_PROVIDER: Literal["ollama", "openai"] = "ollama"
    LLM_BASE_URL: str = "http://localhost:11434"
    LLM_MODEL: str = "llama3.1"
    LLM_API_KEY: str = ""
    LLM_MAX_TOKENS: int = 500
    LLM_TEMPERATURE: float = 0.1

    # Security
    ALLOWED_ORIGINS: str = "*"

    # Monitoring
    LOG_LEVEL: str = "INFO"

    @field_validator("API_KEY", "BRAVE_API_KEY", "LLM_API_KEY", mode="before")
    @classmethod
    def strip_secret(cls, v):
        if isinstance(v, str):
            return v.strip()
        return v

    @field_validator("LLM_PROVIDER", mode="before")
    @classmethod
    def normalize_provider(cls, v):
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @field_validator("LOG_LEVEL", mode="before")
    @classmethod
    def normalize_log_level(cls, v):
        if isinstance(v, str):
            return v.strip().upper()
        return v

    @model_validator(mode="after")
    def check_llm_credentials(self):
        if self.LLM_PROVIDER == "openai" and not self.LLM_API_KEY:
            raise ValueError("LLM_API_KEY is required when LLM_PROVIDER is 'openai'")
        return self

    @property
    def allowed_origins(self) -> List[str]:
        return [origin.strip() for origin in self.ALLOWED_ORIGINS.split(",") if origin.strip()]

    model_config = {
        "env_file": ".env",
        "case_sensitive": True,
        "extra": "ignore",
        "frozen": True,
    }


@lru_cache()
def get_settings() -> Settings:
    """Load settings from the environment once per process.

    Missing credentials raise ``pydantic.ValidationError`` here, at startup.
    """
    settings = Settings()
    logger.info(
        f"Settings loaded: port={settings.PORT}, llm_provider={settings.LLM_PROVIDER}, "
        f"llm_model={settings.LLM_MODEL}"
    )
    return settings
