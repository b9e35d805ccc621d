"""
Application configuration settings.
"""
import json
from functools import lru_cache
from typing import Annotated, List, Optional

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, NoDecode


class Settings(BaseSettings):
    """Application settings."""

    # Application
    APP_NAME: str = "SympCheck Backend"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    HOST: str = "0.0.0.0"
    PORT: int = 8000

    # Security
    SECRET_KEY: str = "sympcheck-development-secret-key-change-me"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 7  # 7 days

    # Database
    DATABASE_URL: str = "sqlite:///./sympcheck.db"

    # CORS
    ALLOWED_HOSTS: Annotated[List[str], NoDecode] = ["http://localhost:3000", "http://localhost:8000"]

    # Logging
    LOG_FILE: Optional[str] = None
    LOG_MAX_SIZE: int = 10 * 1024 * 1024  # 10MB
    LOG_BACKUP_COUNT: int = 5

    # Language-understanding collaborator (Gemini)
    GEMINI_API_KEY: Optional[str] = None
    GEMINI_MODEL: str = "gemini-1.5-flash"
    GEMINI_TIMEOUT_SECONDS: Optional[float] = 30.0

    # Scoring collaborator
    SCORING_STRATEGY: str = "rule_based"  # rule_based, process
    SCORING_SCRIPT_PATH: Optional[str] = None
    SCORING_PYTHON_EXECUTABLE: str = "python"
    SCORING_TIMEOUT_SECONDS: Optional[float] = 60.0
    MAX_PREDICTIONS: int = 5

    # Advice generation
    MAX_CONCURRENT_ADVICE: int = 3

    # Analytics
    ANALYTICS_DEFAULT_MONTHS: int = 6

    model_config = {
        "env_file": ".env",
        "case_sensitive": True,
        "extra": "ignore",
    }

    @field_validator('ALLOWED_HOSTS', mode='before')
    @classmethod
    def parse_allowed_hosts(cls, v):
        """Parse allowed hosts from string or list."""
        if isinstance(v, str):
            if v.startswith('[') and v.endswith(']'):
                return json.loads(v)
            return [host.strip() for host in v.split(',') if host.strip()]
        return v

    @field_validator('SECRET_KEY')
    @classmethod
    def validate_secret_key(cls, v):
        """Validate secret key length."""
        if len(v) < 32:
            raise ValueError('SECRET_KEY must be at least 32 characters long')
        return v

    @field_validator('SCORING_STRATEGY')
    @classmethod
    def validate_scoring_strategy(cls, v):
        allowed = ("rule_based", "process")
        if v not in allowed:
            raise ValueError(f'SCORING_STRATEGY must be one of: {allowed}')
        return v

    @field_validator('MAX_CONCURRENT_ADVICE', 'MAX_PREDICTIONS')
    @classmethod
    def validate_positive(cls, v):
        if v < 1:
            raise ValueError('value must be at least 1')
        return v

    @model_validator(mode='after')
    def validate_scoring_script(self):
        """The process strategy needs a script to run."""
        if self.SCORING_STRATEGY == "process" and not self.SCORING_SCRIPT_PATH:
            raise ValueError("SCORING_SCRIPT_PATH must be set when SCORING_STRATEGY is 'process'")
        return self

    @property
    def gemini_enabled(self) -> bool:
        """Check if the Gemini collaborator is configured."""
        return bool(self.GEMINI_API_KEY)

    @property
    def database_url_safe(self) -> str:
        """Get safe database URL for logging (hides password)."""
        if "@" in self.DATABASE_URL:
            scheme = self.DATABASE_URL.split("://")[0]
            return f"{scheme}://***@{self.DATABASE_URL.split('@', 1)[1]}"
        return self.DATABASE_URL


@lru_cache()
def get_settings() -> Settings:
    """Build the settings once per process."""
    return Settings()


settings = get_settings()
