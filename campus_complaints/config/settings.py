"""
Environment configuration for the campus complaints system.
Uses Pydantic's settings management to handle environment variables
with proper type validation and default values.
"""

import json
from typing import Annotated, List, Optional, Set, Union
from pathlib import Path
from functools import lru_cache
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict
from dotenv import load_dotenv

# Load environment variables from .env file if it exists
env_path = Path('.') / '.env'
load_dotenv(dotenv_path=env_path)

DEFAULT_CATEGORIES = ["Academic", "Infrastructure", "Hostel", "Administrative", "Other"]


def _parse_list(v: Union[str, List[str], Set[str]]) -> List[str]:
    """Accept a JSON list or a comma separated string."""
    if isinstance(v, str):
        if v.startswith('[') and v.endswith(']'):
            try:
                return [str(item).strip() for item in json.loads(v)]
            except json.JSONDecodeError:
                pass
        return [item.strip() for item in v.split(",") if item.strip()]
    return list(v)


class Settings(BaseSettings):
    """Application settings with environment variable support"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
        populate_by_name=True,
    )

    # Application configuration
    APP_NAME: str = Field(default="Campus Complaints", alias="PROJECT_NAME")
    ENVIRONMENT: str = "development"
    DEBUG: bool = False

    # Database configuration
    DATABASE_URL: str = "sqlite:///./campus_complaints.db"
    DATABASE_ECHO: bool = False

    # Monitoring and logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "text"
    LOG_FILE: Optional[str] = None

    # Escalation sweep
    ESCALATION_ENABLED: bool = True
    ESCALATION_THRESHOLD_HOURS: int = Field(default=72, gt=0)
    ESCALATION_INTERVAL_HOURS: float = Field(default=24, gt=0)

    # File storage
    UPLOAD_DIR: str = Field(default="uploads", alias="UPLOAD_DIR")
    MAX_UPLOAD_SIZE: int = Field(default=10485760, alias="MAX_FILE_SIZE")
    ALLOWED_EXTENSIONS: Annotated[Set[str], NoDecode] = Field(
        default={"jpg", "jpeg", "png", "pdf", "doc", "docx", "txt"},
        alias="ALLOWED_FILE_EXTENSIONS",
    )

    # Business logic
    COMPLAINT_CATEGORIES: Annotated[List[str], NoDecode] = Field(default_factory=lambda: list(DEFAULT_CATEGORIES))
    SEED_DEFAULT_DATA: bool = True

    # Validators
    @field_validator('ALLOWED_EXTENSIONS', mode='before')
    @classmethod
    def parse_allowed_extensions(cls, v: Union[str, Set[str], List[str]]) -> Set[str]:
        """Parse ALLOWED_EXTENSIONS from string to set, dropping leading dots"""
        return {ext.lstrip('.').lower() for ext in _parse_list(v)}

    @field_validator('COMPLAINT_CATEGORIES', mode='before')
    @classmethod
    def parse_categories(cls, v: Union[str, List[str]]) -> List[str]:
        """Parse COMPLAINT_CATEGORIES from string to list"""
        return _parse_list(v)

    @field_validator('LOG_LEVEL')
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        return v.upper()

    @field_validator('LOG_FORMAT')
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        v = v.lower()
        if v not in ("text", "json"):
            raise ValueError("LOG_FORMAT must be 'text' or 'json'")
        return v

    def is_production(self) -> bool:
        """Check if running in production environment"""
        return self.ENVIRONMENT == "production"

    def is_development(self) -> bool:
        """Check if running in development environment"""
        return self.ENVIRONMENT == "development"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()


settings = get_settings()
