"""Configuration models for Takify."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field, field_validator

from .core import FilterType, SortDirection, SortField


class APIConfig(BaseModel):
    """API configuration."""

    endpoint: str = Field(default="http://localhost:8000/api")
    timeout: int = Field(default=30)
    retry: int = Field(default=3, ge=0)

    @field_validator("endpoint")
    @classmethod
    def validate_endpoint(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("endpoint cannot be empty")
        return v.strip()


class SyncConfig(BaseModel):
    """Live feed configuration."""

    poll_interval: float = Field(default=5.0, gt=0)


class ViewConfig(BaseModel):
    """Initial filter and sort of the task view."""

    filter_type: FilterType = "all"
    sort_field: SortField = "created_at"
    sort_direction: SortDirection = "desc"


class LogConfig(BaseModel):
    """Logging configuration."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"


class AppConfig(BaseModel):
    """Main Takify configuration."""

    api: APIConfig = Field(default_factory=APIConfig)
    sync: SyncConfig = Field(default_factory=SyncConfig)
    view: ViewConfig = Field(default_factory=ViewConfig)
    log: LogConfig = Field(default_factory=LogConfig)
