"""Pydantic models for API requests and responses."""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class MessageResponse(BaseModel):
    message: str


class TranslateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    text: Optional[str] = None
    source: Optional[str] = Field(None, alias="from")
    target: Optional[str] = Field(None, alias="to")


class TranslateResponse(BaseModel):
    translation: str


class LogLevelInfo(BaseModel):
    current: str
    available: List[str]


class LogLevelUpdate(BaseModel):
    level: Optional[str] = None
    persist: bool = True


class LogLevelResponse(BaseModel):
    success: bool = True
    level: str
    persisted: bool
    message: str


class LoggingConfigResponse(BaseModel):
    success: bool = True
    config: Dict[str, Any]
    message: str = "Logging configuration updated successfully"


class ReconfigurationResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    reconfigured: List[str] = Field(default_factory=list)
    requires_restart: List[str] = Field(default_factory=list, alias="requiresRestart")
    notes: List[str] = Field(default_factory=list)


class PlatformConfigResponse(BaseModel):
    message: str = "Platform configuration updated successfully"
    config: Dict[str, Any]
    reconfiguration: ReconfigurationResult


class HealthStatus(BaseModel):
    status: str  # "alive", "ready"
    cache_initialized: bool
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
