"""
Pydantic schemas for the prompt record, auth session and API responses.
Backend rows are validated here before they reach the form controller.
"""
from datetime import datetime
from enum import Enum
from typing import Optional, Any
from uuid import UUID
from pydantic import BaseModel, Field, field_validator


# =============================================================================
# Prompt Record Schemas
# =============================================================================

class ConfigRecord(BaseModel):
    """The single editable row holding the agent's SDR prompt."""
    id: Optional[str] = Field(None, description="Backend-assigned identifier, unset until first insert")
    prompt_text: str = Field("", description="Prompt text (column prompt_sdr)")
    created_by: Optional[str] = Field(None, description="User who created the record")
    created_at: Optional[datetime] = Field(None, description="Maintained by the backend")
    updated_at: Optional[datetime] = Field(None, description="Maintained by the backend")

    @field_validator("id", "created_by", mode="before")
    @classmethod
    def _normalize_identifier(cls, value: Any) -> Any:
        if isinstance(value, (int, UUID)):
            return str(value)
        return value

    @field_validator("prompt_text", mode="before")
    @classmethod
    def _null_prompt_as_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    class Config:
        json_schema_extra = {
            "example": {
                "id": "abc-123",
                "prompt_text": "You are an SDR assistant...",
                "created_by": "0f3c1a52-8d1e-4a8b-9f57-2d1c3b4a5e6f"
            }
        }


class SaveKind(str, Enum):
    UPDATED = "updated"
    INSERTED = "inserted"


# =============================================================================
# Auth Schemas
# =============================================================================

class Session(BaseModel):
    """Proof of authenticated identity from the auth provider."""
    access_token: str
    user_id: str
    email: Optional[str] = None


# =============================================================================
# Health Check Schemas
# =============================================================================

class HealthResponse(BaseModel):
    """Health check response."""
    status: str = Field(..., description="Overall health status")
    database: str = Field(..., description="Database connection status")
    version: str = Field(..., description="Application version")
