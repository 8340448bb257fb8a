"""
Profile Schemas
"""

from typing import Any, Literal

from pydantic import BaseModel, Field


class ProfileFields(BaseModel):
    full_name: str | None = None
    email: str | None = None
    phone: str | None = None
    country: str | None = None
    avatar_url: str | None = None


class ProfileCompletionRequest(BaseModel):
    """Request body for POST /profiles/completion."""

    profile: ProfileFields
    role: Literal["student", "agent"] | None = None
    role_data: dict[str, Any] | None = Field(
        None, description="Student or agent record; role fields count only when present"
    )


class ProfileCompletionResponse(BaseModel):
    percentage: int = Field(..., ge=0, le=100)
    completed_fields: int = Field(..., ge=0)
    total_fields: int = Field(..., ge=0)
    missing_fields: list[str]
