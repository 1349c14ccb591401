"""Pydantic schemas for Institution entities."""

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from scholaris.models.institution import GradingSystem


class InstitutionCreate(BaseModel):
    """Schema for creating an institution."""

    name: str = Field(..., min_length=1, max_length=255)
    slug: str | None = Field(None, min_length=1, max_length=100, pattern=r"^[a-z0-9-]+$")
    grading_system: GradingSystem = GradingSystem.PRIMARIA_DO


class InstitutionResponse(BaseModel):
    """Schema for institution response."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    name: str
    slug: str
    grading_system: GradingSystem
    is_active: bool
    created_at: datetime
    updated_at: datetime
