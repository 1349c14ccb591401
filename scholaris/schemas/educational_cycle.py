"""Pydantic schemas for educational cycles and generated academic structures."""

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from scholaris.models.educational_cycle import CycleType


class EducationalCycleBase(BaseModel):
    """Base schema for educational cycle data."""

    name: str = Field(..., min_length=1, max_length=100, description="Display name (e.g., 'Primer Ciclo')")
    description: str | None = None
    display_order: int = Field(default=1, ge=0)
    cycle_type: CycleType | None = None


class EducationalCycleCreate(EducationalCycleBase):
    """Schema for creating an educational cycle."""

    pass


class EducationalCycleUpdate(BaseModel):
    """Schema for updating an educational cycle."""

    name: str | None = Field(None, min_length=1, max_length=100)
    description: str | None = None
    display_order: int | None = Field(None, ge=0)
    cycle_type: CycleType | None = None


class EducationalCycleResponse(EducationalCycleBase):
    """Schema for educational cycle response."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    institution_id: uuid.UUID
    created_at: datetime
    updated_at: datetime


class CreatedCycle(BaseModel):
    """A cycle created by structure generation."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    name: str


class CreatedLevel(BaseModel):
    """A level created by structure generation."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    name: str
    grade_number: int | None


class GeneratedStructure(BaseModel):
    """Cycles and levels created by one structure generation."""

    cycles_created: list[CreatedCycle] = Field(default_factory=list)
    levels_created: list[CreatedLevel] = Field(default_factory=list)
