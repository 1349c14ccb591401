"""Pydantic schemas for Level entities and report formats."""

import uuid
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from scholaris.models.level import ReportFormat


class SabanaFormat(BaseModel):
    """Report layout resolved for a level."""

    model_config = ConfigDict(frozen=True)

    report_format: ReportFormat
    period_count: int = Field(..., ge=3, le=4)
    uses_technical_modules: bool


class LevelBase(BaseModel):
    """Base schema for level data."""

    name: str = Field(..., min_length=1, max_length=100, description="Display name (e.g., '3ro de Primaria')")
    grade_number: int | None = Field(None, ge=1)
    description: str | None = None
    display_order: int = Field(default=0, ge=0)


class LevelCreate(LevelBase):
    """Schema for creating a level.

    Supplying any of the report-format fields is a manual override and skips
    automatic resolution from the cycle.
    """

    cycle_id: uuid.UUID | None = None
    report_format: ReportFormat | None = None
    period_count: int | None = Field(None, ge=3, le=4)
    uses_technical_modules: bool | None = None


class LevelUpdate(BaseModel):
    """Schema for updating a level."""

    name: str | None = Field(None, min_length=1, max_length=100)
    grade_number: int | None = Field(None, ge=1)
    description: str | None = None
    display_order: int | None = Field(None, ge=0)
    is_active: bool | None = None
    cycle_id: uuid.UUID | None = None
    report_format: ReportFormat | None = None
    period_count: int | None = Field(None, ge=3, le=4)
    uses_technical_modules: bool | None = None


class LevelResponse(LevelBase):
    """Schema for level response."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    institution_id: uuid.UUID
    cycle_id: uuid.UUID | None
    is_active: bool
    report_format: ReportFormat | None
    period_count: int | None
    uses_technical_modules: bool | None
    created_at: datetime
    updated_at: datetime


class LevelFormatChange(BaseModel):
    """A level whose stored report format differs from the resolved one."""

    level_id: uuid.UUID
    level_name: str
    institution_id: uuid.UUID
    cycle_name: str
    changes: dict[str, tuple[Any, Any]]


class ReportFormatRepairSummary(BaseModel):
    """Outcome of a report-format repair pass."""

    applied: bool
    total: int = 0
    updated: int = 0
    unchanged: int = 0
    without_cycle: int = 0
    unmatched: int = 0
    changes: list[LevelFormatChange] = Field(default_factory=list)
