"""Pydantic schemas for grade computation and grade records."""

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from scholaris.models.grade import GradeStatus


class PeriodScores(BaseModel):
    """Scores a final grade is computed from.

    Any field may be missing; missing scores count as "not entered yet".
    """

    p1: float | None = None
    p2: float | None = None
    p3: float | None = None
    p4: float | None = None
    rp1: float | None = None
    rp2: float | None = None
    rp3: float | None = None
    rp4: float | None = None
    cpc_30: float | None = None


class GradeScoresInput(PeriodScores):
    """Schema for saving a student's scores."""

    p1: float | None = Field(None, ge=0, le=100)
    p2: float | None = Field(None, ge=0, le=100)
    p3: float | None = Field(None, ge=0, le=100)
    p4: float | None = Field(None, ge=0, le=100)
    rp1: float | None = Field(None, ge=0, le=100)
    rp2: float | None = Field(None, ge=0, le=100)
    rp3: float | None = Field(None, ge=0, le=100)
    rp4: float | None = Field(None, ge=0, le=100)
    cpc_30: float | None = Field(None, ge=0, le=30, description="Continuous performance component (0-30)")


class FinalGradeResult(BaseModel):
    """Computed final average and its outcome."""

    model_config = ConfigDict(frozen=True)

    final_average: float
    status: GradeStatus


class GradeRecordResponse(BaseModel):
    """Schema for grade record response."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    institution_id: uuid.UUID
    student_id: uuid.UUID
    subject_id: uuid.UUID
    p1: float | None
    p2: float | None
    p3: float | None
    p4: float | None
    rp1: float | None
    rp2: float | None
    rp3: float | None
    rp4: float | None
    cpc_30: float | None
    final_average: float
    status: GradeStatus
    created_at: datetime
    updated_at: datetime
