"""Pydantic schemas for Scholaris."""

from scholaris.schemas.educational_cycle import (
    CreatedCycle,
    CreatedLevel,
    EducationalCycleCreate,
    EducationalCycleResponse,
    EducationalCycleUpdate,
    GeneratedStructure,
)
from scholaris.schemas.grade import (
    FinalGradeResult,
    GradeRecordResponse,
    GradeScoresInput,
    PeriodScores,
)
from scholaris.schemas.institution import InstitutionCreate, InstitutionResponse
from scholaris.schemas.level import (
    LevelCreate,
    LevelFormatChange,
    LevelResponse,
    LevelUpdate,
    ReportFormatRepairSummary,
    SabanaFormat,
)

__all__ = [
    # Educational cycle
    "EducationalCycleCreate",
    "EducationalCycleUpdate",
    "EducationalCycleResponse",
    "CreatedCycle",
    "CreatedLevel",
    "GeneratedStructure",
    # Grade
    "PeriodScores",
    "GradeScoresInput",
    "FinalGradeResult",
    "GradeRecordResponse",
    # Institution
    "InstitutionCreate",
    "InstitutionResponse",
    # Level
    "SabanaFormat",
    "LevelCreate",
    "LevelUpdate",
    "LevelResponse",
    "LevelFormatChange",
    "ReportFormatRepairSummary",
]
