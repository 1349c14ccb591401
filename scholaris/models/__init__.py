"""SQLAlchemy models for Scholaris."""

from scholaris.models.base import (
    Base,
    InstitutionScopedModel,
    SoftDeleteMixin,
    TimestampMixin,
    UUIDPrimaryKeyMixin,
)
from scholaris.models.institution import (
    Institution,
    GradingSystem,
    HAITI_SYSTEMS,
    DOMINICAN_SYSTEMS,
)
from scholaris.models.educational_cycle import EducationalCycle, CycleType
from scholaris.models.level import Level, ReportFormat, REPORT_FORMAT_FIELDS
from scholaris.models.grade import GradeRecord, GradeStatus

__all__ = [
    # Base
    "Base",
    "InstitutionScopedModel",
    "TimestampMixin",
    "SoftDeleteMixin",
    "UUIDPrimaryKeyMixin",
    # Institution
    "Institution",
    "GradingSystem",
    "HAITI_SYSTEMS",
    "DOMINICAN_SYSTEMS",
    # Academic structure
    "EducationalCycle",
    "CycleType",
    "Level",
    "ReportFormat",
    "REPORT_FORMAT_FIELDS",
    # Grades
    "GradeRecord",
    "GradeStatus",
]
