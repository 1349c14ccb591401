"""Service layer for business logic."""

from scholaris.services.academic_structure_service import (
    AcademicStructureService,
    get_academic_structure_service,
)
from scholaris.services.educational_cycle_service import (
    EducationalCycleService,
    get_educational_cycle_service,
)
from scholaris.services.grading_service import GradeService, compute_final_grade, get_grade_service
from scholaris.services.institution_service import InstitutionService, get_institution_service
from scholaris.services.level_service import LevelService, get_level_service
from scholaris.services.sabana_format_service import resolve_sabana_format

__all__ = [
    "compute_final_grade",
    "resolve_sabana_format",
    "AcademicStructureService",
    "get_academic_structure_service",
    "EducationalCycleService",
    "get_educational_cycle_service",
    "GradeService",
    "get_grade_service",
    "InstitutionService",
    "get_institution_service",
    "LevelService",
    "get_level_service",
]
