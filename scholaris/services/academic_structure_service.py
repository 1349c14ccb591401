"""Generation of an institution's cycles and levels from stage templates."""

import logging
import uuid
from typing import List

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from scholaris.exceptions import ConflictException
from scholaris.models.educational_cycle import CycleType, EducationalCycle
from scholaris.models.level import Level
from scholaris.schemas.educational_cycle import CreatedCycle, CreatedLevel, GeneratedStructure
from scholaris.services.institution_service import get_institution_grading_system
from scholaris.services.sabana_format_service import (
    apply_sabana_format,
    resolve_sabana_format,
    write_sabana_format,
)

logger = logging.getLogger(__name__)


def _two_cycles(cycle_type: CycleType, level_names: List[str]) -> dict:
    return {
        "cycles": [
            {
                "name": "Primer Ciclo",
                "cycle_type": cycle_type,
                "display_order": 1,
                "levels": [
                    {"name": name, "grade_number": number}
                    for number, name in enumerate(level_names[:3], start=1)
                ],
            },
            {
                "name": "Segundo Ciclo",
                "cycle_type": cycle_type,
                "display_order": 2,
                "levels": [
                    {"name": name, "grade_number": number}
                    for number, name in enumerate(level_names[3:], start=4)
                ],
            },
        ],
        "standalone_levels": [],
    }


# Default academic structure by cycle type
ACADEMIC_STRUCTURE_TEMPLATES = {
    CycleType.INICIAL: {
        "cycles": [],
        "standalone_levels": [
            {"name": "Pre-Kinder", "grade_number": 1},
            {"name": "Kinder", "grade_number": 2},
            {"name": "Pre-Primario", "grade_number": 3},
        ],
    },
    CycleType.PRIMARIA: _two_cycles(
        CycleType.PRIMARIA,
        [
            "1ro de Primaria",
            "2do de Primaria",
            "3ro de Primaria",
            "4to de Primaria",
            "5to de Primaria",
            "6to de Primaria",
        ],
    ),
    CycleType.SECUNDARIA: _two_cycles(
        CycleType.SECUNDARIA,
        [
            "1ro de Secundaria",
            "2do de Secundaria",
            "3ro de Secundaria",
            "4to de Secundaria",
            "5to de Secundaria",
            "6to de Secundaria",
        ],
    ),
    CycleType.POLITECNICO: _two_cycles(
        CycleType.POLITECNICO,
        [
            "1ro Politécnico",
            "2do Politécnico",
            "3ro Politécnico",
            "4to Politécnico",
            "5to Politécnico",
            "6to Politécnico",
        ],
    ),
    CycleType.ADULTOS: {"cycles": [], "standalone_levels": []},
}

EMPTY_TEMPLATE = {"cycles": [], "standalone_levels": []}


def get_structure_template(cycle_type: CycleType | str) -> dict:
    """Get the template for a cycle type; unknown types get an empty one."""
    try:
        return ACADEMIC_STRUCTURE_TEMPLATES[CycleType(cycle_type)]
    except ValueError:
        return EMPTY_TEMPLATE


class AcademicStructureService:
    """Service that creates an institution's cycles and levels in one go."""

    async def _existing_names(
        self, db: AsyncSession, model, institution_id: uuid.UUID, names: List[str]
    ) -> set[str]:
        if not names:
            return set()
        result = await db.execute(
            select(model.name).where(
                model.institution_id == institution_id,
                model.name.in_(names),
                model.deleted_at.is_(None),
            )
        )
        return set(result.scalars().all())

    async def generate_academic_structure(
        self,
        db: AsyncSession,
        cycle_type: CycleType | str,
        institution_id: uuid.UUID,
    ) -> GeneratedStructure:
        """Create the template cycles and levels for a stage.

        This function does NOT use get_institution_id() because it is also
        called while setting up an institution.

        All rows are written in one transaction. If any template cycle or
        level name already exists for the institution nothing is created and
        ConflictException is raised.
        """
        template = get_structure_template(cycle_type)
        if not template["cycles"] and not template["standalone_levels"]:
            return GeneratedStructure()

        grading_system = await get_institution_grading_system(db, institution_id)

        cycle_names = [c["name"] for c in template["cycles"]]
        level_names = [lvl["name"] for c in template["cycles"] for lvl in c["levels"]]
        level_names += [lvl["name"] for lvl in template["standalone_levels"]]

        existing_cycles = await self._existing_names(db, EducationalCycle, institution_id, cycle_names)
        for name in cycle_names:
            if name in existing_cycles:
                raise ConflictException(f"Educational cycle '{name}' already exists")
        existing_levels = await self._existing_names(db, Level, institution_id, level_names)
        for name in level_names:
            if name in existing_levels:
                raise ConflictException(f"Level '{name}' already exists")

        cycles: List[EducationalCycle] = []
        levels: List[Level] = []
        try:
            for cycle_tpl in template["cycles"]:
                cycle = EducationalCycle(
                    institution_id=institution_id,
                    name=cycle_tpl["name"],
                    cycle_type=cycle_tpl["cycle_type"].value,
                    display_order=cycle_tpl["display_order"],
                )
                db.add(cycle)
                await db.flush()
                cycles.append(cycle)

                # Resolved once per cycle and shared by its levels
                sabana_format = resolve_sabana_format(cycle, grading_system)
                for level_tpl in cycle_tpl["levels"]:
                    level = Level(
                        institution_id=institution_id,
                        name=level_tpl["name"],
                        grade_number=level_tpl["grade_number"],
                        display_order=level_tpl["grade_number"],
                        cycle_id=cycle.id,
                        is_active=True,
                    )
                    if sabana_format is not None:
                        write_sabana_format(level, sabana_format)
                    db.add(level)
                    levels.append(level)

            # Levels outside a cycle resolve with the requested stage directly
            for level_tpl in template["standalone_levels"]:
                level = Level(
                    institution_id=institution_id,
                    name=level_tpl["name"],
                    grade_number=level_tpl["grade_number"],
                    display_order=level_tpl["grade_number"],
                    is_active=True,
                )
                apply_sabana_format(
                    level,
                    {"name": level_tpl["name"], "cycle_type": CycleType(cycle_type)},
                    grading_system,
                )
                db.add(level)
                levels.append(level)

            await db.flush()
            generated = GeneratedStructure(
                cycles_created=[CreatedCycle.model_validate(c) for c in cycles],
                levels_created=[CreatedLevel.model_validate(lvl) for lvl in levels],
            )
            await db.commit()
        except IntegrityError as e:
            await db.rollback()
            logger.warning(f"Academic structure generation for institution {institution_id} collided: {e}")
            raise ConflictException("The academic structure already exists for this institution") from e
        except Exception:
            await db.rollback()
            raise

        logger.info(
            f"Generated {CycleType(cycle_type).value} structure for institution {institution_id}: "
            f"{len(cycles)} cycles, {len(levels)} levels"
        )
        return generated


# Singleton instance
_academic_structure_service: AcademicStructureService | None = None


def get_academic_structure_service() -> AcademicStructureService:
    """Get the academic structure service singleton."""
    global _academic_structure_service
    if _academic_structure_service is None:
        _academic_structure_service = AcademicStructureService()
    return _academic_structure_service
