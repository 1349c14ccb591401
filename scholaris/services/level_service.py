"""Service for managing levels and their report formats."""

import logging
import uuid
from typing import List, Tuple

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from scholaris.exceptions import ConflictException, NotFoundException
from scholaris.models.educational_cycle import EducationalCycle
from scholaris.models.institution import Institution
from scholaris.models.level import REPORT_FORMAT_FIELDS, Level
from scholaris.schemas.level import LevelFormatChange, ReportFormatRepairSummary
from scholaris.services.institution_service import get_institution_grading_system
from scholaris.services.sabana_format_service import apply_sabana_format, resolve_sabana_format
from scholaris.utils.tenant_context import get_institution_id

logger = logging.getLogger(__name__)


class LevelService:
    """Service for managing level configuration."""

    async def get_levels(
        self,
        db: AsyncSession,
        cycle_id: uuid.UUID | None = None,
        is_active: bool | None = True,
        page: int = 1,
        page_size: int = 100,
    ) -> Tuple[List[Level], int]:
        """Get all levels for the current institution."""
        institution_id = get_institution_id()

        # Base query
        query = select(Level).where(
            Level.institution_id == institution_id,
            Level.deleted_at.is_(None),
        )

        # Apply filters
        if is_active is not None:
            query = query.where(Level.is_active == is_active)
        if cycle_id is not None:
            query = query.where(Level.cycle_id == cycle_id)

        # Count total
        count_query = select(func.count()).select_from(query.subquery())
        total = (await db.execute(count_query)).scalar() or 0

        # Apply pagination and ordering
        query = query.order_by(Level.display_order, Level.grade_number, Level.name)
        query = query.offset((page - 1) * page_size).limit(page_size)

        result = await db.execute(query)
        levels = list(result.scalars().all())

        return levels, total

    async def get_level(self, db: AsyncSession, level_id: uuid.UUID) -> Level | None:
        """Get a level by ID."""
        institution_id = get_institution_id()

        query = select(Level).where(
            Level.id == level_id,
            Level.institution_id == institution_id,
            Level.deleted_at.is_(None),
        )
        result = await db.execute(query)
        return result.scalar_one_or_none()

    async def get_level_by_name(self, db: AsyncSession, name: str) -> Level | None:
        """Get a level by name."""
        institution_id = get_institution_id()

        query = select(Level).where(
            Level.name == name,
            Level.institution_id == institution_id,
            Level.deleted_at.is_(None),
        )
        result = await db.execute(query)
        return result.scalar_one_or_none()

    async def _get_cycle(self, db: AsyncSession, cycle_id: uuid.UUID) -> EducationalCycle:
        institution_id = get_institution_id()

        result = await db.execute(
            select(EducationalCycle).where(
                EducationalCycle.id == cycle_id,
                EducationalCycle.institution_id == institution_id,
                EducationalCycle.deleted_at.is_(None),
            )
        )
        cycle = result.scalar_one_or_none()
        if not cycle:
            raise NotFoundException("Educational cycle")
        return cycle

    async def _resolve_from_cycle(
        self, db: AsyncSession, level: Level, cycle: EducationalCycle
    ) -> None:
        grading_system = await get_institution_grading_system(db, level.institution_id)
        apply_sabana_format(level, cycle, grading_system)

    async def create_level(
        self,
        db: AsyncSession,
        name: str,
        grade_number: int | None = None,
        description: str | None = None,
        display_order: int = 0,
        cycle_id: uuid.UUID | None = None,
        report_format: str | None = None,
        period_count: int | None = None,
        uses_technical_modules: bool | None = None,
    ) -> Level:
        """Create a new level.

        When the level belongs to a cycle its report format is resolved
        automatically, unless any format field is given explicitly.
        """
        institution_id = get_institution_id()

        if await self.get_level_by_name(db, name):
            raise ConflictException(f"Level '{name}' already exists")

        cycle = await self._get_cycle(db, cycle_id) if cycle_id else None

        level = Level(
            institution_id=institution_id,
            name=name,
            grade_number=grade_number,
            description=description,
            display_order=display_order,
            cycle_id=cycle_id,
            is_active=True,
        )

        manual = {
            "report_format": report_format,
            "period_count": period_count,
            "uses_technical_modules": uses_technical_modules,
        }
        if any(value is not None for value in manual.values()):
            for key, value in manual.items():
                setattr(level, key, getattr(value, "value", value))
        elif cycle is not None:
            await self._resolve_from_cycle(db, level, cycle)

        db.add(level)
        await db.commit()
        await db.refresh(level)
        return level

    async def update_level(
        self,
        db: AsyncSession,
        level_id: uuid.UUID,
        **kwargs,
    ) -> Level | None:
        """Update a level.

        Passing `cycle_id` (None detaches) reassigns the level; attaching it
        to a cycle re-resolves the report format unless format fields are
        part of the same update.
        """
        level = await self.get_level(db, level_id)
        if not level:
            return None

        if kwargs.get("name") and kwargs["name"] != level.name:
            existing = await self.get_level_by_name(db, kwargs["name"])
            if existing and existing.id != level.id:
                raise ConflictException(f"Level '{kwargs['name']}' already exists")

        cycle = None
        if "cycle_id" in kwargs:
            cycle_id = kwargs.pop("cycle_id")
            cycle = await self._get_cycle(db, cycle_id) if cycle_id else None
            level.cycle_id = cycle_id

        manual_format = any(kwargs.get(field) is not None for field in REPORT_FORMAT_FIELDS)

        for key, value in kwargs.items():
            if hasattr(level, key) and value is not None:
                setattr(level, key, getattr(value, "value", value))

        if cycle is not None and not manual_format:
            await self._resolve_from_cycle(db, level, cycle)

        await db.commit()
        await db.refresh(level)
        return level

    async def assign_level_to_cycle(
        self,
        db: AsyncSession,
        level_id: uuid.UUID,
        cycle_id: uuid.UUID | None,
    ) -> Level:
        """Attach a level to a cycle (or detach it with None)."""
        level = await self.update_level(db, level_id, cycle_id=cycle_id)
        if not level:
            raise NotFoundException("Level")
        return level

    async def delete_level(self, db: AsyncSession, level_id: uuid.UUID) -> bool:
        """Soft delete a level."""
        level = await self.get_level(db, level_id)
        if not level:
            return False

        level.soft_delete()
        await db.commit()
        return True

    async def repair_report_formats(
        self,
        db: AsyncSession,
        apply: bool = False,
    ) -> ReportFormatRepairSummary:
        """Bring every level's report format in line with its cycle.

        Runs across all institutions and does NOT use get_institution_id().
        With apply=False nothing is written and the summary lists the changes
        that would be made.
        """
        query = (
            select(Level, EducationalCycle, Institution.grading_system)
            .join(Institution, Institution.id == Level.institution_id)
            .outerjoin(
                EducationalCycle,
                (EducationalCycle.id == Level.cycle_id) & EducationalCycle.deleted_at.is_(None),
            )
            .where(Level.deleted_at.is_(None), Institution.deleted_at.is_(None))
            .order_by(Level.institution_id, Level.display_order, Level.name)
        )
        rows = (await db.execute(query)).all()

        summary = ReportFormatRepairSummary(applied=apply, total=len(rows))
        for level, cycle, grading_system in rows:
            if cycle is None:
                summary.without_cycle += 1
                continue

            expected = resolve_sabana_format(cycle, grading_system)
            if expected is None:
                summary.unmatched += 1
                logger.warning(
                    f"Level {level.name!r}: cycle {cycle.name!r} (type {cycle.cycle_type}) "
                    f"cannot be classified"
                )
                continue

            values = expected.model_dump(mode="json")
            changes = {
                field: (getattr(level, field), values[field])
                for field in REPORT_FORMAT_FIELDS
                if getattr(level, field) != values[field]
            }
            if not changes:
                summary.unchanged += 1
                continue

            summary.updated += 1
            summary.changes.append(
                LevelFormatChange(
                    level_id=level.id,
                    level_name=level.name,
                    institution_id=level.institution_id,
                    cycle_name=cycle.name,
                    changes=changes,
                )
            )
            if apply:
                for field in changes:
                    setattr(level, field, values[field])

        if apply:
            await db.commit()

        logger.info(
            f"Report format repair ({'applied' if apply else 'dry run'}): "
            f"{summary.total} levels, {summary.updated} updated, {summary.unchanged} unchanged, "
            f"{summary.without_cycle} without cycle, {summary.unmatched} unmatched"
        )
        return summary


# Singleton instance
_level_service: LevelService | None = None


def get_level_service() -> LevelService:
    """Get the level service singleton."""
    global _level_service
    if _level_service is None:
        _level_service = LevelService()
    return _level_service
