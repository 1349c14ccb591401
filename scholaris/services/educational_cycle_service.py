"""Service for managing educational cycles."""

import logging
import uuid
from typing import List

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from scholaris.exceptions import ConflictException, NotFoundException
from scholaris.models.educational_cycle import EducationalCycle
from scholaris.models.level import Level
from scholaris.services.institution_service import get_institution_grading_system
from scholaris.services.sabana_format_service import apply_sabana_format
from scholaris.utils.tenant_context import get_institution_id

logger = logging.getLogger(__name__)


class EducationalCycleService:
    """Service for managing the cycles levels are grouped into."""

    async def get_cycles(self, db: AsyncSession) -> List[EducationalCycle]:
        """Get all cycles for the current institution."""
        institution_id = get_institution_id()

        query = (
            select(EducationalCycle)
            .where(
                EducationalCycle.institution_id == institution_id,
                EducationalCycle.deleted_at.is_(None),
            )
            .order_by(EducationalCycle.display_order, EducationalCycle.name)
        )
        result = await db.execute(query)
        return list(result.scalars().all())

    async def get_cycle(self, db: AsyncSession, cycle_id: uuid.UUID) -> EducationalCycle | None:
        """Get a cycle by ID."""
        institution_id = get_institution_id()

        query = select(EducationalCycle).where(
            EducationalCycle.id == cycle_id,
            EducationalCycle.institution_id == institution_id,
            EducationalCycle.deleted_at.is_(None),
        )
        result = await db.execute(query)
        return result.scalar_one_or_none()

    async def get_cycle_by_name(self, db: AsyncSession, name: str) -> EducationalCycle | None:
        """Get a cycle by name."""
        institution_id = get_institution_id()

        query = select(EducationalCycle).where(
            EducationalCycle.name == name,
            EducationalCycle.institution_id == institution_id,
            EducationalCycle.deleted_at.is_(None),
        )
        result = await db.execute(query)
        return result.scalar_one_or_none()

    async def get_cycle_levels(self, db: AsyncSession, cycle_id: uuid.UUID) -> List[Level]:
        """Get the levels attached to a cycle."""
        query = (
            select(Level)
            .where(Level.cycle_id == cycle_id, Level.deleted_at.is_(None))
            .order_by(Level.grade_number, Level.name)
        )
        result = await db.execute(query)
        return list(result.scalars().all())

    async def create_cycle(
        self,
        db: AsyncSession,
        name: str,
        description: str | None = None,
        display_order: int = 1,
        cycle_type: str | None = None,
    ) -> EducationalCycle:
        """Create a new cycle."""
        institution_id = get_institution_id()

        if await self.get_cycle_by_name(db, name):
            raise ConflictException(f"Educational cycle '{name}' already exists")

        cycle = EducationalCycle(
            institution_id=institution_id,
            name=name,
            description=description,
            display_order=display_order,
            cycle_type=getattr(cycle_type, "value", cycle_type),
        )
        db.add(cycle)
        await db.commit()
        await db.refresh(cycle)
        return cycle

    async def update_cycle(
        self,
        db: AsyncSession,
        cycle_id: uuid.UUID,
        **kwargs,
    ) -> EducationalCycle | None:
        """Update a cycle.

        Renaming a cycle or changing its type re-resolves the report format
        of its levels.
        """
        cycle = await self.get_cycle(db, cycle_id)
        if not cycle:
            return None

        if kwargs.get("name") and kwargs["name"] != cycle.name:
            existing = await self.get_cycle_by_name(db, kwargs["name"])
            if existing and existing.id != cycle.id:
                raise ConflictException(f"Educational cycle '{kwargs['name']}' already exists")

        reclassify = False
        for key, value in kwargs.items():
            if hasattr(cycle, key) and value is not None:
                value = getattr(value, "value", value)
                if key in ("name", "cycle_type") and getattr(cycle, key) != value:
                    reclassify = True
                setattr(cycle, key, value)

        if reclassify:
            await self._resolve_levels(db, cycle, await self.get_cycle_levels(db, cycle.id))

        await db.commit()
        await db.refresh(cycle)
        return cycle

    async def delete_cycle(self, db: AsyncSession, cycle_id: uuid.UUID) -> bool:
        """Soft delete a cycle, detaching its levels first."""
        cycle = await self.get_cycle(db, cycle_id)
        if not cycle:
            return False

        await db.execute(
            update(Level).where(Level.cycle_id == cycle.id).values(cycle_id=None)
        )
        cycle.soft_delete()
        await db.commit()
        return True

    async def assign_levels_to_cycle(
        self,
        db: AsyncSession,
        cycle_id: uuid.UUID,
        level_ids: List[uuid.UUID],
    ) -> List[Level]:
        """Replace the set of levels attached to a cycle.

        Levels not in `level_ids` are detached; newly attached levels get
        their report format resolved from the cycle.
        """
        institution_id = get_institution_id()

        cycle = await self.get_cycle(db, cycle_id)
        if not cycle:
            raise NotFoundException("Educational cycle")

        current = await self.get_cycle_levels(db, cycle.id)
        wanted = set(level_ids)
        for level in current:
            if level.id not in wanted:
                level.cycle_id = None

        attached: List[Level] = []
        if wanted:
            result = await db.execute(
                select(Level).where(
                    Level.id.in_(wanted),
                    Level.institution_id == institution_id,
                    Level.deleted_at.is_(None),
                )
            )
            current_ids = {level.id for level in current}
            for level in result.scalars().all():
                level.cycle_id = cycle.id
                if level.id not in current_ids:
                    attached.append(level)

        await self._resolve_levels(db, cycle, attached)
        await db.commit()
        return await self.get_cycle_levels(db, cycle.id)

    async def _resolve_levels(
        self, db: AsyncSession, cycle: EducationalCycle, levels: List[Level]
    ) -> None:
        if not levels:
            return
        grading_system = await get_institution_grading_system(db, cycle.institution_id)
        for level in levels:
            apply_sabana_format(level, cycle, grading_system)


# Singleton instance
_educational_cycle_service: EducationalCycleService | None = None


def get_educational_cycle_service() -> EducationalCycleService:
    """Get the educational cycle service singleton."""
    global _educational_cycle_service
    if _educational_cycle_service is None:
        _educational_cycle_service = EducationalCycleService()
    return _educational_cycle_service
