"""Institution service for CRUD operations."""

import re
import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from scholaris.exceptions import ConflictException, NotFoundException
from scholaris.models.institution import GradingSystem, Institution


async def get_institution_grading_system(db: AsyncSession, institution_id: uuid.UUID) -> str:
    """Get the grading system code of an institution."""
    result = await db.execute(
        select(Institution.grading_system).where(
            Institution.id == institution_id,
            Institution.deleted_at.is_(None),
        )
    )
    grading_system = result.scalar_one_or_none()
    if grading_system is None:
        raise NotFoundException("Institution")
    return grading_system


class InstitutionService:
    """Service for managing institutions (schools)."""

    async def get_institution(self, db: AsyncSession, institution_id: uuid.UUID) -> Institution:
        """Get an institution by ID."""
        result = await db.execute(
            select(Institution).where(
                Institution.id == institution_id,
                Institution.deleted_at.is_(None),
            )
        )
        institution = result.scalar_one_or_none()
        if not institution:
            raise NotFoundException("Institution")
        return institution

    async def get_institution_by_slug(self, db: AsyncSession, slug: str) -> Institution | None:
        """Get an institution by slug."""
        result = await db.execute(
            select(Institution).where(
                Institution.slug == slug,
                Institution.deleted_at.is_(None),
            )
        )
        return result.scalar_one_or_none()

    async def create_institution(
        self,
        db: AsyncSession,
        name: str,
        grading_system: GradingSystem | str = GradingSystem.PRIMARIA_DO,
        slug: str | None = None,
    ) -> Institution:
        """Create a new institution."""
        slug = slug or self._generate_slug(name)
        if await self.get_institution_by_slug(db, slug):
            raise ConflictException(f"An institution with slug '{slug}' already exists")

        institution = Institution(
            name=name,
            slug=slug,
            grading_system=GradingSystem(grading_system).value,
            is_active=True,
        )
        db.add(institution)
        await db.commit()
        await db.refresh(institution)
        return institution

    async def update_grading_system(
        self,
        db: AsyncSession,
        institution_id: uuid.UUID,
        grading_system: GradingSystem | str,
    ) -> Institution:
        """Change the grading system an institution reports under.

        Stored levels and grades are not touched; run the report-format repair
        and grade recalculation afterwards.
        """
        institution = await self.get_institution(db, institution_id)
        institution.grading_system = GradingSystem(grading_system).value
        await db.commit()
        await db.refresh(institution)
        return institution

    def _generate_slug(self, name: str) -> str:
        """Generate a URL-safe slug from name."""
        slug = name.lower()
        slug = re.sub(r"[^a-z0-9]+", "-", slug)
        slug = slug.strip("-")
        return slug


# Singleton instance
_institution_service: InstitutionService | None = None


def get_institution_service() -> InstitutionService:
    """Get the institution service singleton."""
    global _institution_service
    if _institution_service is None:
        _institution_service = InstitutionService()
    return _institution_service
