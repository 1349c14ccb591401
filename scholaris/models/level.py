"""Level model (a grade such as "3ro de Primaria") and its report layout."""

import uuid
from enum import Enum

from sqlalchemy import Boolean, ForeignKey, Index, Integer, String, Text, text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from scholaris.models.base import InstitutionScopedModel


class ReportFormat(str, Enum):
    """Report-card (sabana) layout used for a level."""

    INICIAL_DO = "INICIAL_DO"
    INICIAL_HT = "INICIAL_HT"
    PRIMARIA_DO = "PRIMARIA_DO"
    PRIMARIA_HT = "PRIMARIA_HT"
    SECUNDARIA_DO = "SECUNDARIA_DO"
    SECUNDARIA_HT = "SECUNDARIA_HT"
    POLITECNICO_DO = "POLITECNICO_DO"
    ADULTOS = "ADULTOS"


# Columns written from a resolved sabana format
REPORT_FORMAT_FIELDS = ("report_format", "period_count", "uses_technical_modules")


class Level(InstitutionScopedModel):
    """A grade level configured for an institution.

    The report-format columns are denormalized from the level's cycle and the
    institution's grading system. They stay NULL until first resolved and can
    be overridden by an administrator.
    """

    __tablename__ = "levels"
    __table_args__ = (
        Index(
            "idx_levels_institution",
            "institution_id",
            postgresql_where=text("deleted_at IS NULL"),
        ),
        Index(
            "idx_levels_institution_name",
            "institution_id",
            "name",
            unique=True,
            postgresql_where=text("deleted_at IS NULL"),
        ),
        Index("idx_levels_cycle", "cycle_id"),
    )

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    grade_number: Mapped[int | None] = mapped_column(Integer, nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    display_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    cycle_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("educational_cycles.id", ondelete="SET NULL"),
        nullable=True,
    )

    # Report layout
    report_format: Mapped[str | None] = mapped_column(String(30), nullable=True)
    period_count: Mapped[int | None] = mapped_column(Integer, nullable=True)
    uses_technical_modules: Mapped[bool | None] = mapped_column(Boolean, nullable=True)

    def __repr__(self) -> str:
        return f"<Level {self.name}: {self.report_format}>"
