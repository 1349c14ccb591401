"""Educational cycle model grouping grade levels (e.g. "Primer Ciclo")."""

from enum import Enum

from sqlalchemy import Index, Integer, String, Text, text
from sqlalchemy.orm import Mapped, mapped_column

from scholaris.models.base import InstitutionScopedModel


class CycleType(str, Enum):
    """Academic stage a cycle belongs to."""

    INICIAL = "INICIAL"
    PRIMARIA = "PRIMARIA"
    SECUNDARIA = "SECUNDARIA"
    POLITECNICO = "POLITECNICO"
    ADULTOS = "ADULTOS"


class EducationalCycle(InstitutionScopedModel):
    """A cycle configured for an institution.

    `cycle_type` is optional; when it is missing the stage is inferred from
    the cycle name.
    """

    __tablename__ = "educational_cycles"
    __table_args__ = (
        Index(
            "idx_educational_cycles_institution",
            "institution_id",
            postgresql_where=text("deleted_at IS NULL"),
        ),
        Index(
            "idx_educational_cycles_institution_name",
            "institution_id",
            "name",
            unique=True,
            postgresql_where=text("deleted_at IS NULL"),
        ),
    )

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    display_order: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    cycle_type: Mapped[str | None] = mapped_column(String(20), nullable=True)

    def __repr__(self) -> str:
        return f"<EducationalCycle {self.name} ({self.cycle_type})>"
