"""Grade record model storing period scores and the computed final average."""

import uuid
from enum import Enum

from sqlalchemy import Float, Index, String, text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from scholaris.models.base import InstitutionScopedModel


class GradeStatus(str, Enum):
    """Outcome of a final grade."""

    PENDIENTE = "PENDIENTE"
    APROBADO = "APROBADO"
    APLAZADO = "APLAZADO"
    REPROBADO = "REPROBADO"


class GradeRecord(InstitutionScopedModel):
    """A student's grades for one subject.

    `final_average` and `status` are derived from the scores on every save
    and are never edited directly.
    """

    __tablename__ = "grade_records"
    __table_args__ = (
        Index(
            "idx_grade_records_unique",
            "institution_id",
            "student_id",
            "subject_id",
            unique=True,
            postgresql_where=text("deleted_at IS NULL"),
        ),
        Index("idx_grade_records_student", "student_id"),
    )

    student_id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), nullable=False)
    subject_id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), nullable=False)

    # Period scores (0-100) and their remediation attempts
    p1: Mapped[float | None] = mapped_column(Float, nullable=True)
    p2: Mapped[float | None] = mapped_column(Float, nullable=True)
    p3: Mapped[float | None] = mapped_column(Float, nullable=True)
    p4: Mapped[float | None] = mapped_column(Float, nullable=True)
    rp1: Mapped[float | None] = mapped_column(Float, nullable=True)
    rp2: Mapped[float | None] = mapped_column(Float, nullable=True)
    rp3: Mapped[float | None] = mapped_column(Float, nullable=True)
    rp4: Mapped[float | None] = mapped_column(Float, nullable=True)

    # Continuous performance component (0-30), Dominican systems only
    cpc_30: Mapped[float | None] = mapped_column(Float, nullable=True)

    final_average: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=GradeStatus.PENDIENTE.value,
    )

    def __repr__(self) -> str:
        return f"<GradeRecord {self.student_id}/{self.subject_id}: {self.final_average} {self.status}>"
