"""Institution model for multi-tenancy support."""

from enum import Enum

from sqlalchemy import Boolean, Index, String, text
from sqlalchemy.orm import Mapped, mapped_column

from scholaris.models.base import Base, SoftDeleteMixin, TimestampMixin, UUIDPrimaryKeyMixin


class GradingSystem(str, Enum):
    """National grading system an institution reports under.

    The suffix names the country: DO for the Dominican Republic, HT for Haiti.
    """

    PRIMARIA_DO = "PRIMARIA_DO"
    SECUNDARIA_GENERAL_DO = "SECUNDARIA_GENERAL_DO"
    POLITECNICO_DO = "POLITECNICO_DO"
    PRIMARIA_HT = "PRIMARIA_HT"
    SECUNDARIA_HT = "SECUNDARIA_HT"

    @property
    def is_haiti(self) -> bool:
        """Check if the system belongs to the Haitian family."""
        return self in HAITI_SYSTEMS

    @property
    def uses_continuous_component(self) -> bool:
        """Dominican systems grade a 0-30 continuous performance component."""
        return self in DOMINICAN_SYSTEMS


HAITI_SYSTEMS = frozenset({GradingSystem.PRIMARIA_HT, GradingSystem.SECUNDARIA_HT})
DOMINICAN_SYSTEMS = frozenset(
    {
        GradingSystem.PRIMARIA_DO,
        GradingSystem.SECUNDARIA_GENERAL_DO,
        GradingSystem.POLITECNICO_DO,
    }
)


class Institution(Base, UUIDPrimaryKeyMixin, TimestampMixin, SoftDeleteMixin):
    """A school operating under one national grading system."""

    __tablename__ = "institutions"
    __table_args__ = (
        Index("idx_institutions_slug", "slug", postgresql_where=text("deleted_at IS NULL")),
    )

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    slug: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    grading_system: Mapped[str] = mapped_column(
        String(30),
        nullable=False,
        default=GradingSystem.PRIMARIA_DO.value,
    )
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    def __repr__(self) -> str:
        return f"<Institution {self.slug}: {self.grading_system}>"
