"""Final grade computation and grade record persistence."""

import logging
import uuid
from collections.abc import Mapping
from decimal import ROUND_HALF_UP, Decimal

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from scholaris.config import settings
from scholaris.exceptions import ValidationException
from scholaris.models.grade import GradeRecord, GradeStatus
from scholaris.models.institution import GradingSystem
from scholaris.schemas.grade import FinalGradeResult, GradeScoresInput, PeriodScores
from scholaris.services.institution_service import get_institution_grading_system
from scholaris.utils.tenant_context import get_institution_id

logger = logging.getLogger(__name__)

PERIODS = (1, 2, 3, 4)
SCORE_FIELDS = ("p1", "p2", "p3", "p4", "rp1", "rp2", "rp3", "rp4")


def _score(scores: PeriodScores | Mapping, field: str) -> float:
    if isinstance(scores, Mapping):
        value = scores.get(field)
    else:
        value = getattr(scores, field, None)
    return float(value or 0)


def _round2(value: float) -> float:
    return float(Decimal(str(value)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def effective_period_scores(scores: PeriodScores | Mapping) -> list[float]:
    """Best of each period score and its remediation attempt."""
    return [max(_score(scores, f"p{i}"), _score(scores, f"rp{i}")) for i in PERIODS]


def period_average(scores: PeriodScores | Mapping) -> float:
    """Mean of the entered periods.

    A zero score means the period has not been graded and is left out.
    """
    graded = [s for s in effective_period_scores(scores) if s > 0]
    if not graded:
        return 0.0
    return sum(graded) / len(graded)


def _haiti_status(final_average: float) -> GradeStatus:
    if final_average >= settings.ht_pass_mark:
        return GradeStatus.APROBADO
    if final_average > 0:
        return GradeStatus.REPROBADO
    return GradeStatus.PENDIENTE


def _dominican_status(final_average: float) -> GradeStatus:
    if final_average >= settings.do_pass_mark:
        return GradeStatus.APROBADO
    if final_average >= settings.do_conditional_mark:
        return GradeStatus.APLAZADO
    if final_average > 0:
        return GradeStatus.REPROBADO
    return GradeStatus.PENDIENTE


def compute_final_grade(
    system: GradingSystem | str,
    scores: PeriodScores | Mapping,
) -> FinalGradeResult:
    """Compute the final average and status of a set of period scores.

    Haitian systems take the plain mean of the graded periods and pass at 50.
    Dominican systems add the 0-30 continuous component to 70% of the period
    mean and pass at 70, with 60-69.99 deferred (APLAZADO).

    The status is decided on the unrounded average; only the reported
    average is rounded half-up to two decimals. Never raises: an unknown
    system yields a pending zero result.
    """
    try:
        system = GradingSystem(system)
    except ValueError:
        logger.warning(f"No grading formula for system {system!r}, final grade left pending")
        return FinalGradeResult(final_average=0.0, status=GradeStatus.PENDIENTE)

    if system.is_haiti:
        raw = period_average(scores)
        status = _haiti_status(raw)
    else:
        raw = _score(scores, "cpc_30") + period_average(scores) * 70 / 100
        status = _dominican_status(raw)

    return FinalGradeResult(final_average=_round2(raw), status=status)


class GradeService:
    """Service for saving grades and keeping their final averages current."""

    async def get_grade(
        self,
        db: AsyncSession,
        student_id: uuid.UUID,
        subject_id: uuid.UUID,
    ) -> GradeRecord | None:
        """Get a student's grade record for a subject."""
        institution_id = get_institution_id()

        query = select(GradeRecord).where(
            GradeRecord.institution_id == institution_id,
            GradeRecord.student_id == student_id,
            GradeRecord.subject_id == subject_id,
            GradeRecord.deleted_at.is_(None),
        )
        result = await db.execute(query)
        return result.scalar_one_or_none()

    async def save_grade(
        self,
        db: AsyncSession,
        student_id: uuid.UUID,
        subject_id: uuid.UUID,
        scores: GradeScoresInput,
        is_technical_subject: bool = False,
    ) -> GradeRecord:
        """Create or update a student's grades and recompute the final average."""
        institution_id = get_institution_id()
        grading_system = await get_institution_grading_system(db, institution_id)

        if grading_system == GradingSystem.POLITECNICO_DO.value and is_technical_subject:
            raise ValidationException(
                "Technical subjects in polytechnic institutions are graded by learning outcomes"
            )

        record = await self.get_grade(db, student_id, subject_id)
        if record is None:
            record = GradeRecord(
                institution_id=institution_id,
                student_id=student_id,
                subject_id=subject_id,
            )
            db.add(record)

        for field in SCORE_FIELDS:
            setattr(record, field, getattr(scores, field))

        if GradingSystem(grading_system).uses_continuous_component:
            record.cpc_30 = scores.cpc_30
        else:
            record.cpc_30 = None

        result = compute_final_grade(grading_system, scores)
        record.final_average = result.final_average
        record.status = result.status.value

        await db.commit()
        await db.refresh(record)
        return record

    async def recalculate_grades(self, db: AsyncSession) -> int:
        """Recompute every grade record of the current institution.

        Returns the number of records whose result changed.
        """
        institution_id = get_institution_id()
        grading_system = await get_institution_grading_system(db, institution_id)

        result = await db.execute(
            select(GradeRecord).where(
                GradeRecord.institution_id == institution_id,
                GradeRecord.deleted_at.is_(None),
            )
        )

        changed = 0
        for record in result.scalars().all():
            scores = PeriodScores.model_validate(record, from_attributes=True)
            outcome = compute_final_grade(grading_system, scores)
            if (record.final_average, record.status) != (outcome.final_average, outcome.status.value):
                record.final_average = outcome.final_average
                record.status = outcome.status.value
                changed += 1

        await db.commit()
        logger.info(f"Recalculated grades for institution {institution_id}: {changed} changed")
        return changed


# Singleton instance
_grade_service: GradeService | None = None


def get_grade_service() -> GradeService:
    """Get the grade service singleton."""
    global _grade_service
    if _grade_service is None:
        _grade_service = GradeService()
    return _grade_service
