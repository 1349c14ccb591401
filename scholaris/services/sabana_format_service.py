"""Report-card (sabana) format resolution for levels.

A level's report layout follows from the stage of its cycle and the country
of the institution's grading system. The stage comes from the cycle's
`cycle_type` when set, otherwise it is inferred from the cycle name.
"""

import logging
import unicodedata
from collections.abc import Mapping
from typing import Any

from scholaris.config import settings
from scholaris.models.educational_cycle import CycleType
from scholaris.models.level import REPORT_FORMAT_FIELDS, ReportFormat
from scholaris.schemas.level import SabanaFormat

logger = logging.getLogger(__name__)

# Checked in order, first match wins. Reordering reclassifies existing cycles.
CYCLE_TYPE_KEYWORDS: tuple[tuple[CycleType, tuple[str, ...]], ...] = (
    (CycleType.INICIAL, ("inicial", "preescolar", "parvularia")),
    (CycleType.PRIMARIA, ("primaria", "basica")),
    (CycleType.POLITECNICO, ("politecnico", "tecnico")),
    (CycleType.SECUNDARIA, ("secundaria", "media")),
    (CycleType.ADULTOS, ("adulto",)),
)

# (report format for DO, report format for HT) per stage
_VARIANT_FORMATS = {
    CycleType.INICIAL: (ReportFormat.INICIAL_DO, ReportFormat.INICIAL_HT),
    CycleType.PRIMARIA: (ReportFormat.PRIMARIA_DO, ReportFormat.PRIMARIA_HT),
    CycleType.SECUNDARIA: (ReportFormat.SECUNDARIA_DO, ReportFormat.SECUNDARIA_HT),
}

DO_PERIOD_COUNT = 4
HT_PERIOD_COUNT = 3


def _normalize(text: str) -> str:
    decomposed = unicodedata.normalize("NFD", text.lower())
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def infer_cycle_type(name: str | None) -> CycleType | None:
    """Guess a cycle's stage from keywords in its name."""
    if not name:
        return None
    normalized = _normalize(name)
    for cycle_type, keywords in CYCLE_TYPE_KEYWORDS:
        if any(keyword in normalized for keyword in keywords):
            return cycle_type
    return None


def _cycle_attr(cycle: Any, field: str) -> Any:
    if isinstance(cycle, Mapping):
        return cycle.get(field)
    return getattr(cycle, field, None)


def determine_cycle_type(cycle: Any) -> CycleType | None:
    """The explicit `cycle_type` of a cycle, or the one inferred from its name."""
    explicit = _cycle_attr(cycle, "cycle_type")
    if explicit:
        try:
            return CycleType(explicit)
        except ValueError:
            logger.warning(f"Ignoring unknown cycle type {explicit!r}")
    return infer_cycle_type(_cycle_attr(cycle, "name"))


def is_haiti_system(system_code: str | None) -> bool:
    """Check if a grading system code belongs to the Haitian variant."""
    return settings.haiti_system_marker in (system_code or "")


def format_for_cycle_type(cycle_type: CycleType, system_code: str | None) -> SabanaFormat:
    """Look up the report layout of a stage under a grading system."""
    if cycle_type == CycleType.POLITECNICO:
        # There is no Haitian polytechnic layout
        return SabanaFormat(
            report_format=ReportFormat.POLITECNICO_DO,
            period_count=DO_PERIOD_COUNT,
            uses_technical_modules=True,
        )
    if cycle_type == CycleType.ADULTOS:
        return SabanaFormat(
            report_format=ReportFormat.ADULTOS,
            period_count=DO_PERIOD_COUNT,
            uses_technical_modules=False,
        )

    haiti = is_haiti_system(system_code)
    do_format, ht_format = _VARIANT_FORMATS[cycle_type]
    return SabanaFormat(
        report_format=ht_format if haiti else do_format,
        period_count=HT_PERIOD_COUNT if haiti else DO_PERIOD_COUNT,
        uses_technical_modules=False,
    )


def resolve_sabana_format(cycle: Any, system_code: str | None) -> SabanaFormat | None:
    """Resolve the report layout for levels of a cycle.

    Args:
        cycle: An EducationalCycle, or any object or mapping with `name` and
            an optional `cycle_type`
        system_code: The institution's grading system code

    Returns:
        The resolved format, or None when the stage cannot be determined.
        None means "not classified yet": callers keep whatever the level has.
    """
    cycle_type = determine_cycle_type(cycle)
    if cycle_type is None:
        return None
    return format_for_cycle_type(cycle_type, system_code)


def write_sabana_format(level: Any, sabana_format: SabanaFormat) -> None:
    """Copy a resolved format onto a level's report-format columns."""
    values = sabana_format.model_dump(mode="json")
    for field in REPORT_FORMAT_FIELDS:
        setattr(level, field, values[field])


def apply_sabana_format(level: Any, cycle: Any, system_code: str | None) -> SabanaFormat | None:
    """Resolve the format for a level's cycle and write it onto the level.

    Leaves the level untouched when the cycle cannot be classified.
    """
    sabana_format = resolve_sabana_format(cycle, system_code)
    if sabana_format is None:
        logger.warning(
            f"Could not classify cycle {_cycle_attr(cycle, 'name')!r}; "
            f"report format of level {getattr(level, 'name', None)!r} left unchanged"
        )
        return None

    write_sabana_format(level, sabana_format)
    return sabana_format
