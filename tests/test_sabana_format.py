"""
Tests for report-card (sabana) format resolution.
"""

import pytest

from scholaris.models import CycleType, GradingSystem, ReportFormat
from scholaris.models.level import Level
from scholaris.schemas.level import SabanaFormat
from scholaris.services.sabana_format_service import (
    apply_sabana_format,
    infer_cycle_type,
    resolve_sabana_format,
)


class TestInferCycleType:
    @pytest.mark.parametrize(
        "name, expected",
        [
            ("Nivel Inicial", CycleType.INICIAL),
            ("Preescolar", CycleType.INICIAL),
            ("Educación Parvularia", CycleType.INICIAL),
            ("Primaria - Primer Ciclo", CycleType.PRIMARIA),
            ("Educación Básica", CycleType.PRIMARIA),
            ("Politécnico Loyola", CycleType.POLITECNICO),
            ("Bachillerato Técnico", CycleType.POLITECNICO),
            ("SECUNDARIA", CycleType.SECUNDARIA),
            ("Educación Media", CycleType.SECUNDARIA),
            ("Educación de Adultos", CycleType.ADULTOS),
        ],
    )
    def test_keywords(self, name, expected):
        assert infer_cycle_type(name) == expected

    def test_first_match_wins(self):
        # Matches both "basica" and "media"; primary is checked first
        assert infer_cycle_type("Educación Básica y Media") == CycleType.PRIMARIA

    def test_technical_before_secondary(self):
        assert infer_cycle_type("Secundaria Técnico Profesional") == CycleType.POLITECNICO

    @pytest.mark.parametrize("name", ["3rd Grade", "Primer Ciclo", "", None])
    def test_unrecognized(self, name):
        assert infer_cycle_type(name) is None


class TestResolveSabanaFormat:
    def test_explicit_type_wins_over_name(self):
        result = resolve_sabana_format(
            {"name": "Secundaria", "cycle_type": CycleType.PRIMARIA}, GradingSystem.PRIMARIA_DO
        )
        assert result.report_format == ReportFormat.PRIMARIA_DO

    def test_type_as_plain_string(self):
        result = resolve_sabana_format({"name": "X", "cycle_type": "SECUNDARIA"}, "SECUNDARIA_HT")
        assert result == SabanaFormat(
            report_format=ReportFormat.SECUNDARIA_HT,
            period_count=3,
            uses_technical_modules=False,
        )

    def test_haiti_primary_from_name(self):
        result = resolve_sabana_format({"name": "3ro de Primaria", "cycle_type": None}, "PRIMARIA_HT")
        assert result.report_format == ReportFormat.PRIMARIA_HT
        assert result.period_count == 3
        assert result.uses_technical_modules is False

    def test_unrecognizable_name_without_type(self):
        assert resolve_sabana_format({"name": "3rd Grade", "cycle_type": None}, "PRIMARIA_HT") is None

    @pytest.mark.parametrize(
        "cycle_type, system, expected",
        [
            (CycleType.INICIAL, "PRIMARIA_DO", (ReportFormat.INICIAL_DO, 4, False)),
            (CycleType.INICIAL, "PRIMARIA_HT", (ReportFormat.INICIAL_HT, 3, False)),
            (CycleType.PRIMARIA, "PRIMARIA_DO", (ReportFormat.PRIMARIA_DO, 4, False)),
            (CycleType.PRIMARIA, "SECUNDARIA_HT", (ReportFormat.PRIMARIA_HT, 3, False)),
            (CycleType.SECUNDARIA, "SECUNDARIA_GENERAL_DO", (ReportFormat.SECUNDARIA_DO, 4, False)),
            (CycleType.SECUNDARIA, "SECUNDARIA_HT", (ReportFormat.SECUNDARIA_HT, 3, False)),
            (CycleType.POLITECNICO, "POLITECNICO_DO", (ReportFormat.POLITECNICO_DO, 4, True)),
            (CycleType.POLITECNICO, "PRIMARIA_HT", (ReportFormat.POLITECNICO_DO, 4, True)),
            (CycleType.ADULTOS, "PRIMARIA_DO", (ReportFormat.ADULTOS, 4, False)),
            (CycleType.ADULTOS, "SECUNDARIA_HT", (ReportFormat.ADULTOS, 4, False)),
        ],
    )
    def test_format_table(self, cycle_type, system, expected):
        result = resolve_sabana_format({"name": "", "cycle_type": cycle_type}, system)
        assert (result.report_format, result.period_count, result.uses_technical_modules) == expected

    def test_unknown_system_code_uses_dominican_layout(self):
        result = resolve_sabana_format({"name": "Primaria"}, "SOMETHING_ELSE")
        assert result.report_format == ReportFormat.PRIMARIA_DO
        assert result.period_count == 4

    def test_unknown_explicit_type_falls_back_to_name(self):
        result = resolve_sabana_format({"name": "Nivel Inicial", "cycle_type": "KINDER"}, "PRIMARIA_DO")
        assert result.report_format == ReportFormat.INICIAL_DO


class TestApplySabanaFormat:
    def test_writes_columns(self):
        level = Level(name="1ro de Secundaria")
        apply_sabana_format(level, {"name": "Secundaria"}, GradingSystem.SECUNDARIA_HT)
        assert level.report_format == "SECUNDARIA_HT"
        assert level.period_count == 3
        assert level.uses_technical_modules is False

    def test_unmatched_cycle_leaves_level_untouched(self):
        level = Level(
            name="Grade 3",
            report_format="PRIMARIA_DO",
            period_count=4,
            uses_technical_modules=False,
        )
        assert apply_sabana_format(level, {"name": "Third Cycle"}, "PRIMARIA_HT") is None
        assert level.report_format == "PRIMARIA_DO"
        assert level.period_count == 4
