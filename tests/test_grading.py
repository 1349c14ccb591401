"""
Tests for final grade computation under Dominican and Haitian systems.
"""

import pytest

from scholaris.models import GradeStatus, GradingSystem
from scholaris.schemas.grade import PeriodScores
from scholaris.services.grading_service import (
    compute_final_grade,
    effective_period_scores,
    period_average,
)

DOMINICAN = [
    GradingSystem.PRIMARIA_DO,
    GradingSystem.SECUNDARIA_GENERAL_DO,
    GradingSystem.POLITECNICO_DO,
]
HAITIAN = [GradingSystem.PRIMARIA_HT, GradingSystem.SECUNDARIA_HT]


class TestDominicanFormula:
    """Continuous component (30) plus 70% of the period average."""

    def test_four_periods_and_component(self):
        result = compute_final_grade(
            GradingSystem.PRIMARIA_DO,
            PeriodScores(p1=80, p2=90, p3=70, p4=80, cpc_30=25),
        )
        # (80+90+70+80)/4 = 80, 25 + 56 = 81
        assert result.final_average == 81
        assert result.status == GradeStatus.APROBADO

    def test_exactly_70_passes(self):
        result = compute_final_grade(
            GradingSystem.PRIMARIA_DO,
            {"p1": 70, "p2": 70, "p3": 70, "p4": 70, "cpc_30": 21},
        )
        assert result.final_average == 70
        assert result.status == GradeStatus.APROBADO

    def test_exactly_60_is_deferred(self):
        result = compute_final_grade(
            GradingSystem.PRIMARIA_DO,
            {"p1": 60, "p2": 60, "p3": 60, "p4": 60, "cpc_30": 18},
        )
        assert result.final_average == 60
        assert result.status == GradeStatus.APLAZADO

    def test_just_below_70_is_deferred(self):
        # 27.99 + 60 * 0.7
        result = compute_final_grade(
            GradingSystem.SECUNDARIA_GENERAL_DO,
            {"p1": 60, "cpc_30": 27.99},
        )
        assert result.final_average == 69.99
        assert result.status == GradeStatus.APLAZADO

    def test_just_below_60_fails(self):
        result = compute_final_grade(
            GradingSystem.PRIMARIA_DO,
            {"p1": 80, "cpc_30": 3.99},
        )
        # 3.99 + 56 = 59.99
        assert result.final_average == 59.99
        assert result.status == GradeStatus.REPROBADO

    def test_low_scores_fail(self):
        result = compute_final_grade(
            GradingSystem.PRIMARIA_DO,
            {"p1": 40, "p2": 30, "p3": 35, "p4": 45, "cpc_30": 10},
        )
        # 37.5 * 0.7 = 26.25, + 10
        assert result.final_average == 36.25
        assert result.status == GradeStatus.REPROBADO

    def test_fewer_than_four_periods(self):
        result = compute_final_grade(
            GradingSystem.PRIMARIA_DO,
            {"p1": 80, "p2": 90, "cpc_30": 24},
        )
        # (80+90)/2 = 85, 85 * 0.7 = 59.5, + 24
        assert result.final_average == 83.5
        assert result.status == GradeStatus.APROBADO

    def test_zero_component_still_counts(self):
        result = compute_final_grade(
            GradingSystem.PRIMARIA_DO,
            {"p1": 100, "p2": 100, "p3": 100, "p4": 100, "cpc_30": 0},
        )
        assert result.final_average == 70
        assert result.status == GradeStatus.APROBADO

    def test_component_alone(self):
        result = compute_final_grade(GradingSystem.POLITECNICO_DO, {"cpc_30": 20})
        assert result.final_average == 20
        assert result.status == GradeStatus.REPROBADO

    @pytest.mark.parametrize("system", DOMINICAN)
    def test_same_formula_for_every_dominican_system(self, system):
        result = compute_final_grade(
            system, {"p1": 80, "p2": 80, "p3": 80, "p4": 80, "cpc_30": 24}
        )
        assert result.final_average == 80
        assert result.status == GradeStatus.APROBADO


class TestHaitianFormula:
    """Plain mean of graded periods, passing at 50."""

    def test_three_periods(self):
        result = compute_final_grade(
            GradingSystem.SECUNDARIA_HT, {"p1": 60, "p2": 70, "p3": 80}
        )
        assert result.final_average == 70
        assert result.status == GradeStatus.APROBADO

    def test_four_periods(self):
        result = compute_final_grade(
            GradingSystem.SECUNDARIA_HT, {"p1": 60, "p2": 70, "p3": 80, "p4": 50}
        )
        assert result.final_average == 65
        assert result.status == GradeStatus.APROBADO

    def test_below_50_fails_and_rounds(self):
        result = compute_final_grade(
            GradingSystem.SECUNDARIA_HT, {"p1": 30, "p2": 40, "p3": 45}
        )
        assert result.final_average == 38.33
        assert result.status == GradeStatus.REPROBADO

    def test_exactly_50_passes(self):
        result = compute_final_grade(GradingSystem.PRIMARIA_HT, {"p1": 50, "p2": 50})
        assert result.final_average == 50
        assert result.status == GradeStatus.APROBADO

    def test_two_of_four_periods(self):
        result = compute_final_grade(GradingSystem.PRIMARIA_HT, {"p1": 45, "p3": 52})
        assert result.final_average == 48.5
        assert result.status == GradeStatus.REPROBADO

    def test_component_is_ignored(self):
        with_component = compute_final_grade(
            GradingSystem.PRIMARIA_HT, {"p1": 60, "p2": 70, "cpc_30": 30}
        )
        without = compute_final_grade(GradingSystem.PRIMARIA_HT, {"p1": 60, "p2": 70})
        assert with_component == without
        assert with_component.final_average == 65


class TestRemediation:
    def test_higher_remediation_replaces_period(self):
        result = compute_final_grade(
            GradingSystem.SECUNDARIA_HT, {"p1": 40, "rp1": 60, "p2": 70}
        )
        assert result.final_average == 65

    def test_lower_remediation_is_ignored(self):
        with_rp = compute_final_grade(
            GradingSystem.PRIMARIA_DO, {"p1": 80, "rp1": 50, "p2": 90, "cpc_30": 24}
        )
        without = compute_final_grade(
            GradingSystem.PRIMARIA_DO, {"p1": 80, "p2": 90, "cpc_30": 24}
        )
        assert with_rp == without

    def test_remediation_fills_missing_period(self):
        assert effective_period_scores({"rp3": 75}) == [0, 0, 75, 0]

    def test_effective_score_never_below_original(self):
        scores = PeriodScores(p1=90, rp1=10, p2=55, rp2=65, p3=None, rp3=None, p4=70)
        effective = effective_period_scores(scores)
        assert effective == [90, 65, 0, 70]
        for original, best in zip([90, 55, 0, 70], effective):
            assert best >= original


class TestPendingResults:
    @pytest.mark.parametrize("system", DOMINICAN + HAITIAN)
    def test_no_scores_is_pending(self, system):
        result = compute_final_grade(system, PeriodScores())
        assert result.final_average == 0
        assert result.status == GradeStatus.PENDIENTE

    def test_zero_scores_are_not_averaged(self):
        assert period_average({"p1": 0, "p2": 80, "p3": 0, "p4": 60}) == 70

    def test_accepts_system_code_string(self):
        result = compute_final_grade("PRIMARIA_HT", {"p1": 55})
        assert result.final_average == 55
        assert result.status == GradeStatus.APROBADO

    def test_unknown_system_is_pending(self, caplog):
        result = compute_final_grade("BACHILLERATO_XX", {"p1": 90, "cpc_30": 30})
        assert result.final_average == 0
        assert result.status == GradeStatus.PENDIENTE
        assert "BACHILLERATO_XX" in caplog.text


class TestRounding:
    def test_rounds_half_up_on_the_raw_value(self):
        # 10.005 would round down to 10.0 with float round()
        result = compute_final_grade(GradingSystem.PRIMARIA_HT, {"p1": 10.005})
        assert result.final_average == 10.01

    def test_repeating_mean(self):
        result = compute_final_grade(GradingSystem.PRIMARIA_HT, {"p1": 70, "p2": 70, "p3": 71})
        assert result.final_average == 70.33


class TestStatusOnUnroundedAverage:
    """The reported average is rounded but the status uses the exact value."""

    def test_haitian_just_under_pass_mark(self):
        # mean 49.9966..., reported as 50
        result = compute_final_grade(GradingSystem.PRIMARIA_HT, {"p1": 50, "p2": 50, "p3": 49.99})
        assert result.final_average == 50
        assert result.status == GradeStatus.REPROBADO

    def test_dominican_just_under_pass_mark(self):
        # 99.995 * 0.7 = 69.9965, reported as 70
        result = compute_final_grade(GradingSystem.PRIMARIA_DO, {"p1": 99.995, "cpc_30": 0})
        assert result.final_average == 70
        assert result.status == GradeStatus.APLAZADO

    def test_dominican_just_under_conditional_mark(self):
        # 17.996 + 60 * 0.7 = 59.996, reported as 60
        result = compute_final_grade(GradingSystem.SECUNDARIA_GENERAL_DO, {"p1": 60, "cpc_30": 17.996})
        assert result.final_average == 60
        assert result.status == GradeStatus.REPROBADO


class TestGradingSystemFamilies:
    @pytest.mark.parametrize("system", HAITIAN)
    def test_haitian_systems(self, system):
        assert system.is_haiti
        assert not system.uses_continuous_component

    @pytest.mark.parametrize("system", DOMINICAN)
    def test_dominican_systems(self, system):
        assert not system.is_haiti
        assert system.uses_continuous_component
