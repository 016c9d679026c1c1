"""
Tests for the project-level models.

Covers:
- COCOMO II effort/duration/cost formulas and risk bands
- SLIM team efficiency and risk
- RCA capacity floor and risk
- Model recommendation and its tie order
- Configured rates flowing into cost
"""

import math

import pytest

from estimation_engines.parametric import (
    COCOMO_COMPLEXITY_FACTORS,
    calculate_all_models,
    calculate_cocomo,
    calculate_rca,
    calculate_slim,
    get_recommended_model,
    recommend_model,
)
from estimation_kernel.domain import (
    Complexity,
    EstimationParams,
    EstimationRates,
    EstimationResult,
    ModelName,
    RiskLevel,
)
from estimation_kernel.domain.values import round_half_up


def params(size=50, team=5, timeline=12, complexity="medium") -> EstimationParams:
    return EstimationParams(
        project_size=size,
        team_size=team,
        timeline=timeline,
        complexity=complexity,
    )


class TestCocomo:
    """COCOMO II basic model."""

    @pytest.mark.parametrize("complexity", ["low", "medium", "high"])
    def test_effort_formula(self, complexity):
        result = calculate_cocomo(params(size=10, complexity=complexity))
        factor = COCOMO_COMPLEXITY_FACTORS[Complexity(complexity)]

        assert result.effort == pytest.approx(2.94 * 10 ** 1.09 * factor)

    def test_duration_and_cost(self):
        result = calculate_cocomo(params(size=20))
        effort = 2.94 * 20 ** 1.09 * 1.12

        assert result.duration == pytest.approx(3.67 * effort ** 0.28)
        assert result.cost == math.floor(effort * 8000 + 0.5)

    def test_cost_is_whole_dollars(self):
        result = calculate_cocomo(params(size=17.3))
        assert result.cost == int(result.cost)

    @pytest.mark.parametrize("complexity", ["low", "medium", "high"])
    def test_large_project_is_always_high_risk(self, complexity):
        assert calculate_cocomo(params(size=51, complexity=complexity)).risk == RiskLevel.HIGH

    def test_high_complexity_is_high_risk(self):
        assert calculate_cocomo(params(size=5, complexity="high")).risk == RiskLevel.HIGH

    def test_medium_band(self):
        assert calculate_cocomo(params(size=31, complexity="low")).risk == RiskLevel.MEDIUM
        assert calculate_cocomo(params(size=10, complexity="medium")).risk == RiskLevel.MEDIUM

    def test_low_band(self):
        assert calculate_cocomo(params(size=30, complexity="low")).risk == RiskLevel.LOW

    def test_boundary_fifty_is_not_high_for_medium(self):
        assert calculate_cocomo(params(size=50)).risk == RiskLevel.MEDIUM


class TestSlim:
    """SLIM model."""

    def test_efficient_team(self):
        result = calculate_slim(params(size=50, team=5))

        # effort = 50000 / 1500, optimal team sqrt(33.3) > 5
        assert result.effort == pytest.approx(50000 / 1500)
        assert result.duration == pytest.approx(50000 / 1500 / 5)
        assert result.cost == 266667
        assert result.risk == RiskLevel.LOW

    def test_oversized_team_inflates_effort(self):
        result = calculate_slim(params(size=50, team=10))
        base = 50000 / 1500
        efficiency = math.sqrt(base) / 10

        assert result.effort == pytest.approx(base / efficiency)
        assert result.duration == pytest.approx(base / efficiency / 10)
        assert result.risk == RiskLevel.HIGH

    def test_medium_risk_band(self):
        # efficiency = sqrt(100000/2000) / 9 = 0.786
        result = calculate_slim(params(size=100, team=9, complexity="low"))
        assert result.risk == RiskLevel.MEDIUM

    def test_zero_team_returns_zero_duration(self):
        result = calculate_slim(params(team=0))

        assert result.duration == 0
        assert result.effort == pytest.approx(50000 / 1500)

    def test_zero_size_returns_zero_effort(self):
        result = calculate_slim(params(size=0))

        assert result.effort == 0
        assert result.cost == 0
        assert result.duration == 0


class TestRca:
    """RCA price model."""

    def test_capacity_floor(self):
        result = calculate_rca(params(size=50, team=5, timeline=12))

        # required 32.5 < 80% of 60
        assert result.effort == pytest.approx(48)
        assert result.duration == pytest.approx(9.6)
        assert result.cost == 384000
        assert result.risk == RiskLevel.LOW

    def test_required_effort_dominates(self):
        result = calculate_rca(params(size=100, team=5, timeline=12))

        assert result.effort == pytest.approx(65)
        assert result.risk == RiskLevel.MEDIUM

    def test_high_risk_above_120_percent(self):
        assert calculate_rca(params(size=150, team=5, timeline=12)).risk == RiskLevel.HIGH

    def test_zero_team_returns_zero_duration(self):
        result = calculate_rca(params(team=0))

        assert result.duration == 0
        assert result.effort == pytest.approx(32.5)


class TestRecommendation:
    """Lowest-risk model wins; ties go cocomo, slim, rca."""

    def _result(self, risk: RiskLevel) -> EstimationResult:
        return EstimationResult(cost=0, effort=0, duration=0, risk=risk)

    def test_default_project_recommends_slim(self):
        assert get_recommended_model(params()) == ModelName.SLIM

    def test_all_low_recommends_cocomo(self):
        assert get_recommended_model(params(size=10, team=2, complexity="low")) == ModelName.COCOMO

    @pytest.mark.parametrize(
        "risks, expected",
        [
            ((RiskLevel.LOW, RiskLevel.LOW, RiskLevel.LOW), ModelName.COCOMO),
            ((RiskLevel.HIGH, RiskLevel.MEDIUM, RiskLevel.MEDIUM), ModelName.SLIM),
            ((RiskLevel.HIGH, RiskLevel.HIGH, RiskLevel.MEDIUM), ModelName.RCA),
            ((RiskLevel.MEDIUM, RiskLevel.HIGH, RiskLevel.MEDIUM), ModelName.COCOMO),
            ((RiskLevel.HIGH, RiskLevel.LOW, RiskLevel.LOW), ModelName.SLIM),
        ],
    )
    def test_tie_order(self, risks, expected):
        results = {
            "cocomo": self._result(risks[0]),
            "slim": self._result(risks[1]),
            "rca": self._result(risks[2]),
        }
        assert recommend_model(results) == expected

    def test_all_models_keys(self):
        assert set(calculate_all_models(params())) == {"cocomo", "slim", "rca"}


class TestRates:
    """Configured rates are passed by value."""

    def test_cost_scales_with_monthly_rate(self):
        rates = EstimationRates(cost_per_person_month=10000)
        result = calculate_rca(params(), rates)
        assert result.cost == 480000

    def test_effort_does_not_depend_on_rates(self):
        default = calculate_cocomo(params())
        custom = calculate_cocomo(params(), EstimationRates(cost_per_person_month=1))
        assert custom.effort == default.effort


class TestParamsValidation:

    def test_complexity_string_is_coerced(self):
        assert params(complexity="high").complexity is Complexity.HIGH

    def test_unknown_complexity_rejected(self):
        with pytest.raises(ValueError):
            params(complexity="extreme")


class TestNegativeSize:
    """A negative size produces NaN figures rather than a math domain error."""

    NEGATIVE = EstimationParams(-10, 5, 12, "low")

    def test_cocomo_yields_nan(self):
        result = calculate_cocomo(self.NEGATIVE)

        assert math.isnan(result.effort)
        assert math.isnan(result.duration)
        assert math.isnan(result.cost)
        assert result.risk == RiskLevel.LOW

    def test_slim_yields_nan(self):
        result = calculate_slim(self.NEGATIVE)

        assert math.isnan(result.effort)
        assert math.isnan(result.cost)
        assert result.risk == RiskLevel.LOW

    def test_all_models_and_recommendation_do_not_raise(self):
        results = calculate_all_models(self.NEGATIVE)

        assert set(results) == {"cocomo", "slim", "rca"}
        assert get_recommended_model(self.NEGATIVE) in set(ModelName)

    def test_rounding_passes_non_finite_values_through(self):
        assert math.isnan(round_half_up(math.nan))
        assert round_half_up(math.inf) == math.inf
        assert round_half_up(2.5) == 3.0
