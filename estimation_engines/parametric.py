"""
estimation_engines.parametric -- Project-level COCOMO II, SLIM and RCA models.

Responsibility:
    Estimate effort (person-months), duration (months), cost and risk for a
    whole project from its size in KLOC, team size, timeline and
    complexity.  Three independent models are provided, plus a
    recommendation that picks the model whose estimate carries the lowest
    risk.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import estimation_kernel.domain and the tracer.

Invariants enforced:
    - Determinism: identical inputs produce identical outputs.
    - Totality: a zero denominator yields 0 instead of raising, and a
      negative size yields NaN figures (low risk) instead of raising.
    - ``cost`` is rounded to a whole dollar; effort and duration are not
      rounded.
    - Recommendation ties resolve cocomo, then slim, then rca.

Usage:
    from estimation_engines.parametric import calculate_all_models
    from estimation_kernel.domain.values import EstimationParams

    results = calculate_all_models(EstimationParams(50, 5, 12, "medium"))
    print(results["cocomo"].effort)
"""

from __future__ import annotations

import math

from estimation_engines.tracer import traced_engine
from estimation_kernel.domain.values import (
    DEFAULT_RATES,
    Complexity,
    EstimationParams,
    EstimationRates,
    EstimationResult,
    ModelName,
    RiskLevel,
    round_half_up,
    safe_divide,
)
from estimation_kernel.logging_config import get_logger

logger = get_logger("engines.parametric")

# COCOMO II basic coefficients: Effort = A * KLOC^B * factor
COCOMO_A = 2.94
COCOMO_B = 1.09
COCOMO_DURATION_COEFFICIENT = 3.67
COCOMO_DURATION_EXPONENT = 0.28

COCOMO_COMPLEXITY_FACTORS = {
    Complexity.LOW: 1.0,
    Complexity.MEDIUM: 1.12,
    Complexity.HIGH: 1.24,
}

# SLIM productivity per complexity (lines per person-month equivalent)
SLIM_PRODUCTIVITY = {
    Complexity.LOW: 2000,
    Complexity.MEDIUM: 1500,
    Complexity.HIGH: 1000,
}

RCA_COMPLEXITY_MULTIPLIERS = {
    Complexity.LOW: 1.0,
    Complexity.MEDIUM: 1.3,
    Complexity.HIGH: 1.6,
}


def _real_power(base: float, exponent: float) -> float:
    """``base ** exponent`` for real results; NaN for a negative base."""
    if base < 0:
        return math.nan
    return base ** exponent


@traced_engine("cocomo", "2.0", fingerprint_fields=("params", "rates"))
def calculate_cocomo(
    params: EstimationParams,
    rates: EstimationRates = DEFAULT_RATES,
) -> EstimationResult:
    """
    COCOMO II basic model.

    effort = 2.94 * size^1.09 * complexity_factor
    duration = 3.67 * effort^0.28

    Risk is high for projects over 50 KLOC or of high complexity, medium
    over 30 KLOC or of medium complexity, otherwise low.
    """
    factor = COCOMO_COMPLEXITY_FACTORS[params.complexity]

    effort = COCOMO_A * _real_power(params.project_size, COCOMO_B) * factor
    duration = COCOMO_DURATION_COEFFICIENT * _real_power(effort, COCOMO_DURATION_EXPONENT)
    cost = effort * rates.cost_per_person_month

    if params.project_size > 50 or params.complexity == Complexity.HIGH:
        risk = RiskLevel.HIGH
    elif params.project_size > 30 or params.complexity == Complexity.MEDIUM:
        risk = RiskLevel.MEDIUM
    else:
        risk = RiskLevel.LOW

    return EstimationResult(
        cost=round_half_up(cost),
        effort=effort,
        duration=duration,
        risk=risk,
    )


@traced_engine("slim", "1.0", fingerprint_fields=("params", "rates"))
def calculate_slim(
    params: EstimationParams,
    rates: EstimationRates = DEFAULT_RATES,
) -> EstimationResult:
    """
    SLIM (Software Lifecycle Management) model.

    The optimal team size is the square root of the base effort.  A team
    larger than that loses efficiency, which inflates the effort.

    Risk follows team efficiency: high below 0.7, medium below 0.85.
    """
    productivity = SLIM_PRODUCTIVITY[params.complexity]
    effort = (params.project_size * 1000) / productivity

    optimal_team_size = _real_power(effort, 0.5)
    if params.team_size == 0:
        team_efficiency = 1.0
    else:
        ratio = optimal_team_size / params.team_size
        team_efficiency = ratio if math.isnan(ratio) else min(1.0, ratio)

    adjusted_effort = safe_divide(effort, team_efficiency)
    duration = safe_divide(adjusted_effort, params.team_size)
    cost = adjusted_effort * rates.cost_per_person_month

    if team_efficiency < 0.7:
        risk = RiskLevel.HIGH
    elif team_efficiency < 0.85:
        risk = RiskLevel.MEDIUM
    else:
        risk = RiskLevel.LOW

    return EstimationResult(
        cost=round_half_up(cost),
        effort=adjusted_effort,
        duration=duration,
        risk=risk,
    )


@traced_engine("rca", "1.0", fingerprint_fields=("params", "rates"))
def calculate_rca(
    params: EstimationParams,
    rates: EstimationRates = DEFAULT_RATES,
) -> EstimationResult:
    """
    RCA (Resource Constraint Analysis) price model.

    Effort is the larger of what the scope requires and 80% of what the
    team can deliver within the timeline.  Risk grows as the required
    effort exceeds the available capacity.
    """
    multiplier = RCA_COMPLEXITY_MULTIPLIERS[params.complexity]

    max_effort = params.team_size * params.timeline
    required_effort = (params.project_size / 2) * multiplier

    effort = max(required_effort, max_effort * 0.8)
    duration = safe_divide(effort, params.team_size)
    cost = effort * rates.cost_per_person_month

    if required_effort > max_effort * 1.2:
        risk = RiskLevel.HIGH
    elif required_effort > max_effort:
        risk = RiskLevel.MEDIUM
    else:
        risk = RiskLevel.LOW

    return EstimationResult(
        cost=round_half_up(cost),
        effort=effort,
        duration=duration,
        risk=risk,
    )


def calculate_all_models(
    params: EstimationParams,
    rates: EstimationRates = DEFAULT_RATES,
) -> dict[str, EstimationResult]:
    """Run every project-level model. Keys are ``cocomo``, ``slim``, ``rca``."""
    return {
        ModelName.COCOMO.value: calculate_cocomo(params, rates),
        ModelName.SLIM.value: calculate_slim(params, rates),
        ModelName.RCA.value: calculate_rca(params, rates),
    }


def recommend_model(results: dict[str, EstimationResult]) -> ModelName:
    """
    Pick the model with the lowest risk from already computed results.

    Only a strictly lower risk displaces the current pick, so ties go to
    the model checked first (cocomo, then slim, then rca).
    """
    recommended = ModelName.COCOMO
    lowest = results[ModelName.COCOMO.value].risk.ordinal

    for model in (ModelName.SLIM, ModelName.RCA):
        ordinal = results[model.value].risk.ordinal
        if ordinal < lowest:
            recommended = model
            lowest = ordinal

    return recommended


def get_recommended_model(
    params: EstimationParams,
    rates: EstimationRates = DEFAULT_RATES,
) -> ModelName:
    """Compute all models and recommend the lowest-risk one."""
    recommended = recommend_model(calculate_all_models(params, rates))
    logger.debug(
        "model_recommended",
        extra={"recommended_model": recommended.value},
    )
    return recommended
