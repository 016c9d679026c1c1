"""
estimation_engines.feature_models -- Feature-level FPA, PERT and story point models.

Responsibility:
    Estimate a single feature with every model whose input block is
    present on the feature.  Effort and duration are in person-days, cost
    in USD at the configured day rate.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import estimation_kernel.domain and the tracer.

Invariants enforced:
    - An absent input block yields ``None``, never a zero result.
    - Rounding: FPA function points and effort to 1 dp, cost and duration
      to whole numbers; PERT expected effort 1 dp, variance 2 dp, standard
      deviation 1 dp; story point effort 1 dp.  Risk is classified on the
      unrounded standard deviation.
    - The story point effort/cost formula is reproduced as published,
      including the second application of team size in the cost.

Failure modes:
    - None for numeric inputs; zero velocity, sprint length or team size
      yield 0 for the affected quantity.
"""

from __future__ import annotations

import math

from estimation_engines.tracer import traced_engine
from estimation_kernel.domain.features import (
    FeatureEstimationResult,
    FeatureInput,
    FpaElementType,
    FpaResult,
    PertResult,
    StoryPointsResult,
)
from estimation_kernel.domain.pert import three_point_expected, three_point_variance
from estimation_kernel.domain.values import (
    DEFAULT_RATES,
    Complexity,
    EstimationRates,
    RiskLevel,
    round_half_up,
    round_to,
    safe_divide,
)

FPA_WEIGHTS: dict[FpaElementType, dict[Complexity, int]] = {
    FpaElementType.INPUT: {Complexity.LOW: 3, Complexity.MEDIUM: 4, Complexity.HIGH: 6},
    FpaElementType.OUTPUT: {Complexity.LOW: 4, Complexity.MEDIUM: 5, Complexity.HIGH: 7},
    FpaElementType.FILE: {Complexity.LOW: 7, Complexity.MEDIUM: 10, Complexity.HIGH: 15},
    FpaElementType.INTERFACE: {Complexity.LOW: 5, Complexity.MEDIUM: 7, Complexity.HIGH: 10},
    FpaElementType.INQUIRY: {Complexity.LOW: 3, Complexity.MEDIUM: 4, Complexity.HIGH: 6},
}

TCF_BASE = 0.65
TCF_STEP = 0.01

PERT_HIGH_RISK_STD_DEV = 5
PERT_MEDIUM_RISK_STD_DEV = 2


@traced_engine("fpa", "1.0", fingerprint_fields=("feature", "rates"))
def calculate_fpa(
    feature: FeatureInput,
    rates: EstimationRates = DEFAULT_RATES,
) -> FpaResult | None:
    """
    Function Point Analysis.

    ufp = elements * weight[type][complexity]
    tcf = 0.65 + 0.01 * technical_factor
    function_points = ufp * tcf
    effort = function_points * fp_to_effort_ratio   (person-days)

    Duration equals effort: one person works the feature.
    """
    fpa = feature.fpa
    if fpa is None:
        return None

    weight = FPA_WEIGHTS[fpa.type][fpa.complexity]
    ufp = fpa.number_of_elements * weight

    tcf = TCF_BASE + (TCF_STEP * fpa.technical_factor)
    function_points = ufp * tcf

    effort = function_points * rates.fp_to_effort_ratio
    cost = effort * rates.cost_per_person_day
    duration = effort

    return FpaResult(
        function_points=round_to(function_points, 1),
        effort=round_to(effort, 1),
        cost=round_half_up(cost),
        duration=round_half_up(duration),
    )


@traced_engine("pert_three_point", "1.0", fingerprint_fields=("feature", "rates"))
def calculate_pert(
    feature: FeatureInput,
    rates: EstimationRates = DEFAULT_RATES,
) -> PertResult | None:
    """
    Three-point (PERT) estimate for one feature.

    expected = (O + 4M + P) / 6, variance = ((P - O) / 6)^2.
    Risk: high when the standard deviation exceeds 5 days, medium above 2.
    """
    pert = feature.pert
    if pert is None:
        return None

    expected_effort = three_point_expected(pert.optimistic, pert.most_likely, pert.pessimistic)
    variance = three_point_variance(pert.optimistic, pert.pessimistic)
    standard_deviation = math.sqrt(variance)

    if standard_deviation > PERT_HIGH_RISK_STD_DEV:
        risk = RiskLevel.HIGH
    elif standard_deviation > PERT_MEDIUM_RISK_STD_DEV:
        risk = RiskLevel.MEDIUM
    else:
        risk = RiskLevel.LOW

    cost = expected_effort * rates.cost_per_person_day
    duration = expected_effort

    return PertResult(
        expected_effort=round_to(expected_effort, 1),
        variance=round_to(variance, 2),
        standard_deviation=round_to(standard_deviation, 1),
        risk=risk,
        cost=round_half_up(cost),
        duration=round_half_up(duration),
    )


@traced_engine("story_points", "1.0", fingerprint_fields=("feature", "rates"))
def calculate_story_points(
    feature: FeatureInput,
    rates: EstimationRates = DEFAULT_RATES,
) -> StoryPointsResult | None:
    """
    Agile story point estimate.

    sprints = ceil(points / velocity)
    duration = sprints * sprint_length
    effort = (duration / sprint_length) * velocity * (sprint_length / team_size)
    cost = effort * day_rate * team_size
    """
    story = feature.story_points
    if story is None:
        return None

    sprints = math.ceil(safe_divide(story.points, story.team_velocity))
    duration = sprints * story.sprint_length

    effort = (
        safe_divide(duration, story.sprint_length)
        * story.team_velocity
        * safe_divide(story.sprint_length, story.team_size)
    )
    cost = effort * rates.cost_per_person_day * story.team_size

    return StoryPointsResult(
        effort=round_to(effort, 1),
        sprints=sprints,
        duration=duration,
        cost=round_half_up(cost),
    )


def calculate_feature_estimations(
    feature: FeatureInput,
    rates: EstimationRates = DEFAULT_RATES,
) -> FeatureEstimationResult:
    """Run every applicable feature-level model for one feature."""
    return FeatureEstimationResult(
        feature_id=feature.id,
        feature_name=feature.name,
        fpa=calculate_fpa(feature, rates),
        pert=calculate_pert(feature, rates),
        story_points=calculate_story_points(feature, rates),
    )
