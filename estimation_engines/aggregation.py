"""
estimation_engines.aggregation -- Project totals across a feature list.

Responsibility:
    Combine per-feature results into project-level totals for each
    feature-level model.

Architecture position:
    Engines -- pure calculation layer, zero I/O.

Invariants enforced:
    - Effort and cost are summed over the features the model applies to.
    - Duration (and story point sprints) is the maximum, not the sum:
      features are assumed to be worked in parallel.
    - PERT effort sums the rounded per-feature expected effort.
    - A model with no contributing feature reports 0 duration, and the
      averaged PERT risk of no features is low.

Usage:
    from estimation_engines.aggregation import aggregate_feature_estimations

    totals = aggregate_feature_estimations(features)
    print(totals.pert.avg_risk)
"""

from __future__ import annotations

from collections.abc import Sequence

from estimation_engines.feature_models import calculate_feature_estimations
from estimation_engines.tracer import traced_engine
from estimation_kernel.domain.features import (
    FeatureAggregate,
    FeatureEstimationResult,
    FeatureInput,
    ModelTotals,
    PertTotals,
    StoryPointTotals,
)
from estimation_kernel.domain.values import DEFAULT_RATES, EstimationRates, RiskLevel
from estimation_kernel.logging_config import get_logger

logger = get_logger("engines.aggregation")

RISK_SCORES = {
    RiskLevel.LOW: 1,
    RiskLevel.MEDIUM: 2,
    RiskLevel.HIGH: 3,
}


def average_risk(risks: Sequence[RiskLevel]) -> RiskLevel:
    """
    Average risk levels scored low=1, medium=2, high=3.

    The mean buckets back to low (<= 1.5), medium (<= 2.5) or high.
    """
    if not risks:
        return RiskLevel.LOW

    avg = sum(RISK_SCORES[r] for r in risks) / len(risks)
    if avg <= 1.5:
        return RiskLevel.LOW
    if avg <= 2.5:
        return RiskLevel.MEDIUM
    return RiskLevel.HIGH


def summarize_estimations(results: Sequence[FeatureEstimationResult]) -> FeatureAggregate:
    """Aggregate already computed per-feature results."""
    fpa_results = [r.fpa for r in results if r.fpa is not None]
    pert_results = [r.pert for r in results if r.pert is not None]
    story_results = [r.story_points for r in results if r.story_points is not None]

    fpa = ModelTotals(
        total_effort=sum(r.effort for r in fpa_results),
        total_cost=sum(r.cost for r in fpa_results),
        total_duration=max((r.duration for r in fpa_results), default=0.0),
    )

    pert = PertTotals(
        total_effort=sum(r.expected_effort for r in pert_results),
        total_cost=sum(r.cost for r in pert_results),
        total_duration=max((r.duration for r in pert_results), default=0.0),
        avg_risk=average_risk([r.risk for r in pert_results]),
    )

    story_points = StoryPointTotals(
        total_effort=sum(r.effort for r in story_results),
        total_cost=sum(r.cost for r in story_results),
        total_duration=max((r.duration for r in story_results), default=0.0),
        total_sprints=max((r.sprints for r in story_results), default=0),
    )

    return FeatureAggregate(fpa=fpa, pert=pert, story_points=story_points)


@traced_engine("feature_aggregation", "1.0", fingerprint_fields=("features", "rates"))
def aggregate_feature_estimations(
    features: Sequence[FeatureInput],
    rates: EstimationRates = DEFAULT_RATES,
) -> FeatureAggregate:
    """Estimate every feature and aggregate the results per model."""
    results = [calculate_feature_estimations(f, rates) for f in features]
    aggregate = summarize_estimations(results)

    logger.debug(
        "features_aggregated",
        extra={
            "feature_count": len(features),
            "fpa_features": sum(1 for r in results if r.fpa is not None),
            "pert_features": sum(1 for r in results if r.pert is not None),
            "story_point_features": sum(1 for r in results if r.story_points is not None),
        },
    )
    return aggregate
