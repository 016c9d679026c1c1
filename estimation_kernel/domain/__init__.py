"""
Pure domain layer.

This module contains immutable value objects for every estimation model
with NO dependencies on:
- ORM (SQLAlchemy)
- Database
- Time/clock
- I/O
"""

from estimation_kernel.domain.evm import EVMData, EVMMetrics, PerformanceLevel
from estimation_kernel.domain.features import (
    FeatureAggregate,
    FeatureEstimationResult,
    FeatureInput,
    FpaElementType,
    FpaInput,
    FpaResult,
    ModelTotals,
    PertInput,
    PertResult,
    PertTotals,
    RcaInput,
    StoryPointsInput,
    StoryPointsResult,
    StoryPointTotals,
)
from estimation_kernel.domain.pert import (
    CRITICAL_TOLERANCE,
    PertNode,
    PertSchedule,
    PertTask,
    three_point_expected,
    three_point_variance,
)
from estimation_kernel.domain.values import (
    DEFAULT_RATES,
    Complexity,
    EstimationParams,
    EstimationRates,
    EstimationResult,
    ModelName,
    Priority,
    RiskLevel,
    round_half_up,
    round_to,
    safe_divide,
)

__all__ = [
    "CRITICAL_TOLERANCE",
    "Complexity",
    "DEFAULT_RATES",
    "EVMData",
    "EVMMetrics",
    "EstimationParams",
    "EstimationRates",
    "EstimationResult",
    "FeatureAggregate",
    "FeatureEstimationResult",
    "FeatureInput",
    "FpaElementType",
    "FpaInput",
    "FpaResult",
    "ModelName",
    "ModelTotals",
    "PerformanceLevel",
    "PertInput",
    "PertNode",
    "PertResult",
    "PertSchedule",
    "PertTask",
    "PertTotals",
    "Priority",
    "RcaInput",
    "RiskLevel",
    "StoryPointTotals",
    "StoryPointsInput",
    "StoryPointsResult",
    "round_half_up",
    "round_to",
    "safe_divide",
    "three_point_expected",
    "three_point_variance",
]
