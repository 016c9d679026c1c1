"""
Values -- Immutable project-level estimation value objects.

Responsibility:
    Provides the enumerations shared by every estimation model and the
    parameter/result pair consumed and produced by the project-level
    models (COCOMO II, SLIM, RCA).  Also hosts the rounding helpers that
    every model uses, so that all results round the same way.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.
    Imported by every other domain module and by the engines.

Invariants enforced:
    - EstimationParams and EstimationResult are frozen; a result is never
      mutated after creation.
    - Rounding is half toward positive infinity (``round_half_up``), the
      convention the estimation results have always been published with.
      Python's built-in ``round`` (banker's rounding) is never used on
      published figures.

Failure modes:
    - ValueError when an enum is constructed from an unknown string.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum


class Complexity(str, Enum):
    """Project or element complexity."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class RiskLevel(str, Enum):
    """Risk classification attached to an estimate."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def ordinal(self) -> int:
        """0 for low, 1 for medium, 2 for high."""
        return _RISK_ORDINALS[self]


_RISK_ORDINALS = {RiskLevel.LOW: 0, RiskLevel.MEDIUM: 1, RiskLevel.HIGH: 2}


class Priority(str, Enum):
    """Feature priority."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class ModelName(str, Enum):
    """Project-level estimation models, in recommendation tie-break order."""

    COCOMO = "cocomo"
    SLIM = "slim"
    RCA = "rca"


@dataclass(frozen=True)
class EstimationParams:
    """
    Project-level estimation inputs.

    Attributes:
        project_size: Size in KLOC (thousands of lines of code)
        team_size: Number of people on the team
        timeline: Planned timeline in months
        complexity: Overall project complexity
    """

    project_size: float
    team_size: float
    timeline: float
    complexity: Complexity = Complexity.MEDIUM

    def __post_init__(self) -> None:
        object.__setattr__(self, "complexity", Complexity(self.complexity))


@dataclass(frozen=True)
class EstimationResult:
    """
    Output of one project-level model.

    Attributes:
        cost: Total cost in USD, rounded to a whole dollar
        effort: Effort in person-months
        duration: Duration in months
        risk: Risk classification
    """

    cost: float
    effort: float
    duration: float
    risk: RiskLevel


@dataclass(frozen=True)
class EstimationRates:
    """
    Monetary and productivity rates used by the formulas.

    The defaults are the published calculator rates; configured rates are
    passed in by value (see ``estimation_config.bridges``).
    """

    cost_per_person_month: float = 8000.0
    cost_per_person_day: float = 500.0
    fp_to_effort_ratio: float = 0.5


DEFAULT_RATES = EstimationRates()


def round_half_up(value: float) -> float:
    """Round to the nearest integer, ties toward positive infinity; NaN passes through."""
    if not math.isfinite(value):
        return value
    return float(math.floor(value + 0.5))


def round_to(value: float, places: int) -> float:
    """Round to ``places`` decimals the same way as ``round_half_up``."""
    factor = 10 ** places
    return round_half_up(value * factor) / factor


def safe_divide(numerator: float, denominator: float) -> float:
    """Quotient, or 0 when the denominator is 0."""
    if denominator == 0:
        return 0.0
    return numerator / denominator
