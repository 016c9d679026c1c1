"""
Features -- Feature-level estimation inputs and results.

Responsibility:
    Describes one feature of a project together with the optional input
    block of every feature-level model (FPA, PERT three-point, story
    points, RCA resources), and the matching optional result blocks.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.

Invariants enforced:
    - A sub-block set to ``None`` means the model does not apply to the
      feature.  The corresponding result block is ``None`` as well, never
      a zero-filled record.
    - All records are frozen.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from estimation_kernel.domain.values import Complexity, Priority, RiskLevel


class FpaElementType(str, Enum):
    """Function point element types."""

    INPUT = "input"
    OUTPUT = "output"
    FILE = "file"
    INTERFACE = "interface"
    INQUIRY = "inquiry"


@dataclass(frozen=True)
class FpaInput:
    """Function point inputs; technical_factor ranges over [0, 14]."""

    type: FpaElementType = FpaElementType.INPUT
    complexity: Complexity = Complexity.MEDIUM
    number_of_elements: float = 0
    technical_factor: float = 7

    def __post_init__(self) -> None:
        object.__setattr__(self, "type", FpaElementType(self.type))
        object.__setattr__(self, "complexity", Complexity(self.complexity))


@dataclass(frozen=True)
class PertInput:
    """Three-point estimate in person-days."""

    optimistic: float = 0
    most_likely: float = 0
    pessimistic: float = 0


@dataclass(frozen=True)
class StoryPointsInput:
    """Agile sizing; sprint_length is in days, team_velocity in points per sprint."""

    points: float = 0
    team_velocity: float = 20
    team_size: float = 5
    sprint_length: float = 14
    description: str = ""


@dataclass(frozen=True)
class RcaInput:
    """Resource data captured per feature; risk_factor is a percentage (0-30)."""

    assigned_resources: float = 0
    hourly_rate: float = 0
    risk_factor: float = 0


@dataclass(frozen=True)
class FeatureInput:
    """
    A single feature with the inputs of every applicable model.

    Attributes:
        id: Stable feature identifier
        name: Display name
        priority: Business priority
        dependencies: Ids of features this one depends on
        fpa / pert / story_points / rca: Optional per-model inputs
    """

    id: str
    name: str
    priority: Priority = Priority.MEDIUM
    dependencies: tuple[str, ...] = ()
    fpa: FpaInput | None = None
    pert: PertInput | None = None
    story_points: StoryPointsInput | None = None
    rca: RcaInput | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "priority", Priority(self.priority))
        object.__setattr__(self, "dependencies", tuple(self.dependencies))

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> FeatureInput:
        """Build a feature from a plain dict using the calculator's camelCase keys."""
        fpa = data.get("fpa")
        pert = data.get("pert")
        story = data.get("storyPoints")
        rca = data.get("rca")
        return cls(
            id=str(data["id"]),
            name=str(data.get("name", "")),
            priority=data.get("priority", Priority.MEDIUM),
            dependencies=tuple(data.get("dependencies", ())),
            fpa=FpaInput(
                type=fpa["type"],
                complexity=fpa["complexity"],
                number_of_elements=fpa["numberOfElements"],
                technical_factor=fpa["technicalFactor"],
            ) if fpa else None,
            pert=PertInput(
                optimistic=pert["optimistic"],
                most_likely=pert["mostLikely"],
                pessimistic=pert["pessimistic"],
            ) if pert else None,
            story_points=StoryPointsInput(
                points=story["points"],
                team_velocity=story["teamVelocity"],
                team_size=story["teamSize"],
                sprint_length=story["sprintLength"],
                description=story.get("description", ""),
            ) if story else None,
            rca=RcaInput(
                assigned_resources=rca["assignedResources"],
                hourly_rate=rca["hourlyRate"],
                risk_factor=rca["riskFactor"],
            ) if rca else None,
        )


@dataclass(frozen=True)
class FpaResult:
    """Function point result; effort and duration are in person-days."""

    function_points: float
    effort: float
    cost: float
    duration: float


@dataclass(frozen=True)
class PertResult:
    """Three-point result for a single feature."""

    expected_effort: float
    variance: float
    standard_deviation: float
    risk: RiskLevel
    cost: float
    duration: float


@dataclass(frozen=True)
class StoryPointsResult:
    """Story point result; effort in person-days, duration in days."""

    effort: float
    sprints: int
    duration: float
    cost: float


@dataclass(frozen=True)
class FeatureEstimationResult:
    """Per-feature results, one optional block per model."""

    feature_id: str
    feature_name: str
    fpa: FpaResult | None = None
    pert: PertResult | None = None
    story_points: StoryPointsResult | None = None


@dataclass(frozen=True)
class ModelTotals:
    """Project totals for one feature-level model."""

    total_effort: float = 0.0
    total_cost: float = 0.0
    total_duration: float = 0.0


@dataclass(frozen=True)
class PertTotals(ModelTotals):
    """PERT totals plus the averaged risk bucket."""

    avg_risk: RiskLevel = RiskLevel.LOW


@dataclass(frozen=True)
class StoryPointTotals(ModelTotals):
    """Story point totals plus the longest sprint count."""

    total_sprints: int = 0


@dataclass(frozen=True)
class FeatureAggregate:
    """Project-level totals across a feature list."""

    fpa: ModelTotals = field(default_factory=ModelTotals)
    pert: PertTotals = field(default_factory=PertTotals)
    story_points: StoryPointTotals = field(default_factory=StoryPointTotals)
