"""
PERT -- Three-point task and network schedule value objects.

Responsibility:
    Defines the task record fed to the PERT network solver, the per-node
    schedule it produces, and the schedule summary.  Also hosts the
    three-point formulas themselves, because a task's expected time and
    variance are derived at construction.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.

Invariants enforced:
    - ``PertTask.expected_time == (O + 4M + P) / 6``
    - ``PertTask.variance == ((P - O) / 6) ** 2``
      Both are computed in ``__post_init__`` and cannot be passed in.
    - ``PertNode``: ``ef = es + duration``, ``ls = lf - duration``,
      ``slack = ls - es``, ``is_critical`` iff ``|slack| < CRITICAL_TOLERANCE``.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any

CRITICAL_TOLERANCE = 0.01


def three_point_expected(optimistic: float, most_likely: float, pessimistic: float) -> float:
    """Beta-distribution mean: (O + 4M + P) / 6."""
    return (optimistic + 4 * most_likely + pessimistic) / 6


def three_point_variance(optimistic: float, pessimistic: float) -> float:
    """Beta-distribution variance: ((P - O) / 6) ** 2."""
    return ((pessimistic - optimistic) / 6) ** 2


@dataclass(frozen=True)
class PertTask:
    """
    One activity of a PERT network.

    ``dependencies`` lists the ids of predecessor tasks.  ``expected_time``
    and ``variance`` are derived; use ``dataclasses.replace`` to edit a task
    and they are recomputed.
    """

    id: str
    task_name: str
    optimistic: float
    most_likely: float
    pessimistic: float
    dependencies: tuple[str, ...] = ()
    expected_time: float = field(init=False)
    variance: float = field(init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "dependencies", tuple(self.dependencies))
        object.__setattr__(
            self,
            "expected_time",
            three_point_expected(self.optimistic, self.most_likely, self.pessimistic),
        )
        object.__setattr__(
            self,
            "variance",
            three_point_variance(self.optimistic, self.pessimistic),
        )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> PertTask:
        """Build a task from the calculator's camelCase keys; derived keys are ignored."""
        return cls(
            id=str(data["id"]),
            task_name=str(data.get("taskName", "")),
            optimistic=data["optimistic"],
            most_likely=data["mostLikely"],
            pessimistic=data["pessimistic"],
            dependencies=tuple(data.get("dependencies", ())),
        )


@dataclass(frozen=True)
class PertNode:
    """Solver output for one task."""

    id: str
    es: float
    ef: float
    ls: float
    lf: float
    slack: float
    is_critical: bool


@dataclass(frozen=True)
class PertSchedule:
    """
    Solved PERT network.

    Attributes:
        nodes: One node per task, in input order
        total_duration: Latest early finish in the network (0 when empty)
        critical_path: Ids of critical tasks, in input order
        critical_path_variance: Sum of the critical tasks' variances
    """

    nodes: tuple[PertNode, ...] = ()
    total_duration: float = 0.0
    critical_path: tuple[str, ...] = ()
    critical_path_variance: float = 0.0

    @property
    def critical_path_std_dev(self) -> float:
        return math.sqrt(self.critical_path_variance)

    def node(self, task_id: str) -> PertNode:
        for node in self.nodes:
            if node.id == task_id:
                return node
        raise KeyError(task_id)
