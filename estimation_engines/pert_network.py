"""
estimation_engines.pert_network -- PERT/CPM network solver.

Responsibility:
    Given PERT tasks with expected durations and predecessor lists,
    compute earliest/latest start and finish, slack and the critical path
    with a two-pass critical path method.

Architecture position:
    Engines -- pure calculation layer, zero I/O.

Invariants enforced:
    - Forward pass, in input order:
        es = max(ef of predecessors), 0 without predecessors
        ef = es + expected_time
    - Project duration = max(ef), 0 for an empty network.
    - Backward pass, in reverse input order:
        lf = min(ls of dependents), project duration without dependents
        ls = lf - expected_time
    - slack = ls - es; a node is critical when |slack| < 0.01.
    - The solver never reorders tasks.  Callers must supply them in
      dependency order; ``order_tasks`` is the explicit opt-in for input
      that is not.

Failure modes:
    - DuplicateTaskError if two tasks share an id.
    - UnknownDependencyError if a predecessor id names no task.
    - DependencyOrderError if a predecessor is listed after its dependent.
    - CyclicDependencyError from ``order_tasks`` when the graph has a cycle.

Usage:
    from estimation_engines.pert_network import build_pert_schedule

    schedule = build_pert_schedule(tasks)
    print(schedule.total_duration, schedule.critical_path)
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Sequence

from estimation_engines.tracer import traced_engine
from estimation_kernel.domain.pert import (
    CRITICAL_TOLERANCE,
    PertNode,
    PertSchedule,
    PertTask,
)
from estimation_kernel.exceptions import (
    CyclicDependencyError,
    DependencyOrderError,
    DuplicateTaskError,
    UnknownDependencyError,
)
from estimation_kernel.logging_config import get_logger

logger = get_logger("engines.pert_network")


def _index_tasks(tasks: Sequence[PertTask]) -> dict[str, int]:
    positions: dict[str, int] = {}
    for i, task in enumerate(tasks):
        if task.id in positions:
            raise DuplicateTaskError(task.id)
        positions[task.id] = i
    return positions


def _dependents_of(tasks: Sequence[PertTask]) -> dict[str, list[str]]:
    dependents: dict[str, list[str]] = defaultdict(list)
    for task in tasks:
        for dep in task.dependencies:
            dependents[dep].append(task.id)
    return dependents


@traced_engine("pert_network", "1.0", fingerprint_fields=("tasks",))
def solve_pert_network(tasks: Sequence[PertTask]) -> list[PertNode]:
    """
    Two-pass critical path solve.

    Args:
        tasks: Tasks in dependency order (every predecessor before its
            dependents).

    Returns:
        One PertNode per task, in input order.
    """
    positions = _index_tasks(tasks)

    # Forward pass
    early_finish: dict[str, float] = {}
    early_start: dict[str, float] = {}
    for task in tasks:
        for dep in task.dependencies:
            if dep not in positions:
                raise UnknownDependencyError(task.id, dep)
            if dep not in early_finish:
                raise DependencyOrderError(task.id, dep)
        es = max((early_finish[d] for d in task.dependencies), default=0.0)
        early_start[task.id] = es
        early_finish[task.id] = es + task.expected_time

    project_duration = max(early_finish.values(), default=0.0)

    # Backward pass
    dependents = _dependents_of(tasks)
    late_start: dict[str, float] = {}
    late_finish: dict[str, float] = {}
    for task in reversed(tasks):
        successors = dependents.get(task.id, [])
        lf = min((late_start[s] for s in successors), default=project_duration)
        late_finish[task.id] = lf
        late_start[task.id] = lf - task.expected_time

    nodes = []
    for task in tasks:
        es = early_start[task.id]
        ls = late_start[task.id]
        slack = ls - es
        nodes.append(
            PertNode(
                id=task.id,
                es=es,
                ef=early_finish[task.id],
                ls=ls,
                lf=late_finish[task.id],
                slack=slack,
                is_critical=abs(slack) < CRITICAL_TOLERANCE,
            )
        )
    return nodes


def build_pert_schedule(tasks: Sequence[PertTask]) -> PertSchedule:
    """Solve the network and summarize duration and critical path."""
    nodes = solve_pert_network(tasks)
    variances = {task.id: task.variance for task in tasks}

    critical_path = tuple(node.id for node in nodes if node.is_critical)
    schedule = PertSchedule(
        nodes=tuple(nodes),
        total_duration=max((node.ef for node in nodes), default=0.0),
        critical_path=critical_path,
        critical_path_variance=sum(variances[task_id] for task_id in critical_path),
    )

    logger.debug(
        "pert_schedule_built",
        extra={
            "task_count": len(nodes),
            "total_duration": schedule.total_duration,
            "critical_path": list(critical_path),
        },
    )
    return schedule


def order_tasks(tasks: Sequence[PertTask]) -> list[PertTask]:
    """
    Stable topological sort of tasks.

    Tasks whose predecessors are all placed keep their relative input
    order.  Input already in dependency order is returned unchanged.

    Raises:
        DuplicateTaskError: If two tasks share an id.
        UnknownDependencyError: If a predecessor id names no task.
        CyclicDependencyError: If the dependency graph has a cycle.
    """
    positions = _index_tasks(tasks)
    for task in tasks:
        for dep in task.dependencies:
            if dep not in positions:
                raise UnknownDependencyError(task.id, dep)

    placed: set[str] = set()
    ordered: list[PertTask] = []
    remaining = list(tasks)

    while remaining:
        ready = next(
            (t for t in remaining if all(d in placed for d in t.dependencies)),
            None,
        )
        if ready is None:
            raise CyclicDependencyError([t.id for t in remaining])
        ordered.append(ready)
        placed.add(ready.id)
        remaining.remove(ready)

    return ordered
