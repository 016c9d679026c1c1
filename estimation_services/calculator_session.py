"""
estimation_services.calculator_session -- Recompute-on-write calculator state.

Responsibility:
    Own the user's current inputs (project parameters, feature list, PERT
    task list) and keep the derived results in step with them.  Every
    mutation synchronously calls the pure engines and stores their output,
    so a reader never sees results that lag the inputs.

Architecture position:
    Services -- stateful orchestration over engines + kernel.
    Reads configuration only through the values handed to its
    constructors (``from_config`` helpers use ``estimation_config.bridges``).

Invariants enforced:
    - After any public mutator returns, ``results`` / ``estimations`` /
      ``aggregate`` / ``schedule`` reflect the current inputs.
    - PERT tasks satisfy ``optimistic <= most_likely <= pessimistic`` and
      carry a non-blank name; violations raise ``InvalidTaskError`` and
      leave the task list untouched.
    - Task order is the caller's insertion order.  The planner never
      reorders tasks and never rewrites dependencies on delete.

Failure modes:
    - InvalidTaskError from ``add_task`` / ``edit_task`` on bad input.
    - TaskNotFoundError / FeatureNotFoundError for unknown ids.
    - DuplicateFeatureError when a feature id is reused.
    - A malformed network (unknown or out-of-order dependency) does not
      raise from the mutator; ``schedule`` becomes None and
      ``schedule_error`` holds the SchedulingError.

Usage:
    estimator = ProjectEstimator.from_config(get_active_config())
    estimator.update(project_size=80)
    estimator.recommended_model       # ModelName.SLIM, ...

    planner = PertPlanner()
    planner.load_sample_tasks()
    planner.schedule.critical_path    # ("A", "B", "C", "D", "E")
"""

from __future__ import annotations

import dataclasses
from collections.abc import Sequence
from typing import Any
from uuid import uuid4

from estimation_config.bridges import (
    build_feature_template,
    build_project_params,
    build_rates,
)
from estimation_config.schema import EstimationConfig
from estimation_engines.aggregation import summarize_estimations
from estimation_engines.feature_models import calculate_feature_estimations
from estimation_engines.parametric import calculate_all_models, recommend_model
from estimation_engines.pert_network import build_pert_schedule
from estimation_kernel.domain import (
    DEFAULT_RATES,
    EstimationParams,
    EstimationRates,
    EstimationResult,
    FeatureAggregate,
    FeatureEstimationResult,
    FeatureInput,
    FpaInput,
    ModelName,
    PertInput,
    PertSchedule,
    PertTask,
    StoryPointsInput,
)
from estimation_kernel.exceptions import (
    DuplicateFeatureError,
    FeatureNotFoundError,
    InvalidTaskError,
    SchedulingError,
    TaskNotFoundError,
)
from estimation_kernel.logging_config import LogContext, get_logger

logger = get_logger("services.calculator_session")

DEFAULT_PROJECT_PARAMS = EstimationParams(
    project_size=50,
    team_size=5,
    timeline=12,
    complexity="medium",
)

DEFAULT_FEATURE_TEMPLATE = FeatureInput(
    id="",
    name="",
    fpa=FpaInput(),
    pert=PertInput(),
    story_points=StoryPointsInput(),
)

SAMPLE_TASKS: tuple[PertTask, ...] = (
    PertTask("A", "Requirements Analysis", 3, 5, 8),
    PertTask("B", "System Design", 5, 7, 10, ("A",)),
    PertTask("C", "Development", 10, 18, 25, ("B",)),
    PertTask("D", "Testing", 5, 8, 12, ("C",)),
    PertTask("E", "Deployment", 2, 4, 6, ("D",)),
)


class ProjectEstimator:
    """
    Project-level inputs plus the three model results and recommendation.

    Guarantees:
        - ``results`` always holds ``cocomo``, ``slim`` and ``rca``.
        - ``recommended_model`` is the lowest-risk model of ``results``.
    """

    def __init__(
        self,
        params: EstimationParams = DEFAULT_PROJECT_PARAMS,
        rates: EstimationRates = DEFAULT_RATES,
    ):
        self.rates = rates
        self.params = params
        self.results: dict[str, EstimationResult] = {}
        self.recommended_model = ModelName.COCOMO
        self._recompute()

    @classmethod
    def from_config(cls, config: EstimationConfig) -> ProjectEstimator:
        return cls(build_project_params(config), build_rates(config))

    def update(self, **changes: Any) -> dict[str, EstimationResult]:
        """
        Replace one or more parameters and recompute.

        Args:
            **changes: Any of project_size, team_size, timeline, complexity.

        Raises:
            TypeError: If a keyword is not an EstimationParams field.
            ValueError: If complexity is not a known value.
        """
        self.params = dataclasses.replace(self.params, **changes)
        return self._recompute()

    def _recompute(self) -> dict[str, EstimationResult]:
        self.results = calculate_all_models(self.params, self.rates)
        self.recommended_model = recommend_model(self.results)
        logger.debug(
            "project_estimates_recomputed",
            extra={
                "project_size": self.params.project_size,
                "team_size": self.params.team_size,
                "timeline": self.params.timeline,
                "complexity": self.params.complexity.value,
                "recommended_model": self.recommended_model.value,
            },
        )
        return self.results


class FeaturePlanner:
    """
    Ordered feature list with per-feature estimations and project totals.

    New features start from a template (the configured feature defaults);
    ``update_feature`` replaces the whole record.
    """

    def __init__(
        self,
        rates: EstimationRates = DEFAULT_RATES,
        template: FeatureInput = DEFAULT_FEATURE_TEMPLATE,
        features: Sequence[FeatureInput] = (),
    ):
        self.rates = rates
        self.template = template
        self.features: list[FeatureInput] = []
        self.estimations: list[FeatureEstimationResult] = []
        self.aggregate = FeatureAggregate()
        for feature in features:
            self._check_unique(feature.id)
            self.features.append(feature)
        self._recompute()

    @classmethod
    def from_config(cls, config: EstimationConfig, features: Sequence[FeatureInput] = ()) -> FeaturePlanner:
        return cls(
            rates=build_rates(config),
            template=build_feature_template(config, feature_id="", name=""),
            features=features,
        )

    def add_feature(self, name: str = "", feature_id: str | None = None) -> FeatureInput:
        """Append a feature pre-filled from the template and recompute."""
        fid = feature_id or f"feature-{uuid4().hex[:8]}"
        self._check_unique(fid)
        feature = dataclasses.replace(self.template, id=fid, name=name)
        self.features.append(feature)
        with LogContext.bind(feature_id=fid):
            logger.info("feature_added", extra={"feature_name": name})
        self._recompute()
        return feature

    def update_feature(self, feature: FeatureInput) -> FeatureEstimationResult:
        """Replace the feature with the same id and recompute."""
        index = self._index_of(feature.id)
        self.features[index] = feature
        self._recompute()
        return self.estimations[index]

    def remove_feature(self, feature_id: str) -> None:
        """Drop a feature and recompute. Dependents keep their references."""
        index = self._index_of(feature_id)
        del self.features[index]
        with LogContext.bind(feature_id=feature_id):
            logger.info("feature_removed")
        self._recompute()

    def estimation_for(self, feature_id: str) -> FeatureEstimationResult:
        return self.estimations[self._index_of(feature_id)]

    def _index_of(self, feature_id: str) -> int:
        for i, feature in enumerate(self.features):
            if feature.id == feature_id:
                return i
        raise FeatureNotFoundError(feature_id)

    def _check_unique(self, feature_id: str) -> None:
        if any(f.id == feature_id for f in self.features):
            raise DuplicateFeatureError(feature_id)

    def _recompute(self) -> None:
        self.estimations = [
            calculate_feature_estimations(f, self.rates) for f in self.features
        ]
        self.aggregate = summarize_estimations(self.estimations)


class PertPlanner:
    """
    Editable PERT task list with a solved schedule.

    Guarantees:
        - ``schedule`` is the solved network for the current tasks, or None
          when the network is malformed (see ``schedule_error``).
    """

    def __init__(self, tasks: Sequence[PertTask] = ()):
        self.tasks: list[PertTask] = []
        self.schedule: PertSchedule | None = PertSchedule()
        self.schedule_error: SchedulingError | None = None
        for task in tasks:
            self._validate(task)
            self.tasks.append(task)
        self._recompute()

    def add_task(
        self,
        task_name: str,
        optimistic: float,
        most_likely: float,
        pessimistic: float,
        dependencies: Sequence[str] = (),
        task_id: str | None = None,
    ) -> PertTask:
        """Validate and append a task, then re-solve the network."""
        task = PertTask(
            id=task_id or f"task-{uuid4().hex[:8]}",
            task_name=task_name,
            optimistic=optimistic,
            most_likely=most_likely,
            pessimistic=pessimistic,
            dependencies=tuple(dependencies),
        )
        self._validate(task)
        self.tasks.append(task)
        with LogContext.bind(task_id=task.id):
            logger.info("pert_task_added", extra={"task_name": task.task_name})
        self._recompute()
        return task

    def edit_task(self, task_id: str, **changes: Any) -> PertTask:
        """
        Replace fields of an existing task in place.

        ``expected_time`` and ``variance`` are re-derived from the new
        estimates; passing them raises ValueError.
        """
        index = self._index_of(task_id)
        if "dependencies" in changes:
            changes["dependencies"] = tuple(changes["dependencies"])
        task = dataclasses.replace(self.tasks[index], **changes)
        self._validate(task)
        self.tasks[index] = task
        with LogContext.bind(task_id=task_id):
            logger.info("pert_task_updated")
        self._recompute()
        return task

    def delete_task(self, task_id: str) -> None:
        """Remove a task. Tasks that depended on it keep the dangling id."""
        index = self._index_of(task_id)
        del self.tasks[index]
        with LogContext.bind(task_id=task_id):
            logger.info("pert_task_deleted")
        self._recompute()

    def load_sample_tasks(self) -> list[PertTask]:
        """Replace the task list with the five-task sample chain A-E."""
        self.tasks = list(SAMPLE_TASKS)
        self._recompute()
        return self.tasks

    def clear(self) -> None:
        self.tasks = []
        self._recompute()

    def _index_of(self, task_id: str) -> int:
        for i, task in enumerate(self.tasks):
            if task.id == task_id:
                return i
        raise TaskNotFoundError(task_id)

    @staticmethod
    def _validate(task: PertTask) -> None:
        if not task.task_name.strip():
            raise InvalidTaskError(task.task_name, "Task name is required")
        if task.optimistic > task.most_likely or task.most_likely > task.pessimistic:
            raise InvalidTaskError(
                task.task_name,
                "Values must satisfy: Optimistic <= Most Likely <= Pessimistic",
            )

    def _recompute(self) -> None:
        try:
            self.schedule = build_pert_schedule(self.tasks)
            self.schedule_error = None
        except SchedulingError as exc:
            self.schedule = None
            self.schedule_error = exc
            logger.warning(
                "pert_schedule_unsolvable",
                extra={"error_code": exc.code, "error": str(exc)},
            )
