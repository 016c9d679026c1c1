"""
Typed Exception Hierarchy for the Estimation Kernel.

===============================================================================
SCOPE
===============================================================================

The estimation formulas are total functions over their numeric inputs: a
zero denominator yields 0, never an exception.  Typed exceptions exist only
at the seams where the input is structurally malformed (a PERT network
whose dependencies cannot be resolved) or where state crosses a boundary
(a stored EVM blob that cannot be decoded, a feature or task id that does
not exist in a planner).

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

    EstimationKernelError (base)
    |
    +-- SchedulingError
    |   +-- DuplicateTaskError
    |   +-- UnknownDependencyError
    |   +-- DependencyOrderError
    |   +-- CyclicDependencyError
    |   +-- TaskNotFoundError
    |   +-- InvalidTaskError
    |
    +-- FeatureError
    |   +-- FeatureNotFoundError
    |   +-- DuplicateFeatureError
    |
    +-- StorageError
        +-- StoredPayloadError

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Category        | Code                        | When Raised
----------------|-----------------------------|-----------------------------------------
Scheduling      | DUPLICATE_TASK              | Two PERT tasks share one id
                | UNKNOWN_DEPENDENCY          | Dependency names no task in the network
                | DEPENDENCY_ORDER            | Dependency listed after its dependent
                | CYCLIC_DEPENDENCY           | order_tasks() found a cycle
                | TASK_NOT_FOUND              | Planner edit/delete of unknown task id
                | INVALID_TASK                | Missing name or O <= M <= P violated
----------------|-----------------------------|-----------------------------------------
Feature         | FEATURE_NOT_FOUND           | Planner update/remove of unknown feature
                | DUPLICATE_FEATURE           | Feature id already present
----------------|-----------------------------|-----------------------------------------
Storage         | INVALID_STORED_PAYLOAD      | Stored JSON blob unreadable or incomplete

===============================================================================
HANDLING PATTERNS
===============================================================================

    try:
        schedule = build_pert_schedule(tasks)
    except DependencyOrderError as e:
        tasks = order_tasks(tasks)   # explicit opt-in reordering
    except SchedulingError as e:
        return {"error": e.code}
"""


class EstimationKernelError(Exception):
    """
    Base exception for all estimation kernel errors.

    All subclasses must have a `code` class attribute for machine-readable
    error identification.
    """

    code: str = "ESTIMATION_KERNEL_ERROR"


# Scheduling exceptions


class SchedulingError(EstimationKernelError):
    """Base exception for PERT network and task planning errors."""

    code: str = "SCHEDULING_ERROR"


class DuplicateTaskError(SchedulingError):
    """The same task id appears more than once in a network."""

    code: str = "DUPLICATE_TASK"

    def __init__(self, task_id: str):
        self.task_id = task_id
        super().__init__(f"Duplicate task id in network: {task_id}")


class UnknownDependencyError(SchedulingError):
    """A task depends on an id that no task in the network carries."""

    code: str = "UNKNOWN_DEPENDENCY"

    def __init__(self, task_id: str, dependency_id: str):
        self.task_id = task_id
        self.dependency_id = dependency_id
        super().__init__(
            f"Task {task_id} depends on unknown task {dependency_id}"
        )


class DependencyOrderError(SchedulingError):
    """A dependency is listed after the task that depends on it."""

    code: str = "DEPENDENCY_ORDER"

    def __init__(self, task_id: str, dependency_id: str):
        self.task_id = task_id
        self.dependency_id = dependency_id
        super().__init__(
            f"Task {task_id} is listed before its dependency {dependency_id}; "
            "tasks must be supplied in dependency order"
        )


class CyclicDependencyError(SchedulingError):
    """The dependency graph contains at least one cycle."""

    code: str = "CYCLIC_DEPENDENCY"

    def __init__(self, task_ids: list[str]):
        self.task_ids = list(task_ids)
        super().__init__(
            f"Cyclic dependency among tasks: {', '.join(self.task_ids)}"
        )


class TaskNotFoundError(SchedulingError):
    """Task with given id is not part of the plan."""

    code: str = "TASK_NOT_FOUND"

    def __init__(self, task_id: str):
        self.task_id = task_id
        super().__init__(f"Task not found: {task_id}")


class InvalidTaskError(SchedulingError):
    """Task input rejected by the planner."""

    code: str = "INVALID_TASK"

    def __init__(self, task_name: str, reason: str):
        self.task_name = task_name
        self.reason = reason
        super().__init__(f"Invalid task {task_name!r}: {reason}")


# Feature exceptions


class FeatureError(EstimationKernelError):
    """Base exception for feature planning errors."""

    code: str = "FEATURE_ERROR"


class FeatureNotFoundError(FeatureError):
    """Feature with given id is not part of the plan."""

    code: str = "FEATURE_NOT_FOUND"

    def __init__(self, feature_id: str):
        self.feature_id = feature_id
        super().__init__(f"Feature not found: {feature_id}")


class DuplicateFeatureError(FeatureError):
    """Feature with given id already exists in the plan."""

    code: str = "DUPLICATE_FEATURE"

    def __init__(self, feature_id: str):
        self.feature_id = feature_id
        super().__init__(f"Feature already exists: {feature_id}")


# Storage exceptions


class StorageError(EstimationKernelError):
    """Base exception for key-value persistence errors."""

    code: str = "STORAGE_ERROR"


class StoredPayloadError(StorageError):
    """A stored JSON blob could not be decoded into the expected shape."""

    code: str = "INVALID_STORED_PAYLOAD"

    def __init__(self, key: str, reason: str):
        self.key = key
        self.reason = reason
        super().__init__(f"Stored payload for {key!r} is invalid: {reason}")
