"""
Estimation services -- stateful orchestration over engines and kernel.

Services own the current inputs, call the pure engines on every mutation
and hold the results.  They are the only layer that combines engines,
configuration and persistence.
"""

from estimation_services.calculator_session import (
    SAMPLE_TASKS,
    FeaturePlanner,
    PertPlanner,
    ProjectEstimator,
)
from estimation_services.evm_service import DEFAULT_EVM_DATA, DEFAULT_EVM_KEY, EVMDataService
from estimation_services.workbook_export import export_estimation_workbook

__all__ = [
    "DEFAULT_EVM_DATA",
    "DEFAULT_EVM_KEY",
    "EVMDataService",
    "FeaturePlanner",
    "PertPlanner",
    "ProjectEstimator",
    "SAMPLE_TASKS",
    "export_estimation_workbook",
]
