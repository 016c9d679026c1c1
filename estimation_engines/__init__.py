"""
Module: estimation_engines
Responsibility:
    Package entrypoint that re-exports all public symbols from the pure
    estimation engine sub-modules.  This is the canonical import surface
    for higher layers (estimation_services, scripts).

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import estimation_kernel (domain, exceptions, logging).
    MUST NOT import estimation_services or estimation_config.

Invariants enforced:
    - Purity: engines never read configuration, storage or the clock.
      Rates are passed in as ``EstimationRates`` values.
    - Determinism: identical inputs always produce identical outputs.
    - Totality: formulas return 0 instead of dividing by zero.

Failure modes:
    - Typed SchedulingError subclasses from the PERT network solver on
      malformed networks.

Usage:
    from estimation_engines.parametric import calculate_all_models
    from estimation_engines.feature_models import calculate_feature_estimations
    from estimation_engines.aggregation import aggregate_feature_estimations
    from estimation_engines.pert_network import build_pert_schedule
    from estimation_engines.evm import calculate_evm_metrics
"""

from estimation_engines.aggregation import (
    aggregate_feature_estimations,
    average_risk,
    summarize_estimations,
)
from estimation_engines.evm import (
    calculate_evm_metrics,
    format_currency,
    format_decimal,
    get_health_score,
    get_health_status,
    get_performance_level,
    get_performance_status,
    get_trend,
)
from estimation_engines.feature_models import (
    FPA_WEIGHTS,
    calculate_feature_estimations,
    calculate_fpa,
    calculate_pert,
    calculate_story_points,
)
from estimation_engines.parametric import (
    calculate_all_models,
    calculate_cocomo,
    calculate_rca,
    calculate_slim,
    get_recommended_model,
    recommend_model,
)
from estimation_engines.pert_network import (
    build_pert_schedule,
    order_tasks,
    solve_pert_network,
)
from estimation_engines.tracer import compute_input_fingerprint, traced_engine

__all__ = [
    "FPA_WEIGHTS",
    "aggregate_feature_estimations",
    "average_risk",
    "build_pert_schedule",
    "calculate_all_models",
    "calculate_cocomo",
    "calculate_evm_metrics",
    "calculate_feature_estimations",
    "calculate_fpa",
    "calculate_pert",
    "calculate_rca",
    "calculate_slim",
    "calculate_story_points",
    "compute_input_fingerprint",
    "format_currency",
    "format_decimal",
    "get_health_score",
    "get_health_status",
    "get_performance_level",
    "get_performance_status",
    "get_recommended_model",
    "get_trend",
    "order_tasks",
    "recommend_model",
    "solve_pert_network",
    "summarize_estimations",
    "traced_engine",
]
