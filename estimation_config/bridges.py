"""
Config -> Kernel Bridges.

Functions that convert ``EstimationConfig`` sections into kernel value
objects. These live in estimation_config (the producer) because the
kernel must NEVER import estimation_config.

Usage:
    from estimation_config import get_active_config
    from estimation_config.bridges import build_rates, build_project_params

    config = get_active_config()
    rates = build_rates(config)
    params = build_project_params(config)
"""

from __future__ import annotations

from estimation_config.schema import EstimationConfig
from estimation_kernel.domain import (
    EstimationParams,
    EstimationRates,
    EVMData,
    FeatureInput,
    FpaInput,
    PertInput,
    StoryPointsInput,
)


def build_rates(config: EstimationConfig) -> EstimationRates:
    """Kernel rates from the ``rates`` section."""
    return EstimationRates(
        cost_per_person_month=config.rates.cost_per_person_month,
        cost_per_person_day=config.rates.cost_per_person_day,
        fp_to_effort_ratio=config.rates.fp_to_effort_ratio,
    )


def build_project_params(config: EstimationConfig) -> EstimationParams:
    """Initial project parameters from ``project_defaults``."""
    defaults = config.project_defaults
    return EstimationParams(
        project_size=defaults.project_size,
        team_size=defaults.team_size,
        timeline=defaults.timeline,
        complexity=defaults.complexity,
    )


def build_evm_defaults(config: EstimationConfig) -> EVMData:
    """EVM inputs used before anything has been stored."""
    evm = config.evm_defaults
    return EVMData(bac=evm.bac, pv=evm.pv, ev=evm.ev, ac=evm.ac)


def build_feature_template(config: EstimationConfig, feature_id: str, name: str) -> FeatureInput:
    """A new feature pre-filled with the configured template values."""
    t = config.feature_template
    return FeatureInput(
        id=feature_id,
        name=name,
        priority=t.priority,
        fpa=FpaInput(
            type=t.fpa_type,
            complexity=t.fpa_complexity,
            number_of_elements=t.fpa_number_of_elements,
            technical_factor=t.fpa_technical_factor,
        ),
        pert=PertInput(
            optimistic=t.pert_optimistic,
            most_likely=t.pert_most_likely,
            pessimistic=t.pert_pessimistic,
        ),
        story_points=StoryPointsInput(
            points=t.story_points,
            team_velocity=t.team_velocity,
            team_size=t.team_size,
            sprint_length=t.sprint_length,
        ),
    )
