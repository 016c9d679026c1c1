"""
Configuration Schema (``estimation_config.schema``).

Responsibility
--------------
Frozen dataclasses describing the estimation configuration document.
The loader produces these; the bridges turn them into kernel value
objects.

Architecture position
---------------------
**Config layer** -- pure data definitions.  No I/O and no dependency on
the kernel, so that the kernel never has to import configuration types.
Enumerated values (complexity, element type) are kept as plain strings
here and checked by the loader's validation step.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class RatesDef:
    """Monetary and productivity rates."""

    cost_per_person_month: float = 8000.0
    cost_per_person_day: float = 500.0
    fp_to_effort_ratio: float = 0.5


@dataclass(frozen=True)
class ProjectDefaultsDef:
    """Initial project parameters of a new calculator session."""

    project_size: float = 50
    team_size: float = 5
    timeline: float = 12
    complexity: str = "medium"


@dataclass(frozen=True)
class FeatureTemplateDef:
    """Pre-filled model inputs for a newly added feature."""

    priority: str = "medium"
    fpa_type: str = "input"
    fpa_complexity: str = "medium"
    fpa_number_of_elements: float = 0
    fpa_technical_factor: float = 7
    pert_optimistic: float = 0
    pert_most_likely: float = 0
    pert_pessimistic: float = 0
    story_points: float = 0
    team_velocity: float = 20
    team_size: float = 5
    sprint_length: float = 14


@dataclass(frozen=True)
class EVMDefaultsDef:
    """EVM inputs used when nothing has been persisted yet."""

    bac: float = 1_000_000
    pv: float = 600_000
    ev: float = 550_000
    ac: float = 580_000


@dataclass(frozen=True)
class StorageDef:
    """Where persisted calculator state lives."""

    database_url: str = "sqlite:///estimation.db"
    evm_key: str = "evmData"


@dataclass(frozen=True)
class EstimationConfig:
    """
    The complete, validated configuration.

    ``checksum`` is the SHA-256 of the canonical JSON form of the source
    document, so two configs with the same checksum behave identically.
    """

    config_id: str
    version: int
    rates: RatesDef
    project_defaults: ProjectDefaultsDef
    feature_template: FeatureTemplateDef
    evm_defaults: EVMDefaultsDef
    storage: StorageDef
    checksum: str = ""
