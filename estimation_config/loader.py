"""
Configuration Loader (``estimation_config.loader``).

Responsibility
--------------
Loads the YAML configuration document and parses it into typed
``estimation_config.schema`` dataclass instances, then validates the
result.  The single public entry point for runtime config is
``estimation_config.get_active_config()``.

Invariants enforced
-------------------
* Every parsed object is a frozen dataclass from ``schema.py``.
* A section that is absent falls back to the schema defaults; a key that
  is present must hold a value of the right kind.
* ``compute_checksum`` produces a deterministic SHA-256 hash for
  configuration identity and change detection.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Missing ``config_id``  -> ``KeyError`` propagates.
* Unknown section keys, non-positive rates, unknown enumerated values or
  negative EVM defaults  -> ``ValueError`` listing every problem found.
"""

from __future__ import annotations

import hashlib
import json
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any

import yaml

from estimation_config.schema import (
    EstimationConfig,
    EVMDefaultsDef,
    FeatureTemplateDef,
    ProjectDefaultsDef,
    RatesDef,
    StorageDef,
)

COMPLEXITIES = frozenset({"low", "medium", "high"})
PRIORITIES = frozenset({"low", "medium", "high"})
FPA_TYPES = frozenset({"input", "output", "file", "interface", "inquiry"})


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
    """
    with open(path) as f:
        return yaml.safe_load(f) or {}


def _parse_section(cls, data: dict[str, Any] | None, section: str):
    """Build a schema dataclass from a mapping, rejecting unknown keys."""
    if data is None:
        return cls()
    if not isinstance(data, dict):
        raise ValueError(f"Section '{section}' must be a mapping, got {type(data).__name__}")
    known = {f.name for f in fields(cls)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ValueError(f"Unknown keys in section '{section}': {', '.join(unknown)}")
    return cls(**data)


def parse_rates(data: dict[str, Any] | None) -> RatesDef:
    """Parse the ``rates`` section."""
    rates = _parse_section(RatesDef, data, "rates")
    return RatesDef(**{f.name: float(getattr(rates, f.name)) for f in fields(RatesDef)})


def parse_project_defaults(data: dict[str, Any] | None) -> ProjectDefaultsDef:
    """Parse the ``project_defaults`` section."""
    return _parse_section(ProjectDefaultsDef, data, "project_defaults")


def parse_feature_template(data: dict[str, Any] | None) -> FeatureTemplateDef:
    """Parse the ``feature_template`` section."""
    return _parse_section(FeatureTemplateDef, data, "feature_template")


def parse_evm_defaults(data: dict[str, Any] | None) -> EVMDefaultsDef:
    """Parse the ``evm_defaults`` section."""
    evm = _parse_section(EVMDefaultsDef, data, "evm_defaults")
    return EVMDefaultsDef(**{f.name: float(getattr(evm, f.name)) for f in fields(EVMDefaultsDef)})


def parse_storage(data: dict[str, Any] | None) -> StorageDef:
    """Parse the ``storage`` section."""
    return _parse_section(StorageDef, data, "storage")


def parse_config(data: dict[str, Any]) -> EstimationConfig:
    """
    Parse a whole configuration document.

    Preconditions:
        - ``data`` is the mapping loaded from YAML.
    Postconditions:
        - Returns an ``EstimationConfig`` whose checksum is computed over
          ``data``.
    Raises:
        KeyError: if ``config_id`` is missing.
        ValueError: if a section is malformed.
    """
    return EstimationConfig(
        config_id=data["config_id"],
        version=int(data.get("version", 1)),
        rates=parse_rates(data.get("rates")),
        project_defaults=parse_project_defaults(data.get("project_defaults")),
        feature_template=parse_feature_template(data.get("feature_template")),
        evm_defaults=parse_evm_defaults(data.get("evm_defaults")),
        storage=parse_storage(data.get("storage")),
        checksum=compute_checksum(data),
    )


@dataclass
class ConfigValidationResult:
    """
    Result of configuration validation.

    ``is_valid`` returns ``True`` only when ``errors`` is empty.
    """

    errors: list[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return len(self.errors) == 0

    def add_error(self, msg: str) -> None:
        self.errors.append(msg)


def validate_config(config: EstimationConfig) -> ConfigValidationResult:
    """Check value ranges and enumerated values of a parsed config."""
    result = ConfigValidationResult()

    for f in fields(RatesDef):
        if getattr(config.rates, f.name) <= 0:
            result.add_error(f"rates.{f.name} must be positive")

    defaults = config.project_defaults
    if defaults.complexity not in COMPLEXITIES:
        result.add_error(f"project_defaults.complexity '{defaults.complexity}' is not one of {sorted(COMPLEXITIES)}")
    for name in ("project_size", "team_size", "timeline"):
        if getattr(defaults, name) < 0:
            result.add_error(f"project_defaults.{name} must not be negative")

    template = config.feature_template
    if template.priority not in PRIORITIES:
        result.add_error(f"feature_template.priority '{template.priority}' is not one of {sorted(PRIORITIES)}")
    if template.fpa_type not in FPA_TYPES:
        result.add_error(f"feature_template.fpa_type '{template.fpa_type}' is not one of {sorted(FPA_TYPES)}")
    if template.fpa_complexity not in COMPLEXITIES:
        result.add_error(
            f"feature_template.fpa_complexity '{template.fpa_complexity}' is not one of {sorted(COMPLEXITIES)}"
        )
    if not 0 <= template.fpa_technical_factor <= 14:
        result.add_error("feature_template.fpa_technical_factor must be within [0, 14]")

    for f in fields(EVMDefaultsDef):
        if getattr(config.evm_defaults, f.name) < 0:
            result.add_error(f"evm_defaults.{f.name} must not be negative")

    if not config.storage.evm_key:
        result.add_error("storage.evm_key must not be empty")

    return result


def load_config(path: Path) -> EstimationConfig:
    """
    Load, parse and validate the configuration document at ``path``.

    Raises:
        FileNotFoundError, yaml.YAMLError, KeyError: see module docstring.
        ValueError: if validation fails.
    """
    config = parse_config(load_yaml_file(path))
    validation = validate_config(config)
    if not validation.is_valid:
        raise ValueError(
            "Configuration validation failed:\n"
            + "\n".join(f"  - {e}" for e in validation.errors)
        )
    return config


def compute_checksum(data: dict[str, Any]) -> str:
    """
    Compute SHA-256 checksum of canonical JSON serialization.

    Identical ``data`` always produces identical checksums.
    """
    canonical = json.dumps(data, sort_keys=True, default=str)
    return hashlib.sha256(canonical.encode()).hexdigest()
