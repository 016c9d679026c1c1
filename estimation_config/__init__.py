"""
estimation_config -- single public entrypoint for calculator configuration.

Responsibility:
    Provides the ONLY way to obtain configuration at runtime through
    ``get_active_config()``.  Returns a frozen ``EstimationConfig``.

Architecture position:
    Configuration -- YAML-driven.  This package sits above
    ``estimation_kernel`` and below ``estimation_services``.  The kernel
    MUST NEVER import from ``estimation_config``; ``bridges`` translates
    configuration into kernel value objects.

Invariants enforced:
    - Single entrypoint: all runtime config flows through ``get_active_config()``.
    - Validation: the document must pass ``validate_config`` before it is
      returned.
    - Deterministic checksum: the same YAML always yields the same checksum.

Failure modes:
    - ``FileNotFoundError`` -- the configuration file does not exist.
    - ``yaml.YAMLError`` -- the file is not valid YAML.
    - ``KeyError`` -- ``config_id`` is missing.
    - ``ValueError`` -- validation failures.

Audit relevance:
    Every successful ``get_active_config()`` call emits an
    ``ESTIMATION_CONFIG_TRACE`` log entry containing the config_id,
    version, checksum and source path, tying each estimate to the rates
    that produced it.
"""

from __future__ import annotations

import logging
from pathlib import Path

from estimation_config.loader import load_config
from estimation_config.schema import EstimationConfig

_logger = logging.getLogger("estimation_kernel.config")

DEFAULT_CONFIG_PATH = Path(__file__).parent / "defaults" / "estimation.yaml"


def get_active_config(config_path: Path | str | None = None) -> EstimationConfig:
    """The ONLY public configuration entrypoint.

    Args:
        config_path: Override path to a configuration document.
            Defaults to estimation_config/defaults/estimation.yaml.

    Returns:
        A validated, frozen ``EstimationConfig``.
    """
    path = Path(config_path) if config_path is not None else DEFAULT_CONFIG_PATH
    config = load_config(path)

    _logger.info(
        "ESTIMATION_CONFIG_TRACE",
        extra={
            "trace_type": "ESTIMATION_CONFIG_TRACE",
            "config_id": config.config_id,
            "config_version": config.version,
            "checksum": config.checksum,
            "source": str(path),
        },
    )
    return config


__all__ = ["DEFAULT_CONFIG_PATH", "EstimationConfig", "get_active_config"]
