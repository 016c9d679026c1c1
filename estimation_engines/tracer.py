"""
estimation_engines.tracer -- ``@traced_engine`` and the ESTIMATION_ENGINE_TRACE record.

Each decorated engine call logs one INFO record:

    ESTIMATION_ENGINE_TRACE  engine_name, engine_version, input_fingerprint,
                             duration_ms, function

The fingerprint identifies the inputs of a calculation so that two runs
reporting different numbers can be checked for identical inputs.  It is
the first 16 hex characters of the SHA-256 of a canonical JSON rendering
of the selected arguments (dataclasses expanded field by field, enums by
value, mapping keys sorted).

Engines stay pure: the decorator reads the arguments and writes a log
record, nothing else.  Defaults are applied before fingerprinting, so an
omitted argument and its default value fingerprint the same.
"""

from __future__ import annotations

import dataclasses
import functools
import hashlib
import inspect
import json
import time
from collections.abc import Callable, Mapping
from enum import Enum
from typing import Any

from estimation_kernel.logging_config import get_logger

_logger = get_logger("engines.tracer")

TRACE_MESSAGE = "ESTIMATION_ENGINE_TRACE"


def _plain(value: Any) -> Any:
    """Reduce a value to JSON-compatible builtins, deterministically."""
    if isinstance(value, Enum):
        return value.value
    if value is None or isinstance(value, (bool, int, float, str)):
        return value
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {f.name: _plain(getattr(value, f.name)) for f in dataclasses.fields(value)}
    if isinstance(value, Mapping):
        return {str(k): _plain(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_plain(v) for v in value]
    return str(value)


def compute_input_fingerprint(
    fingerprint_fields: tuple[str, ...],
    arguments: Mapping[str, Any],
) -> str:
    """16-hex-character SHA-256 of the named arguments; absent names count as null."""
    selected = {name: _plain(arguments.get(name)) for name in fingerprint_fields}
    canonical = json.dumps(selected, sort_keys=True, separators=(",", ":"))
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()[:16]


def traced_engine(
    engine_name: str,
    engine_version: str,
    fingerprint_fields: tuple[str, ...] = (),
) -> Callable[[Callable], Callable]:
    """
    Wrap an engine function so every call emits a trace record.

    Args:
        engine_name: Stable engine identifier, e.g. ``"pert_network"``.
        engine_version: Bumped whenever the formula changes.
        fingerprint_fields: Parameter names hashed into ``input_fingerprint``.
    """

    def decorator(func: Callable) -> Callable:
        signature = inspect.signature(func)

        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            bound = signature.bind(*args, **kwargs)
            bound.apply_defaults()
            fingerprint = (
                compute_input_fingerprint(fingerprint_fields, bound.arguments)
                if fingerprint_fields
                else ""
            )

            started = time.perf_counter()
            result = func(*bound.args, **bound.kwargs)
            elapsed_ms = (time.perf_counter() - started) * 1000

            _logger.info(
                TRACE_MESSAGE,
                extra={
                    "trace_type": TRACE_MESSAGE,
                    "engine_name": engine_name,
                    "engine_version": engine_version,
                    "input_fingerprint": fingerprint,
                    "duration_ms": round(elapsed_ms, 2),
                    "function": func.__qualname__,
                },
            )
            return result

        return wrapper

    return decorator
