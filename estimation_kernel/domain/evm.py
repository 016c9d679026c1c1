"""
EVM -- Earned Value Management inputs and derived indices.

Responsibility:
    ``EVMData`` is the only EVM state that is ever persisted.
    ``EVMMetrics`` is always derived from it and is never stored.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any

EVM_FIELDS = ("bac", "pv", "ev", "ac")


@dataclass(frozen=True)
class EVMData:
    """
    Raw earned value inputs.

    Attributes:
        bac: Budget at completion
        pv: Planned value
        ev: Earned value
        ac: Actual cost
    """

    bac: float
    pv: float
    ev: float
    ac: float

    def to_dict(self) -> dict[str, float]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> EVMData:
        return cls(**{name: float(data[name]) for name in EVM_FIELDS})


@dataclass(frozen=True)
class EVMMetrics:
    """Indices derived from EVMData."""

    cpi: float
    spi: float
    cv: float
    sv: float
    eac: float
    vac: float
    percent_complete: float


class PerformanceLevel(str, Enum):
    """Traffic-light band for an index or a variance."""

    GOOD = "good"
    WARNING = "warning"
    POOR = "poor"
