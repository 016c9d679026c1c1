"""
estimation_engines.evm -- Earned Value Management indices and presentation helpers.

Responsibility:
    Derive CPI, SPI, CV, SV, EAC, VAC and percent complete from the four
    raw EVM inputs, and classify/format those indices the way the
    dashboards report them.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    EVMMetrics is recomputed on every read; it is never persisted.

Invariants enforced:
    - cpi = ev / ac, spi = ev / pv, eac = bac / cpi,
      percent_complete = ev / bac * 100; each is 0 when its denominator
      is 0.
    - cv = ev - ac, sv = ev - pv, vac = bac - eac.
    - Currency formatting rounds half away from zero to whole dollars;
      decimal formatting rounds the exact binary value half up.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

from estimation_engines.tracer import traced_engine
from estimation_kernel.domain.evm import EVMData, EVMMetrics, PerformanceLevel
from estimation_kernel.domain.values import round_half_up, safe_divide

VARIANCE_WARNING_FLOOR = -50000

HEALTH_EXCELLENT = 80
HEALTH_ATTENTION = 60


@traced_engine("evm", "1.0", fingerprint_fields=("data",))
def calculate_evm_metrics(data: EVMData) -> EVMMetrics:
    """Derive the EVM indices from raw inputs."""
    cpi = safe_divide(data.ev, data.ac)
    spi = safe_divide(data.ev, data.pv)
    cv = data.ev - data.ac
    sv = data.ev - data.pv
    eac = safe_divide(data.bac, cpi)
    vac = data.bac - eac
    percent_complete = safe_divide(data.ev, data.bac) * 100

    return EVMMetrics(
        cpi=cpi,
        spi=spi,
        cv=cv,
        sv=sv,
        eac=eac,
        vac=vac,
        percent_complete=percent_complete,
    )


def format_currency(value: float) -> str:
    """USD with thousands separators and no cents, e.g. ``-$54,545``."""
    amount = Decimal(repr(float(value))).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    sign = "-" if amount < 0 else ""
    return f"{sign}${abs(int(amount)):,}"


def format_decimal(value: float, places: int = 3) -> str:
    """Fixed-point formatting with ``places`` decimals."""
    quantum = Decimal(1).scaleb(-places)
    return str(Decimal(float(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def get_performance_level(value: float, kind: str = "index") -> PerformanceLevel:
    """
    Traffic-light band.

    Indices (CPI, SPI): good >= 1.0, warning >= 0.9.
    Variances (CV, SV, VAC): good >= 0, warning >= -50,000.
    """
    if kind == "index":
        if value >= 1.0:
            return PerformanceLevel.GOOD
        if value >= 0.9:
            return PerformanceLevel.WARNING
        return PerformanceLevel.POOR
    if kind == "variance":
        if value >= 0:
            return PerformanceLevel.GOOD
        if value >= VARIANCE_WARNING_FLOOR:
            return PerformanceLevel.WARNING
        return PerformanceLevel.POOR
    raise ValueError(f"Unknown performance kind: {kind!r}")


def get_performance_status(value: float) -> str:
    """Status label for a performance index."""
    if value >= 1.0:
        return "On Track"
    if value >= 0.9:
        return "Warning"
    return "At Risk"


def get_health_score(cpi: float, spi: float) -> int:
    """0-100 score; each index contributes at most 50 points."""
    cpi_score = min(cpi * 50, 50)
    spi_score = min(spi * 50, 50)
    return int(round_half_up(cpi_score + spi_score))


def get_health_status(score: float) -> str:
    if score >= HEALTH_EXCELLENT:
        return "Excellent"
    if score >= HEALTH_ATTENTION:
        return "Requires Attention"
    return "Critical"


def get_trend(value: float) -> str:
    """``up`` for an index at or above 1.0, else ``down``."""
    return "up" if value >= 1.0 else "down"
