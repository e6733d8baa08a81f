# src/dealscope/catalog/benchmarks.py
from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Literal, Mapping

from dealscope.domain.assessment import MetricLevel

Direction = Literal["higher", "lower"]


@dataclass(frozen=True)
class Benchmark:
    """
    Cut-offs for Excellent / Good / Fair. Anything past `fair` is Poor.

    For "higher" metrics a value must be >= the cut-off; for "lower" metrics
    (leverage, breakeven, price multiples) it must be <= the cut-off.
    """
    direction: Direction
    excellent: float
    good: float
    fair: float

    def level(self, value: float) -> MetricLevel:
        if self.direction == "higher":
            if value >= self.excellent:
                return "Excellent"
            if value >= self.good:
                return "Good"
            if value >= self.fair:
                return "Fair"
            return "Poor"
        if value <= self.excellent:
            return "Excellent"
        if value <= self.good:
            return "Good"
        if value <= self.fair:
            return "Fair"
        return "Poor"


# Universal thresholds, one row per scoreable metric. Size and currency
# metrics (price per SF/unit, EGI, NPV, annual rent, revenue per unit) and
# the rent-vs-market comparison have no row and are never scored.
BENCHMARKS: Mapping[str, Benchmark] = MappingProxyType(
    {
        "capRate": Benchmark("higher", 8.0, 6.0, 4.0),
        "cashOnCash": Benchmark("higher", 10.0, 8.0, 6.0),
        "dscr": Benchmark("higher", 1.5, 1.25, 1.0),
        "ltv": Benchmark("lower", 60.0, 70.0, 80.0),
        "grm": Benchmark("lower", 8.0, 10.0, 12.0),
        "breakeven": Benchmark("lower", 75.0, 85.0, 90.0),
        "roi": Benchmark("higher", 12.0, 8.0, 4.0),
        "irr": Benchmark("higher", 15.0, 12.0, 8.0),
        "equityMultiple": Benchmark("higher", 2.0, 1.7, 1.4),
        "walt": Benchmark("higher", 7.0, 5.0, 3.0),
        "salesPerSF": Benchmark("higher", 500.0, 350.0, 200.0),
        "clearHeightPremium": Benchmark("higher", 15.0, 0.0, -15.0),
    }
)


def benchmark_for(metric_id: str) -> Benchmark | None:
    return BENCHMARKS.get(metric_id)
