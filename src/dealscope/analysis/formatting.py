from __future__ import annotations

import math
from typing import Any, Mapping

from dealscope.catalog.dependencies import metric_info
from dealscope.domain.metrics import ValueKind


def format_metric_value(value: float | None, kind: ValueKind | str) -> str:
    """
    Display-only rendering. Never feeds back into calculations.

      percentage -> "8.00%"
      currency   -> "$1,234,567"
      ratio      -> "1.25"
      years      -> "5.2 yrs"
    """
    if value is None or not math.isfinite(value):
        return "N/A"
    if kind == "percentage":
        return f"{value:.2f}%"
    if kind == "currency":
        sign = "-" if value < 0 else ""
        return f"{sign}${abs(value):,.0f}"
    if kind == "ratio":
        return f"{value:.2f}"
    if kind == "years":
        return f"{value:.1f} yrs"
    return str(value)


def format_metrics(metrics: Mapping[str, Any]) -> dict[str, str]:
    out: dict[str, str] = {}
    for metric_id, value in metrics.items():
        info = metric_info(metric_id)
        kind = info.kind if info is not None else "ratio"
        out[metric_id] = format_metric_value(value, kind)
    return out
