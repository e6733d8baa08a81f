# src/dealscope/analysis/assessment.py
"""
Deal assessment: score each computed metric against its benchmark and roll
the individual levels up into one overall rating plus recommendation text.
"""
from __future__ import annotations

import math
from collections import Counter
from typing import Any, Mapping

from dealscope.catalog.benchmarks import benchmark_for
from dealscope.domain.assessment import AssessmentLevel, DealAssessment, MetricLevel
from dealscope.domain.metrics import METRIC_IDS, MetricFlags

_RECOMMENDATIONS: Mapping[str, str] = {
    "Excellent": "This deal shows excellent potential with multiple positive metrics.",
    "Good": "This deal shows good potential. Consider negotiating better terms.",
    "Fair": "This deal shows moderate potential with some areas of concern.",
    "Poor": "This deal shows several areas of concern. Consider passing or renegotiating.",
    "Insufficient Data": (
        "Not enough data to assess this deal. Enable metrics and complete the required inputs."
    ),
}


def score_metric(metric_id: str, value: Any) -> MetricLevel | None:
    """Level for one metric value, or None if it has no benchmark or no usable value."""
    bench = benchmark_for(metric_id)
    if bench is None or value is None or isinstance(value, bool):
        return None
    try:
        v = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(v):
        return None
    return bench.level(v)


def overall_level(levels: list[MetricLevel]) -> AssessmentLevel:
    """
    Strict-majority roll-up over n scored metrics:
      n == 0           -> Insufficient Data
      Excellent > n/2  -> Excellent
      Exc + Good > n/2 -> Good
      Poor > n/2       -> Poor
      otherwise        -> Fair
    """
    n = len(levels)
    if n == 0:
        return "Insufficient Data"
    counts = Counter(levels)
    half = n / 2
    if counts["Excellent"] > half:
        return "Excellent"
    if counts["Excellent"] + counts["Good"] > half:
        return "Good"
    if counts["Poor"] > half:
        return "Poor"
    return "Fair"


def recommendation_for(overall: AssessmentLevel, weak_count: int = 0) -> str:
    text = _RECOMMENDATIONS[overall]
    if overall in ("Insufficient Data", "Excellent") or weak_count <= 0:
        return text
    noun = "metric" if weak_count == 1 else "metrics"
    return f"{text} {weak_count} {noun} scored below benchmark."


def assess(
    metrics: Mapping[str, Any],
    flags: MetricFlags | Mapping[str, Any] | None,
) -> DealAssessment:
    """
    Only metrics that are flagged, computed (not None) and benchmarked are
    scored. A "not computed" value is left out of metric_scores entirely.
    """
    wanted = set(MetricFlags.coerce(flags).enabled())

    scores: dict[str, MetricLevel] = {}
    for metric_id in METRIC_IDS:
        if metric_id not in wanted:
            continue
        level = score_metric(metric_id, metrics.get(metric_id))
        if level is not None:
            scores[metric_id] = level

    levels = list(scores.values())
    overall = overall_level(levels)
    weak = sum(1 for lvl in levels if lvl in ("Fair", "Poor"))

    return DealAssessment(
        overall=overall,
        metric_scores=scores,
        recommendation=recommendation_for(overall, weak),
        active_metrics=len(scores),
    )
