from __future__ import annotations

from typing import Any, Mapping

from dealscope.adapters.logging_utils import get_logger
from dealscope.analysis.assessment import assess
from dealscope.analysis.calculator import calculate, clear_height_band
from dealscope.analysis.formatting import format_metrics
from dealscope.catalog.resolver import fields_for_metrics, flags_for_package, get_package, missing_fields
from dealscope.domain.metrics import MetricFlags
from dealscope.domain.property import PropertyData
from dealscope.services.validation import prepare_payload, validate_inputs

logger = get_logger(__name__)


def _resolve_flags(
    payload: Mapping[str, Any],
    package_id: str | None,
    flags: MetricFlags | Mapping[str, Any] | None,
) -> tuple[MetricFlags, str | None]:
    """
    Explicit flags win. Otherwise the package (argument first, then the
    payload's selectedPackage) decides which metrics run.
    """
    if flags is not None:
        return MetricFlags.coerce(flags), package_id
    pkg_id = package_id or payload.get("selectedPackage") or payload.get("selected_package")
    return flags_for_package(pkg_id), pkg_id


def _insights(prop: PropertyData, metrics: Mapping[str, float | None]) -> dict[str, str]:
    """Descriptive labels that go with the industrial and multifamily metrics."""
    out: dict[str, str] = {}
    band = clear_height_band(prop.clear_height)
    if band is not None:
        out["clearHeightCategory"] = band.category
        out["estimatedPremium"] = band.estimated_premium
    vs_market = metrics.get("rentVsMarket")
    if vs_market is not None:
        if vs_market > 5:
            out["marketComparison"] = f"{vs_market:.1f}% above market"
        elif vs_market < -5:
            out["marketComparison"] = f"{abs(vs_market):.1f}% below market"
        else:
            out["marketComparison"] = "At market rate"
    return out


def analyze_deal(
    raw_payload: Mapping[str, Any],
    *,
    package_id: str | None = None,
    flags: MetricFlags | Mapping[str, Any] | None = None,
) -> dict[str, Any]:
    """
    Main analysis entrypoint: prepare -> resolve metrics -> calculate -> assess.

    Raises ValueError / pydantic.ValidationError for payloads that cannot be
    read as property data at all. Everything downstream degrades to
    "not computed" values instead of raising.
    """
    payload = prepare_payload(raw_payload)
    prop = PropertyData.model_validate(payload)

    metric_flags, pkg_id = _resolve_flags(payload, package_id, flags)
    enabled = metric_flags.enabled()

    metrics = calculate(prop, metric_flags)
    assessment = assess(metrics, metric_flags)

    if pkg_id and get_package(pkg_id) is not None:
        missing = missing_fields(pkg_id, prop)
        validation_errors = validate_inputs(pkg_id, payload)
    else:
        missing = [f for f in fields_for_metrics(enabled) if not prop.has_field(f)]
        validation_errors = {}

    not_computed = [m for m, v in metrics.items() if v is None]

    logger.info(
        "deal_analyzed",
        extra={
            "context": {
                "property_type": prop.property_type,
                "package_id": pkg_id,
                "requested": len(enabled),
                "not_computed": not_computed,
                "overall": assessment.overall,
            }
        },
    )

    return {
        "propertyType": prop.property_type,
        "packageId": pkg_id,
        "metrics": metrics,
        "formatted": format_metrics(metrics),
        "assessment": assessment.model_dump(by_alias=True),
        "missingFields": missing,
        "validationErrors": validation_errors,
        "insights": _insights(prop, metrics),
    }
