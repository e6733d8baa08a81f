# src/dealscope/catalog/resolver.py
"""
Read-only queries over the package catalog and the metric dependency table.

Unknown metric ids, package ids and property types resolve to empty results
rather than raising, so callers can pass user input straight through.
"""
from __future__ import annotations

from collections.abc import Iterable
from typing import Any, Mapping

from dealscope.catalog.dependencies import METRIC_DEPENDENCIES
from dealscope.catalog.packages import PACKAGE_CATALOG, PACKAGES_BY_ID
from dealscope.domain.fields import LegacyField, StructuredField, field_name
from dealscope.domain.metrics import METRIC_IDS, MetricFlags
from dealscope.domain.packages import CalculationPackage, PackageFields, PackageRecommendation
from dealscope.domain.property import PropertyData


def packages_for(property_type: str | None) -> list[CalculationPackage]:
    if not property_type:
        return []
    return list(PACKAGE_CATALOG.get(property_type, ()))


def get_package(package_id: str | None) -> CalculationPackage | None:
    if not package_id:
        return None
    return PACKAGES_BY_ID.get(package_id)


def fields_for(package_id: str | None) -> PackageFields:
    pkg = get_package(package_id)
    if pkg is None:
        return PackageFields()
    return PackageFields(required=pkg.required_fields, optional=pkg.optional_fields)


def fields_for_metrics(metric_ids: Iterable[str]) -> list[str]:
    """
    Union of the per-metric dependency lists.

    Metrics are walked in METRIC_IDS declaration order (not caller order), and
    each field keeps the position where it was first seen.
    """
    wanted = set(metric_ids)
    seen: dict[str, None] = {}
    for metric_id in METRIC_IDS:
        if metric_id not in wanted:
            continue
        for f in METRIC_DEPENDENCIES.get(metric_id, ()):
            seen.setdefault(f, None)
    return list(seen)


def flags_for_package(package_id: str | None) -> MetricFlags:
    pkg = get_package(package_id)
    if pkg is None:
        return MetricFlags()
    return MetricFlags.of(pkg.included_metrics)


def required_field_names(package_id: str | None) -> list[str]:
    return [field_name(f) for f in fields_for(package_id).required]


def _as_property(inputs: PropertyData | Mapping[str, Any]) -> PropertyData:
    if isinstance(inputs, PropertyData):
        return inputs
    return PropertyData.model_validate(dict(inputs))


def missing_fields(package_id: str | None, inputs: PropertyData | Mapping[str, Any]) -> list[str]:
    data = _as_property(inputs)
    return [name for name in required_field_names(package_id) if not data.has_field(name)]


def data_completeness(package_id: str | None, inputs: PropertyData | Mapping[str, Any]) -> float:
    """Share (0-1) of the package's required fields that carry a value."""
    required = required_field_names(package_id)
    if not required:
        return 0.0
    data = _as_property(inputs)
    present = sum(1 for name in required if data.has_field(name))
    return present / len(required)


def meets_minimum_data(package_id: str | None, inputs: PropertyData | Mapping[str, Any]) -> bool:
    pkg = get_package(package_id)
    if pkg is None:
        return False
    return data_completeness(package_id, inputs) >= pkg.metadata.minimum_data_threshold


def recommend_packages(inputs: PropertyData | Mapping[str, Any]) -> list[PackageRecommendation]:
    """
    Rank the packages for the input's property type by how many of their
    required fields are already filled in. Ties keep catalog order.
    """
    data = _as_property(inputs)
    recs = [
        PackageRecommendation(
            package_id=pkg.id,
            name=pkg.name,
            description=pkg.description,
            match_score=round(data_completeness(pkg.id, data) * 100),
        )
        for pkg in packages_for(data.property_type)
    ]
    return sorted(recs, key=lambda r: r.match_score, reverse=True)


def _validate_field(spec: LegacyField | StructuredField, path: str) -> list[str]:
    errors: list[str] = []
    if not field_name(spec):
        errors.append(f"{path}: field name is required")
    if spec.kind == "legacy":
        return errors

    if spec.type == "select" and not spec.options:
        errors.append(f"{path}: select fields must have options")
    if spec.type in ("array", "object") and not spec.sub_fields:
        errors.append(f"{path}: {spec.type} fields must have sub-fields")
    if spec.bounds is not None:
        lo, hi = spec.bounds.min, spec.bounds.max
        if lo is not None and hi is not None and lo > hi:
            errors.append(f"{path}: min {lo} is greater than max {hi}")
    for i, sub in enumerate(spec.sub_fields):
        errors.extend(_validate_field(sub, f"{path}.subFields[{i}]"))
    return errors


def validate_package(pkg: CalculationPackage) -> list[str]:
    """Structural self-check for a catalog entry. Empty list means valid."""
    errors: list[str] = []
    if not pkg.id:
        errors.append("package id is required")
    if not pkg.name:
        errors.append("package name is required")
    if not pkg.description:
        errors.append("package description is required")
    if not pkg.required_fields:
        errors.append("at least one required field is needed")
    if not 0.0 <= pkg.metadata.minimum_data_threshold <= 1.0:
        errors.append("minimum data threshold must be between 0 and 1")

    unknown = [m for m in pkg.included_metrics if m not in METRIC_DEPENDENCIES]
    if unknown:
        errors.append(f"unknown metrics: {', '.join(unknown)}")

    for i, f in enumerate(pkg.required_fields):
        errors.extend(_validate_field(f, f"requiredFields[{i}]"))
    for i, f in enumerate(pkg.optional_fields):
        errors.extend(_validate_field(f, f"optionalFields[{i}]"))

    declared = {field_name(f) for f in pkg.required_fields + pkg.optional_fields}
    uncovered = [f for f in fields_for_metrics(pkg.included_metrics) if f not in declared]
    if uncovered:
        errors.append(f"metric inputs not declared by package: {', '.join(uncovered)}")
    return errors
