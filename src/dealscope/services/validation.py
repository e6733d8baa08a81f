# src/dealscope/services/validation.py
"""
Input preparation and field-level validation for the collection layer.

Bounds and required flags live on the package's field specs; this module is
where they are enforced. The calculator itself never looks at them.
"""
from __future__ import annotations

from typing import Any, Mapping

from dealscope.catalog.resolver import fields_for
from dealscope.domain.fields import NUMERIC_FIELD_TYPES, LegacyField, StructuredField, field_label, field_name
from dealscope.domain.property import to_wire_keys

_NUMERIC_KEYS = {
    "purchasePrice",
    "currentNOI",
    "projectedNOI",
    "grossIncome",
    "operatingExpenses",
    "annualCashFlow",
    "totalInvestment",
    "occupancyRate",
    "averageRent",
    "monthlyRent",
    "loanAmount",
    "interestRate",
    "loanTerm",
    "discountRate",
    "holdingPeriod",
    "exitCapRate",
    "squareFootage",
    "rentableSquareFeet",
    "grossLeasableArea",
    "numberOfUnits",
    "parkingSpaces",
    "clearHeight",
}


def _to_num(val: Any, field: str) -> float:
    """
    Coerce values like:
      - 250000
      - "250000" / "250,000" / "$250,000"
      - "6.5%"  (kept in percent units -> 6.5)
    into float.
    """
    if isinstance(val, bool):
        raise ValueError(f"Invalid type for {field}: bool")
    if isinstance(val, (int, float)):
        return float(val)
    if isinstance(val, str):
        s = val.strip().replace(",", "").replace("$", "")
        if s.endswith("%"):
            s = s[:-1]
        try:
            return float(s)
        except ValueError:
            raise ValueError(f"Invalid number for {field}: {val!r}") from None
    raise ValueError(f"Invalid type for {field}: {type(val).__name__}")


def prepare_payload(raw: Mapping[str, Any]) -> dict[str, Any]:
    """
    Normalize an incoming form payload.

      - snake_case keys are renamed to their camelCase wire names
      - numeric strings become floats
      - blank strings become missing (key dropped)
      - anything else passes through for PropertyData to handle
    Raises ValueError for a non-blank numeric field that cannot be parsed.
    """
    if not isinstance(raw, Mapping):
        raise ValueError("payload must be an object")

    cleaned: dict[str, Any] = {}
    for key, val in to_wire_keys(raw).items():
        if isinstance(val, str) and not val.strip():
            continue
        if key in _NUMERIC_KEYS and val is not None:
            cleaned[key] = _to_num(val, key)
        else:
            cleaned[key] = val
    return cleaned


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def validate_field_value(spec: LegacyField | StructuredField, value: Any) -> list[str]:
    """Messages for one value against its spec. Empty list means valid."""
    label = field_label(spec)

    if spec.kind == "legacy":
        # legacy entries are listed as required by the package, nothing more
        return [f"{label} is required"] if _is_blank(value) else []

    errors: list[str] = []
    if _is_blank(value):
        if spec.required:
            errors.append(f"{label} is required")
        return errors

    lo = spec.bounds.min if spec.bounds else None
    hi = spec.bounds.max if spec.bounds else None

    if spec.type in NUMERIC_FIELD_TYPES:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return [f"{label} must be a number"]
        if lo is not None and value < lo:
            errors.append(f"{label} must be at least {lo:g}")
        if hi is not None and value > hi:
            errors.append(f"{label} must be at most {hi:g}")
    elif spec.type == "string":
        if not isinstance(value, str):
            errors.append(f"{label} must be a string")
    elif spec.type == "boolean":
        if not isinstance(value, bool):
            errors.append(f"{label} must be a boolean")
    elif spec.type == "select":
        if spec.options and value not in spec.options:
            errors.append(f"{label} must be one of: {', '.join(spec.options)}")
    elif spec.type == "array":
        if not isinstance(value, list):
            return [f"{label} must be a list"]
        if lo is not None and len(value) < lo:
            errors.append(f"{label} must have at least {lo:g} items")
        for i, item in enumerate(value):
            errors.extend(_validate_sub_fields(spec, item, f"{label}[{i}]"))
    elif spec.type == "object":
        errors.extend(_validate_sub_fields(spec, value, label))
    return errors


def _validate_sub_fields(spec: StructuredField, item: Any, prefix: str) -> list[str]:
    if not isinstance(item, Mapping):
        return [f"{prefix} must be an object"]
    errors: list[str] = []
    for sub in spec.sub_fields:
        for msg in validate_field_value(sub, item.get(sub.name)):
            errors.append(f"{prefix}: {msg}")
    return errors


def validate_inputs(package_id: str | None, inputs: Mapping[str, Any]) -> dict[str, list[str]]:
    """
    Field name -> messages for every required/optional field of the package
    that fails validation. Keys may be camelCase or snake_case. Unknown
    packages validate to an empty dict.
    """
    spec_fields = fields_for(package_id)
    inputs = to_wire_keys(inputs)
    problems: dict[str, list[str]] = {}
    for spec in spec_fields.required:
        msgs = validate_field_value(spec, inputs.get(field_name(spec)))
        if msgs:
            problems[field_name(spec)] = msgs
    for spec in spec_fields.optional:
        value = inputs.get(field_name(spec))
        if _is_blank(value):
            continue
        msgs = validate_field_value(spec, value)
        if msgs:
            problems[field_name(spec)] = msgs
    return problems
