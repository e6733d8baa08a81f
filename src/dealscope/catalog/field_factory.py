"""Helpers that build common StructuredField shapes for the package catalog."""
from __future__ import annotations

from dealscope.domain.fields import FieldBounds, LegacyField, StructuredField, label_from_name

CREDIT_RATINGS: tuple[str, ...] = ("AAA", "AA", "A", "BBB", "BB", "B", "CCC", "D", "NR")


def legacy(*names: str) -> tuple[LegacyField, ...]:
    return tuple(LegacyField(name=n) for n in names)


def currency(name: str, label: str | None = None, *, required: bool = True, **extra) -> StructuredField:
    return StructuredField(
        name=name,
        type="currency",
        label=label or label_from_name(name),
        required=required,
        bounds=extra.pop("bounds", FieldBounds(min=0)),
        unit="$",
        **extra,
    )


def percentage(
    name: str,
    label: str | None = None,
    *,
    required: bool = True,
    max_value: float = 100,
    **extra,
) -> StructuredField:
    return StructuredField(
        name=name,
        type="percentage",
        label=label or label_from_name(name),
        required=required,
        bounds=FieldBounds(min=0, max=max_value),
        unit="%",
        **extra,
    )


def number(
    name: str,
    label: str | None = None,
    *,
    required: bool = True,
    min_value: float | None = 0,
    max_value: float | None = None,
    unit: str | None = None,
    **extra,
) -> StructuredField:
    return StructuredField(
        name=name,
        type="number",
        label=label or label_from_name(name),
        required=required,
        bounds=FieldBounds(min=min_value, max=max_value),
        unit=unit,
        **extra,
    )


def select(name: str, options: tuple[str, ...], label: str | None = None, *, required: bool = True) -> StructuredField:
    return StructuredField(
        name=name,
        type="select",
        label=label or label_from_name(name),
        options=options,
        required=required,
    )


def tenant_roster(*, min_tenants: int = 1, with_sales: bool = False) -> StructuredField:
    sub_fields = (
        StructuredField(name="tenantName", type="string", label="Tenant Name", required=True),
        currency("annualRent", "Annual Rent"),
        number("remainingLeaseTerm", "Remaining Lease Term", max_value=99, unit="years"),
        select("creditRating", CREDIT_RATINGS, "Credit Rating", required=False),
    )
    if with_sales:
        sub_fields += (
            currency("reportedSales", "Reported Annual Sales"),
            number("squareFootage", "Tenant Square Footage", min_value=1, unit="SF"),
        )
    return StructuredField(
        name="tenants",
        type="array",
        label="Tenant Roster",
        description="One entry per tenant lease",
        required=True,
        bounds=FieldBounds(min=min_tenants),
        sub_fields=sub_fields,
    )
