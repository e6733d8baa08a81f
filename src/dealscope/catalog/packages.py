# src/dealscope/catalog/packages.py
"""
Per-property-type catalog of analysis packages.

Older packages list their inputs as bare field names (LegacyField); newer
ones carry StructuredField specs with bounds and nested roster fields. Both
live side by side in the same catalog. The catalog is assembled once at
import and exposed through read-only mappings of frozen models.
"""
from __future__ import annotations

from types import MappingProxyType
from typing import Mapping

from dealscope.catalog.field_factory import currency, legacy, number, percentage, tenant_roster
from dealscope.domain.packages import CalculationPackage, PackageMetadata

_BASIC_FIELDS = ("purchasePrice", "currentNOI", "totalInvestment", "annualCashFlow")

_COMPLETE_FIELDS = (
    "purchasePrice",
    "currentNOI",
    "projectedNOI",
    "totalInvestment",
    "annualCashFlow",
    "loanAmount",
    "interestRate",
    "loanTerm",
    "operatingExpenses",
    "grossIncome",
    "holdingPeriod",
)

_COMPLETE_METRICS = ("capRate", "cashOnCash", "dscr", "ltv", "breakeven", "irr")

_INSTITUTIONAL_METRICS = _COMPLETE_METRICS + ("roi", "equityMultiple", "pricePerSF")

_PROJECTION_OPTIONAL = legacy("exitCapRate", "discountRate")


def _basic(prefix: str, property_type: str, label: str) -> CalculationPackage:
    return CalculationPackage(
        id=f"{prefix}-basic",
        name=f"{label} Quick Analysis",
        description=f"Basic return metrics for {label.lower()} properties",
        category="Screening",
        property_type=property_type,
        included_metrics=("capRate", "cashOnCash"),
        required_fields=legacy(*_BASIC_FIELDS),
        metadata=PackageMetadata(templates=("quickSummary",), minimum_data_threshold=1.0, analysis_depth="basic"),
    )


def _complete(prefix: str, property_type: str, label: str) -> CalculationPackage:
    return CalculationPackage(
        id=f"{prefix}-complete",
        name=f"Complete {label} Analysis",
        description=f"Returns, leverage and hold-period metrics for {label.lower()} properties",
        category="Core",
        property_type=property_type,
        included_metrics=_COMPLETE_METRICS,
        required_fields=legacy(*_COMPLETE_FIELDS),
        optional_fields=_PROJECTION_OPTIONAL,
        metadata=PackageMetadata(
            templates=("investmentSummary", "debtAnalysis"),
            minimum_data_threshold=0.9,
            analysis_depth="detailed",
        ),
    )


def _institutional(
    prefix: str,
    property_type: str,
    label: str,
    description: str,
    extra_required: tuple[str, ...],
    *,
    metrics: tuple[str, ...] = _INSTITUTIONAL_METRICS,
    size_fields: tuple[str, ...] = ("squareFootage",),
) -> CalculationPackage:
    return CalculationPackage(
        id=f"{prefix}-institutional",
        name=f"Institutional {label} Analysis",
        description=description,
        category="Core-Plus",
        property_type=property_type,
        included_metrics=metrics,
        required_fields=legacy(*_COMPLETE_FIELDS, *size_fields, *extra_required),
        optional_fields=_PROJECTION_OPTIONAL + legacy("parkingSpaces"),
        metadata=PackageMetadata(
            templates=("institutionalMemo", "icPresentation"),
            minimum_data_threshold=0.85,
            analysis_depth="comprehensive",
        ),
    )


def _dcf(prefix: str, property_type: str, label: str) -> CalculationPackage:
    return CalculationPackage(
        id=f"{prefix}-dcf",
        name=f"{label} Discounted Cash Flow",
        description="Hold-period cash flows with exit value, IRR, NPV and equity multiple",
        category="Financial",
        property_type=property_type,
        included_metrics=("cashOnCash", "roi", "irr", "npv", "equityMultiple"),
        required_fields=(
            currency("totalInvestment", "Total Equity Invested"),
            currency("annualCashFlow", "Annual Cash Flow", bounds=None),
            currency("currentNOI", "Current NOI", bounds=None),
            currency("projectedNOI", "Projected NOI at Exit", bounds=None),
            number("holdingPeriod", "Holding Period", min_value=1, max_value=30, unit="years"),
            percentage("discountRate", "Discount Rate"),
        ),
        optional_fields=(
            percentage(
                "exitCapRate",
                "Exit Cap Rate",
                required=False,
                max_value=25,
                helper_text="Defaults to the house exit cap when left blank",
            ),
        ),
        metadata=PackageMetadata(
            templates=("cashFlowProjection", "returnsSummary"),
            minimum_data_threshold=1.0,
            analysis_depth="detailed",
        ),
    )


def _walt(
    package_id: str,
    property_type: str,
    name: str,
    description: str,
    *,
    metrics: tuple[str, ...] = ("capRate", "walt"),
    with_sales: bool = False,
) -> CalculationPackage:
    return CalculationPackage(
        id=package_id,
        name=name,
        description=description,
        category="Specialized",
        property_type=property_type,
        included_metrics=metrics,
        required_fields=(
            currency("purchasePrice", "Purchase Price"),
            currency("currentNOI", "Current NOI", bounds=None),
            tenant_roster(with_sales=with_sales),
        ),
        metadata=PackageMetadata(
            templates=("waltAnalysis", "tenantRollReport"),
            minimum_data_threshold=0.9,
            analysis_depth="specialized",
        ),
    )


_OFFICE = (
    _basic("office", "office", "Office"),
    _complete("office", "office", "Office"),
    _institutional(
        "office", "office", "Office",
        "Institutional-grade office analysis with tenant and lease analytics",
        ("rentableSquareFeet", "numberOfTenants", "averageRentPSF"),
    ),
    _dcf("office", "office", "Office"),
    _walt(
        "office-walt-enhanced", "office",
        "Enhanced WALT Analysis",
        "Rent-weighted remaining lease term across the office rent roll",
    ),
)

_RETAIL = (
    _basic("retail", "retail", "Retail"),
    _complete("retail", "retail", "Retail"),
    _institutional(
        "retail", "retail", "Retail",
        "Retail analysis with sales performance and trade area inputs",
        ("grossLeasableArea", "occupancyCostRatio", "trafficCount"),
    ),
    _dcf("retail", "retail", "Retail"),
    _walt(
        "retail-lease-durability", "retail",
        "Retail Lease Durability & Sales",
        "Rent-weighted remaining lease term and tenant sales productivity",
        metrics=("capRate", "walt", "salesPerSF"),
        with_sales=True,
    ),
)

_INDUSTRIAL = (
    _basic("industrial", "industrial", "Industrial"),
    CalculationPackage(
        id="industrial-investment",
        name="Industrial Investment Analysis",
        description="Returns and financing metrics",
        category="Core",
        property_type="industrial",
        included_metrics=("capRate", "cashOnCash", "dscr", "ltv", "roi"),
        required_fields=legacy(
            "purchasePrice", "currentNOI", "projectedNOI", "totalInvestment",
            "annualCashFlow", "loanAmount", "interestRate", "loanTerm", "holdingPeriod",
        ),
        optional_fields=legacy("exitCapRate"),
        metadata=PackageMetadata(
            templates=("investmentSummary", "debtAnalysis"),
            minimum_data_threshold=0.9,
            analysis_depth="detailed",
        ),
    ),
    _institutional(
        "industrial", "industrial", "Industrial",
        "Industrial analysis with building functionality and logistics inputs",
        ("clearHeight", "numberOfDockDoors", "powerCapacity", "distanceToHighway"),
        metrics=_INSTITUTIONAL_METRICS + ("clearHeightPremium",),
    ),
    _dcf("industrial", "industrial", "Industrial"),
)

_MULTIFAMILY = (
    _basic("multifamily", "multifamily", "Multifamily"),
    _complete("multifamily", "multifamily", "Multifamily"),
    _institutional(
        "multifamily", "multifamily", "Multifamily",
        "Multifamily analysis with revenue performance and per-unit pricing",
        ("occupancyRate", "monthlyRent", "averageRent"),
        metrics=_COMPLETE_METRICS + ("roi", "equityMultiple", "pricePerUnit", "grm", "annualRent", "egi",
                                         "revenuePerUnit", "rentVsMarket"),
        size_fields=("numberOfUnits",),
    ),
    _dcf("multifamily", "multifamily", "Multifamily"),
)

_MIXED_USE = (
    _basic("mixed", "mixed-use", "Mixed-Use"),
    _complete("mixed", "mixed-use", "Mixed-Use"),
    _institutional(
        "mixed", "mixed-use", "Mixed-Use",
        "Mixed-use analysis across residential and commercial components",
        ("propertyType",),
    ),
    _dcf("mixed", "mixed-use", "Mixed-Use"),
)

PACKAGE_CATALOG: Mapping[str, tuple[CalculationPackage, ...]] = MappingProxyType(
    {
        "office": _OFFICE,
        "retail": _RETAIL,
        "industrial": _INDUSTRIAL,
        "multifamily": _MULTIFAMILY,
        "mixed-use": _MIXED_USE,
    }
)

PACKAGES_BY_ID: Mapping[str, CalculationPackage] = MappingProxyType(
    {pkg.id: pkg for packages in PACKAGE_CATALOG.values() for pkg in packages}
)
