# src/dealscope/catalog/dependencies.py
"""
Static metric -> input field dependency table.

Every other catalog piece (packages, resolver, calculator guards) reads from
here, so a metric's inputs are declared exactly once. Field names use the
camelCase wire identifiers of PropertyData.
"""
from __future__ import annotations

from types import MappingProxyType
from typing import Mapping

from dealscope.domain.metrics import METRIC_IDS, MetricInfo


def _info(metric_id, name, category, description, kind, *fields) -> MetricInfo:
    return MetricInfo(
        metric_id=metric_id,
        name=name,
        category=category,
        description=description,
        kind=kind,
        required_fields=tuple(fields),
    )


_ENTRIES = (
    # Basic
    _info(
        "capRate", "Cap Rate", "Basic",
        "Annual return on the purchase price from net operating income",
        "percentage", "purchasePrice", "currentNOI",
    ),
    _info(
        "cashOnCash", "Cash-on-Cash Return", "Basic",
        "Annual cash flow relative to the cash actually invested",
        "percentage", "totalInvestment", "annualCashFlow",
    ),
    # Debt
    _info(
        "dscr", "Debt Service Coverage Ratio", "Debt",
        "Ability to cover debt payments with property income",
        "ratio", "currentNOI", "loanAmount", "interestRate", "loanTerm",
    ),
    _info(
        "ltv", "Loan-to-Value Ratio", "Debt",
        "Loan amount relative to purchase price",
        "percentage", "loanAmount", "purchasePrice",
    ),
    # Multifamily / income multiples
    _info(
        "grm", "Gross Rent Multiplier", "Multifamily",
        "Purchase price relative to annual gross rent",
        "ratio", "purchasePrice", "monthlyRent",
    ),
    _info(
        "annualRent", "Annual Rent", "Multifamily",
        "Monthly rent annualized",
        "currency", "monthlyRent",
    ),
    # Property
    _info(
        "pricePerSF", "Price per Square Foot", "Property",
        "Purchase price per square foot of building area",
        "currency", "purchasePrice", "squareFootage",
    ),
    _info(
        "pricePerUnit", "Price per Unit", "Multifamily",
        "Purchase price per unit",
        "currency", "purchasePrice", "numberOfUnits",
    ),
    _info(
        "egi", "Effective Gross Income", "Multifamily",
        "Gross income adjusted for occupancy",
        "currency", "grossIncome", "occupancyRate",
    ),
    # Advanced
    _info(
        "breakeven", "Breakeven Occupancy", "Advanced",
        "Share of gross income needed to cover expenses and debt service",
        "percentage", "operatingExpenses", "grossIncome", "loanAmount", "interestRate", "loanTerm",
    ),
    _info(
        "roi", "Return on Investment", "Advanced",
        "Total cash flow plus appreciation over the hold, relative to investment",
        "percentage", "totalInvestment", "annualCashFlow", "currentNOI", "projectedNOI", "holdingPeriod",
    ),
    _info(
        "irr", "Internal Rate of Return", "Advanced",
        "Discount rate that zeroes the NPV of the projected cash flows",
        "percentage", "totalInvestment", "annualCashFlow", "currentNOI", "projectedNOI", "holdingPeriod",
    ),
    _info(
        "npv", "Net Present Value", "Advanced",
        "Projected cash flows discounted at the investor's required return",
        "currency", "totalInvestment", "annualCashFlow", "currentNOI", "projectedNOI", "holdingPeriod",
        "discountRate",
    ),
    _info(
        "equityMultiple", "Equity Multiple", "Advanced",
        "Total distributions over the hold divided by equity invested",
        "ratio", "totalInvestment", "annualCashFlow", "currentNOI", "projectedNOI", "holdingPeriod",
    ),
    # Lease
    _info(
        "walt", "Weighted Average Lease Term", "Lease",
        "Remaining lease term weighted by each tenant's annual rent",
        "years", "tenants",
    ),
    # Retail
    _info(
        "salesPerSF", "Tenant Sales per SF", "Retail",
        "Average of each tenant's reported annual sales over its square footage",
        "currency", "tenants",
    ),
    # Industrial
    _info(
        "clearHeightPremium", "Clear Height Premium", "Industrial",
        "Estimated value premium or discount implied by the building's clear height",
        "percentage", "clearHeight",
    ),
    # Multifamily
    _info(
        "revenuePerUnit", "Revenue per Unit", "Multifamily",
        "Monthly rental income per unit",
        "currency", "monthlyRent", "numberOfUnits",
    ),
    _info(
        "rentVsMarket", "Rent vs Market", "Multifamily",
        "Per-unit monthly rent above (+) or below (-) the market average rent",
        "percentage", "monthlyRent", "numberOfUnits", "averageRent",
    ),
)

if tuple(e.metric_id for e in _ENTRIES) != METRIC_IDS:
    raise RuntimeError("metric table out of sync with METRIC_IDS")

METRIC_CATALOG: Mapping[str, MetricInfo] = MappingProxyType({e.metric_id: e for e in _ENTRIES})

METRIC_DEPENDENCIES: Mapping[str, tuple[str, ...]] = MappingProxyType(
    {e.metric_id: e.required_fields for e in _ENTRIES}
)


def metric_info(metric_id: str) -> MetricInfo | None:
    return METRIC_CATALOG.get(metric_id)
