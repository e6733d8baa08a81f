# src/dealscope/analysis/calculator.py
"""
Metric calculation engine.

`calculate` maps (PropertyData, MetricFlags) to a fresh sparse dict with one
key per flagged metric. A value of None means "not computed": a required
input was missing, a denominator was zero or negative, or the IRR solver did
not converge. One metric failing never affects another, and nothing here
raises or returns NaN / Infinity.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Optional

from dealscope.adapters.config import config
from dealscope.analysis import finance
from dealscope.domain.metrics import METRIC_IDS, CalculatedMetrics, MetricFlags
from dealscope.domain.property import PropertyData

MetricFn = Callable[[PropertyData], Optional[float]]

MAX_HOLDING_YEARS = 100


def _positive(v: float | None) -> bool:
    return v is not None and v > 0


def _ratio(numerator: float | None, denominator: float | None) -> float | None:
    if numerator is None or not _positive(denominator):
        return None
    return numerator / denominator


def _pct(numerator: float | None, denominator: float | None) -> float | None:
    r = _ratio(numerator, denominator)
    return None if r is None else r * 100.0


def _debt_service(d: PropertyData) -> float | None:
    if d.loan_amount is None or d.interest_rate is None or d.loan_term is None:
        return None
    return finance.annual_debt_service(d.loan_amount, d.interest_rate, d.loan_term)


def _annual_rent(d: PropertyData) -> float | None:
    if d.monthly_rent is not None:
        return d.monthly_rent * 12.0
    return d.gross_income


def _holding_period(d: PropertyData) -> int | None:
    if d.holding_period is None:
        return None
    n = int(round(d.holding_period))
    # whole years only
    if n < 1 or n > MAX_HOLDING_YEARS or abs(n - d.holding_period) > 1e-9:
        return None
    return n


def _projection(d: PropertyData):
    """Cash-flow series for the hold, or None when the inputs don't support one."""
    n = _holding_period(d)
    if (
        n is None
        or not _positive(d.total_investment)
        or d.annual_cash_flow is None
        or d.current_noi is None
        or d.projected_noi is None
    ):
        return None
    exit_cap = d.exit_cap_rate if d.exit_cap_rate is not None else config.DEFAULT_EXIT_CAP_RATE
    reversion = finance.reversion_value(d.total_investment, d.current_noi, d.projected_noi, exit_cap)
    if reversion is None:
        return None
    return finance.cash_flow_series(d.total_investment, d.annual_cash_flow, n, reversion)


# --- per-metric formulas -----------------------------------------------------


def cap_rate(d: PropertyData) -> float | None:
    return _pct(d.current_noi, d.purchase_price)


def cash_on_cash(d: PropertyData) -> float | None:
    return _pct(d.annual_cash_flow, d.total_investment)


def dscr(d: PropertyData) -> float | None:
    return _ratio(d.current_noi, _debt_service(d))


def ltv(d: PropertyData) -> float | None:
    if d.loan_amount is None or d.loan_amount < 0:
        return None
    return _pct(d.loan_amount, d.purchase_price)


def grm(d: PropertyData) -> float | None:
    if d.purchase_price is None or d.purchase_price <= 0:
        return None
    return _ratio(d.purchase_price, _annual_rent(d))


def annual_rent(d: PropertyData) -> float | None:
    rent = _annual_rent(d)
    if rent is None or rent < 0:
        return None
    return rent


def price_per_sf(d: PropertyData) -> float | None:
    if d.purchase_price is None or d.purchase_price <= 0:
        return None
    area = d.square_footage or d.rentable_square_feet or d.gross_leasable_area
    return _ratio(d.purchase_price, area)


def price_per_unit(d: PropertyData) -> float | None:
    if d.purchase_price is None or d.purchase_price <= 0:
        return None
    return _ratio(d.purchase_price, d.number_of_units)


def egi(d: PropertyData) -> float | None:
    if d.gross_income is None or d.occupancy_rate is None:
        return None
    if not 0 <= d.occupancy_rate <= 100:
        return None
    return d.gross_income * d.occupancy_rate / 100.0


def breakeven(d: PropertyData) -> float | None:
    ds = _debt_service(d)
    if ds is None or d.operating_expenses is None or d.operating_expenses < 0:
        return None
    return _pct(d.operating_expenses + ds, d.gross_income)


def roi(d: PropertyData) -> float | None:
    flows = _projection(d)
    if flows is None:
        return None
    # total distributions net of the returned principal
    gain = float(flows[1:].sum()) - d.total_investment
    return _pct(gain, d.total_investment)


def irr(d: PropertyData) -> float | None:
    flows = _projection(d)
    if flows is None:
        return None
    rate = finance.irr(flows)
    return None if rate is None else rate * 100.0


def npv(d: PropertyData) -> float | None:
    flows = _projection(d)
    if flows is None or d.discount_rate is None or d.discount_rate <= -100:
        return None
    return finance.npv(d.discount_rate / 100.0, flows)


def equity_multiple(d: PropertyData) -> float | None:
    flows = _projection(d)
    if flows is None:
        return None
    return finance.equity_multiple(flows)


def walt(d: PropertyData) -> float | None:
    """
    Sum(rent x remaining term) / Sum(rent), in years.

    Every roster entry needs a rent and a term; one incomplete tenant makes
    the whole figure not computed.
    """
    if not d.tenants:
        return None
    rows: list[tuple[float, float]] = []
    for t in d.tenants:
        if t.annual_rent is None or t.annual_rent < 0:
            return None
        if t.remaining_lease_term is None or t.remaining_lease_term < 0:
            return None
        rows.append((t.annual_rent, t.remaining_lease_term))
    total_rent = sum(rent for rent, _ in rows)
    if total_rent <= 0:
        return None
    return sum(rent * term for rent, term in rows) / total_rent


def sales_per_sf(d: PropertyData) -> float | None:
    """Average of each tenant's reported sales / tenant square footage."""
    if not d.tenants:
        return None
    per_tenant: list[float] = []
    for t in d.tenants:
        if t.reported_sales is None or t.reported_sales < 0:
            return None
        ratio = _ratio(t.reported_sales, t.square_footage)
        if ratio is None:
            return None
        per_tenant.append(ratio)
    return sum(per_tenant) / len(per_tenant)


@dataclass(frozen=True)
class ClearHeightBand:
    category: str
    estimated_premium: str
    premium_pct: float  # midpoint of the estimated range


# (minimum clear height in feet, band), tallest first
CLEAR_HEIGHT_BANDS: tuple[tuple[float, ClearHeightBand], ...] = (
    (36.0, ClearHeightBand("Modern Spec (36ft+)", "15-25% premium", 20.0)),
    (28.0, ClearHeightBand("Standard Modern (28-35ft)", "Market rate", 0.0)),
    (24.0, ClearHeightBand("Older Generation (24-27ft)", "10-20% discount", -15.0)),
    (0.0, ClearHeightBand("Functionally Obsolete (<24ft)", "25-40% discount", -32.5)),
)


def clear_height_band(clear_height: float | None) -> ClearHeightBand | None:
    if clear_height is None or clear_height <= 0:
        return None
    for floor, band in CLEAR_HEIGHT_BANDS:
        if clear_height >= floor:
            return band
    return None


def clear_height_premium(d: PropertyData) -> float | None:
    band = clear_height_band(d.clear_height)
    return None if band is None else band.premium_pct


def revenue_per_unit(d: PropertyData) -> float | None:
    if d.monthly_rent is None or d.monthly_rent < 0:
        return None
    return _ratio(d.monthly_rent, d.number_of_units)


def rent_vs_market(d: PropertyData) -> float | None:
    """Per-unit rent relative to the market average rent, in percent."""
    per_unit = revenue_per_unit(d)
    if per_unit is None or not _positive(d.average_rent):
        return None
    return (per_unit - d.average_rent) / d.average_rent * 100.0


METRIC_FUNCTIONS: Mapping[str, MetricFn] = {
    "capRate": cap_rate,
    "cashOnCash": cash_on_cash,
    "dscr": dscr,
    "ltv": ltv,
    "grm": grm,
    "annualRent": annual_rent,
    "pricePerSF": price_per_sf,
    "pricePerUnit": price_per_unit,
    "egi": egi,
    "breakeven": breakeven,
    "roi": roi,
    "irr": irr,
    "npv": npv,
    "equityMultiple": equity_multiple,
    "walt": walt,
    "salesPerSF": sales_per_sf,
    "clearHeightPremium": clear_height_premium,
    "revenuePerUnit": revenue_per_unit,
    "rentVsMarket": rent_vs_market,
}


def _finite_or_none(v: Any) -> float | None:
    if v is None:
        return None
    try:
        f = float(v)
    except (TypeError, ValueError, OverflowError):
        return None
    return f if math.isfinite(f) else None


def calculate(
    inputs: PropertyData | Mapping[str, Any],
    flags: MetricFlags | Mapping[str, Any] | None,
) -> CalculatedMetrics:
    """
    Compute every flagged metric. Keys in the result are exactly the flagged
    metric ids (declaration order); values are floats or None. A record that
    cannot be read at all yields None for every flagged metric.
    """
    wanted = set(MetricFlags.coerce(flags).enabled())
    if isinstance(inputs, PropertyData):
        data = inputs
    else:
        try:
            data = PropertyData.model_validate(dict(inputs))
        except (TypeError, ValueError):
            # unreadable record (pydantic ValidationError is a ValueError)
            return {m: None for m in METRIC_IDS if m in wanted}

    out: CalculatedMetrics = {}
    for metric_id in METRIC_IDS:
        if metric_id not in wanted:
            continue
        fn = METRIC_FUNCTIONS[metric_id]
        try:
            value = fn(data)
        except (ArithmeticError, ValueError):
            value = None
        out[metric_id] = _finite_or_none(value)
    return out
