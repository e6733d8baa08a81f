# src/dealscope/analysis/finance.py
from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

from dealscope.adapters.config import config


@dataclass(frozen=True)
class SolverConfig:
    max_iterations: int
    tolerance: float
    lower_bound: float
    upper_bound: float


DEFAULT_SOLVER = SolverConfig(
    max_iterations=config.IRR_MAX_ITERATIONS,
    tolerance=config.IRR_TOLERANCE,
    lower_bound=config.IRR_LOWER_BOUND,
    upper_bound=config.IRR_UPPER_BOUND,
)


def _monthly_mortgage_payment(principal: float, annual_rate_pct: float, years: float) -> float:
    """
    Standard fixed-rate amortization formula:
    M = P * [ r(1+r)^n / ((1+r)^n - 1) ]
    P = loan principal
    r = monthly interest rate
    n = number of payments (months)
    """
    r = annual_rate_pct / 100.0 / 12.0
    n = years * 12

    if r == 0:
        return principal / n

    growth = (1 + r) ** n
    return principal * (r * growth) / (growth - 1)


def annual_debt_service(loan_amount: float, annual_rate_pct: float, term_years: float) -> float | None:
    """
    Twelve amortizing payments. None when the loan cannot be amortized
    (no principal, non-positive term, negative rate).
    """
    if loan_amount <= 0 or term_years <= 0 or annual_rate_pct < 0:
        return None
    payment = _monthly_mortgage_payment(loan_amount, annual_rate_pct, term_years)
    ds = payment * 12.0
    if not math.isfinite(ds) or ds <= 0:
        return None
    return ds


def reversion_value(
    total_investment: float,
    current_noi: float,
    projected_noi: float,
    exit_cap_rate_pct: float,
) -> float | None:
    """
    Equity back at sale: the original investment plus the value created by
    NOI growth, capitalized at the exit cap rate.
    """
    if exit_cap_rate_pct <= 0:
        return None
    appreciation = (projected_noi - current_noi) / (exit_cap_rate_pct / 100.0)
    return total_investment + appreciation


def cash_flow_series(
    total_investment: float,
    annual_cash_flow: float,
    holding_period: int,
    reversion: float,
) -> np.ndarray:
    """
    Year 0 outflow, level annual cash flow for years 1..N, reversion on top
    of year N.
    """
    flows = np.full(holding_period + 1, float(annual_cash_flow))
    flows[0] = -float(total_investment)
    flows[-1] += reversion
    return flows


def npv(rate: float, cash_flows: np.ndarray) -> float:
    """NPV with the first flow at t=0. `rate` is a decimal (0.08 for 8%)."""
    flows = np.asarray(cash_flows, dtype=float)
    periods = np.arange(flows.shape[0], dtype=float)
    with np.errstate(over="ignore", divide="ignore", invalid="ignore"):
        value = float(np.sum(flows / (1.0 + rate) ** periods))
    return value


def irr(cash_flows: np.ndarray, solver: SolverConfig = DEFAULT_SOLVER) -> float | None:
    """
    Bisection on the discount rate over [lower_bound, upper_bound].

    Returns the decimal rate, or None when the bracket holds no sign change,
    NPV is not finite at a probe point, or the interval has not shrunk below
    `tolerance` within `max_iterations`.
    """
    flows = np.asarray(cash_flows, dtype=float)
    if flows.size < 2 or not np.all(np.isfinite(flows)):
        return None
    if not (np.any(flows > 0) and np.any(flows < 0)):
        return None

    lo, hi = solver.lower_bound, solver.upper_bound
    f_lo, f_hi = npv(lo, flows), npv(hi, flows)
    if not (math.isfinite(f_lo) and math.isfinite(f_hi)):
        return None
    if f_lo == 0.0:
        return lo
    if f_hi == 0.0:
        return hi
    if (f_lo > 0) == (f_hi > 0):
        return None

    for _ in range(solver.max_iterations):
        mid = (lo + hi) / 2.0
        f_mid = npv(mid, flows)
        if not math.isfinite(f_mid):
            return None
        if f_mid == 0.0 or (hi - lo) / 2.0 < solver.tolerance:
            return mid
        if (f_mid > 0) == (f_lo > 0):
            lo, f_lo = mid, f_mid
        else:
            hi = mid
    return None


def equity_multiple(cash_flows: np.ndarray) -> float | None:
    """
    Net distributions over years 1..N divided by the year-0 investment.
    Negative operating years reduce the total rather than count as equity.
    """
    flows = np.asarray(cash_flows, dtype=float)
    if flows.size < 2:
        return None
    invested = -float(flows[0])
    if invested <= 0:
        return None
    return float(np.sum(flows[1:])) / invested
