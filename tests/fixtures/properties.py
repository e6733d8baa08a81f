# tests/fixtures/properties.py
"""Sample property payloads shared across tests (camelCase wire form)."""


def office_basic() -> dict:
    """
    1M office, 80k NOI, 200k equity throwing 24k a year.
    Expected: capRate 8.0, cashOnCash 12.0, both Excellent.
    """
    return {
        "propertyType": "office",
        "purchasePrice": 1_000_000,
        "currentNOI": 80_000,
        "totalInvestment": 200_000,
        "annualCashFlow": 24_000,
    }


def leveraged_office() -> dict:
    """Adds a 1M / 6% / 25yr loan and income/expense lines to office_basic."""
    return office_basic() | {
        "currentNOI": 150_000,
        "loanAmount": 1_000_000,
        "interestRate": 6,
        "loanTerm": 25,
        "grossIncome": 200_000,
        "operatingExpenses": 50_000,
    }


def dcf_deal() -> dict:
    """
    5-year hold: 1M in, 80k/yr out, NOI 100k -> 110k, 8% exit cap.
    Reversion = 1M + 10k / 0.08 = 1.125M.
    """
    return {
        "propertyType": "office",
        "totalInvestment": 1_000_000,
        "annualCashFlow": 80_000,
        "currentNOI": 100_000,
        "projectedNOI": 110_000,
        "holdingPeriod": 5,
        "exitCapRate": 8,
        "discountRate": 10,
    }


def rent_roll() -> list[dict]:
    return [
        {"tenantName": "Anchor Co", "annualRent": 300_000, "remainingLeaseTerm": 10, "creditRating": "A"},
        {"tenantName": "Corner Cafe", "annualRent": 100_000, "remainingLeaseTerm": 5, "creditRating": "NR"},
    ]


def multifamily_partial() -> dict:
    return {
        "propertyType": "multifamily",
        "purchasePrice": 1_200_000,
        "monthlyRent": 10_000,
        "numberOfUnits": 12,
        "currentNOI": 84_000,
    }
