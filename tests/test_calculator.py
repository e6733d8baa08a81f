import json

import pytest

from dealscope.analysis.calculator import calculate
from dealscope.analysis.finance import annual_debt_service
from dealscope.domain.metrics import METRIC_IDS, MetricFlags
from fixtures.properties import dcf_deal, leveraged_office, multifamily_partial, office_basic, rent_roll


def test_cap_rate_example():
    out = calculate({"purchasePrice": 1_000_000, "currentNOI": 80_000}, {"capRate": True})
    assert out == {"capRate": pytest.approx(8.0)}


def test_cash_on_cash_example():
    out = calculate({"annualCashFlow": 24_000, "totalInvestment": 200_000}, {"cashOnCash": True})
    assert out["cashOnCash"] == pytest.approx(12.0)


def test_grm_and_annual_rent_example():
    out = calculate(
        {"purchasePrice": 1_200_000, "monthlyRent": 10_000},
        {"grm": True, "annualRent": True},
    )
    assert out["annualRent"] == pytest.approx(120_000)
    assert out["grm"] == pytest.approx(10.0)


def test_grm_falls_back_to_gross_income():
    out = calculate({"purchasePrice": 1_200_000, "grossIncome": 150_000}, {"grm": True})
    assert out["grm"] == pytest.approx(8.0)


def test_dscr_is_deterministic():
    inputs = leveraged_office()
    flags = {"dscr": True}
    first = calculate(inputs, flags)["dscr"]
    second = calculate(inputs, flags)["dscr"]

    assert first == second
    assert first == pytest.approx(150_000 / annual_debt_service(1_000_000, 6, 25))
    assert first == pytest.approx(1.94, abs=0.01)


def test_keys_are_exactly_the_flagged_metrics():
    out = calculate(leveraged_office(), {"capRate": True, "ltv": True, "walt": False})
    assert list(out) == ["capRate", "ltv"]


def test_no_flags_means_empty_result():
    assert calculate(office_basic(), None) == {}
    assert calculate(office_basic(), MetricFlags()) == {}


def test_unknown_flag_keys_are_ignored():
    out = calculate(office_basic(), {"capRate": True, "moonPhase": True})
    assert list(out) == ["capRate"]


def test_missing_input_is_not_computed_and_isolated():
    out = calculate({"purchasePrice": 1_000_000, "loanAmount": 700_000}, {"capRate": True, "ltv": True})
    assert out["capRate"] is None
    assert out["ltv"] == pytest.approx(70.0)


@pytest.mark.parametrize("price", [0, -5, None])
def test_bad_price_is_not_computed(price):
    out = calculate(
        {"purchasePrice": price, "currentNOI": 80_000, "squareFootage": 1_000, "numberOfUnits": 4},
        {"capRate": True, "pricePerSF": True, "pricePerUnit": True},
    )
    assert out == {"capRate": None, "pricePerSF": None, "pricePerUnit": None}


def test_price_per_sf_falls_back_to_rentable_area():
    out = calculate({"purchasePrice": 1_000_000, "rentableSquareFeet": 10_000}, {"pricePerSF": True})
    assert out["pricePerSF"] == pytest.approx(100.0)


def test_price_per_unit():
    out = calculate(multifamily_partial(), {"pricePerUnit": True})
    assert out["pricePerUnit"] == pytest.approx(100_000)


def test_egi_requires_occupancy_in_range():
    assert calculate({"grossIncome": 200_000, "occupancyRate": 95}, {"egi": True})["egi"] == pytest.approx(190_000)
    assert calculate({"grossIncome": 200_000, "occupancyRate": 120}, {"egi": True})["egi"] is None


def test_breakeven_occupancy():
    ds = annual_debt_service(1_000_000, 6, 25)
    out = calculate(leveraged_office(), {"breakeven": True})
    assert out["breakeven"] == pytest.approx((50_000 + ds) / 200_000 * 100)


def test_zero_rate_loan_still_has_debt_service():
    inputs = leveraged_office() | {"interestRate": 0, "loanTerm": 10}
    out = calculate(inputs, {"dscr": True})
    assert out["dscr"] == pytest.approx(150_000 / 100_000)


def test_projection_metrics():
    out = calculate(dcf_deal(), {"roi": True, "irr": True, "npv": True, "equityMultiple": True})

    # 4 x 80k + 1.205M terminal year on 1M in
    assert out["roi"] == pytest.approx(52.5)
    assert out["equityMultiple"] == pytest.approx(1.525)
    assert 10.0 < out["irr"] < 10.1

    flows = [-1_000_000] + [80_000] * 4 + [80_000 + 1_125_000]
    expected_npv = sum(cf / 1.10**t for t, cf in enumerate(flows))
    assert out["npv"] == pytest.approx(expected_npv)


def test_exit_cap_defaults_when_missing():
    inputs = dcf_deal()
    del inputs["exitCapRate"]
    # default exit cap is 8%, same as the fixture
    assert calculate(inputs, {"roi": True})["roi"] == pytest.approx(52.5)


@pytest.mark.parametrize("hold", [0, -3, 5.5, 101])
def test_invalid_holding_period_is_not_computed(hold):
    inputs = dcf_deal() | {"holdingPeriod": hold}
    out = calculate(inputs, {"roi": True, "irr": True, "npv": True, "equityMultiple": True})
    assert set(out.values()) == {None}


def test_irr_without_sign_change_is_not_computed():
    inputs = dcf_deal() | {"annualCashFlow": -200_000, "projectedNOI": 0, "currentNOI": 100_000}
    out = calculate(inputs, {"irr": True})
    assert out["irr"] is None


def test_walt():
    out = calculate({"tenants": rent_roll()}, {"walt": True})
    # (300k * 10 + 100k * 5) / 400k
    assert out["walt"] == pytest.approx(8.75)


def test_walt_empty_roster_is_not_computed():
    assert calculate({"tenants": []}, {"walt": True})["walt"] is None
    assert calculate({}, {"walt": True})["walt"] is None


def test_string_inputs_are_read_leniently():
    out = calculate({"purchasePrice": "$1,000,000", "currentNOI": "80,000"}, {"capRate": True})
    assert out["capRate"] == pytest.approx(8.0)


def test_result_is_a_fresh_dict():
    flags = {"capRate": True}
    a = calculate(office_basic(), flags)
    a["capRate"] = 0.0
    b = calculate(office_basic(), flags)
    assert b["capRate"] == pytest.approx(8.0)


def test_json_round_trip_keeps_none_distinct_from_zero():
    out = calculate({"purchasePrice": 1_000_000, "loanAmount": 0}, {"capRate": True, "ltv": True})
    assert out == {"capRate": None, "ltv": 0.0}

    back = json.loads(json.dumps(out))
    assert back["capRate"] is None
    assert back["ltv"] == 0
    assert back["ltv"] is not None


def test_all_metrics_on_full_payload():
    payload = leveraged_office() | dcf_deal() | {"purchasePrice": 1_000_000, "tenants": rent_roll()}
    out = calculate(payload, MetricFlags.of(METRIC_IDS))
    assert list(out) == list(METRIC_IDS)


def test_walt_partial_roster_is_not_computed():
    roster = rent_roll() + [{"tenantName": "Pop-up", "annualRent": 50_000}]
    assert calculate({"tenants": roster}, {"walt": True})["walt"] is None

    no_rent = rent_roll() + [{"tenantName": "Kiosk", "remainingLeaseTerm": 3}]
    assert calculate({"tenants": no_rent}, {"walt": True})["walt"] is None


def test_walt_negative_term_is_not_computed():
    roster = rent_roll()
    roster[1]["remainingLeaseTerm"] = -2
    assert calculate({"tenants": roster}, {"walt": True})["walt"] is None


@pytest.mark.parametrize(
    "inputs",
    [
        {"purchasePrice": 1_000_000, "currentNOI": 80_000, "tenants": [{"tenantName": 7}]},
        {"purchasePrice": 1_000_000, "currentNOI": 80_000, "tenants": "not a roster"},
        {"purchasePrice": 1_000_000, "currentNOI": 80_000, "propertyType": ["office"]},
    ],
)
def test_unreadable_record_is_not_computed(inputs):
    out = calculate(inputs, {"capRate": True, "walt": True})
    assert out == {"capRate": None, "walt": None}


@pytest.mark.parametrize("off", ["false", "False", "0", "no", "off", 0, False, None, "maybe"])
def test_string_false_flags_are_off(off):
    assert calculate(office_basic(), {"capRate": off}) == {}


@pytest.mark.parametrize("on", ["true", "1", "yes", 1, True])
def test_string_true_flags_are_on(on):
    assert calculate(office_basic(), {"capRate": on}) == {"capRate": pytest.approx(8.0)}


def test_equity_multiple_with_negative_cash_flow():
    # NOI 100k -> 140k at 8% exit: reversion 1M + 500k = 1.5M
    inputs = {
        "totalInvestment": 1_000_000,
        "annualCashFlow": -10_000,
        "currentNOI": 100_000,
        "projectedNOI": 140_000,
        "holdingPeriod": 5,
        "exitCapRate": 8,
    }
    out = calculate(inputs, {"equityMultiple": True, "roi": True})
    # (5 x -10k + 1.5M) / 1M
    assert out["equityMultiple"] == pytest.approx(1.45)
    assert out["roi"] == pytest.approx(45.0)


def test_sales_per_sf_averages_tenants():
    roster = [
        {"tenantName": "Grocer", "annualRent": 400_000, "remainingLeaseTerm": 12,
         "reportedSales": 20_000_000, "squareFootage": 40_000},
        {"tenantName": "Shoes", "annualRent": 90_000, "remainingLeaseTerm": 4,
         "reportedSales": 1_500_000, "squareFootage": 5_000},
    ]
    out = calculate({"tenants": roster}, {"salesPerSF": True})
    # (500 + 300) / 2
    assert out["salesPerSF"] == pytest.approx(400.0)


def test_sales_per_sf_needs_sales_and_area_for_every_tenant():
    roster = [
        {"tenantName": "Grocer", "reportedSales": 20_000_000, "squareFootage": 40_000},
        {"tenantName": "Shoes", "reportedSales": 1_500_000},
    ]
    assert calculate({"tenants": roster}, {"salesPerSF": True})["salesPerSF"] is None
    assert calculate({"tenants": rent_roll()}, {"salesPerSF": True})["salesPerSF"] is None
    assert calculate({"tenants": []}, {"salesPerSF": True})["salesPerSF"] is None


@pytest.mark.parametrize(
    "height, premium",
    [(40, 20.0), (36, 20.0), (30, 0.0), (28, 0.0), (25, -15.0), (24, -15.0), (20, -32.5)],
)
def test_clear_height_premium_bands(height, premium):
    out = calculate({"clearHeight": height}, {"clearHeightPremium": True})
    assert out["clearHeightPremium"] == pytest.approx(premium)


@pytest.mark.parametrize("height", [None, 0, -4])
def test_clear_height_premium_needs_positive_height(height):
    assert calculate({"clearHeight": height}, {"clearHeightPremium": True})["clearHeightPremium"] is None


def test_revenue_per_unit_and_rent_vs_market():
    inputs = multifamily_partial() | {"averageRent": 800}
    out = calculate(inputs, {"revenuePerUnit": True, "rentVsMarket": True})
    assert out["revenuePerUnit"] == pytest.approx(10_000 / 12)
    assert out["rentVsMarket"] == pytest.approx((10_000 / 12 - 800) / 800 * 100)


def test_rent_vs_market_needs_average_rent():
    out = calculate(multifamily_partial(), {"revenuePerUnit": True, "rentVsMarket": True})
    assert out["revenuePerUnit"] == pytest.approx(833.33, abs=0.01)
    assert out["rentVsMarket"] is None
    assert calculate({"monthlyRent": 10_000, "numberOfUnits": 0}, {"revenuePerUnit": True}) == {"revenuePerUnit": None}
