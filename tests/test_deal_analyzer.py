# tests/test_deal_analyzer.py
import pytest

from dealscope.services.deal_analyzer import analyze_deal
from fixtures.properties import dcf_deal, office_basic, rent_roll


def test_analyze_with_package():
    result = analyze_deal(office_basic(), package_id="office-basic")

    assert result["packageId"] == "office-basic"
    assert result["metrics"] == {"capRate": pytest.approx(8.0), "cashOnCash": pytest.approx(12.0)}
    assert result["formatted"] == {"capRate": "8.00%", "cashOnCash": "12.00%"}
    assert result["assessment"]["overall"] == "Excellent"
    assert result["assessment"]["activeMetrics"] == 2
    assert result["missingFields"] == []
    assert result["validationErrors"] == {}


def test_selected_package_in_payload_is_used():
    payload = office_basic() | {"selectedPackage": "office-basic"}
    result = analyze_deal(payload)
    assert result["packageId"] == "office-basic"
    assert list(result["metrics"]) == ["capRate", "cashOnCash"]


def test_explicit_flags_win_over_package():
    payload = office_basic() | {"selectedPackage": "office-basic"}
    result = analyze_deal(payload, flags={"capRate": True})
    assert list(result["metrics"]) == ["capRate"]


def test_string_inputs_are_normalized():
    payload = {
        "propertyType": "office",
        "purchasePrice": "$1,000,000",
        "currentNOI": "80,000",
        "totalInvestment": "200000",
        "annualCashFlow": "24,000",
    }
    result = analyze_deal(payload, package_id="office-basic")
    assert result["metrics"]["capRate"] == pytest.approx(8.0)


def test_missing_inputs_are_reported_not_raised():
    result = analyze_deal({"propertyType": "office", "purchasePrice": 1_000_000}, package_id="office-basic")

    assert result["metrics"] == {"capRate": None, "cashOnCash": None}
    assert result["formatted"] == {"capRate": "N/A", "cashOnCash": "N/A"}
    assert result["assessment"]["overall"] == "Insufficient Data"
    assert result["missingFields"] == ["currentNOI", "totalInvestment", "annualCashFlow"]
    assert "currentNOI" in result["validationErrors"]


def test_ad_hoc_flags_report_missing_dependency_fields():
    result = analyze_deal({"purchasePrice": 1_000_000}, flags={"capRate": True, "ltv": True})
    assert result["packageId"] is None
    assert result["missingFields"] == ["currentNOI", "loanAmount"]


def test_nothing_selected():
    result = analyze_deal(office_basic())
    assert result["metrics"] == {}
    assert result["assessment"]["overall"] == "Insufficient Data"


def test_walt_package():
    payload = {"propertyType": "office", "purchasePrice": 10_000_000, "currentNOI": 700_000, "tenants": rent_roll()}
    result = analyze_deal(payload, package_id="office-walt-enhanced")
    assert result["metrics"]["walt"] == pytest.approx(8.75)
    assert result["assessment"]["metricScores"] == {"capRate": "Good", "walt": "Excellent"}
    assert result["validationErrors"] == {}


def test_dcf_package_validation_messages():
    payload = dcf_deal() | {"holdingPeriod": 45}
    result = analyze_deal(payload, package_id="office-dcf")
    assert result["validationErrors"] == {"holdingPeriod": ["Holding Period must be at most 30"]}


def test_malformed_payload_raises():
    with pytest.raises(ValueError):
        analyze_deal({"purchasePrice": "lots"}, package_id="office-basic")
    with pytest.raises(ValueError):
        analyze_deal("not a dict")  # type: ignore[arg-type]


def test_snake_case_payload_is_complete():
    payload = {
        "property_type": "office",
        "purchase_price": 1_000_000,
        "current_noi": 80_000,
        "total_investment": 200_000,
        "annual_cash_flow": 24_000,
    }
    result = analyze_deal(payload, package_id="office-basic")
    assert result["metrics"] == {"capRate": pytest.approx(8.0), "cashOnCash": pytest.approx(12.0)}
    assert result["missingFields"] == []
    assert result["validationErrors"] == {}


def test_retail_sales_package():
    roster = [
        {"tenantName": "Grocer", "annualRent": 400_000, "remainingLeaseTerm": 12,
         "reportedSales": 20_000_000, "squareFootage": 40_000},
        {"tenantName": "Shoes", "annualRent": 100_000, "remainingLeaseTerm": 2,
         "reportedSales": 1_500_000, "squareFootage": 5_000},
    ]
    payload = {"propertyType": "retail", "purchasePrice": 8_000_000, "currentNOI": 500_000, "tenants": roster}
    result = analyze_deal(payload, package_id="retail-lease-durability")

    assert result["metrics"]["walt"] == pytest.approx(10.0)
    assert result["metrics"]["salesPerSF"] == pytest.approx(400.0)
    assert result["formatted"]["salesPerSF"] == "$400"
    assert result["assessment"]["metricScores"]["salesPerSF"] == "Good"
    assert result["validationErrors"] == {}


def test_industrial_clear_height_insights():
    payload = {"propertyType": "industrial", "purchasePrice": 5_000_000, "currentNOI": 400_000, "clearHeight": 32}
    result = analyze_deal(payload, flags={"capRate": True, "clearHeightPremium": True})

    assert result["metrics"]["clearHeightPremium"] == pytest.approx(0.0)
    assert result["insights"] == {
        "clearHeightCategory": "Standard Modern (28-35ft)",
        "estimatedPremium": "Market rate",
    }


@pytest.mark.parametrize(
    "average_rent, label",
    [(700, "19.0% above market"), (1_000, "16.7% below market"), (820, "At market rate")],
)
def test_multifamily_market_comparison(average_rent, label):
    payload = {"propertyType": "multifamily", "monthlyRent": 10_000, "numberOfUnits": 12, "averageRent": average_rent}
    result = analyze_deal(payload, flags={"revenuePerUnit": True, "rentVsMarket": True})
    assert result["insights"] == {"marketComparison": label}


def test_no_insights_without_inputs():
    assert analyze_deal(office_basic(), package_id="office-basic")["insights"] == {}
