import math
from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

# Asset classes with a package catalog
PROPERTY_TYPES: tuple[str, ...] = ("office", "retail", "industrial", "multifamily", "mixed-use")


def _lenient_number(v: Any) -> Any:
    """
    Coerce loosely-typed form values into float or None.

      - 250000 / 250000.0      -> 250000.0
      - "250,000" / "$250,000" -> 250000.0
      - "6.5%"                 -> 6.5   (percent units are kept as-is)
      - "", "n/a", NaN, inf    -> None
    """
    if v is None or isinstance(v, bool):
        return None
    if isinstance(v, (int, float)):
        f = float(v)
        return f if math.isfinite(f) else None
    if isinstance(v, str):
        s = v.strip().replace(",", "").replace("$", "")
        if s.endswith("%"):
            s = s[:-1]
        if not s:
            return None
        try:
            f = float(s)
        except ValueError:
            return None
        return f if math.isfinite(f) else None
    return None


class Tenant(BaseModel):
    """One row of a tenant roster (office / retail rent rolls)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    tenant_name: str | None = None
    annual_rent: float | None = None
    remaining_lease_term: float | None = Field(default=None, description="Years left on the lease")
    credit_rating: str | None = None

    # retail rosters only
    reported_sales: float | None = Field(default=None, description="Annual gross sales")
    square_footage: float | None = None

    @field_validator("annual_rent", "remaining_lease_term", "reported_sales", "square_footage", mode="before")
    @classmethod
    def _numbers(cls, v: Any) -> Any:
        return _lenient_number(v)


class PropertyData(BaseModel):
    """
    Raw property figures as collected by the input form.

    Almost everything is optional: the calculator decides per metric whether
    it has enough to work with. Property-type-specific extension fields
    (numberOfDockDoors, trafficCount, ...) are kept as extras and round-trip untouched.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    property_type: str | None = None
    selected_package: str | None = None

    # pricing / income
    purchase_price: float | None = None
    current_noi: float | None = Field(default=None, alias="currentNOI")
    projected_noi: float | None = Field(default=None, alias="projectedNOI")
    gross_income: float | None = None
    operating_expenses: float | None = None
    annual_cash_flow: float | None = None
    total_investment: float | None = None
    occupancy_rate: float | None = None  # percent, 0-100
    average_rent: float | None = None
    monthly_rent: float | None = None

    # debt
    loan_amount: float | None = None
    interest_rate: float | None = None  # annual, percent
    loan_term: float | None = None  # years

    # projections
    discount_rate: float | None = None  # percent
    holding_period: float | None = None  # years
    exit_cap_rate: float | None = None  # percent

    # physical
    square_footage: float | None = None
    rentable_square_feet: float | None = None
    gross_leasable_area: float | None = None
    number_of_units: float | None = None
    parking_spaces: float | None = None
    clear_height: float | None = None  # feet, industrial

    # repeatable sub-records
    tenants: list[Tenant] | None = None

    @field_validator(
        "purchase_price",
        "current_noi",
        "projected_noi",
        "gross_income",
        "operating_expenses",
        "annual_cash_flow",
        "total_investment",
        "occupancy_rate",
        "average_rent",
        "monthly_rent",
        "loan_amount",
        "interest_rate",
        "loan_term",
        "discount_rate",
        "holding_period",
        "exit_cap_rate",
        "square_footage",
        "rentable_square_feet",
        "gross_leasable_area",
        "number_of_units",
        "parking_spaces",
        "clear_height",
        mode="before",
    )
    @classmethod
    def _numbers(cls, v: Any) -> Any:
        return _lenient_number(v)

    def has_field(self, name: str) -> bool:
        """
        True when the camelCase (or snake_case) field carries a usable value.
        Empty tenant rosters count as missing.
        """
        attr = _ALIAS_TO_ATTR.get(name, name)
        if attr in type(self).model_fields:
            value = getattr(self, attr)
        else:
            value = (self.model_extra or {}).get(name)
        if value is None:
            return False
        if isinstance(value, (list, tuple, dict, str)) and len(value) == 0:
            return False
        return True


_ALIAS_TO_ATTR: dict[str, str] = {
    (info.alias or attr): attr for attr, info in PropertyData.model_fields.items()
}

_ATTR_TO_ALIAS: dict[str, str] = {attr: alias for alias, attr in _ALIAS_TO_ATTR.items()}
_TENANT_ATTR_TO_ALIAS: dict[str, str] = {
    attr: (info.alias or attr) for attr, info in Tenant.model_fields.items()
}


def _rename(item: Mapping[str, Any], names: Mapping[str, str]) -> dict[str, Any]:
    out: dict[str, Any] = {}
    for key, value in item.items():
        wire = names.get(key, key)
        # an explicit camelCase key beats its snake_case twin
        if wire in out and key != wire:
            continue
        out[wire] = value
    return out


def to_wire_keys(payload: Mapping[str, Any]) -> dict[str, Any]:
    """
    Rename snake_case attribute keys ("purchase_price") to their camelCase
    wire names ("purchasePrice"), tenant roster entries included. Unknown
    keys pass through unchanged.
    """
    out = _rename(payload, _ATTR_TO_ALIAS)
    tenants = out.get("tenants")
    if isinstance(tenants, list):
        out["tenants"] = [
            _rename(t, _TENANT_ATTR_TO_ALIAS) if isinstance(t, Mapping) else t for t in tenants
        ]
    return out
