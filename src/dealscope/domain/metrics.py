from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError
from pydantic.alias_generators import to_camel

# Declaration order matters: resolvers and reports walk metrics in this order.
METRIC_IDS: tuple[str, ...] = (
    "capRate",
    "cashOnCash",
    "dscr",
    "ltv",
    "grm",
    "annualRent",
    "pricePerSF",
    "pricePerUnit",
    "egi",
    "breakeven",
    "roi",
    "irr",
    "npv",
    "equityMultiple",
    "walt",
    "salesPerSF",
    "clearHeightPremium",
    "revenuePerUnit",
    "rentVsMarket",
)

_BOOL = TypeAdapter(bool)


def _as_flag(value: Any) -> bool:
    """Read "true"/"false"/1/0 style values. Anything unreadable is off."""
    try:
        return _BOOL.validate_python(value)
    except ValidationError:
        return False


ValueKind = Literal["percentage", "currency", "ratio", "years"]

# metric id -> computed value, or None for "could not compute"
CalculatedMetrics = dict[str, Optional[float]]


@dataclass(frozen=True)
class MetricInfo:
    metric_id: str
    name: str
    category: str
    description: str
    kind: ValueKind
    required_fields: tuple[str, ...]


class MetricFlags(BaseModel):
    """
    Which metrics the user asked for. Unknown keys are ignored so that a
    client sending flags for metrics this build does not know stays valid.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    cap_rate: bool = False
    cash_on_cash: bool = False
    dscr: bool = False
    ltv: bool = False
    grm: bool = False
    annual_rent: bool = False
    price_per_sf: bool = Field(default=False, alias="pricePerSF")
    price_per_unit: bool = False
    egi: bool = False
    breakeven: bool = False
    roi: bool = False
    irr: bool = False
    npv: bool = False
    equity_multiple: bool = False
    walt: bool = False
    sales_per_sf: bool = Field(default=False, alias="salesPerSF")
    clear_height_premium: bool = False
    revenue_per_unit: bool = False
    rent_vs_market: bool = False

    def enabled(self) -> list[str]:
        """Metric ids flagged true, in declaration order."""
        dumped = self.model_dump(by_alias=True)
        return [m for m in METRIC_IDS if dumped.get(m)]

    @classmethod
    def of(cls, metric_ids: Iterable[str]) -> "MetricFlags":
        wanted = set(metric_ids)
        return cls.model_validate({m: True for m in METRIC_IDS if m in wanted})

    @classmethod
    def coerce(cls, flags: Union["MetricFlags", Mapping[str, Any], None]) -> "MetricFlags":
        if flags is None:
            return cls()
        if isinstance(flags, MetricFlags):
            return flags
        return cls.model_validate({k: _as_flag(v) for k, v in flags.items()})
