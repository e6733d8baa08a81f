from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from dealscope.domain.fields import FieldSpec

PackageCategory = Literal[
    "Screening",
    "Core",
    "Core-Plus",
    "Value-Add",
    "Financial",
    "Risk",
    "Specialized",
]

AnalysisDepth = Literal["basic", "detailed", "comprehensive", "specialized"]


class PackageMetadata(BaseModel):
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    templates: tuple[str, ...] = ()
    minimum_data_threshold: float = Field(default=1.0, description="0-1 share of required fields")
    analysis_depth: AnalysisDepth = "basic"


class CalculationPackage(BaseModel):
    """A named bundle of metrics plus the inputs needed to compute them."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    id: str
    name: str
    description: str
    category: PackageCategory
    property_type: str
    included_metrics: tuple[str, ...]
    required_fields: tuple[FieldSpec, ...]
    optional_fields: tuple[FieldSpec, ...] = ()
    metadata: PackageMetadata = PackageMetadata()


class PackageFields(BaseModel):
    model_config = ConfigDict(frozen=True)

    required: tuple[FieldSpec, ...] = ()
    optional: tuple[FieldSpec, ...] = ()


class PackageRecommendation(BaseModel):
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    package_id: str
    name: str
    description: str
    match_score: int
