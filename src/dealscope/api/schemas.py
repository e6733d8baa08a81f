# src/dealscope/api/schemas.py
from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from dealscope.domain.fields import FieldSpec
from dealscope.domain.metrics import MetricFlags
from dealscope.domain.property import PropertyData


class _Camel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# --------------------------------------------
# Catalog
# --------------------------------------------


class MetricItem(_Camel):
    metric_id: str
    name: str
    category: str
    description: str
    kind: str
    required_fields: list[str]


class PackageItem(_Camel):
    id: str
    name: str
    description: str
    category: str
    property_type: str
    included_metrics: list[str]
    analysis_depth: str
    minimum_data_threshold: float


class FieldsResponse(_Camel):
    required: list[FieldSpec] = Field(default_factory=list)
    optional: list[FieldSpec] = Field(default_factory=list)


class FieldsForMetricsRequest(_Camel):
    metrics: list[str] = Field(default_factory=list)


class FieldsForMetricsResponse(_Camel):
    fields: list[str]


# --------------------------------------------
# Calculate / assess
# --------------------------------------------


class CalculateRequest(_Camel):
    """
    Property figures plus the metric selection.

    `inputs` stays permissive: property-type extension fields are kept.
    """

    inputs: PropertyData
    flags: MetricFlags = Field(default_factory=MetricFlags)


class CalculateResponse(_Camel):
    metrics: dict[str, Optional[float]]


class AssessRequest(_Camel):
    metrics: dict[str, Optional[float]]
    flags: MetricFlags = Field(default_factory=MetricFlags)


# --------------------------------------------
# Analyze (full pipeline)
# --------------------------------------------


class AnalyzeRequest(_Camel):
    """
    Typed request for /analyze.

    `inputs` is passed through the lenient payload preparation, so strings
    like "$1,200,000" or "6.5%" are accepted.
    """

    inputs: dict[str, Any]
    package_id: str | None = None
    flags: dict[str, bool] | None = None


class AnalyzeResponse(_Camel):
    """Permissive: the analyzer returns a rich dict that may grow."""

    model_config = ConfigDict(extra="allow")

    property_type: str | None = None
    package_id: str | None = None
    metrics: dict[str, Optional[float]]
    formatted: dict[str, str]
    assessment: dict[str, Any]
    missing_fields: list[str]
    validation_errors: dict[str, list[str]]
    insights: dict[str, str] = {}


class RecommendationItem(_Camel):
    package_id: str
    name: str
    description: str
    match_score: int
