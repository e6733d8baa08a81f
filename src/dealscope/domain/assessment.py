from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

# Ordinal levels for a single metric
MetricLevel = Literal["Excellent", "Good", "Fair", "Poor"]

# Overall rating adds the explicit "nothing to score" outcome
AssessmentLevel = Literal["Excellent", "Good", "Fair", "Poor", "Insufficient Data"]

METRIC_LEVELS: tuple[str, ...] = ("Excellent", "Good", "Fair", "Poor")


class DealAssessment(BaseModel):
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    overall: AssessmentLevel
    metric_scores: dict[str, MetricLevel] = Field(default_factory=dict)
    recommendation: str
    active_metrics: int = 0
