# src/dealscope/api/http.py
from __future__ import annotations

from typing import Any

from fastapi import FastAPI, HTTPException
from pydantic import ValidationError

from dealscope.adapters.logging_utils import get_logger
from dealscope.analysis.assessment import assess
from dealscope.analysis.calculator import calculate
from dealscope.catalog.dependencies import METRIC_CATALOG
from dealscope.catalog.resolver import fields_for, fields_for_metrics, packages_for, recommend_packages
from dealscope.domain.assessment import DealAssessment
from dealscope.domain.property import PropertyData
from dealscope.services.deal_analyzer import analyze_deal
from .schemas import (
    AnalyzeRequest,
    AnalyzeResponse,
    AssessRequest,
    CalculateRequest,
    CalculateResponse,
    FieldsForMetricsRequest,
    FieldsForMetricsResponse,
    FieldsResponse,
    MetricItem,
    PackageItem,
    RecommendationItem,
)

app = FastAPI(title="dealscope")

logger = get_logger(__name__)


# -----------------------------
# Catalog (read-only)
# -----------------------------


@app.get("/metrics", response_model=list[MetricItem])
def list_metrics() -> list[MetricItem]:
    return [
        MetricItem(
            metric_id=info.metric_id,
            name=info.name,
            category=info.category,
            description=info.description,
            kind=info.kind,
            required_fields=list(info.required_fields),
        )
        for info in METRIC_CATALOG.values()
    ]


@app.get("/property-types/{property_type}/packages", response_model=list[PackageItem])
def list_packages(property_type: str) -> list[PackageItem]:
    """Unknown property types return an empty list, not a 404."""
    return [
        PackageItem(
            id=p.id,
            name=p.name,
            description=p.description,
            category=p.category,
            property_type=p.property_type,
            included_metrics=list(p.included_metrics),
            analysis_depth=p.metadata.analysis_depth,
            minimum_data_threshold=p.metadata.minimum_data_threshold,
        )
        for p in packages_for(property_type)
    ]


@app.get("/packages/{package_id}/fields", response_model=FieldsResponse)
def package_fields(package_id: str) -> FieldsResponse:
    pf = fields_for(package_id)
    return FieldsResponse(required=list(pf.required), optional=list(pf.optional))


@app.post("/fields", response_model=FieldsForMetricsResponse)
def fields_for_metric_selection(payload: FieldsForMetricsRequest) -> FieldsForMetricsResponse:
    return FieldsForMetricsResponse(fields=fields_for_metrics(payload.metrics))


# -----------------------------
# Core pipeline
# -----------------------------


@app.post("/calculate", response_model=CalculateResponse)
def calculate_endpoint(payload: CalculateRequest) -> CalculateResponse:
    return CalculateResponse(metrics=calculate(payload.inputs, payload.flags))


@app.post("/assess", response_model=DealAssessment)
def assess_endpoint(payload: AssessRequest) -> DealAssessment:
    return assess(payload.metrics, payload.flags)


@app.post("/analyze", response_model=AnalyzeResponse)
def analyze_endpoint(payload: AnalyzeRequest) -> AnalyzeResponse:
    try:
        result = analyze_deal(
            payload.inputs,
            package_id=payload.package_id,
            flags=payload.flags,
        )
        return AnalyzeResponse(**result)
    except (ValueError, ValidationError) as e:
        logger.warning("analyze_failed", extra={"context": {"error": str(e)}})
        raise HTTPException(status_code=400, detail=str(e)) from e


@app.post("/recommendations", response_model=list[RecommendationItem])
def recommendations_endpoint(payload: dict[str, Any]) -> list[RecommendationItem]:
    try:
        prop = PropertyData.model_validate(payload)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    return [
        RecommendationItem(
            package_id=r.package_id,
            name=r.name,
            description=r.description,
            match_score=r.match_score,
        )
        for r in recommend_packages(prop)
    ]
