# dealscope/services/screening.py

from __future__ import annotations

from typing import Any, Dict, List, Mapping

import numpy as np
import pandas as pd
from loguru import logger

from dealscope.analysis.assessment import assess
from dealscope.analysis.calculator import calculate
from dealscope.domain.metrics import MetricFlags
from dealscope.domain.property import PropertyData


def _row_to_payload(row: pd.Series) -> Dict[str, Any]:
    """
    Convert a portfolio CSV row into a PropertyData payload.

    NaN cells mean "not provided"; column names are the camelCase field ids.
    """
    payload: Dict[str, Any] = {}
    for key, value in row.items():
        if isinstance(value, np.generic):
            value = value.item()
        if value is None or (isinstance(value, float) and np.isnan(value)):
            continue
        payload[str(key)] = value
    return payload


def screen_portfolio(
    df: pd.DataFrame,
    flags: MetricFlags | Mapping[str, Any],
    *,
    id_column: str | None = None,
) -> pd.DataFrame:
    """
    Run calculate + assess for every row.

    Returns one row per property with a column per requested metric (NaN where
    not computed), the overall level and the number of scored metrics. Rows
    that cannot be read as property data are kept with overall = "Invalid".
    Raises ValueError when id_column is given but missing from the frame.
    """
    if id_column is not None and id_column not in df.columns:
        raise ValueError(f"id column {id_column!r} not found in portfolio columns: {list(df.columns)}")

    metric_flags = MetricFlags.coerce(flags)
    enabled = metric_flags.enabled()

    records: List[Dict[str, Any]] = []
    n_invalid = 0
    for idx, row in df.iterrows():
        rec: Dict[str, Any] = {"id": row[id_column] if id_column else idx}
        try:
            prop = PropertyData.model_validate(_row_to_payload(row))
        except ValueError as e:
            n_invalid += 1
            logger.warning("Row {} could not be parsed: {}", idx, e)
            rec.update({m: np.nan for m in enabled})
            rec.update({"overall": "Invalid", "scored_metrics": 0})
            records.append(rec)
            continue

        metrics = calculate(prop, metric_flags)
        assessment = assess(metrics, metric_flags)
        rec.update({m: (np.nan if v is None else v) for m, v in metrics.items()})
        rec["overall"] = assessment.overall
        rec["scored_metrics"] = assessment.active_metrics
        records.append(rec)

    logger.info(
        "Screened {} properties ({} invalid) for metrics: {}",
        len(records),
        n_invalid,
        ", ".join(enabled) or "-",
    )

    columns = ["id", *enabled, "overall", "scored_metrics"]
    return pd.DataFrame.from_records(records, columns=columns)


def summarize_screen(screened: pd.DataFrame) -> Dict[str, Any]:
    """Counts by overall level plus per-metric medians, for CLI / report output."""
    metric_cols = [c for c in screened.columns if c not in ("id", "overall", "scored_metrics")]
    medians = {
        c: (None if screened[c].isna().all() else float(screened[c].median()))
        for c in metric_cols
    }
    return {
        "n_properties": int(len(screened)),
        "by_overall": {str(k): int(v) for k, v in screened["overall"].value_counts().items()},
        "median": medians,
    }
