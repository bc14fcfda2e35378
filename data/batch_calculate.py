"""Run the health calculation engine over a CSV of profiles.

This module provides:
- parse_profiles_csv(csv_path): returns (row_number, field dict) pairs
- calculate_rows(rows, engine): one flat result dict per input row
- run_batch(csv_path, output_path): reads, calculates and writes a results CSV

Column names match the `Profile` field names. `medical_conditions` holds a
semicolon-separated list of tags; override columns are prefixed with
`override_` (e.g. `override_bmr_formula`). Rows that fail range checks are kept
in the output with their error message instead of being dropped.
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple

import numpy as np
import pandas as pd
from pydantic import ValidationError as PydanticValidationError

from core.exceptions import AppException, InsufficientDataError
from core.logger import get_logger
from schemas.profile_schema import Profile
from services.health_engine import HealthCalculationEngine, health_engine

logger = get_logger("data.batch_calculate")

OVERRIDE_PREFIX = "override_"

RESULT_COLUMNS = [
    "row",
    "status",
    "error",
    "bmr",
    "bmr_formula",
    "tdee",
    "target_calories",
    "water_ml",
    "bmi",
    "bmi_category",
    "protein_g",
    "carbs_g",
    "fat_g",
    "climate_type",
    "population_type",
    "training_level",
    "confidence",
]


def _clean(value: Any) -> Any:
    """Turn pandas NaN cells and numpy scalars into plain Python values."""
    if value is None:
        return None
    if isinstance(value, float) and np.isnan(value):
        return None
    if isinstance(value, np.generic):
        return value.item()
    if isinstance(value, str) and not value.strip():
        return None
    return value


def row_to_fields(row: Dict[str, Any]) -> Dict[str, Any]:
    """Map one CSV row onto `Profile` keyword arguments.

    Empty cells are omitted so the model defaults apply.
    """
    fields: Dict[str, Any] = {}
    overrides: Dict[str, Any] = {}
    for column, raw in row.items():
        value = _clean(raw)
        if value is None:
            continue
        if column.startswith(OVERRIDE_PREFIX):
            overrides[column[len(OVERRIDE_PREFIX):]] = value
        elif column == "medical_conditions":
            fields[column] = tuple(t.strip() for t in str(value).split(";") if t.strip())
        else:
            fields[column] = value
    if overrides:
        fields["overrides"] = overrides
    return fields


def parse_profiles_csv(csv_path: str) -> List[Tuple[int, Dict[str, Any]]]:
    """Read the CSV and return `(row_number, fields)` pairs.

    Row numbers are 1-based and count data rows only.

    Raises:
        InsufficientDataError: If the file contains no data rows.
    """
    logger.info("Parsing profiles CSV: %s", csv_path)
    try:
        df = pd.read_csv(csv_path, encoding="utf-8")
    except pd.errors.EmptyDataError as exc:
        raise InsufficientDataError(f"No profiles found in {csv_path}", minimum_required=1) from exc
    df = df.rename(columns=lambda s: str(s).strip())
    if df.empty:
        raise InsufficientDataError(f"No profiles found in {csv_path}", minimum_required=1)
    return [(index + 1, row_to_fields(record)) for index, record in enumerate(df.to_dict(orient="records"))]


def _result_row(row_number: int, bundle) -> Dict[str, Any]:
    return {
        "row": row_number,
        "status": "ok",
        "error": None,
        "bmr": bundle.bmr.value,
        "bmr_formula": bundle.bmr.formula_or_method,
        "tdee": bundle.tdee.value,
        "target_calories": bundle.target_calories.value,
        "water_ml": bundle.water_ml.value,
        "bmi": bundle.bmi.value,
        "bmi_category": bundle.bmi.category.value,
        "protein_g": bundle.macros.protein_g,
        "carbs_g": bundle.macros.carbs_g,
        "fat_g": bundle.macros.fat_g,
        "climate_type": bundle.context.climate_type.value,
        "population_type": bundle.context.population_type.value,
        "training_level": bundle.training_age.level.value,
        "confidence": bundle.confidence.value,
    }


def _error_row(row_number: int, message: str) -> Dict[str, Any]:
    row = {column: None for column in RESULT_COLUMNS}
    row.update({"row": row_number, "status": "error", "error": message})
    return row


def calculate_rows(
    rows: List[Tuple[int, Dict[str, Any]]],
    engine: Optional[HealthCalculationEngine] = None,
) -> List[Dict[str, Any]]:
    """Calculate a bundle for every parsed row.

    Rows whose values fail model parsing or range checks produce an `error`
    row carrying the message; the batch continues with the next row.
    """
    engine = engine or health_engine
    results = []
    for row_number, fields in rows:
        try:
            profile = Profile(**fields)
            bundle = engine.calculate_all(profile)
        except PydanticValidationError as exc:
            errors = exc.errors()
            location = ".".join(str(part) for part in errors[0]["loc"]) if errors else "row"
            message = f"{location}: {errors[0]['msg']}" if errors else str(exc)
            logger.warning("Row %s rejected: %s", row_number, message)
            results.append(_error_row(row_number, message))
            continue
        except AppException as exc:
            logger.warning("Row %s rejected: %s", row_number, exc.message)
            results.append(_error_row(row_number, exc.message))
            continue
        results.append(_result_row(row_number, bundle))
    return results


def run_batch(
    csv_path: str,
    output_path: str,
    engine: Optional[HealthCalculationEngine] = None,
) -> Dict[str, int]:
    """Calculate every profile in `csv_path` and write the results CSV.

    Returns:
        Dictionary with `total`, `ok` and `errors` row counts.
    """
    results = calculate_rows(parse_profiles_csv(csv_path), engine=engine)
    out = pd.DataFrame(results, columns=RESULT_COLUMNS)
    out.to_csv(output_path, index=False)

    errors = int((out["status"] == "error").sum())
    summary = {"total": len(out), "ok": len(out) - errors, "errors": errors}
    logger.info("Batch finished: %s", summary)
    return summary


if __name__ == "__main__":
    import argparse

    p = argparse.ArgumentParser("Run the health calculation engine over a profiles CSV")
    p.add_argument("csv_path")
    p.add_argument("output_path", nargs="?", default="health_results.csv")
    args = p.parse_args()
    summary = run_batch(args.csv_path, args.output_path)
    print(f"Done: {summary['ok']} ok, {summary['errors']} errors")
