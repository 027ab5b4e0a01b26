from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, List

import pandas as pd

from ..recommendations.models import Camp
from ..store.rows import camp_from_row
from .config import DEFAULT_INGESTION_CONFIG, IngestionConfig

logger = logging.getLogger(__name__)

CANONICAL_COLUMNS: List[str] = [
    "id",
    "name",
    "description",
    "age_min",
    "age_max",
    "price",
    "early_bird_price",
    "early_bird_deadline",
    "capacity",
    "enrolled_count",
    "start_date",
    "end_date",
    "featured",
    "categories",
    "amenities",
    "location",
    "status",
    "created_at",
]

_INT_COLUMNS = ["age_min", "age_max", "capacity", "enrolled_count"]
_FLOAT_COLUMNS = ["price", "early_bird_price"]
_JSON_COLUMNS = ["categories", "camp_category_assignments", "amenities", "organisations"]
_TRUTHY = {"true", "t", "1", "yes"}


def _read_export(path: Path) -> pd.DataFrame:
    # The database export writes a BOM and stores JSON columns as text.
    df = pd.read_csv(path, encoding="utf-8-sig", dtype=str, keep_default_na=False)
    for col in _INT_COLUMNS + _FLOAT_COLUMNS:
        if col in df.columns:
            df[col] = pd.to_numeric(df[col].replace("", pd.NA), errors="coerce")
    if "featured" in df.columns:
        df["featured"] = df["featured"].str.strip().str.lower().isin(_TRUTHY)
    return df


def _parse_json(raw: Any) -> Any:
    if not raw:
        return None
    try:
        return json.loads(raw)
    except (TypeError, ValueError):
        logger.warning("Skipping unparseable JSON cell: %.60s", raw)
        return None


def _to_row(record: dict[str, Any]) -> dict[str, Any]:
    row: dict[str, Any] = {}
    for key, value in record.items():
        if key in _JSON_COLUMNS:
            row[key] = _parse_json(value)
        elif isinstance(value, str):
            row[key] = value.strip() or None
        elif pd.isna(value):
            row[key] = None
        elif key in _INT_COLUMNS:
            row[key] = int(value)
        else:
            row[key] = value
    return row


def load_camps_csv(path: Path) -> list[Camp]:
    """Load every row of a camps CSV as ``Camp`` records."""
    df = _read_export(path)
    camps: list[Camp] = []
    for record in df.to_dict(orient="records"):
        row = _to_row(record)
        if not row.get("id"):
            continue
        camps.append(camp_from_row(row))
    return camps


def _camp_to_record(camp: Camp) -> dict[str, Any]:
    data = camp.model_dump(mode="json")
    data["categories"] = json.dumps(data["categories"])
    data["amenities"] = json.dumps(data["amenities"])
    return {col: data.get(col) for col in CANONICAL_COLUMNS}


def run_ingestion(config: IngestionConfig = DEFAULT_INGESTION_CONFIG) -> Path:
    """
    Normalize a raw ``camps`` export into the catalog CSV.

    Steps:
    - Read the export and map each row onto ``Camp``.
    - Keep rows whose status is in ``config.statuses``.
    - Write the canonical columns to ``config.processed_path``.
    """
    config.processed_data_dir.mkdir(parents=True, exist_ok=True)

    camps = [c for c in load_camps_csv(config.raw_export_path) if c.status in config.statuses]
    canonical = pd.DataFrame([_camp_to_record(c) for c in camps], columns=CANONICAL_COLUMNS)

    output_path = config.processed_path
    canonical.to_csv(output_path, index=False)
    logger.info("Wrote %d camps to %s", len(canonical), output_path)
    return output_path


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    path = run_ingestion()
    print(f"Ingestion complete. Catalog saved to: {path}")
