"""Equipment spreadsheet import/export (xlsx via openpyxl, or csv)."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Sequence, Union

import pandas as pd

from ..api.client import equipment_to_record
from ..core.exceptions import ValidationError
from .model import Equipment

# Column order of exported sheets. Attachments are not exported.
COLUMNS = [
    "id",
    "category",
    "brand",
    "model",
    "serialNumber",
    "installationDate",
    "status",
    "division",
    "location",
    "calibrationMeasuringPoint",
    "personInCharge",
]


def _cell(value: Any) -> Any:
    if value is None or (isinstance(value, float) and pd.isna(value)):
        return None
    if isinstance(value, pd.Timestamp):
        return value.date().isoformat()
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()


def read_rows(path: Union[str, Path]) -> List[Dict[str, Any]]:
    """Rows of an equipment sheet as form-shaped dicts. Unknown columns are dropped."""

    path = Path(path)
    if path.suffix.lower() == ".csv":
        df = pd.read_csv(path, dtype=str, keep_default_na=False)
    elif path.suffix.lower() in {".xlsx", ".xlsm"}:
        df = pd.read_excel(path, engine="openpyxl")
    else:
        raise ValidationError(f"Unsupported file type: {path.suffix or path.name}")

    missing = {"id", "category", "brand", "division"} - set(df.columns)
    if missing:
        raise ValidationError(f"Missing columns: {', '.join(sorted(missing))}")

    known = [c for c in COLUMNS if c in df.columns]
    rows = []
    for record in df[known].to_dict(orient="records"):
        row = {k: _cell(v) for k, v in record.items()}
        if any(v for v in row.values()):
            rows.append(row)
    return rows


def to_frame(items: Sequence[Equipment]) -> pd.DataFrame:
    return pd.DataFrame([equipment_to_record(i) for i in items], columns=COLUMNS)


def write_equipment(items: Sequence[Equipment], path: Union[str, Path]) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    df = to_frame(items)
    if path.suffix.lower() == ".csv":
        df.to_csv(path, index=False)
    else:
        with pd.ExcelWriter(path, engine="openpyxl") as writer:
            df.to_excel(writer, index=False, sheet_name="Equipment")
    return path
