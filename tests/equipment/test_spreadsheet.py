from __future__ import annotations

import pandas as pd
import pytest

from src.labnexus.labnexus.core.enums import Division
from src.labnexus.labnexus.core.exceptions import ValidationError
from src.labnexus.labnexus.equipment.model import Equipment
from src.labnexus.labnexus.equipment.spreadsheet import COLUMNS, read_rows, write_equipment


def test_export_then_import_xlsx(tmp_path):
    items = [
        Equipment(id="A-1", category="HPLC", brand="Acme", division=Division.MS, model="X1", image="data:,abc"),
        Equipment(id="A-2", category="pH Meter", brand="Horiba", division=Division.HPLC),
    ]
    path = write_equipment(items, tmp_path / "out" / "inventory.xlsx")

    df = pd.read_excel(path, engine="openpyxl")
    assert list(df.columns) == COLUMNS
    assert "image" not in df.columns

    rows = read_rows(path)
    assert [r["id"] for r in rows] == ["A-1", "A-2"]
    assert rows[0]["model"] == "X1"
    assert rows[1]["location"] is None


def test_import_csv_skips_blank_lines_and_unknown_columns(tmp_path):
    path = tmp_path / "rows.csv"
    path.write_text(
        "id,category,brand,division,notes\n"
        "B-1,Centrifuge,Thermo,MS,ignore me\n"
        ",,,,\n",
        encoding="utf-8",
    )

    rows = read_rows(path)

    assert rows == [{"id": "B-1", "category": "Centrifuge", "brand": "Thermo", "division": "MS"}]


def test_import_requires_core_columns(tmp_path):
    path = tmp_path / "rows.csv"
    path.write_text("id,brand\nB-1,Thermo\n", encoding="utf-8")
    with pytest.raises(ValidationError, match="category"):
        read_rows(path)


def test_rejects_unknown_file_type(tmp_path):
    with pytest.raises(ValidationError):
        read_rows(tmp_path / "rows.json")
