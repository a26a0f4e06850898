"""Export the equipment inventory to .xlsx (default) or .csv."""

from __future__ import annotations

import logging
import sys
from datetime import datetime
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from src.labnexus.labnexus.api.client import DataClient
from src.labnexus.labnexus.container import build_client_backend
from src.labnexus.labnexus.equipment.spreadsheet import write_equipment
from src.labnexus.labnexus.main import load_settings


def main(argv=None) -> None:
    argv = sys.argv[1:] if argv is None else argv
    settings = load_settings()
    logging.basicConfig(level=str(settings.get("LOG_LEVEL", "INFO")).upper())

    if argv:
        out_file = Path(argv[0])
    else:
        ts = datetime.now().strftime("%Y%m%d_%H%M%S")
        out_file = REPO_ROOT / "exports" / f"equipment_{ts}.xlsx"

    items = DataClient(build_client_backend(settings)).equipment.list()
    write_equipment(items, out_file)
    print(f"OK: {len(items)} items -> {out_file}")


if __name__ == "__main__":
    main()
