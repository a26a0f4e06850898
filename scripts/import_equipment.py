"""Bulk import equipment from an .xlsx or .csv sheet.

Usage: python scripts/import_equipment.py <file> [--as <user email>]
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from src.labnexus.labnexus.container import build_client_backend, build_container
from src.labnexus.labnexus.core.exceptions import ApiError, DomainError
from src.labnexus.labnexus.equipment.spreadsheet import read_rows
from src.labnexus.labnexus.main import load_settings
from src.labnexus.labnexus.users.model import SessionUser


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("file")
    parser.add_argument("--as", dest="email", default="admin@sss.com", help="email of the acting Admin/Supporting user")
    args = parser.parse_args(argv)

    settings = load_settings()
    logging.basicConfig(level=str(settings.get("LOG_LEVEL", "INFO")).upper())
    container = build_container(backend=build_client_backend(settings))

    actor = next((u for u in container.user_service.list() if u.email.lower() == args.email.lower()), None)
    if actor is None:
        print(f"ERROR: no user with email {args.email}")
        return 1

    try:
        rows = read_rows(args.file)
        view = container.equipment_service.bulk_import(
            actor=SessionUser(id=actor.id, name=actor.name, role=actor.role),
            rows=rows,
        )
    except (DomainError, ApiError) as e:
        print(f"ERROR: {e}")
        return 1

    print(f"OK: imported {len(rows)} rows ({len(view.equipment)} items in inventory)")
    return 0


if __name__ == "__main__":
    sys.exit(main())
