"""Wipe every table and re-seed the defaults.

Asks twice before doing anything; pass ``--yes`` to skip the prompts.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from src.labnexus.labnexus.api.client import DataClient
from src.labnexus.labnexus.container import build_server_backend
from src.labnexus.labnexus.core.constants import DATABASE_TARGET_ID
from src.labnexus.labnexus.core.enums import AuditAction, Role
from src.labnexus.labnexus.main import load_settings
from src.labnexus.labnexus.notifications.audit import AuditTrail
from src.labnexus.labnexus.users.model import SessionUser

CONSOLE = SessionUser(id="system", name="System", role=Role.ADMIN)


def _confirmed() -> bool:
    if input("Confirm full reset? All data will be lost. [y/N] ").strip().lower() != "y":
        return False
    return input("Type RESET to continue: ").strip() == "RESET"


def main(argv=None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    settings = load_settings()
    logging.basicConfig(level=str(settings.get("LOG_LEVEL", "INFO")).upper())

    if "--yes" not in argv and not _confirmed():
        print("Aborted.")
        return 1

    backend = build_server_backend(settings)
    client = DataClient(backend)
    result = client.reset()
    AuditTrail(client).record(
        CONSOLE,
        AuditAction.RESET,
        target_id=DATABASE_TARGET_ID,
        target_name="System Database",
        subject="System",
        details="Full database reset from the command line",
    )
    print(f"OK: {result.get('message')}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
