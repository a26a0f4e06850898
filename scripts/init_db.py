from __future__ import annotations

import logging
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from src.labnexus.labnexus.container import build_server_backend
from src.labnexus.labnexus.main import load_settings


def main() -> None:
    settings = load_settings()
    logging.basicConfig(level=str(settings.get("LOG_LEVEL", "INFO")).upper())

    backend = build_server_backend(settings)
    result = backend.initialize()
    print(f"OK: {result.get('message')} (backend={settings.get('SERVER_BACKEND')}, seeded={result.get('seeded')})")


if __name__ == "__main__":
    main()
