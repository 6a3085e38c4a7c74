"""One automation tick for cron, e.g. ``*/5 * * * 1-6 python scripts/run_automation.py``."""

from __future__ import annotations

import importlib
import json
import logging
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from dotenv import load_dotenv

from config import get_settings_module

from src.ritual_sessions.ritual_sessions.common.datetime_utils import now_local
from src.ritual_sessions.ritual_sessions.container import build_container
from src.ritual_sessions.ritual_sessions.main import engine_settings_from


def main() -> int:
    load_dotenv(override=False)
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s [%(name)s] %(message)s")

    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG, settings=engine_settings_from(settings))

    report = container.automation.tick(now_local())
    print(json.dumps(report.to_dict()))
    return 1 if report.errors else 0


if __name__ == "__main__":
    sys.exit(main())
