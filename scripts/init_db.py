"""Create the database and tables; ``--seed`` also inserts demo participants.

Same work as ``flask rituals init-db`` for environments without the Flask CLI.
"""

from __future__ import annotations

import importlib
import logging
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from dotenv import load_dotenv

from config import get_settings_module

from src.ritual_sessions.ritual_sessions.database.bootstrap import apply_schema, ensure_demo_participants, list_tables
from src.ritual_sessions.ritual_sessions.database.connection import DBConfig
from src.ritual_sessions.ritual_sessions.main import SCHEMA_PATH


def main(argv: list[str]) -> int:
    load_dotenv(override=False)
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s [%(name)s] %(message)s")

    db_config = dict(importlib.import_module(get_settings_module()).DB_CONFIG)
    apply_schema(db_config, schema_path=SCHEMA_PATH)
    if "--seed" in argv:
        ensure_demo_participants(db_config)

    print(f"{DBConfig.from_dict(db_config).describe()}: {', '.join(sorted(list_tables(db_config)))}")
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
