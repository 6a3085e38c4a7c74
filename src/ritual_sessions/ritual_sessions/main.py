from __future__ import annotations

import importlib
import json
import logging
from pathlib import Path
from typing import Optional

import click
from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .common.datetime_utils import now_local, parse_hhmm, parse_weekday
from .common.http import error_response
from .container import Container, EngineSettings, build_container
from .core.constants import DEFAULT_OFF_DAY, DEFAULT_STANDUP_DURATION_MINUTES, DEFAULT_STANDUP_TIME
from .core.exceptions import DomainError
from .database.bootstrap import apply_schema, ensure_demo_participants, list_tables
from .database.connection import DBConfig
from .learning.controller import register as register_learning
from .sessions.controller import register as register_sessions
from .streaks.controller import register as register_streaks

logger = logging.getLogger(__name__)

SCHEMA_PATH = Path(__file__).resolve().parents[3] / "database" / "schema.sql"


def engine_settings_from(settings) -> EngineSettings:
    standup_time = getattr(settings, "STANDUP_TIME", None)
    return EngineSettings(
        off_day=parse_weekday(getattr(settings, "OFF_DAY", DEFAULT_OFF_DAY)),
        standup_time=parse_hhmm(standup_time) if standup_time else DEFAULT_STANDUP_TIME,
        standup_duration_minutes=int(getattr(settings, "STANDUP_DURATION_MINUTES", DEFAULT_STANDUP_DURATION_MINUTES)),
        streak_current_month_only=bool(getattr(settings, "STREAK_CURRENT_MONTH_ONLY", False)),
    )


def _register_cli(app: Flask, container: Container, db_config: dict) -> None:
    @app.cli.group("rituals")
    def rituals():
        """Session automation and database helpers."""

    @rituals.command("tick")
    def tick():
        """Schedule, start and end today's standup as due."""
        report = container.automation.tick(now_local())
        click.echo(json.dumps(report.to_dict()))

    @rituals.command("init-db")
    @click.option("--seed", is_flag=True, help="Also insert demo participants.")
    def init_db(seed: bool):
        apply_schema(db_config, schema_path=SCHEMA_PATH)
        if seed:
            ensure_demo_participants(db_config)
        click.echo(f"schema ready (tables={len(list_tables(db_config))})")


def create_app(*, container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    db_config = getattr(settings, "DB_CONFIG")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    logging.basicConfig(
        level=logging.DEBUG if app.config["DEBUG"] else logging.INFO,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    logger.info("settings=%s db=%s", settings_module, DBConfig.from_dict(db_config).describe())

    if container is None:
        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config, schema_path=SCHEMA_PATH)
            logger.info("schema ready (tables=%d)", len(list_tables(db_config)))
        if bool(getattr(settings, "AUTO_SEED_DB", False)):
            ensure_demo_participants(db_config)
        container = build_container(db_config=db_config, settings=engine_settings_from(settings))

    app.extensions["rituals"] = container

    @app.errorhandler(DomainError)
    def handle_domain_error(exc: DomainError):
        return error_response(exc)

    register_sessions(app, container)
    register_attendance(app, container)
    register_learning(app, container)
    register_streaks(app, container)
    _register_cli(app, container, db_config)

    return app
