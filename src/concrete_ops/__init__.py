"""Concrete Ops package.

Back office API for a concrete-cutting contractor, organized by feature modules
(users, access requests, timecards, jobs, equipment, inventory, documents) with a
thin Flask controller layer over service/repository layers.
"""
from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from .settings import get_settings_module

from .database.bootstrap import apply_schema, apply_seed_sql, ensure_demo_users, list_tables

from .container import Container, build_container
from .errors import register_error_handlers
from .access_requests.controller import register as register_access_requests
from .documents.controller import register as register_documents
from .equipment.controller import register as register_equipment
from .inventory.controller import register as register_inventory
from .jobs.controller import register as register_jobs
from .timecards.controller import register as register_timecards
from .users.controller import register as register_users

logger = logging.getLogger(__name__)

DATABASE_DIR = Path(__file__).resolve().parents[2] / "database"


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    db_config = getattr(settings, "DB_CONFIG")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    logging.basicConfig(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.info(
        "settings=%s db=%s@%s:%s/%s",
        settings_module,
        db_config.get("user"),
        db_config.get("host"),
        db_config.get("port", 3306),
        db_config.get("database"),
    )

    if container is None:
        if getattr(settings, "AUTO_INIT_DB", False):
            apply_schema(db_config, schema_path=DATABASE_DIR / "schema.sql")
            logger.info("schema ready (tables=%s)", len(list_tables(db_config)))
        if getattr(settings, "AUTO_SEED_DB", False):
            apply_seed_sql(db_config, seed_path=DATABASE_DIR / "seed.sql")
            ensure_demo_users(db_config)
            logger.info("demo seed ready")
        container = build_container(db_config=db_config, settings=settings)

    register_error_handlers(app)
    register_users(app, container)
    register_access_requests(app, container)
    register_timecards(app, container)
    register_jobs(app, container)
    register_equipment(app, container)
    register_inventory(app, container)
    register_documents(app, container)

    return app
