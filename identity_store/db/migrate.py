"""
Applying schema migrations.

``upgrade`` is the normal Alembic path with version bookkeeping. ``apply_revision``
runs a single revision's ``upgrade()`` exactly as written, with no bookkeeping,
so applying a revision to a database that already has it fails the same way the
raw DDL would. Either way a failing statement aborts the run with
``MigrationApplyFailure``.
"""

from pathlib import Path

from alembic import command
from alembic.config import Config
from alembic.migration import MigrationContext
from alembic.operations import Operations
from alembic.script import ScriptDirectory
from alembic.util import CommandError
from loguru import logger
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from identity_store.core.exceptions import MigrationApplyFailure

PROJECT_ROOT = Path(__file__).resolve().parents[2]
ALEMBIC_INI = PROJECT_ROOT / "alembic.ini"
SCRIPT_LOCATION = PROJECT_ROOT / "alembic"


def alembic_config(engine: Engine) -> Config:
    cfg = Config(str(ALEMBIC_INI))
    cfg.set_main_option("script_location", str(SCRIPT_LOCATION))
    url = engine.url.render_as_string(hide_password=False)
    cfg.set_main_option("sqlalchemy.url", url.replace("%", "%%"))
    return cfg


def upgrade(engine: Engine, revision: str = "head") -> None:
    cfg = alembic_config(engine)
    logger.info("Upgrading database to {}", revision)
    try:
        with engine.begin() as connection:
            cfg.attributes["connection"] = connection
            command.upgrade(cfg, revision)
    except (SQLAlchemyError, CommandError) as exc:
        logger.error("Migration to {} failed: {}", revision, exc)
        raise MigrationApplyFailure(revision, str(exc)) from exc


def apply_revision(engine: Engine, revision: str) -> None:
    script = ScriptDirectory.from_config(alembic_config(engine))
    try:
        migration = script.get_revision(revision)
    except CommandError as exc:
        raise MigrationApplyFailure(revision, str(exc)) from exc
    if migration is None:
        raise MigrationApplyFailure(revision, "unknown revision")

    logger.info("Applying migration {}", revision)
    try:
        with engine.begin() as connection:
            context = MigrationContext.configure(connection)
            with Operations.context(context):
                migration.module.upgrade()
    except SQLAlchemyError as exc:
        logger.error("Migration {} failed: {}", revision, exc)
        raise MigrationApplyFailure(revision, str(exc)) from exc
    logger.info("Migration {} applied", revision)
