import logging
import sys
from pathlib import Path
from typing import Optional

from loguru import logger

from identity_store.core.config import settings

LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)


class InterceptHandler(logging.Handler):
    """Forward stdlib ``logging`` records (SQLAlchemy, Alembic, uvicorn) to loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        logger.opt(depth=2, exception=record.exc_info).log(level, record.getMessage())


def configure_logging(level: Optional[str] = None, log_file: Optional[str] = None) -> None:
    level = level or settings.LOG_LEVEL
    log_file = log_file if log_file is not None else settings.LOG_FILE

    logger.remove()
    logger.add(sys.stderr, level=level, format=LOG_FORMAT, colorize=True)

    if log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            str(path),
            level=level,
            format=LOG_FORMAT,
            rotation="10 MB",
            retention=5,
            enqueue=True,
        )

    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)

    # Alembic installs its own handlers via fileConfig; route everything to root.
    for name in ("alembic", "sqlalchemy", "uvicorn", "uvicorn.error"):
        stdlog = logging.getLogger(name)
        stdlog.handlers = []
        stdlog.propagate = True

    logging.getLogger("sqlalchemy.engine").setLevel(
        logging.INFO if settings.DB_ECHO else logging.WARNING
    )
    logging.getLogger("sqlalchemy.pool").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)

    logger.info("Logging configured at level {}", level)
