from contextlib import contextmanager
from typing import Any, Iterator, Optional

from loguru import logger
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, sessionmaker

from identity_store.core.config import settings
from identity_store.core.exceptions import ConstraintViolation


def build_engine(url: str, **kwargs: Any) -> Engine:
    """Create an engine for ``url``.

    SQLite connections are shared across threads by the pool and wait up to
    ``DB_BUSY_TIMEOUT`` seconds for a competing writer instead of failing.
    """
    connect_args = kwargs.pop("connect_args", {})
    if make_url(url).get_backend_name() == "sqlite":
        connect_args.setdefault("check_same_thread", False)
        connect_args.setdefault("timeout", settings.DB_BUSY_TIMEOUT)
    kwargs.setdefault("echo", settings.DB_ECHO)
    return create_engine(url, connect_args=connect_args, **kwargs)


engine = build_engine(settings.DATABASE_URL, pool_pre_ping=True)

SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)


def get_db() -> Iterator[Session]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def _constraint_name(exc: IntegrityError) -> Optional[str]:
    # psycopg exposes the violated constraint; sqlite only has the message.
    diag = getattr(exc.orig, "diag", None)
    return getattr(diag, "constraint_name", None)


@contextmanager
def translate_integrity_errors(db: Session) -> Iterator[None]:
    """Roll back and re-raise database integrity errors as ``ConstraintViolation``."""
    try:
        yield
    except IntegrityError as exc:
        db.rollback()
        logger.warning("Write rejected by the database: {}", exc.orig)
        raise ConstraintViolation(str(exc.orig), constraint=_constraint_name(exc)) from exc
