from typing import Mapping, Optional

from loguru import logger
from sqlalchemy import select
from sqlalchemy.orm import Session

from identity_store.core.exceptions import ConstraintViolation, NotFound
from identity_store.db.session import translate_integrity_errors
from identity_store.models.user import User, allocate_internal_id


class UserRepository:
    """
    Data access for the ``users`` table.

    Both identifiers are issued by database counters and are never written
    afterwards; only ``one`` and ``two`` can change. Every method commits or
    rolls back its own transaction, including when it raises.
    """

    MUTABLE_FIELDS = frozenset({"one", "two"})

    def __init__(self, session: Session):
        self.session = session

    def create(self, one: Optional[str] = None, two: Optional[str] = None) -> User:
        """Insert a row, drawing ``id`` and ``internal_id`` from their counters."""
        with translate_integrity_errors(self.session):
            internal_id = allocate_internal_id(self.session)
            user = User(internal_id=internal_id, one=one, two=two)
            self.session.add(user)
            self.session.commit()
        self.session.refresh(user)
        logger.info("Created user id={} internal_id={}", user.id, user.internal_id)
        return user

    def get(self, user_id: int) -> User:
        user = self.session.get(User, user_id)
        if user is None:
            raise self._missing("id", user_id)
        return user

    def get_by_internal_id(self, internal_id: int) -> User:
        """Look up a user through the unique ``users_internal_id`` index."""
        stmt = select(User).where(User.internal_id == internal_id)
        user = self.session.scalars(stmt).one_or_none()
        if user is None:
            raise self._missing("internal_id", internal_id)
        return user

    def update(self, user_id: int, changes: Mapping[str, Optional[str]]) -> User:
        """Apply ``changes`` to ``one``/``two``. Keys absent from ``changes`` are left alone."""
        return self._apply(self.get(user_id), changes)

    def update_by_internal_id(
        self, internal_id: int, changes: Mapping[str, Optional[str]]
    ) -> User:
        # Lock the row so concurrent patches to the same user serialize.
        stmt = select(User).where(User.internal_id == internal_id).with_for_update()
        user = self.session.scalars(stmt).one_or_none()
        if user is None:
            raise self._missing("internal_id", internal_id)
        return self._apply(user, changes)

    def delete(self, user_id: int) -> None:
        user = self.get(user_id)
        internal_id = user.internal_id
        self.session.delete(user)
        self.session.commit()
        logger.info("Deleted user id={} internal_id={}", user_id, internal_id)

    def _missing(self, key: str, value: int) -> NotFound:
        # End the read transaction opened by the failed lookup.
        self.session.rollback()
        return NotFound("User", key, value)

    def _apply(self, user: User, changes: Mapping[str, Optional[str]]) -> User:
        rejected = set(changes) - self.MUTABLE_FIELDS
        if rejected:
            self.session.rollback()
            raise ConstraintViolation(
                f"Cannot modify {', '.join(sorted(rejected))} of an existing user",
                constraint="immutable_identifier",
            )

        for key, value in changes.items():
            setattr(user, key, value)

        with translate_integrity_errors(self.session):
            self.session.commit()
        self.session.refresh(user)
        logger.debug("Updated user id={} fields={}", user.id, sorted(changes))
        return user
