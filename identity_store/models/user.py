from sqlalchemy import DDL, BigInteger, Column, Index, Integer, String, event, insert
from sqlalchemy.orm import Session

from identity_store.db.base import Base

# SQLite only auto-increments an INTEGER PRIMARY KEY (rowid alias).
BigId = BigInteger().with_variant(Integer, "sqlite")

# Sequence behind users_internal_id_seq.id on PostgreSQL (bigserial naming).
INTERNAL_ID_SEQUENCE = "users_internal_id_seq_id_seq"


class InternalIdSequence(Base):
    """Counter backing ``users.internal_id``.

    Each issued value is one row whose key comes from the engine's own
    auto-increment, so allocation is atomic and values are never reissued.
    """

    __tablename__ = "users_internal_id_seq"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(BigId, primary_key=True)


def allocate_internal_id(session: Session) -> int:
    """Issue the next ``internal_id`` and commit it on its own.

    An issued value is spent even if the insert that uses it fails, the way
    PostgreSQL ``nextval`` behaves, so a collision is never handed out twice.
    """
    result = session.execute(insert(InternalIdSequence.__table__))
    internal_id = result.inserted_primary_key[0]
    session.commit()
    return internal_id


class User(Base):
    __tablename__ = "users"
    __table_args__ = (
        Index("users_internal_id", "internal_id", unique=True),
        {"sqlite_autoincrement": True},
    )

    id = Column(BigId, primary_key=True)
    # Independent of ``id``: never derive one from the other.
    internal_id = Column(BigInteger, nullable=False)
    one = Column(String, nullable=True)
    two = Column(String, nullable=True)

    def __repr__(self) -> str:
        return f"<User id={self.id} internal_id={self.internal_id}>"


# Same server default the initial migration sets, for schemas built from the
# models. Runs after all tables exist so the counter's sequence is there.
INTERNAL_ID_SERVER_DEFAULT = DDL(
    f"ALTER TABLE users ALTER COLUMN internal_id SET DEFAULT nextval('{INTERNAL_ID_SEQUENCE}')"
).execute_if(dialect="postgresql")

event.listen(Base.metadata, "after_create", INTERNAL_ID_SERVER_DEFAULT)
