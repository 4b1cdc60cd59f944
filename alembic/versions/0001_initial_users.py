"""initial users table

Revision ID: 0001_initial_users
Revises:
Create Date: 2026-02-27 00:00:00.000000

Creates ``users`` with two independently issued bigint identifiers and the
unique index ``users_internal_id``. ``users_internal_id_seq`` is the counter
that issues ``internal_id``.
"""

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "0001_initial_users"
down_revision = None
branch_labels = None
depends_on = None

BigId = sa.BigInteger().with_variant(sa.Integer(), "sqlite")


def upgrade() -> None:
    op.create_table(
        "users_internal_id_seq",
        sa.Column("id", BigId, primary_key=True, autoincrement=True),
        sqlite_autoincrement=True,
    )

    internal_id_default = None
    if op.get_context().dialect.name == "postgresql":
        # Raw SQL inserts draw from the same sequence as the ORM counter.
        internal_id_default = sa.text("nextval('users_internal_id_seq_id_seq')")

    op.create_table(
        "users",
        sa.Column("id", BigId, primary_key=True, autoincrement=True),
        sa.Column(
            "internal_id",
            sa.BigInteger(),
            nullable=False,
            server_default=internal_id_default,
        ),
        sa.Column("one", sa.String(), nullable=True),
        sa.Column("two", sa.String(), nullable=True),
        sqlite_autoincrement=True,
    )
    op.create_index("users_internal_id", "users", ["internal_id"], unique=True)


def downgrade() -> None:
    op.drop_index("users_internal_id", table_name="users")
    op.drop_table("users")
    op.drop_table("users_internal_id_seq")
