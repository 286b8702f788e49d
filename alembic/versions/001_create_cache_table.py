"""Create cache table

Revision ID: 001
Revises: None
Create Date: 2026-10-18 00:00:00.000000+00:00

What:  Creates the `cache` table holding proxied upstream payloads.
How:   One row per cache key; expiry is an absolute epoch-milliseconds value
       compared on every read. No secondary indexes: all access is by key.

Rollback: downgrade() drops the table. Cached payloads are re-fetchable, so
nothing is lost that the upstream API cannot provide again.
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "cache",
        sa.Column(
            "key",
            sa.Text(),
            nullable=False,
            comment="Request path followed by the raw query string",
        ),
        sa.Column(
            "value",
            sa.Text(),
            nullable=False,
            comment="Response body exactly as it was returned to the client",
        ),
        sa.Column(
            "expires_at",
            sa.BigInteger(),
            nullable=False,
            comment="Absolute expiry time in epoch milliseconds",
        ),
        sa.PrimaryKeyConstraint("key"),
    )


def downgrade() -> None:
    op.drop_table("cache")
