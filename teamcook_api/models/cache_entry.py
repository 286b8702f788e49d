"""
Team Cook API: Cache Entry SQLAlchemy Model
=============================================

What:  ORM model representing the `cache` table.
How:   Inherits from the shared DeclarativeBase; Alembic reads this for migrations.
Who:   Used by CacheService for reads and upserts.

Table Design:
    - key:        request path + raw query string; primary key, the only
                  access path, so no secondary indexes
    - value:      serialized response body (JSON text), stored verbatim
    - expires_at: absolute expiry as integer epoch milliseconds

    Rows are never deleted. An expired row stays until the next write for
    the same key overwrites it; reads filter on expires_at instead.
"""

from sqlalchemy import BigInteger, Text
from sqlalchemy.orm import Mapped, mapped_column

from teamcook_api.database import Base


class CacheEntry(Base):
    """One cached upstream payload."""

    __tablename__ = "cache"

    key: Mapped[str] = mapped_column(
        Text,
        primary_key=True,
        comment="Request path followed by the raw query string",
    )

    value: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        comment="Response body exactly as it was returned to the client",
    )

    expires_at: Mapped[int] = mapped_column(
        BigInteger,
        nullable=False,
        comment="Absolute expiry time in epoch milliseconds",
    )

    def __repr__(self) -> str:
        return f"<CacheEntry(key='{self.key}', expires_at={self.expires_at})>"
