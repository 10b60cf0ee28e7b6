"""Shared model mixins and column helpers."""

from __future__ import annotations

from datetime import datetime

import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import JSONB
from sqlmodel import Field, SQLModel

from ..core.periods import utcnow

JSON_TYPE = sa.JSON().with_variant(JSONB, "postgresql")


def timestamp_column(*, nullable: bool = False, index: bool = False) -> sa.Column:
    """Return a timezone-aware ``DateTime`` column."""
    return sa.Column(sa.DateTime(timezone=True), nullable=nullable, index=index)


class TimestampMixin(SQLModel, table=False):
    """Mixin that provides created/updated timestamp columns."""

    created_at: datetime = Field(
        default_factory=utcnow,
        nullable=False,
        index=True,
        sa_type=sa.DateTime(timezone=True),
        sa_column_kwargs={"server_default": sa.func.now()},
    )
    updated_at: datetime = Field(
        default_factory=utcnow,
        nullable=False,
        sa_type=sa.DateTime(timezone=True),
        sa_column_kwargs={
            "server_default": sa.func.now(),
            "server_onupdate": sa.func.now(),
        },
    )


__all__ = ["JSON_TYPE", "TimestampMixin", "timestamp_column", "utcnow"]
