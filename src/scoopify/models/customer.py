"""Customer accounts."""

from __future__ import annotations

from enum import Enum

import sqlalchemy as sa
from sqlmodel import Field

from .common import TimestampMixin


class CustomerStatus(str, Enum):
    ACTIVE = "ACTIVE"
    PAUSED = "PAUSED"
    INACTIVE = "INACTIVE"
    CANCELLED = "CANCELLED"


class Customer(TimestampMixin, table=True):
    """A subscribed household, located by zip code."""

    __tablename__ = "customers"
    __table_args__ = (sa.Index("ix_customers_status_zip_code", "status", "zip_code"),)

    id: int | None = Field(default=None, primary_key=True)
    user_id: int | None = Field(
        default=None,
        sa_column=sa.Column(sa.Integer(), sa.ForeignKey("users.id", ondelete="SET NULL"), nullable=True),
    )
    zip_code: str = Field(sa_column=sa.Column(sa.String(length=10), nullable=False))
    status: CustomerStatus = Field(
        default=CustomerStatus.ACTIVE,
        sa_column=sa.Column(
            sa.Enum(CustomerStatus, name="customer_status", native_enum=False),
            nullable=False,
            server_default=CustomerStatus.ACTIVE.value,
        ),
    )


__all__ = ["Customer", "CustomerStatus"]
