"""Customer payments."""

from __future__ import annotations

from enum import Enum

import sqlalchemy as sa
from sqlmodel import Field

from .common import TimestampMixin


class PaymentStatus(str, Enum):
    PENDING = "PENDING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"
    REFUNDED = "REFUNDED"


class Payment(TimestampMixin, table=True):
    __tablename__ = "payments"
    __table_args__ = (sa.Index("ix_payments_status_created_at", "status", "created_at"),)

    id: int | None = Field(default=None, primary_key=True)
    customer_id: int | None = Field(
        default=None,
        sa_column=sa.Column(sa.Integer(), sa.ForeignKey("customers.id", ondelete="SET NULL"), nullable=True),
    )
    amount: float = Field(sa_column=sa.Column(sa.Float(), nullable=False))
    status: PaymentStatus = Field(
        default=PaymentStatus.PENDING,
        sa_column=sa.Column(
            sa.Enum(PaymentStatus, name="payment_status", native_enum=False),
            nullable=False,
            server_default=PaymentStatus.PENDING.value,
        ),
    )


__all__ = ["Payment", "PaymentStatus"]
