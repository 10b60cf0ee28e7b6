"""Scheduled and completed service visits."""

from __future__ import annotations

from datetime import datetime
from enum import Enum

import sqlalchemy as sa
from sqlmodel import Field

from .common import TimestampMixin, timestamp_column


class ServiceStatus(str, Enum):
    PENDING = "PENDING"
    SCHEDULED = "SCHEDULED"
    CLAIMED = "CLAIMED"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class Service(TimestampMixin, table=True):
    """A single visit to a customer, optionally claimed by an employee."""

    __tablename__ = "services"
    __table_args__ = (
        sa.Index("ix_services_status_completed_date", "status", "completed_date"),
        sa.Index("ix_services_employee_id", "employee_id"),
    )

    id: int | None = Field(default=None, primary_key=True)
    customer_id: int = Field(
        sa_column=sa.Column(sa.Integer(), sa.ForeignKey("customers.id", ondelete="CASCADE"), nullable=False),
    )
    employee_id: int | None = Field(
        default=None,
        sa_column=sa.Column(sa.Integer(), sa.ForeignKey("employees.id", ondelete="SET NULL"), nullable=True),
    )
    status: ServiceStatus = Field(
        default=ServiceStatus.PENDING,
        sa_column=sa.Column(
            sa.Enum(ServiceStatus, name="service_status", native_enum=False),
            nullable=False,
            server_default=ServiceStatus.PENDING.value,
        ),
    )
    scheduled_date: datetime = Field(sa_column=timestamp_column())
    completed_date: datetime | None = Field(default=None, sa_column=timestamp_column(nullable=True))
    potential_earnings: float = Field(
        default=0.0,
        sa_column=sa.Column(sa.Float(), nullable=False, server_default="0"),
    )
    rating: int | None = Field(default=None, sa_column=sa.Column(sa.Integer(), nullable=True))
    customer_feedback: str | None = Field(default=None, sa_column=sa.Column(sa.Text(), nullable=True))


__all__ = ["Service", "ServiceStatus"]
