"""Users and the employees who perform services."""

from __future__ import annotations

from enum import Enum

import sqlalchemy as sa
from sqlmodel import Field

from .common import TimestampMixin


class EmployeeStatus(str, Enum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    PENDING_ONBOARDING = "PENDING_ONBOARDING"


class User(TimestampMixin, table=True):
    """Account record shared by admins, customers and employees."""

    __tablename__ = "users"

    id: int | None = Field(default=None, primary_key=True)
    email: str = Field(sa_column=sa.Column(sa.String(length=320), nullable=False, unique=True))
    name: str | None = Field(default=None, sa_column=sa.Column(sa.String(length=255), nullable=True))


class Employee(TimestampMixin, table=True):
    """Field employee; the display name lives on the linked ``User``."""

    __tablename__ = "employees"

    id: int | None = Field(default=None, primary_key=True)
    user_id: int = Field(
        sa_column=sa.Column(sa.Integer(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
    )
    status: EmployeeStatus = Field(
        default=EmployeeStatus.ACTIVE,
        sa_column=sa.Column(
            sa.Enum(EmployeeStatus, name="employee_status", native_enum=False),
            nullable=False,
            server_default=EmployeeStatus.ACTIVE.value,
        ),
    )


__all__ = ["Employee", "EmployeeStatus", "User"]
