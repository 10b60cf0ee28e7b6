"""Persisted business intelligence reports."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any

import sqlalchemy as sa
from sqlmodel import Field, SQLModel

from .common import JSON_TYPE, timestamp_column, utcnow


class ReportType(str, Enum):
    WEEKLY_INTELLIGENCE = "WEEKLY_INTELLIGENCE"


class BusinessReport(SQLModel, table=True):
    """Append-only log of generated reports, one per type and period."""

    __tablename__ = "business_reports"
    __table_args__ = (
        sa.UniqueConstraint("type", "period_start", name="uq_business_reports_type_period"),
    )

    id: int | None = Field(default=None, primary_key=True)
    type: ReportType = Field(
        default=ReportType.WEEKLY_INTELLIGENCE,
        sa_column=sa.Column(
            sa.Enum(ReportType, name="report_type", native_enum=False),
            nullable=False,
        ),
    )
    period_start: datetime = Field(sa_column=timestamp_column())
    period_end: datetime = Field(sa_column=timestamp_column())
    report_data: dict[str, Any] = Field(default_factory=dict, sa_column=sa.Column(JSON_TYPE, nullable=False))
    generated_at: datetime = Field(
        default_factory=utcnow,
        sa_column=sa.Column(sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )


__all__ = ["BusinessReport", "ReportType"]
