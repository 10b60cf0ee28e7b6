"""Zip codes an employee has agreed to serve."""

from __future__ import annotations

import sqlalchemy as sa
from sqlmodel import Field

from .common import TimestampMixin


class CoverageArea(TimestampMixin, table=True):
    __tablename__ = "coverage_areas"
    __table_args__ = (sa.Index("ix_coverage_areas_active_zip_code", "active", "zip_code"),)

    id: int | None = Field(default=None, primary_key=True)
    zip_code: str = Field(sa_column=sa.Column(sa.String(length=10), nullable=False))
    employee_id: int = Field(
        sa_column=sa.Column(sa.Integer(), sa.ForeignKey("employees.id", ondelete="CASCADE"), nullable=False),
    )
    travel_distance: float | None = Field(default=None, sa_column=sa.Column(sa.Float(), nullable=True))
    active: bool = Field(
        default=True,
        sa_column=sa.Column(sa.Boolean(), nullable=False, server_default=sa.true()),
    )


__all__ = ["CoverageArea"]
