"""Schemas for stored reports and background job APIs."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict

from ..models import ReportType


class BusinessReportSummary(BaseModel):
    """Listing representation of a stored report, without its payload."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    type: ReportType
    period_start: datetime
    period_end: datetime
    generated_at: datetime


class BusinessReportRead(BusinessReportSummary):
    report_data: dict[str, Any]


class BusinessReportList(BaseModel):
    items: list[BusinessReportSummary]
    limit: int = Field(ge=1)


class JobEnqueueResponse(BaseModel):
    """Metadata about an enqueued background job."""

    job_id: str
    queue: str
    enqueued_at: datetime
    status: str = "queued"


__all__ = ["BusinessReportList", "BusinessReportRead", "BusinessReportSummary", "JobEnqueueResponse"]
