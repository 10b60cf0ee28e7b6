"""Pydantic schemas for public interfaces."""

from __future__ import annotations

from .intelligence import (
    IntelligenceResults,
    IntelligenceRunResponse,
    Priority,
    RiskAssessment,
    RiskType,
)
from .report import BusinessReportList, BusinessReportRead, BusinessReportSummary, JobEnqueueResponse
from .system import CronFailureResponse, ErrorResponse, HealthCheckResponse, MetadataResponse

__all__ = [
    "BusinessReportList",
    "BusinessReportRead",
    "BusinessReportSummary",
    "CronFailureResponse",
    "ErrorResponse",
    "HealthCheckResponse",
    "IntelligenceResults",
    "IntelligenceRunResponse",
    "JobEnqueueResponse",
    "MetadataResponse",
    "Priority",
    "RiskAssessment",
    "RiskType",
]
