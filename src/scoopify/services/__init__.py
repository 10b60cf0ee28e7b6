"""Domain service layer package."""

from __future__ import annotations

from .intelligence import BusinessIntelligenceService, IntelligenceRun
from .notifications import ReportNotifier
from .reports import BusinessReportService, SaveOutcome, build_report_payload

__all__ = [
    "BusinessIntelligenceService",
    "BusinessReportService",
    "IntelligenceRun",
    "ReportNotifier",
    "SaveOutcome",
    "build_report_payload",
]
