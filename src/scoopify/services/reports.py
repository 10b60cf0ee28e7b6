"""Persistence and retrieval of business intelligence reports."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from sqlalchemy.exc import IntegrityError
from sqlmodel.ext.asyncio.session import AsyncSession

from ..core.periods import ReportPeriod
from ..models import BusinessReport, ReportType
from ..repositories import BusinessReportRepository
from ..schemas.intelligence import IntelligenceResults

logger = logging.getLogger("scoopify.services.reports")


@dataclass(slots=True)
class SaveOutcome:
    """Result of storing a report; ``created`` is false for an existing period."""

    report: BusinessReport
    created: bool

    @property
    def duplicate(self) -> bool:
        return not self.created


def build_report_payload(results: IntelligenceResults, generated_at: datetime) -> dict[str, Any]:
    """Shape the JSON document stored in ``business_reports.report_data``."""

    details = results.model_dump(mode="json")
    return {
        "timestamp": generated_at.isoformat(),
        "summary": {
            "weekly_metrics": details["weekly_report"]["metrics"],
            "monthly_metrics": details["monthly_report"]["metrics"],
            "risks": results.risk_assessment.total_risks,
            "recommendations": len(results.recommendations),
            "degraded_sections": [failure.section for failure in results.degraded_sections],
        },
        "details": details,
    }


class BusinessReportService:
    """Store at most one report per type and period, and read them back."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session
        self._repository = BusinessReportRepository(session)

    async def save(
        self,
        payload: dict[str, Any],
        period: ReportPeriod,
        *,
        generated_at: datetime,
        report_type: ReportType = ReportType.WEEKLY_INTELLIGENCE,
    ) -> SaveOutcome:
        existing = await self._repository.get_for_period(report_type, period.start)
        if existing is not None:
            logger.info(
                "Report for %s already stored; skipping duplicate write.",
                period.start.isoformat(),
                extra={"report_id": existing.id, "report_type": report_type.value},
            )
            return SaveOutcome(report=existing, created=False)

        report = BusinessReport(
            type=report_type,
            period_start=period.start,
            period_end=period.end,
            report_data=payload,
            generated_at=generated_at,
        )
        try:
            await self._repository.add(report)
            await self._session.commit()
        except IntegrityError:
            logger.info("Detected concurrent report creation for %s; reusing stored row.", period.start.isoformat())
            await self._session.rollback()
            return await self._existing_after_conflict(report_type, period)
        await self._repository.refresh(report)
        return SaveOutcome(report=report, created=True)

    async def _existing_after_conflict(self, report_type: ReportType, period: ReportPeriod) -> SaveOutcome:
        existing = await self._repository.get_for_period(report_type, period.start)
        if existing is None:
            logger.error("Failed to locate report for %s after a uniqueness conflict", period.start.isoformat())
            raise RuntimeError("Report uniqueness conflict without a stored report")
        return SaveOutcome(report=existing, created=False)

    async def get_report(self, report_id: int) -> BusinessReport | None:
        return await self._repository.get(report_id)

    async def list_reports(self, *, limit: int = 10) -> list[BusinessReport]:
        return await self._repository.list_recent(limit=limit)


__all__ = ["BusinessReportService", "SaveOutcome", "build_report_payload"]
