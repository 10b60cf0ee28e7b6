"""Business intelligence run: aggregate, assess, recommend, persist, notify."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from sqlmodel.ext.asyncio.session import AsyncSession

from ..core.config import IntelligenceThresholds, Settings
from ..core.periods import as_utc, utcnow
from ..db.session import SessionFactory
from ..schemas.intelligence import (
    FinancialMetrics,
    GrowthAnalysis,
    IntelligenceResults,
    MonthlyGrowth,
    MonthlyMetrics,
    MonthlyReport,
    OperationalMetrics,
    PenetrationMetrics,
    PeriodBounds,
    RetentionMetrics,
    RiskAssessment,
    SatisfactionMetrics,
    SectionFailure,
    WeeklyMetrics,
    WeeklyReport,
)
from . import metrics
from .notifications import ReportNotifier
from .recommendations import check_critical_alerts, generate_recommendations
from .reports import BusinessReportService, build_report_payload
from .risks import RISK_ASSESSORS, summarise_risks

logger = logging.getLogger("scoopify.services.intelligence")

SectionCompute = Callable[[AsyncSession], Awaitable[Any]]


@dataclass(frozen=True, slots=True)
class Section:
    name: str
    compute: SectionCompute
    default: Callable[[], Any]


@dataclass(slots=True)
class IntelligenceRun:
    """What one run produced; ``report_id`` is ``None`` when persistence failed."""

    results: IntelligenceResults
    report_id: int | None = None
    duplicate: bool = False

    @property
    def persisted(self) -> bool:
        return self.report_id is not None


class BusinessIntelligenceService:
    """Assemble the weekly intelligence report from independent sections.

    Each section opens its own session from ``session_factory``. A section
    that raises is logged, replaced by its zero default and listed in
    ``results.degraded_sections``; the rest of the run continues. With
    ``concurrent`` set the sections are gathered, otherwise awaited in order.
    """

    def __init__(
        self,
        session_factory: SessionFactory,
        *,
        thresholds: IntelligenceThresholds | None = None,
        notifier: ReportNotifier,
        concurrent: bool = True,
    ) -> None:
        self._session_factory = session_factory
        self._thresholds = thresholds or IntelligenceThresholds()
        self._notifier = notifier
        self._concurrent = concurrent

    @classmethod
    def from_settings(cls, settings: Settings, session_factory: SessionFactory) -> "BusinessIntelligenceService":
        return cls(
            session_factory,
            thresholds=settings.bi_thresholds,
            notifier=ReportNotifier(settings.report_recipient),
            concurrent=settings.bi_concurrent_sections,
        )

    @property
    def thresholds(self) -> IntelligenceThresholds:
        return self._thresholds

    async def run(self, *, now: datetime | None = None) -> IntelligenceRun:
        moment = as_utc(now) if now is not None else utcnow()
        context = metrics.ReportContext.at(moment, self._thresholds)
        logger.info(
            "Starting business intelligence run for week of %s",
            context.week.start.date().isoformat(),
            extra={"concurrent": self._concurrent},
        )

        results = await self.compute(context)
        run = await self._persist_and_notify(results, context)
        logger.info(
            "Business intelligence run finished",
            extra={
                "report_id": run.report_id,
                "duplicate": run.duplicate,
                "risks": results.risk_assessment.total_risks,
                "recommendations": len(results.recommendations),
                "degraded_sections": [failure.section for failure in results.degraded_sections],
            },
        )
        return run

    async def compute(self, context: metrics.ReportContext) -> IntelligenceResults:
        """Evaluate every section and assemble the result tree, without persisting."""

        sections = self._sections(context)
        outcomes = await self._evaluate(sections)
        values = {name: value for name, (value, _) in zip((s.name for s in sections), outcomes)}
        failures = [failure for _, failure in outcomes if failure is not None]

        results = IntelligenceResults(
            weekly_report=WeeklyReport(
                period=PeriodBounds(**context.week.to_dict()),
                metrics=values["weekly_report.metrics"],
                top_employees=values["weekly_report.top_employees"],
                satisfaction=values["weekly_report.satisfaction"],
                financial=values["weekly_report.financial"],
            ),
            monthly_report=MonthlyReport(
                period=PeriodBounds(**context.month.to_dict()),
                metrics=MonthlyMetrics(
                    growth=values["monthly_report.growth"],
                    retention=values["monthly_report.retention"],
                    penetration=values["monthly_report.penetration"],
                ),
                expansion=values["monthly_report.expansion"],
                operational=values["monthly_report.operational"],
            ),
            growth_analysis=values["growth_analysis"],
            risk_assessment=summarise_risks(
                values[f"risk_assessment.{name}"] for name, _ in RISK_ASSESSORS
            ),
            alerts=values["alerts"],
            degraded_sections=failures,
        )
        results.recommendations = generate_recommendations(results, self._thresholds)
        return results

    def _sections(self, context: metrics.ReportContext) -> list[Section]:
        def bind(aggregator: Callable[[AsyncSession, metrics.ReportContext], Awaitable[Any]]) -> SectionCompute:
            return lambda session: aggregator(session, context)

        sections = [
            Section("weekly_report.metrics", bind(metrics.weekly_metrics), WeeklyMetrics),
            Section("weekly_report.top_employees", bind(metrics.top_employees), list),
            Section("weekly_report.satisfaction", bind(metrics.satisfaction_metrics), SatisfactionMetrics),
            Section("weekly_report.financial", bind(metrics.financial_metrics), FinancialMetrics),
            Section("monthly_report.growth", bind(metrics.monthly_growth), MonthlyGrowth),
            Section("monthly_report.retention", bind(metrics.retention_metrics), RetentionMetrics),
            Section("monthly_report.penetration", bind(metrics.penetration_metrics), PenetrationMetrics),
            Section("monthly_report.expansion", bind(metrics.expansion_opportunities), list),
            Section("monthly_report.operational", bind(metrics.operational_metrics), OperationalMetrics),
            Section("growth_analysis", bind(metrics.growth_trends), GrowthAnalysis),
        ]
        for name, assessor in RISK_ASSESSORS:
            sections.append(
                Section(
                    f"risk_assessment.{name}",
                    lambda session, assessor=assessor: assessor(session, context.thresholds, context.now),
                    RiskAssessment,
                )
            )
        sections.append(
            Section("alerts", lambda session: check_critical_alerts(session, context.thresholds, context.now), list)
        )
        return sections

    async def _evaluate(self, sections: list[Section]) -> list[tuple[Any, SectionFailure | None]]:
        if self._concurrent:
            return list(await asyncio.gather(*(self._run_section(section) for section in sections)))
        return [await self._run_section(section) for section in sections]

    async def _run_section(self, section: Section) -> tuple[Any, SectionFailure | None]:
        try:
            async with self._session_factory() as session:
                return await section.compute(session), None
        except Exception as exc:
            logger.exception(
                "Business intelligence section %s failed; falling back to defaults.",
                section.name,
                extra={"section": section.name},
            )
            return section.default(), SectionFailure(section=section.name, error=f"{type(exc).__name__}: {exc}")

    async def _persist_and_notify(
        self, results: IntelligenceResults, context: metrics.ReportContext
    ) -> IntelligenceRun:
        payload = build_report_payload(results, context.now)
        try:
            async with self._session_factory() as session:
                outcome = await BusinessReportService(session).save(
                    payload, context.week, generated_at=context.now
                )
        except Exception:
            logger.exception("Failed to persist business intelligence report; returning unsaved results.")
            return IntelligenceRun(results=results)

        if outcome.created:
            try:
                await self._notifier.send_report(payload)
            except Exception:
                logger.exception("Failed to send business intelligence report notification.")
        return IntelligenceRun(results=results, report_id=outcome.report.id, duplicate=outcome.duplicate)


__all__ = ["BusinessIntelligenceService", "IntelligenceRun", "Section"]
