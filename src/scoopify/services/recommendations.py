"""Threshold checks that turn computed metrics into recommendations and alerts."""

from __future__ import annotations

from datetime import datetime

from sqlmodel.ext.asyncio.session import AsyncSession

from ..core.config import IntelligenceThresholds
from ..core.periods import trailing_window
from ..repositories import CoverageAreaRepository, CustomerRepository, PaymentRepository
from ..schemas.intelligence import Alert, AlertLevel, IntelligenceResults, Priority, Recommendation


def generate_recommendations(
    results: IntelligenceResults,
    thresholds: IntelligenceThresholds,
) -> list[Recommendation]:
    """Derive recommendations in a fixed order: weekly metrics, risks, growth trend.

    Sections that degraded during the run contribute nothing, since their
    zero defaults would otherwise read as real shortfalls.
    """

    recommendations: list[Recommendation] = []

    if not results.is_degraded("weekly_report.metrics"):
        metrics = results.weekly_report.metrics
        if metrics.avg_services_per_employee < thresholds.min_avg_services_per_employee:
            recommendations.append(
                Recommendation(
                    priority=Priority.HIGH,
                    category="OPERATIONS",
                    title="Increase Employee Productivity",
                    description="Average services per employee is below target. Consider training and incentives.",
                    impact=Priority.HIGH,
                    effort=Priority.MEDIUM,
                )
            )
        if metrics.new_customers < thresholds.min_weekly_new_customers:
            recommendations.append(
                Recommendation(
                    priority=Priority.HIGH,
                    category="GROWTH",
                    title="Boost Customer Acquisition",
                    description="New customer signups are low. Increase marketing efforts.",
                    impact=Priority.HIGH,
                    effort=Priority.HIGH,
                )
            )

    for risk in results.risk_assessment.risks:
        if risk.type is None or risk.priority is None:
            continue
        recommendations.append(
            Recommendation(
                priority=risk.priority,
                category="RISK_MITIGATION",
                title=f"Address {risk.type.value.replace('_', ' ')}",
                description=risk.recommendation or "",
                impact=Priority.HIGH,
                effort=Priority.MEDIUM,
            )
        )

    recent_weeks = results.growth_analysis.customer_growth[-thresholds.growth_recent_weeks :]
    if recent_weeks and not results.is_degraded("growth_analysis"):
        average = sum(week.new_customers for week in recent_weeks) / len(recent_weeks)
        if average < thresholds.min_avg_weekly_growth:
            recommendations.append(
                Recommendation(
                    priority=Priority.MEDIUM,
                    category="GROWTH",
                    title="Optimize Customer Growth Strategy",
                    description=(
                        "Customer growth rate is below target. Review marketing channels and conversion rates."
                    ),
                    impact=Priority.MEDIUM,
                    effort=Priority.HIGH,
                )
            )

    return recommendations


def evaluate_alerts(
    uncovered_customers: int,
    recent_failed_payments: int,
    thresholds: IntelligenceThresholds,
) -> list[Alert]:
    alerts: list[Alert] = []
    if uncovered_customers > 0:
        alerts.append(
            Alert(
                type=AlertLevel.CRITICAL,
                title="Customers Without Coverage",
                message=f"{uncovered_customers} customers are in areas without active employees",
                action="URGENT_RECRUITMENT_NEEDED",
            )
        )
    if recent_failed_payments > thresholds.failed_payment_alert_count:
        alerts.append(
            Alert(
                type=AlertLevel.WARNING,
                title="High Payment Failure Rate",
                message=(
                    f"{recent_failed_payments} payment failures in the last "
                    f"{thresholds.failed_payment_alert_days} days"
                ),
                action="REVIEW_PAYMENT_PROCESSES",
            )
        )
    return alerts


async def check_critical_alerts(
    session: AsyncSession,
    thresholds: IntelligenceThresholds,
    now: datetime,
) -> list[Alert]:
    covered = await CoverageAreaRepository(session).distinct_active_zips()
    uncovered_customers = await CustomerRepository(session).count_active_outside_zips(covered)
    failed = await PaymentRepository(session).count_failed(
        trailing_window(now, thresholds.failed_payment_alert_days)
    )
    return evaluate_alerts(uncovered_customers, failed, thresholds)


__all__ = ["check_critical_alerts", "evaluate_alerts", "generate_recommendations"]
