"""Business risk assessors.

Each ``assess_*`` coroutine gathers its inputs from the database and hands them
to a pure ``evaluate_*`` function that applies ``IntelligenceThresholds``.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from datetime import datetime

from sqlmodel.ext.asyncio.session import AsyncSession

from ..core.config import IntelligenceThresholds
from ..core.periods import preceding_window, trailing_window
from ..repositories import CoverageAreaRepository, CustomerRepository, PaymentRepository, ServiceRepository
from ..schemas.intelligence import Priority, RiskAssessment, RiskSummary, RiskType


def evaluate_coverage_risk(
    customer_zips: Iterable[str],
    covered_zips: Iterable[str],
    thresholds: IntelligenceThresholds,
    *,
    affected_customers: int = 0,
) -> RiskAssessment:
    """Flag zip codes that have active customers but no active coverage."""

    uncovered = sorted(set(customer_zips) - set(covered_zips))
    if not uncovered:
        return RiskAssessment()
    priority = Priority.HIGH if len(uncovered) > thresholds.coverage_gap_high_zip_count else Priority.MEDIUM
    return RiskAssessment(
        has_risk=True,
        type=RiskType.COVERAGE_GAP,
        priority=priority,
        description=f"{len(uncovered)} zip codes have customers but no coverage",
        recommendation="Recruit employees in uncovered areas immediately",
        details={"uncovered_zips": uncovered, "affected_customers": affected_customers},
    )


def evaluate_employee_retention_risk(
    recent: Mapping[int, int],
    previous: Mapping[int, int],
    thresholds: IntelligenceThresholds,
) -> RiskAssessment:
    """Flag employees whose completions dropped below the decline ratio.

    Only employees active in both windows are compared.
    """

    at_risk = sorted(
        employee_id
        for employee_id, completed in recent.items()
        if employee_id in previous and completed < previous[employee_id] * thresholds.retention_decline_ratio
    )
    if not at_risk:
        return RiskAssessment()
    priority = Priority.HIGH if len(at_risk) > thresholds.retention_high_employee_count else Priority.MEDIUM
    return RiskAssessment(
        has_risk=True,
        type=RiskType.EMPLOYEE_RETENTION,
        priority=priority,
        description=f"{len(at_risk)} employees showing declining performance",
        recommendation="Implement employee engagement program and performance coaching",
        details={"affected_employees": len(at_risk), "employee_ids": at_risk},
    )


def churn_risk_percentage(failed_payments: int, inactive_customers: int, active_customers: int) -> float:
    if active_customers <= 0:
        return 0.0
    return (failed_payments + inactive_customers) / active_customers * 100


def evaluate_customer_churn_risk(
    failed_payments: int,
    inactive_customers: int,
    active_customers: int,
    thresholds: IntelligenceThresholds,
) -> RiskAssessment:
    percentage = churn_risk_percentage(failed_payments, inactive_customers, active_customers)
    if percentage <= thresholds.churn_risk_percent:
        return RiskAssessment()
    priority = Priority.HIGH if percentage > thresholds.churn_high_percent else Priority.MEDIUM
    return RiskAssessment(
        has_risk=True,
        type=RiskType.CUSTOMER_CHURN,
        priority=priority,
        description=f"{percentage:.1f}% of customers at risk of churning",
        recommendation="Implement customer retention program and payment recovery",
        details={
            "failed_payments": failed_payments,
            "inactive_customers": inactive_customers,
            "churn_risk_percentage": round(percentage, 2),
        },
    )


def evaluate_revenue_decline_risk(
    recent_amount: float,
    previous_amount: float,
    thresholds: IntelligenceThresholds,
) -> RiskAssessment:
    """Flag a week-over-week revenue drop; no baseline means no risk."""

    if previous_amount <= 0 or recent_amount >= previous_amount * thresholds.revenue_decline_ratio:
        return RiskAssessment()
    high = recent_amount < previous_amount * thresholds.revenue_high_decline_ratio
    decline = (previous_amount - recent_amount) / previous_amount * 100
    return RiskAssessment(
        has_risk=True,
        type=RiskType.REVENUE_DECLINE,
        priority=Priority.HIGH if high else Priority.MEDIUM,
        description=f"Revenue declined by {decline:.1f}%",
        recommendation="Investigate revenue decline and implement growth strategies",
        details={"recent_revenue": recent_amount, "previous_revenue": previous_amount},
    )


async def assess_coverage_risk(
    session: AsyncSession, thresholds: IntelligenceThresholds, now: datetime
) -> RiskAssessment:
    customer_zips = await CustomerRepository(session).distinct_active_zips()
    covered_zips = await CoverageAreaRepository(session).distinct_active_zips()
    uncovered = customer_zips - covered_zips
    affected = await CustomerRepository(session).count_active_in_zips(uncovered)
    return evaluate_coverage_risk(customer_zips, covered_zips, thresholds, affected_customers=affected)


async def assess_employee_retention_risk(
    session: AsyncSession, thresholds: IntelligenceThresholds, now: datetime
) -> RiskAssessment:
    repository = ServiceRepository(session)
    days = thresholds.retention_window_days
    recent = await repository.completions_by_employee(trailing_window(now, days))
    previous = await repository.completions_by_employee(preceding_window(now, days))
    return evaluate_employee_retention_risk(recent, previous, thresholds)


async def assess_customer_churn_risk(
    session: AsyncSession, thresholds: IntelligenceThresholds, now: datetime
) -> RiskAssessment:
    window = trailing_window(now, thresholds.churn_window_days)
    customers = CustomerRepository(session)
    failed = await PaymentRepository(session).count_failed(window)
    inactive = await customers.count_active_not_updated_since(window.start)
    active = await customers.count_active()
    return evaluate_customer_churn_risk(failed, inactive, active, thresholds)


async def assess_revenue_decline_risk(
    session: AsyncSession, thresholds: IntelligenceThresholds, now: datetime
) -> RiskAssessment:
    payments = PaymentRepository(session)
    days = thresholds.revenue_window_days
    recent = await payments.completed_revenue(trailing_window(now, days))
    previous = await payments.completed_revenue(preceding_window(now, days))
    return evaluate_revenue_decline_risk(recent, previous, thresholds)


def summarise_risks(assessments: Iterable[RiskAssessment]) -> RiskSummary:
    """Keep flagged risks in assessor order and count the high-priority ones."""

    risks = [assessment for assessment in assessments if assessment.has_risk]
    return RiskSummary(
        total_risks=len(risks),
        high_priority_risks=sum(1 for risk in risks if risk.priority is Priority.HIGH),
        risks=risks,
    )


RISK_ASSESSORS = (
    ("coverage", assess_coverage_risk),
    ("employee_retention", assess_employee_retention_risk),
    ("customer_churn", assess_customer_churn_risk),
    ("revenue_decline", assess_revenue_decline_risk),
)


__all__ = [
    "RISK_ASSESSORS",
    "assess_coverage_risk",
    "assess_customer_churn_risk",
    "assess_employee_retention_risk",
    "assess_revenue_decline_risk",
    "churn_risk_percentage",
    "evaluate_coverage_risk",
    "evaluate_customer_churn_risk",
    "evaluate_employee_retention_risk",
    "evaluate_revenue_decline_risk",
    "summarise_risks",
]
