"""Metric aggregators for the weekly, monthly and trend sections.

Every aggregator is an independent coroutine ``(session, context) -> section``
that only issues aggregate queries through the repositories.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal

from sqlmodel.ext.asyncio.session import AsyncSession

from ..core.config import IntelligenceThresholds
from ..core.periods import ReportPeriod, month_period, previous_month_period, recent_weeks, week_period
from ..repositories import (
    CoverageAreaRepository,
    CustomerRepository,
    EmployeeRepository,
    PaymentRepository,
    ServiceRepository,
)
from ..schemas.intelligence import (
    CustomerGrowthPoint,
    EmployeeGrowthPoint,
    ExpansionOpportunity,
    FinancialMetrics,
    GrowthAnalysis,
    MarketExpansionPoint,
    MonthlyGrowth,
    OperationalMetrics,
    PenetrationMetrics,
    RetentionMetrics,
    RevenueGrowthPoint,
    SatisfactionMetrics,
    TopEmployee,
    WeeklyMetrics,
)


@dataclass(frozen=True, slots=True)
class ReportContext:
    """Clock reading, derived periods and policy shared by one run."""

    now: datetime
    week: ReportPeriod
    month: ReportPeriod
    thresholds: IntelligenceThresholds

    @classmethod
    def at(cls, now: datetime, thresholds: IntelligenceThresholds) -> "ReportContext":
        return cls(now=now, week=week_period(now), month=month_period(now), thresholds=thresholds)


def round_half_up(value: float, digits: int = 2) -> float:
    quantum = Decimal(1).scaleb(-digits)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def percentage_change(current: float, previous: float) -> float | None:
    if previous <= 0:
        return None
    return round_half_up((current - previous) / previous * 100)


async def weekly_metrics(session: AsyncSession, context: ReportContext) -> WeeklyMetrics:
    services = ServiceRepository(session)
    completed = await services.count_completed(context.week)
    new_customers = await CustomerRepository(session).count_created(context.week)
    revenue = await PaymentRepository(session).completed_revenue(context.week)
    per_employee = await services.completions_by_employee(context.week, include_unassigned=True)

    # Unassigned visits count as one group in the average but not as an employee.
    average = sum(per_employee.values()) / len(per_employee) if per_employee else 0.0
    return WeeklyMetrics(
        services_completed=completed,
        new_customers=new_customers,
        revenue=round_half_up(revenue),
        avg_services_per_employee=round_half_up(average),
        employee_count=sum(1 for employee_id in per_employee if employee_id is not None),
    )


async def top_employees(session: AsyncSession, context: ReportContext) -> list[TopEmployee]:
    ranked = await ServiceRepository(session).top_employees(context.week, context.thresholds.top_employee_limit)
    return [
        TopEmployee(
            employee_id=row.employee_id,
            name=row.name or "Unknown",
            services_completed=row.services_completed,
            total_earnings=round_half_up(row.total_earnings),
            avg_earnings_per_service=(
                round_half_up(row.total_earnings / row.services_completed) if row.services_completed else 0.0
            ),
        )
        for row in ranked
    ]


async def satisfaction_metrics(session: AsyncSession, context: ReportContext) -> SatisfactionMetrics:
    summary = await ServiceRepository(session).rating_summary(context.week)
    if summary.total_ratings == 0:
        return SatisfactionMetrics()
    return SatisfactionMetrics(
        average_rating=round_half_up(summary.average_rating),
        total_ratings=summary.total_ratings,
        satisfaction_score=int(round_half_up(summary.average_rating / 5 * 100, 0)),
    )


def financial_breakdown(total_revenue: float, thresholds: IntelligenceThresholds) -> FinancialMetrics:
    """Estimate costs from revenue; the split is policy, not bookkeeping."""

    payouts = total_revenue * thresholds.employee_payout_share
    fees = total_revenue * thresholds.platform_fee_rate + (thresholds.platform_fee_fixed if total_revenue > 0 else 0)
    operational = total_revenue * thresholds.operational_cost_rate
    net = total_revenue - payouts - fees - operational
    return FinancialMetrics(
        total_revenue=round_half_up(total_revenue),
        employee_payouts=round_half_up(payouts),
        platform_fees=round_half_up(fees),
        operational_costs=round_half_up(operational),
        net_profit=round_half_up(net),
        profit_margin=round_half_up(net / total_revenue * 100) if total_revenue > 0 else 0.0,
    )


async def financial_metrics(session: AsyncSession, context: ReportContext) -> FinancialMetrics:
    revenue = await PaymentRepository(session).completed_revenue(context.week)
    return financial_breakdown(revenue, context.thresholds)


async def monthly_growth(session: AsyncSession, context: ReportContext) -> MonthlyGrowth:
    previous = previous_month_period(context.now)
    customers = CustomerRepository(session)
    payments = PaymentRepository(session)
    new_customers = await customers.count_created(context.month)
    previous_customers = await customers.count_created(previous)
    revenue = await payments.completed_revenue(context.month)
    previous_revenue = await payments.completed_revenue(previous)
    return MonthlyGrowth(
        new_customers=new_customers,
        previous_new_customers=previous_customers,
        customer_growth_rate=percentage_change(new_customers, previous_customers),
        revenue=round_half_up(revenue),
        previous_revenue=round_half_up(previous_revenue),
        revenue_growth_rate=percentage_change(revenue, previous_revenue),
    )


async def retention_metrics(session: AsyncSession, context: ReportContext) -> RetentionMetrics:
    customers = CustomerRepository(session)
    active = await customers.count_active()
    churned = await customers.count_departed(context.month)
    base = active + churned
    return RetentionMetrics(
        active_customers=active,
        churned_customers=churned,
        retention_rate=round_half_up(active / base * 100) if base else 0.0,
    )


async def penetration_metrics(session: AsyncSession, context: ReportContext) -> PenetrationMetrics:
    customers = CustomerRepository(session)
    customer_zips = await customers.distinct_active_zips()
    covered_zips = await CoverageAreaRepository(session).distinct_active_zips()
    served = customer_zips & covered_zips
    served_customers = await customers.count_active_in_zips(served)
    return PenetrationMetrics(
        customer_zip_codes=len(customer_zips),
        covered_zip_codes=len(covered_zips),
        covered_customer_zip_codes=len(served),
        coverage_rate=round_half_up(len(served) / len(customer_zips) * 100) if customer_zips else 0.0,
        customers_per_covered_zip=round_half_up(served_customers / len(covered_zips)) if covered_zips else 0.0,
    )


async def expansion_opportunities(session: AsyncSession, context: ReportContext) -> list[ExpansionOpportunity]:
    """Uncovered zip codes with the most active customers."""

    customers = CustomerRepository(session)
    uncovered = await customers.distinct_active_zips() - await CoverageAreaRepository(session).distinct_active_zips()
    ranked = await customers.active_counts_by_zip(uncovered, context.thresholds.expansion_limit)
    return [ExpansionOpportunity(zip_code=zip_code, active_customers=count) for zip_code, count in ranked]


async def operational_metrics(session: AsyncSession, context: ReportContext) -> OperationalMetrics:
    services = ServiceRepository(session)
    scheduled = await services.count_scheduled(context.month)
    completed = await services.count_completed(context.month)
    cancelled = await services.count_cancelled(context.month)
    scheduled_completed = await services.count_completed_of_scheduled(context.month)
    elapsed_until = min(context.now, context.month.end)
    elapsed_days = max((elapsed_until - context.month.start).days + 1, 1)
    return OperationalMetrics(
        services_scheduled=scheduled,
        services_completed=completed,
        services_cancelled=cancelled,
        completion_rate=round_half_up(scheduled_completed / scheduled * 100) if scheduled else 0.0,
        avg_completions_per_day=round_half_up(completed / elapsed_days),
    )


async def growth_trends(session: AsyncSession, context: ReportContext) -> GrowthAnalysis:
    customers = CustomerRepository(session)
    payments = PaymentRepository(session)
    employees = EmployeeRepository(session)
    coverage = CoverageAreaRepository(session)

    analysis = GrowthAnalysis()
    cumulative = 0
    for week in recent_weeks(context.now, context.thresholds.growth_weeks):
        label = week.start.isoformat()
        new_customers = await customers.count_created(week)
        cumulative += new_customers
        analysis.customer_growth.append(
            CustomerGrowthPoint(week=label, new_customers=new_customers, cumulative_customers=cumulative)
        )
        analysis.revenue_growth.append(
            RevenueGrowthPoint(week=label, revenue=round_half_up(await payments.completed_revenue(week)))
        )
        analysis.employee_growth.append(
            EmployeeGrowthPoint(week=label, new_employees=await employees.count_created(week))
        )
        analysis.market_expansion.append(
            MarketExpansionPoint(week=label, new_coverage_areas=await coverage.count_created(week))
        )
    return analysis


__all__ = [
    "ReportContext",
    "expansion_opportunities",
    "financial_breakdown",
    "financial_metrics",
    "growth_trends",
    "monthly_growth",
    "operational_metrics",
    "penetration_metrics",
    "percentage_change",
    "retention_metrics",
    "round_half_up",
    "satisfaction_metrics",
    "top_employees",
    "weekly_metrics",
]
