from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from conftest import NOW, DataBuilder
from scoopify.core.config import IntelligenceThresholds
from scoopify.models import CustomerStatus, PaymentStatus, ServiceStatus
from scoopify.services.metrics import (
    ReportContext,
    expansion_opportunities,
    financial_breakdown,
    growth_trends,
    monthly_growth,
    operational_metrics,
    penetration_metrics,
    percentage_change,
    retention_metrics,
    round_half_up,
    satisfaction_metrics,
    top_employees,
    weekly_metrics,
)

UTC = timezone.utc
WEEK_START = datetime(2024, 5, 13, tzinfo=UTC)
WEEK_END = datetime(2024, 5, 19, 23, 59, 59, 999999, tzinfo=UTC)


@pytest.fixture()
def context() -> ReportContext:
    return ReportContext.at(NOW, IntelligenceThresholds())


def test_round_half_up() -> None:
    assert round_half_up(2.675) == 2.68
    assert round_half_up(0.125) == 0.13
    assert round_half_up(89.5, 0) == 90.0


def test_percentage_change_without_baseline() -> None:
    assert percentage_change(10, 0) is None
    assert percentage_change(15, 10) == 50.0


def test_financial_breakdown_applies_cost_policy() -> None:
    financial = financial_breakdown(1000.0, IntelligenceThresholds())

    assert financial.total_revenue == 1000.0
    assert financial.employee_payouts == 750.0
    assert financial.platform_fees == 29.3
    assert financial.operational_costs == 50.0
    assert financial.net_profit == 170.7
    assert financial.profit_margin == 17.07


def test_financial_breakdown_without_revenue_is_zero() -> None:
    financial = financial_breakdown(0.0, IntelligenceThresholds())

    assert financial.model_dump() == {
        "total_revenue": 0.0,
        "employee_payouts": 0.0,
        "platform_fees": 0.0,
        "operational_costs": 0.0,
        "net_profit": 0.0,
        "profit_margin": 0.0,
    }


async def test_weekly_metrics_counts_completions_inside_inclusive_bounds(
    session, builder: DataBuilder, context: ReportContext
) -> None:
    first = await builder.employee("First")
    second = await builder.employee("Second")
    customer = await builder.customer(created_at=WEEK_START)
    await builder.service(customer, employee=first, completed=WEEK_START)
    await builder.service(customer, employee=first, completed=WEEK_END)
    await builder.service(customer, employee=second, completed=NOW)
    await builder.service(customer, completed=NOW)
    await builder.service(customer, employee=first, completed=WEEK_START - timedelta(microseconds=1))
    await builder.service(customer, employee=first, completed=WEEK_END + timedelta(microseconds=1))
    await builder.service(customer, employee=second, status=ServiceStatus.CANCELLED, completed=NOW)
    await builder.payment(40.0)
    await builder.payment(15.5, status=PaymentStatus.REFUNDED)

    metrics = await weekly_metrics(session, context)

    assert metrics.services_completed == 4
    assert metrics.new_customers == 1
    assert metrics.revenue == 40.0
    assert metrics.employee_count == 2
    # Two employees plus the unassigned group share four completions.
    assert metrics.avg_services_per_employee == 1.33


async def test_weekly_average_keeps_unassigned_completions_as_a_group(
    session, builder: DataBuilder, context: ReportContext
) -> None:
    employee = await builder.employee()
    customer = await builder.customer()
    await builder.service(customer, employee=employee)
    await builder.service(customer, employee=employee)
    await builder.service(customer)

    metrics = await weekly_metrics(session, context)

    assert metrics.services_completed == 3
    assert metrics.employee_count == 1
    assert metrics.avg_services_per_employee == 1.5


async def test_top_employees_are_ranked_with_earnings(
    session, builder: DataBuilder, context: ReportContext
) -> None:
    busy = await builder.employee("Busy")
    quiet = await builder.employee(None)
    customer = await builder.customer()
    for earnings in (20.0, 25.0):
        await builder.service(customer, employee=busy, earnings=earnings)
    await builder.service(customer, employee=quiet, earnings=10.0)

    ranked = await top_employees(session, context)

    assert [(row.name, row.services_completed) for row in ranked] == [("Busy", 2), ("Unknown", 1)]
    assert ranked[0].total_earnings == 45.0
    assert ranked[0].avg_earnings_per_service == 22.5


async def test_satisfaction_metrics(session, builder: DataBuilder, context: ReportContext) -> None:
    customer = await builder.customer()
    await builder.service(customer, rating=5)
    await builder.service(customer, rating=4)
    await builder.service(customer, rating=None)

    satisfaction = await satisfaction_metrics(session, context)

    assert satisfaction.total_ratings == 2
    assert satisfaction.average_rating == 4.5
    assert satisfaction.satisfaction_score == 90


async def test_monthly_growth_against_previous_month(
    session, builder: DataBuilder, context: ReportContext
) -> None:
    for _ in range(3):
        await builder.customer(created_at=datetime(2024, 5, 2, tzinfo=UTC))
    for _ in range(2):
        await builder.customer(created_at=datetime(2024, 4, 20, tzinfo=UTC))
    await builder.payment(150.0, created_at=datetime(2024, 5, 3, tzinfo=UTC))

    growth = await monthly_growth(session, context)

    assert growth.new_customers == 3
    assert growth.previous_new_customers == 2
    assert growth.customer_growth_rate == 50.0
    assert growth.revenue == 150.0
    assert growth.revenue_growth_rate is None


async def test_retention_and_penetration(session, builder: DataBuilder, context: ReportContext) -> None:
    employee = await builder.employee()
    await builder.coverage("A", employee)
    await builder.coverage("Z", employee)
    for zip_code in ("A", "A", "B"):
        await builder.customer(zip_code)
    await builder.customer("A", status=CustomerStatus.CANCELLED, updated_at=datetime(2024, 5, 10, tzinfo=UTC))

    retention = await retention_metrics(session, context)
    penetration = await penetration_metrics(session, context)

    assert retention.active_customers == 3
    assert retention.churned_customers == 1
    assert retention.retention_rate == 75.0
    assert penetration.customer_zip_codes == 2
    assert penetration.covered_zip_codes == 2
    assert penetration.covered_customer_zip_codes == 1
    assert penetration.coverage_rate == 50.0
    assert penetration.customers_per_covered_zip == 1.0


async def test_expansion_opportunities_rank_uncovered_zips(
    session, builder: DataBuilder, context: ReportContext
) -> None:
    employee = await builder.employee()
    await builder.coverage("A", employee)
    for zip_code in ("A", "B", "C", "C"):
        await builder.customer(zip_code)

    opportunities = await expansion_opportunities(session, context)

    assert [(item.zip_code, item.active_customers) for item in opportunities] == [("C", 2), ("B", 1)]


async def test_operational_metrics(session, builder: DataBuilder, context: ReportContext) -> None:
    customer = await builder.customer()
    await builder.service(customer, scheduled=datetime(2024, 5, 1, tzinfo=UTC))
    await builder.service(
        customer, status=ServiceStatus.CANCELLED, scheduled=datetime(2024, 5, 2, tzinfo=UTC), completed=None
    )
    await builder.service(
        customer, status=ServiceStatus.SCHEDULED, scheduled=datetime(2024, 5, 20, tzinfo=UTC), completed=None
    )

    operational = await operational_metrics(session, context)

    assert operational.services_scheduled == 3
    assert operational.services_completed == 1
    assert operational.services_cancelled == 1
    assert operational.completion_rate == 33.33
    assert operational.avg_completions_per_day == 0.07


async def test_completion_rate_ignores_visits_scheduled_in_previous_month(
    session, builder: DataBuilder, context: ReportContext
) -> None:
    customer = await builder.customer()
    for _ in range(3):
        await builder.service(customer, scheduled=datetime(2024, 4, 29, tzinfo=UTC), completed=NOW)
    await builder.service(
        customer, status=ServiceStatus.SCHEDULED, scheduled=datetime(2024, 5, 20, tzinfo=UTC), completed=None
    )

    operational = await operational_metrics(session, context)

    assert operational.services_scheduled == 1
    assert operational.services_completed == 3
    assert operational.completion_rate == 0.0


async def test_completion_rate_never_exceeds_one_hundred(
    session, builder: DataBuilder, context: ReportContext
) -> None:
    customer = await builder.customer()
    await builder.service(
        customer, scheduled=datetime(2024, 4, 30, tzinfo=UTC), completed=datetime(2024, 5, 2, tzinfo=UTC)
    )
    await builder.service(
        customer, scheduled=datetime(2024, 5, 3, tzinfo=UTC), completed=datetime(2024, 5, 3, tzinfo=UTC)
    )

    operational = await operational_metrics(session, context)

    assert operational.services_completed == 2
    assert operational.completion_rate == 100.0


async def test_growth_trends_cover_twelve_weeks(session, builder: DataBuilder, context: ReportContext) -> None:
    await builder.customer(created_at=NOW - timedelta(days=14))
    await builder.customer(created_at=NOW)
    await builder.employee(created_at=NOW)
    await builder.payment(12.5, created_at=NOW - timedelta(days=7))

    trends = await growth_trends(session, context)

    assert len(trends.customer_growth) == 12
    assert trends.customer_growth[-1].week == WEEK_START.isoformat()
    assert [point.new_customers for point in trends.customer_growth[-3:]] == [1, 0, 1]
    assert trends.customer_growth[-1].cumulative_customers == 2
    assert trends.revenue_growth[-2].revenue == 12.5
    assert trends.employee_growth[-1].new_employees == 1
    assert sum(point.new_coverage_areas for point in trends.market_expansion) == 0
