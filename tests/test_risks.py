from __future__ import annotations

from datetime import timedelta

import pytest

from conftest import NOW, DataBuilder
from scoopify.core.config import IntelligenceThresholds
from scoopify.models import CustomerStatus, PaymentStatus
from scoopify.schemas.intelligence import Priority, RiskAssessment, RiskType
from scoopify.services.risks import (
    assess_coverage_risk,
    assess_customer_churn_risk,
    assess_employee_retention_risk,
    assess_revenue_decline_risk,
    churn_risk_percentage,
    evaluate_coverage_risk,
    evaluate_customer_churn_risk,
    evaluate_employee_retention_risk,
    evaluate_revenue_decline_risk,
    summarise_risks,
)

THRESHOLDS = IntelligenceThresholds()


def test_coverage_risk_absent_without_customers_or_coverage() -> None:
    assert evaluate_coverage_risk([], [], THRESHOLDS) == RiskAssessment(has_risk=False)


def test_coverage_risk_lists_uncovered_zips_with_medium_priority() -> None:
    risk = evaluate_coverage_risk(["A", "B", "C"], ["A"], THRESHOLDS)

    assert risk.has_risk is True
    assert risk.type is RiskType.COVERAGE_GAP
    assert risk.priority is Priority.MEDIUM
    assert risk.details["uncovered_zips"] == ["B", "C"]


def test_coverage_risk_is_high_above_five_uncovered_zips() -> None:
    five = evaluate_coverage_risk([f"Z{i}" for i in range(5)], [], THRESHOLDS)
    six = evaluate_coverage_risk([f"Z{i}" for i in range(6)], [], THRESHOLDS)

    assert five.priority is Priority.MEDIUM
    assert six.priority is Priority.HIGH


def test_revenue_decline_of_thirty_percent_is_medium() -> None:
    risk = evaluate_revenue_decline_risk(70, 100, THRESHOLDS)

    assert risk.has_risk is True
    assert risk.type is RiskType.REVENUE_DECLINE
    assert risk.priority is Priority.MEDIUM
    assert risk.description == "Revenue declined by 30.0%"


@pytest.mark.parametrize(
    ("recent", "previous", "expected"),
    [(50, 100, Priority.HIGH), (80, 100, None), (10, 0, None), (0, 0, None)],
)
def test_revenue_decline_thresholds(recent: float, previous: float, expected: Priority | None) -> None:
    risk = evaluate_revenue_decline_risk(recent, previous, THRESHOLDS)

    assert risk.priority is expected
    assert risk.has_risk is (expected is not None)


def test_employee_retention_compares_only_employees_present_in_both_windows() -> None:
    risk = evaluate_employee_retention_risk({1: 6, 2: 10, 3: 1}, {1: 10, 2: 10}, THRESHOLDS)

    assert risk.has_risk is True
    assert risk.priority is Priority.MEDIUM
    assert risk.details == {"affected_employees": 1, "employee_ids": [1]}


def test_employee_retention_is_high_above_three_employees() -> None:
    previous = {employee_id: 10 for employee_id in range(1, 5)}
    recent = {employee_id: 2 for employee_id in range(1, 5)}

    assert evaluate_employee_retention_risk(recent, previous, THRESHOLDS).priority is Priority.HIGH


def test_churn_risk_percentage_handles_empty_customer_base() -> None:
    assert churn_risk_percentage(3, 2, 0) == 0.0
    assert churn_risk_percentage(1, 1, 10) == pytest.approx(20.0)


def test_churn_risk_priorities() -> None:
    assert evaluate_customer_churn_risk(1, 0, 10, THRESHOLDS).has_risk is False
    assert evaluate_customer_churn_risk(1, 1, 10, THRESHOLDS).priority is Priority.MEDIUM
    high = evaluate_customer_churn_risk(2, 1, 10, THRESHOLDS)
    assert high.priority is Priority.HIGH
    assert high.description == "30.0% of customers at risk of churning"


def test_thresholds_are_configurable() -> None:
    strict = IntelligenceThresholds(revenue_decline_ratio=0.95, revenue_high_decline_ratio=0.9)

    assert evaluate_revenue_decline_risk(92, 100, THRESHOLDS).has_risk is False
    assert evaluate_revenue_decline_risk(92, 100, strict).priority is Priority.MEDIUM


def test_summarise_risks_keeps_only_flagged_assessments() -> None:
    summary = summarise_risks(
        [
            evaluate_coverage_risk([f"Z{i}" for i in range(6)], [], THRESHOLDS),
            RiskAssessment(),
            evaluate_revenue_decline_risk(70, 100, THRESHOLDS),
        ]
    )

    assert summary.total_risks == 2
    assert summary.high_priority_risks == 1
    assert [risk.type for risk in summary.risks] == [RiskType.COVERAGE_GAP, RiskType.REVENUE_DECLINE]


async def test_assess_coverage_risk_reads_active_rows(session, builder: DataBuilder) -> None:
    employee = await builder.employee()
    await builder.coverage("A", employee)
    await builder.coverage("B", employee, active=False)
    for zip_code in ("A", "B", "C"):
        await builder.customer(zip_code)
    await builder.customer("D", status=CustomerStatus.CANCELLED)

    risk = await assess_coverage_risk(session, THRESHOLDS, NOW)

    assert risk.details == {"uncovered_zips": ["B", "C"], "affected_customers": 2}


async def test_assess_coverage_risk_without_rows(session) -> None:
    assert (await assess_coverage_risk(session, THRESHOLDS, NOW)).has_risk is False


async def test_assess_revenue_decline_risk_uses_adjacent_weeks(session, builder: DataBuilder) -> None:
    await builder.payment(100, created_at=NOW - timedelta(days=10))
    await builder.payment(70, created_at=NOW - timedelta(days=2))
    await builder.payment(500, status=PaymentStatus.FAILED, created_at=NOW - timedelta(days=2))

    risk = await assess_revenue_decline_risk(session, THRESHOLDS, NOW)

    assert risk.priority is Priority.MEDIUM
    assert risk.details == {"recent_revenue": 70.0, "previous_revenue": 100.0}


async def test_assess_employee_retention_risk(session, builder: DataBuilder) -> None:
    employee = await builder.employee()
    customer = await builder.customer()
    for days_ago in (35, 40, 45):
        await builder.service(customer, employee=employee, completed=NOW - timedelta(days=days_ago))
    await builder.service(customer, employee=employee, completed=NOW - timedelta(days=3))

    risk = await assess_employee_retention_risk(session, THRESHOLDS, NOW)

    assert risk.details == {"affected_employees": 1, "employee_ids": [employee.id]}


async def test_assess_customer_churn_risk(session, builder: DataBuilder) -> None:
    for _ in range(4):
        await builder.customer(created_at=NOW - timedelta(days=1))
    await builder.customer(created_at=NOW - timedelta(days=90))
    await builder.payment(10, status=PaymentStatus.FAILED, created_at=NOW - timedelta(days=1))

    risk = await assess_customer_churn_risk(session, THRESHOLDS, NOW)

    assert risk.priority is Priority.HIGH
    assert risk.details["failed_payments"] == 1
    assert risk.details["inactive_customers"] == 1
    assert risk.details["churn_risk_percentage"] == 40.0
