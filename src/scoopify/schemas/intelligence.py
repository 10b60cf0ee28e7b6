"""Result tree produced by the business intelligence job.

Every section carries zero/empty defaults, so a degraded or empty-database
run still serialises with the complete shape.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class Priority(str, Enum):
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"


class RiskType(str, Enum):
    COVERAGE_GAP = "COVERAGE_GAP"
    EMPLOYEE_RETENTION = "EMPLOYEE_RETENTION"
    CUSTOMER_CHURN = "CUSTOMER_CHURN"
    REVENUE_DECLINE = "REVENUE_DECLINE"


class PeriodBounds(BaseModel):
    start: str | None = None
    end: str | None = None


class WeeklyMetrics(BaseModel):
    services_completed: int = 0
    new_customers: int = 0
    revenue: float = 0.0
    avg_services_per_employee: float = 0.0
    employee_count: int = 0


class TopEmployee(BaseModel):
    employee_id: int
    name: str = "Unknown"
    services_completed: int = 0
    total_earnings: float = 0.0
    avg_earnings_per_service: float = 0.0


class SatisfactionMetrics(BaseModel):
    average_rating: float = 0.0
    total_ratings: int = 0
    satisfaction_score: int = 0


class FinancialMetrics(BaseModel):
    total_revenue: float = 0.0
    employee_payouts: float = 0.0
    platform_fees: float = 0.0
    operational_costs: float = 0.0
    net_profit: float = 0.0
    profit_margin: float = 0.0


class WeeklyReport(BaseModel):
    period: PeriodBounds = Field(default_factory=PeriodBounds)
    metrics: WeeklyMetrics = Field(default_factory=WeeklyMetrics)
    top_employees: list[TopEmployee] = Field(default_factory=list)
    satisfaction: SatisfactionMetrics = Field(default_factory=SatisfactionMetrics)
    financial: FinancialMetrics = Field(default_factory=FinancialMetrics)


class MonthlyGrowth(BaseModel):
    new_customers: int = 0
    previous_new_customers: int = 0
    customer_growth_rate: float | None = None
    revenue: float = 0.0
    previous_revenue: float = 0.0
    revenue_growth_rate: float | None = None


class RetentionMetrics(BaseModel):
    active_customers: int = 0
    churned_customers: int = 0
    retention_rate: float = 0.0


class PenetrationMetrics(BaseModel):
    customer_zip_codes: int = 0
    covered_zip_codes: int = 0
    covered_customer_zip_codes: int = 0
    coverage_rate: float = 0.0
    customers_per_covered_zip: float = 0.0


class MonthlyMetrics(BaseModel):
    growth: MonthlyGrowth = Field(default_factory=MonthlyGrowth)
    retention: RetentionMetrics = Field(default_factory=RetentionMetrics)
    penetration: PenetrationMetrics = Field(default_factory=PenetrationMetrics)


class ExpansionOpportunity(BaseModel):
    zip_code: str
    active_customers: int


class OperationalMetrics(BaseModel):
    services_scheduled: int = 0
    services_completed: int = 0
    services_cancelled: int = 0
    completion_rate: float = 0.0
    avg_completions_per_day: float = 0.0


class MonthlyReport(BaseModel):
    period: PeriodBounds = Field(default_factory=PeriodBounds)
    metrics: MonthlyMetrics = Field(default_factory=MonthlyMetrics)
    expansion: list[ExpansionOpportunity] = Field(default_factory=list)
    operational: OperationalMetrics = Field(default_factory=OperationalMetrics)


class CustomerGrowthPoint(BaseModel):
    week: str
    new_customers: int = 0
    cumulative_customers: int = 0


class RevenueGrowthPoint(BaseModel):
    week: str
    revenue: float = 0.0


class EmployeeGrowthPoint(BaseModel):
    week: str
    new_employees: int = 0


class MarketExpansionPoint(BaseModel):
    week: str
    new_coverage_areas: int = 0


class GrowthAnalysis(BaseModel):
    customer_growth: list[CustomerGrowthPoint] = Field(default_factory=list)
    revenue_growth: list[RevenueGrowthPoint] = Field(default_factory=list)
    employee_growth: list[EmployeeGrowthPoint] = Field(default_factory=list)
    market_expansion: list[MarketExpansionPoint] = Field(default_factory=list)


class RiskAssessment(BaseModel):
    """Outcome of one risk assessor; only ``has_risk`` is meaningful when false."""

    has_risk: bool = False
    type: RiskType | None = None
    priority: Priority | None = None
    description: str | None = None
    recommendation: str | None = None
    details: dict[str, Any] = Field(default_factory=dict)


class RiskSummary(BaseModel):
    total_risks: int = 0
    high_priority_risks: int = 0
    risks: list[RiskAssessment] = Field(default_factory=list)


class Recommendation(BaseModel):
    priority: Priority
    category: str
    title: str
    description: str
    impact: Priority
    effort: Priority


class AlertLevel(str, Enum):
    CRITICAL = "CRITICAL"
    WARNING = "WARNING"


class Alert(BaseModel):
    type: AlertLevel
    title: str
    message: str
    action: str


class SectionFailure(BaseModel):
    """A section that raised and was replaced by its default."""

    section: str
    error: str


class IntelligenceResults(BaseModel):
    weekly_report: WeeklyReport = Field(default_factory=WeeklyReport)
    monthly_report: MonthlyReport = Field(default_factory=MonthlyReport)
    growth_analysis: GrowthAnalysis = Field(default_factory=GrowthAnalysis)
    risk_assessment: RiskSummary = Field(default_factory=RiskSummary)
    recommendations: list[Recommendation] = Field(default_factory=list)
    alerts: list[Alert] = Field(default_factory=list)
    degraded_sections: list[SectionFailure] = Field(default_factory=list)

    def is_degraded(self, section: str) -> bool:
        return any(
            failure.section == section or failure.section.startswith(f"{section}.")
            for failure in self.degraded_sections
        )


class IntelligenceRunResponse(BaseModel):
    """Body returned by the cron endpoint."""

    success: bool = True
    results: IntelligenceResults
    report_id: int | None = None
    duplicate: bool = False


__all__ = [
    "Alert",
    "AlertLevel",
    "CustomerGrowthPoint",
    "EmployeeGrowthPoint",
    "ExpansionOpportunity",
    "FinancialMetrics",
    "GrowthAnalysis",
    "IntelligenceResults",
    "IntelligenceRunResponse",
    "MarketExpansionPoint",
    "MonthlyGrowth",
    "MonthlyMetrics",
    "MonthlyReport",
    "OperationalMetrics",
    "PenetrationMetrics",
    "PeriodBounds",
    "Priority",
    "Recommendation",
    "RetentionMetrics",
    "RevenueGrowthPoint",
    "RiskAssessment",
    "RiskSummary",
    "RiskType",
    "SatisfactionMetrics",
    "SectionFailure",
    "TopEmployee",
    "WeeklyMetrics",
    "WeeklyReport",
]
