"""Database repositories encapsulating query logic."""

from __future__ import annotations

from .customers import CustomerRepository
from .payments import PaymentRepository
from .reports import BusinessReportRepository
from .services import EmployeeCompletions, RatingSummary, ServiceRepository
from .workforce import CoverageAreaRepository, EmployeeRepository

__all__ = [
    "BusinessReportRepository",
    "CoverageAreaRepository",
    "CustomerRepository",
    "EmployeeCompletions",
    "EmployeeRepository",
    "PaymentRepository",
    "RatingSummary",
    "ServiceRepository",
]
