"""Domain models for the business intelligence service."""

from __future__ import annotations

from .common import TimestampMixin
from .coverage import CoverageArea
from .customer import Customer, CustomerStatus
from .payment import Payment, PaymentStatus
from .people import Employee, EmployeeStatus, User
from .report import BusinessReport, ReportType
from .service import Service, ServiceStatus

__all__ = [
    "BusinessReport",
    "CoverageArea",
    "Customer",
    "CustomerStatus",
    "Employee",
    "EmployeeStatus",
    "Payment",
    "PaymentStatus",
    "ReportType",
    "Service",
    "ServiceStatus",
    "TimestampMixin",
    "User",
]
