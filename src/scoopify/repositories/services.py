"""Aggregate queries over service visits."""

from __future__ import annotations

from dataclasses import dataclass

import sqlalchemy as sa
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from ..core.periods import ReportPeriod
from ..models import Employee, Service, ServiceStatus, User
from .base import BaseRepository, within


@dataclass(slots=True)
class EmployeeCompletions:
    employee_id: int
    name: str | None
    services_completed: int
    total_earnings: float


@dataclass(slots=True)
class RatingSummary:
    total_ratings: int
    average_rating: float


class ServiceRepository(BaseRepository[Service]):
    """Read-only aggregates over ``Service`` rows."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Service)

    def _completed_in(self, period: ReportPeriod) -> tuple[sa.ColumnElement[bool], ...]:
        return (Service.status == ServiceStatus.COMPLETED, within(Service.completed_date, period))

    async def count_completed(self, period: ReportPeriod) -> int:
        """Count services completed inside ``period`` (both ends inclusive)."""
        return await self._count(*self._completed_in(period))

    async def completions_by_employee(
        self, period: ReportPeriod, *, include_unassigned: bool = False
    ) -> dict[int | None, int]:
        """Completed services per employee.

        With ``include_unassigned`` the visits without an employee are kept as
        one extra group under the ``None`` key.
        """
        conditions = list(self._completed_in(period))
        if not include_unassigned:
            conditions.append(Service.employee_id.is_not(None))
        statement = (
            select(Service.employee_id, sa.func.count(Service.id))
            .where(*conditions)
            .group_by(Service.employee_id)
        )
        result = await self.session.execute(statement)
        return {
            (int(employee_id) if employee_id is not None else None): int(total)
            for employee_id, total in result.all()
        }

    async def top_employees(self, period: ReportPeriod, limit: int) -> list[EmployeeCompletions]:
        """Employees ranked by completions in ``period``, ties broken by id."""
        completed = sa.func.count(Service.id).label("completed")
        earnings = sa.func.coalesce(sa.func.sum(Service.potential_earnings), 0.0).label("earnings")
        statement = (
            select(Service.employee_id, User.name, completed, earnings)
            .select_from(Service)
            .join(Employee, Employee.id == Service.employee_id)
            .outerjoin(User, User.id == Employee.user_id)
            .where(*self._completed_in(period))
            .group_by(Service.employee_id, User.name)
            .order_by(completed.desc(), Service.employee_id)
            .limit(limit)
        )
        result = await self.session.execute(statement)
        return [
            EmployeeCompletions(
                employee_id=int(employee_id),
                name=name,
                services_completed=int(total),
                total_earnings=float(amount or 0),
            )
            for employee_id, name, total, amount in result.all()
        ]

    async def rating_summary(self, period: ReportPeriod) -> RatingSummary:
        statement = select(sa.func.count(Service.rating), sa.func.avg(Service.rating)).where(
            *self._completed_in(period),
            Service.rating.is_not(None),
        )
        result = await self.session.execute(statement)
        total, average = result.one()
        return RatingSummary(total_ratings=int(total or 0), average_rating=float(average or 0))

    async def count_scheduled(self, period: ReportPeriod) -> int:
        return await self._count(within(Service.scheduled_date, period))

    async def count_completed_of_scheduled(self, period: ReportPeriod) -> int:
        """Count services scheduled inside ``period`` that are now completed."""
        return await self._count(
            Service.status == ServiceStatus.COMPLETED,
            within(Service.scheduled_date, period),
        )

    async def count_cancelled(self, period: ReportPeriod) -> int:
        return await self._count(
            Service.status == ServiceStatus.CANCELLED,
            within(Service.scheduled_date, period),
        )


__all__ = ["EmployeeCompletions", "RatingSummary", "ServiceRepository"]
