"""Queries over employees and the zip codes they cover."""

from __future__ import annotations

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from ..core.periods import ReportPeriod
from ..models import CoverageArea, Employee
from .base import BaseRepository, within


class CoverageAreaRepository(BaseRepository[CoverageArea]):
    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, CoverageArea)

    async def distinct_active_zips(self) -> set[str]:
        statement = select(CoverageArea.zip_code).where(CoverageArea.active.is_(True)).distinct()
        result = await self.session.execute(statement)
        return set(result.scalars().all())

    async def count_created(self, period: ReportPeriod) -> int:
        return await self._count(within(CoverageArea.created_at, period))


class EmployeeRepository(BaseRepository[Employee]):
    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Employee)

    async def count_created(self, period: ReportPeriod) -> int:
        return await self._count(within(Employee.created_at, period))


__all__ = ["CoverageAreaRepository", "EmployeeRepository"]
