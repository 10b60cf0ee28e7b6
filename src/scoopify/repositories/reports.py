"""Repository for persisted business reports."""

from __future__ import annotations

from datetime import datetime

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from ..models import BusinessReport, ReportType
from .base import BaseRepository


class BusinessReportRepository(BaseRepository[BusinessReport]):
    """Persistence helpers for ``BusinessReport`` entities."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, BusinessReport)

    async def get_for_period(self, report_type: ReportType, period_start: datetime) -> BusinessReport | None:
        result = await self.session.execute(
            select(BusinessReport).where(
                BusinessReport.type == report_type,
                BusinessReport.period_start == period_start,
            )
        )
        return result.scalar_one_or_none()

    async def list_recent(self, *, limit: int = 10, report_type: ReportType | None = None) -> list[BusinessReport]:
        """Most recently generated reports first."""
        statement = select(BusinessReport)
        if report_type is not None:
            statement = statement.where(BusinessReport.type == report_type)
        statement = statement.order_by(BusinessReport.generated_at.desc(), BusinessReport.id.desc()).limit(limit)
        result = await self.session.execute(statement)
        return list(result.scalars().all())

    async def count(self) -> int:
        return await self._count()


__all__ = ["BusinessReportRepository"]
