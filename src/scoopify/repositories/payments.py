"""Aggregate queries over payments."""

from __future__ import annotations

import sqlalchemy as sa
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from ..core.periods import ReportPeriod
from ..models import Payment, PaymentStatus
from .base import BaseRepository, within


class PaymentRepository(BaseRepository[Payment]):
    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Payment)

    async def completed_revenue(self, period: ReportPeriod) -> float:
        """Sum of completed payment amounts created in ``period``; 0 when none."""
        statement = select(sa.func.sum(Payment.amount)).where(
            Payment.status == PaymentStatus.COMPLETED,
            within(Payment.created_at, period),
        )
        return float(await self._scalar(statement) or 0)

    async def count_failed(self, period: ReportPeriod) -> int:
        return await self._count(
            Payment.status == PaymentStatus.FAILED,
            within(Payment.created_at, period),
        )


__all__ = ["PaymentRepository"]
