"""Aggregate queries over customers."""

from __future__ import annotations

from collections.abc import Collection
from datetime import datetime

import sqlalchemy as sa
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from ..core.periods import ReportPeriod
from ..models import Customer, CustomerStatus
from .base import BaseRepository, within

_DEPARTED_STATUSES = (CustomerStatus.CANCELLED, CustomerStatus.INACTIVE)


class CustomerRepository(BaseRepository[Customer]):
    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Customer)

    async def count_created(self, period: ReportPeriod) -> int:
        return await self._count(within(Customer.created_at, period))

    async def count_active(self) -> int:
        return await self._count(Customer.status == CustomerStatus.ACTIVE)

    async def count_active_not_updated_since(self, moment: datetime) -> int:
        """Active customers whose record has not changed since ``moment``."""
        return await self._count(
            Customer.status == CustomerStatus.ACTIVE,
            Customer.updated_at < moment,
        )

    async def count_departed(self, period: ReportPeriod) -> int:
        """Customers that cancelled or went inactive during ``period``."""
        return await self._count(
            Customer.status.in_(_DEPARTED_STATUSES),
            within(Customer.updated_at, period),
        )

    async def distinct_active_zips(self) -> set[str]:
        statement = select(Customer.zip_code).where(Customer.status == CustomerStatus.ACTIVE).distinct()
        result = await self.session.execute(statement)
        return set(result.scalars().all())

    async def count_active_in_zips(self, zip_codes: Collection[str]) -> int:
        if not zip_codes:
            return 0
        return await self._count(
            Customer.status == CustomerStatus.ACTIVE,
            Customer.zip_code.in_(list(zip_codes)),
        )

    async def count_active_outside_zips(self, zip_codes: Collection[str]) -> int:
        """Active customers whose zip is not in ``zip_codes`` (all of them when empty)."""
        criteria = [Customer.status == CustomerStatus.ACTIVE]
        if zip_codes:
            criteria.append(Customer.zip_code.not_in(list(zip_codes)))
        return await self._count(*criteria)

    async def active_counts_by_zip(self, zip_codes: Collection[str], limit: int) -> list[tuple[str, int]]:
        """Active customer counts for ``zip_codes``, largest first, ties by zip."""
        if not zip_codes:
            return []
        total = sa.func.count(Customer.id).label("total")
        statement = (
            select(Customer.zip_code, total)
            .where(Customer.status == CustomerStatus.ACTIVE, Customer.zip_code.in_(list(zip_codes)))
            .group_by(Customer.zip_code)
            .order_by(total.desc(), Customer.zip_code)
            .limit(limit)
        )
        result = await self.session.execute(statement)
        return [(str(zip_code), int(count)) for zip_code, count in result.all()]


__all__ = ["CustomerRepository"]
