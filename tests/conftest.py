from __future__ import annotations

import os

os.environ.setdefault("SCOOPIFY_ENVIRONMENT", "test")
os.environ.setdefault("SCOOPIFY_DATABASE_URL", "sqlite+aiosqlite:///./scoopify-test.db")
os.environ["CRON_SECRET"] = "test-cron-secret"

from collections.abc import AsyncIterator
from dataclasses import dataclass
from datetime import datetime, timezone
from itertools import count

import pytest_asyncio
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker, create_async_engine
from sqlmodel.ext.asyncio.session import AsyncSession

from scoopify.core.config import get_settings
from scoopify.db.base import SQLModel
from scoopify.db.session import get_session, get_session_factory
from scoopify.main import create_app
from scoopify.models import (
    CoverageArea,
    Customer,
    CustomerStatus,
    Employee,
    Payment,
    PaymentStatus,
    Service,
    ServiceStatus,
    User,
)

CRON_SECRET = "test-cron-secret"

# Wednesday; week is 2024-05-13..2024-05-19, month is May 2024.
NOW = datetime(2024, 5, 15, 12, 0, tzinfo=timezone.utc)


@pytest_asyncio.fixture
async def engine(tmp_path) -> AsyncIterator[AsyncEngine]:
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'scoopify.db'}")
    async with engine.begin() as connection:
        await connection.run_sync(SQLModel.metadata.create_all)
    try:
        yield engine
    finally:
        await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def session(session_factory: async_sessionmaker[AsyncSession]) -> AsyncIterator[AsyncSession]:
    async with session_factory() as db_session:
        yield db_session


@dataclass
class DataBuilder:
    """Insert rows directly so aggregates can be checked against known data."""

    session: AsyncSession

    def __post_init__(self) -> None:
        self._sequence = count(1)

    async def _save(self, instance):
        # No refresh: an open read transaction would block writers on SQLite.
        self.session.add(instance)
        await self.session.commit()
        return instance

    async def employee(self, name: str | None = "Employee", *, created_at: datetime = NOW) -> Employee:
        user = await self._save(User(email=f"user-{next(self._sequence)}@example.com", name=name))
        return await self._save(Employee(user_id=user.id, created_at=created_at))

    async def customer(
        self,
        zip_code: str = "75201",
        *,
        status: CustomerStatus = CustomerStatus.ACTIVE,
        created_at: datetime = NOW,
        updated_at: datetime | None = None,
    ) -> Customer:
        return await self._save(
            Customer(zip_code=zip_code, status=status, created_at=created_at, updated_at=updated_at or created_at)
        )

    async def coverage(
        self, zip_code: str, employee: Employee, *, active: bool = True, created_at: datetime = NOW
    ) -> CoverageArea:
        return await self._save(
            CoverageArea(zip_code=zip_code, employee_id=employee.id, active=active, created_at=created_at)
        )

    async def service(
        self,
        customer: Customer,
        *,
        employee: Employee | None = None,
        status: ServiceStatus = ServiceStatus.COMPLETED,
        scheduled: datetime = NOW,
        completed: datetime | None = NOW,
        earnings: float = 0.0,
        rating: int | None = None,
    ) -> Service:
        return await self._save(
            Service(
                customer_id=customer.id,
                employee_id=employee.id if employee is not None else None,
                status=status,
                scheduled_date=scheduled,
                completed_date=completed,
                potential_earnings=earnings,
                rating=rating,
            )
        )

    async def payment(
        self,
        amount: float,
        *,
        status: PaymentStatus = PaymentStatus.COMPLETED,
        created_at: datetime = NOW,
        customer: Customer | None = None,
    ) -> Payment:
        return await self._save(
            Payment(
                amount=amount,
                status=status,
                created_at=created_at,
                customer_id=customer.id if customer is not None else None,
            )
        )


@pytest_asyncio.fixture
async def builder(session: AsyncSession) -> DataBuilder:
    return DataBuilder(session)


@pytest_asyncio.fixture
async def app(session_factory: async_sessionmaker[AsyncSession]) -> AsyncIterator[FastAPI]:
    get_settings.cache_clear()
    application = create_app()

    async def _override_session() -> AsyncIterator[AsyncSession]:
        async with session_factory() as db_session:
            yield db_session

    application.dependency_overrides[get_session] = _override_session
    application.dependency_overrides[get_session_factory] = lambda: session_factory
    try:
        yield application
    finally:
        application.dependency_overrides.clear()


@pytest_asyncio.fixture
async def client(app: FastAPI) -> AsyncIterator[AsyncClient]:
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as http_client:
        yield http_client
