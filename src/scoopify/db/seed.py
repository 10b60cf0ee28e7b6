"""Seed script for populating development data."""

from __future__ import annotations

import asyncio
from datetime import timedelta

from sqlmodel import select

from ..core.periods import utcnow
from ..models import (
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
from .session import async_session_maker, init_db

DEMO_EMPLOYEES = (
    ("alex@scoopify.club", "Alex Rivera", ("75201", "75204")),
    ("sam@scoopify.club", "Sam Chen", ("75205",)),
)
DEMO_CUSTOMER_ZIPS = ("75201", "75201", "75204", "75205", "75206", "75209")


async def seed() -> None:
    """Populate the database with a small set of development fixtures."""

    await init_db()
    async with async_session_maker() as session:
        existing = await session.exec(select(User).where(User.email == DEMO_EMPLOYEES[0][0]))
        if existing.first() is not None:
            return

        now = utcnow()
        employees: list[Employee] = []
        for email, name, zips in DEMO_EMPLOYEES:
            user = User(email=email, name=name)
            session.add(user)
            await session.flush()
            employee = Employee(user_id=user.id)
            session.add(employee)
            await session.flush()
            employees.append(employee)
            for zip_code in zips:
                session.add(CoverageArea(zip_code=zip_code, employee_id=employee.id, travel_distance=10.0))

        customers: list[Customer] = []
        for index, zip_code in enumerate(DEMO_CUSTOMER_ZIPS):
            customer = Customer(
                zip_code=zip_code,
                status=CustomerStatus.ACTIVE,
                created_at=now - timedelta(days=7 * index),
            )
            session.add(customer)
            customers.append(customer)
        await session.flush()

        for day in range(14):
            moment = now - timedelta(days=day)
            customer = customers[day % len(customers)]
            employee = employees[day % len(employees)]
            session.add(
                Service(
                    customer_id=customer.id,
                    employee_id=employee.id,
                    status=ServiceStatus.COMPLETED,
                    scheduled_date=moment,
                    completed_date=moment,
                    potential_earnings=18.75,
                    rating=4 + day % 2,
                )
            )
            session.add(
                Payment(
                    customer_id=customer.id,
                    amount=25.0,
                    status=PaymentStatus.FAILED if day % 5 == 4 else PaymentStatus.COMPLETED,
                    created_at=moment,
                )
            )
        session.add(
            Service(
                customer_id=customers[0].id,
                status=ServiceStatus.SCHEDULED,
                scheduled_date=now + timedelta(days=2),
            )
        )
        await session.commit()


def main() -> None:
    """Entry-point hook for ``python -m`` execution."""
    asyncio.run(seed())


if __name__ == "__main__":  # pragma: no cover - manual execution entry-point
    main()
