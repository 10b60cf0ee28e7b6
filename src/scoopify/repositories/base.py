"""Base repository implementation supporting asynchronous SQLModel sessions."""

from __future__ import annotations

from typing import Any, Generic, TypeVar

import sqlalchemy as sa
from sqlmodel import SQLModel, select
from sqlmodel.ext.asyncio.session import AsyncSession

from ..core.periods import ReportPeriod

ModelType = TypeVar("ModelType", bound=SQLModel)


def within(column: Any, period: ReportPeriod) -> sa.ColumnElement[bool]:
    """SQL predicate for ``period.start <= column <= period.end``."""
    return sa.and_(column >= period.start, column <= period.end)


class BaseRepository(Generic[ModelType]):
    """Provide shared persistence helpers for repositories."""

    def __init__(self, session: AsyncSession, model_type: type[ModelType]) -> None:
        self._session = session
        self._model_type = model_type

    @property
    def session(self) -> AsyncSession:
        """Return the session associated with the repository."""
        return self._session

    async def get(self, entity_id: int) -> ModelType | None:
        """Retrieve a model instance by its primary key."""
        return await self._session.get(self._model_type, entity_id)

    async def add(self, instance: ModelType) -> ModelType:
        """Add and flush a new entity instance."""
        self._session.add(instance)
        await self._session.flush()
        return instance

    async def refresh(self, instance: ModelType) -> ModelType:
        await self._session.refresh(instance)
        return instance

    async def _scalar(self, statement: Any) -> Any:
        result = await self._session.execute(statement)
        return result.scalar_one()

    async def _count(self, *criteria: Any) -> int:
        statement = select(sa.func.count()).select_from(self._model_type)
        if criteria:
            statement = statement.where(*criteria)
        return int(await self._scalar(statement) or 0)


__all__ = ["BaseRepository", "ModelType", "within"]
