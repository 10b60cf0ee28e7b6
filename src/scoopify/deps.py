"""Reusable FastAPI dependencies."""

from __future__ import annotations

import logging
import secrets
from typing import Annotated

from fastapi import Depends, Query
from sqlmodel.ext.asyncio.session import AsyncSession

from .core.config import Settings, get_settings
from .db.session import SessionFactory, get_session, get_session_factory
from .errors import UnauthorizedError

logger = logging.getLogger("scoopify.deps")

SettingsDependency = Annotated[Settings, Depends(get_settings)]
DatabaseSessionDependency = Annotated[AsyncSession, Depends(get_session)]
SessionFactoryDependency = Annotated[SessionFactory, Depends(get_session_factory)]


def verify_cron_secret(
    settings: SettingsDependency,
    secret: Annotated[str | None, Query(description="Shared cron secret")] = None,
) -> None:
    """Reject the request unless ``secret`` matches the configured ``CRON_SECRET``.

    An unset ``CRON_SECRET`` rejects every caller.
    """

    expected = settings.cron_secret
    if expected is None:
        logger.warning("CRON_SECRET is not configured; rejecting cron request.")
        raise UnauthorizedError()
    if secret is None or not secrets.compare_digest(secret.encode(), expected.encode()):
        raise UnauthorizedError()


CronSecretDependency = Depends(verify_cron_secret)


__all__ = [
    "CronSecretDependency",
    "DatabaseSessionDependency",
    "SessionFactoryDependency",
    "SettingsDependency",
    "verify_cron_secret",
]
