"""RQ integration helpers for background intelligence runs."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from threading import Lock
from typing import TYPE_CHECKING, TypeVar
from uuid import uuid4

from redis import Redis
from redis.exceptions import RedisError
from rq import Queue
from rq.job import Job, Retry

from .config import get_settings

if TYPE_CHECKING:
    from ..db.session import SessionFactory

logger = logging.getLogger("scoopify.core.jobs")

T = TypeVar("T")

_job_connection: Redis | None = None
_job_queue: Queue | None = None
_job_lock = Lock()
_job_session_factory: SessionFactory | None = None


class JobQueueUnavailableError(RuntimeError):
    """Raised when the Redis-backed job queue cannot be reached."""


def set_job_connection(connection: Redis | None) -> None:
    """Inject a Redis connection for job queue operations (primarily for tests)."""

    global _job_connection, _job_queue
    with _job_lock:
        _job_connection = connection
        _job_queue = None


def close_job_connection() -> None:
    global _job_connection, _job_queue
    with _job_lock:
        connection = _job_connection
        if connection is not None:
            try:
                connection.close()
            except RedisError:
                logger.debug("Failed to close Redis connection cleanly.", exc_info=True)
        _job_connection = None
        _job_queue = None


def set_job_session_factory(factory: SessionFactory | None) -> None:
    """Override the session factory used when executing jobs."""

    global _job_session_factory
    with _job_lock:
        _job_session_factory = factory


@asynccontextmanager
async def _job_session_scope() -> AsyncIterator[SessionFactory]:
    if _job_session_factory is not None:
        yield _job_session_factory
        return

    from ..db.session import isolated_session_factory  # Local import to avoid circular dependency

    async with isolated_session_factory() as factory:
        yield factory


async def execute_with_job_sessions(callback: Callable[[SessionFactory], Awaitable[T]]) -> T:
    """Run ``callback`` with a session factory usable from the job's event loop."""

    async with _job_session_scope() as factory:
        return await callback(factory)


def _resolve_job_connection() -> Redis:
    global _job_connection
    if _job_connection is not None:
        return _job_connection
    settings = get_settings()
    try:
        connection = Redis.from_url(settings.redis_url)
        connection.ping()
    except RedisError as exc:
        logger.error("Redis job queue unavailable.", exc_info=True)
        raise JobQueueUnavailableError("Job queue is unavailable.") from exc
    _job_connection = connection
    return connection


def _resolve_job_queue() -> Queue:
    global _job_queue
    with _job_lock:
        if _job_queue is not None:
            return _job_queue
        connection = _resolve_job_connection()
        settings = get_settings()
        _job_queue = Queue(
            settings.job_queue_name,
            connection=connection,
            default_timeout=settings.job_default_timeout or None,
        )
        return _job_queue


def get_job_connection() -> Redis:
    """Return the Redis connection used for job processing."""

    with _job_lock:
        return _resolve_job_connection()


def get_job_queue() -> Queue:
    """Return the job queue configured for the application."""

    return _resolve_job_queue()


def enqueue_business_intelligence(*, request_id: str | None = None) -> Job:
    """Enqueue one business intelligence run, retried per the job settings."""

    from ..jobs.intelligence import run_business_intelligence_job

    queue = _resolve_job_queue()
    settings = get_settings()
    retry: Retry | None = None
    if settings.job_max_retries > 0:
        retry = Retry(max=settings.job_max_retries, interval=settings.job_retry_backoff_seconds or [0])
    result_ttl = settings.job_result_ttl_seconds or None
    try:
        job = queue.enqueue(
            run_business_intelligence_job,
            request_id,
            job_id=f"business-intelligence-{uuid4()}",
            retry=retry,
            result_ttl=result_ttl,
            failure_ttl=result_ttl,
            description="Generate weekly business intelligence report",
            job_timeout=settings.job_default_timeout or None,
        )
    except RedisError as exc:
        logger.error("Failed to enqueue business intelligence job", exc_info=True)
        raise JobQueueUnavailableError("Unable to enqueue job; Redis is unavailable.") from exc
    logger.info("Enqueued business intelligence job %s", job.id, extra={"queue": queue.name})
    return job


__all__ = [
    "JobQueueUnavailableError",
    "close_job_connection",
    "enqueue_business_intelligence",
    "execute_with_job_sessions",
    "get_job_connection",
    "get_job_queue",
    "set_job_connection",
    "set_job_session_factory",
]
