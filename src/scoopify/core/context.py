"""Execution-scoped context used to correlate log lines."""

from __future__ import annotations

from contextvars import ContextVar, Token

REQUEST_ID_HEADER = "X-Request-ID"
_UNSET = "-"

_request_id_ctx_var: ContextVar[str] = ContextVar("request_id", default=_UNSET)
_job_id_ctx_var: ContextVar[str] = ContextVar("job_id", default=_UNSET)


def get_request_id() -> str:
    """Return the request identifier for the current execution context."""

    return _request_id_ctx_var.get()


def bind_request_id(request_id: str) -> Token[str]:
    return _request_id_ctx_var.set(request_id)


def reset_request_id(token: Token[str]) -> None:
    _request_id_ctx_var.reset(token)


def clear_request_id() -> None:
    _request_id_ctx_var.set(_UNSET)


def get_job_id() -> str:
    """Return the identifier of the background job currently executing, if any."""

    return _job_id_ctx_var.get()


def bind_job_id(job_id: str) -> Token[str]:
    return _job_id_ctx_var.set(job_id)


def reset_job_id(token: Token[str]) -> None:
    _job_id_ctx_var.reset(token)


__all__ = [
    "REQUEST_ID_HEADER",
    "bind_job_id",
    "bind_request_id",
    "clear_request_id",
    "get_job_id",
    "get_request_id",
    "reset_job_id",
    "reset_request_id",
]
