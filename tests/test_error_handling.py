from __future__ import annotations

import pytest
from fastapi import FastAPI, status
from httpx import ASGITransport, AsyncClient
from pydantic import BaseModel
from sqlalchemy.exc import IntegrityError

from scoopify.errors import ApplicationError, NotFoundError
from scoopify.main import create_app


@pytest.fixture()
def app() -> FastAPI:
    return create_app()


def _client(app: FastAPI) -> AsyncClient:
    return AsyncClient(transport=ASGITransport(app=app, raise_app_exceptions=False), base_url="http://test")


async def test_application_error_response_schema(app: FastAPI) -> None:
    @app.get("/error/application")
    async def trigger_application_error() -> None:
        raise ApplicationError(
            "Example failure",
            code="example_error",
            status_code=status.HTTP_418_IM_A_TEAPOT,
            details={"foo": "bar"},
        )

    async with _client(app) as client:
        response = await client.get("/error/application")

    assert response.status_code == status.HTTP_418_IM_A_TEAPOT
    request_id = response.headers["X-Request-ID"]
    assert response.json() == {
        "code": "example_error",
        "message": "Example failure",
        "details": {"foo": "bar", "request_id": request_id},
    }


async def test_validation_error_response_schema(app: FastAPI) -> None:
    class ExamplePayload(BaseModel):
        name: str

    @app.post("/error/validation")
    async def create_item(_: ExamplePayload) -> None:
        return None

    async with _client(app) as client:
        response = await client.post("/error/validation", json={})

    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
    payload = response.json()
    assert payload["code"] == "validation_error"
    assert "errors" in payload["details"]
    assert payload["details"]["request_id"] == response.headers["X-Request-ID"]


async def test_unknown_route_uses_error_envelope(app: FastAPI) -> None:
    async with _client(app) as client:
        response = await client.get("/error/not-found", headers={"X-Request-ID": "missing-1"})

    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json() == {
        "code": "not_found",
        "message": "Not Found",
        "details": {"request_id": "missing-1"},
    }


async def test_not_found_error_carries_details(app: FastAPI) -> None:
    @app.get("/error/report")
    async def missing_report() -> None:
        raise NotFoundError("Report not found.", details={"report_id": 7})

    async with _client(app) as client:
        response = await client.get("/error/report")

    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json()["details"]["report_id"] == 7


async def test_database_errors_use_the_generic_server_error(app: FastAPI) -> None:
    @app.get("/error/database")
    async def trigger_integrity_error() -> None:
        raise IntegrityError("INSERT", {}, Exception("duplicate key"))

    async with _client(app) as client:
        response = await client.get("/error/database")

    assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    assert response.json()["code"] == "server_error"
    assert "duplicate key" not in response.text


async def test_unhandled_error_hides_details(app: FastAPI) -> None:
    @app.get("/error/unhandled")
    async def trigger_unhandled() -> None:
        raise RuntimeError("secret internals")

    async with _client(app) as client:
        response = await client.get("/error/unhandled")

    assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    assert response.json()["code"] == "server_error"
    assert "secret internals" not in response.text


async def test_oversized_request_id_is_replaced(app: FastAPI) -> None:
    async with _client(app) as client:
        response = await client.get("/healthz", headers={"X-Request-ID": "x" * 500})

    assert response.status_code == status.HTTP_200_OK
    assert len(response.headers["X-Request-ID"]) == 36
