from __future__ import annotations

from fastapi import status
from httpx import AsyncClient

from conftest import CRON_SECRET

REPORTS_PATH = "/api/reports/business-intelligence"


async def test_list_reports_requires_secret(client: AsyncClient) -> None:
    response = await client.get(REPORTS_PATH)

    assert response.status_code == status.HTTP_401_UNAUTHORIZED


async def test_stored_report_can_be_listed_and_fetched(client: AsyncClient) -> None:
    created = await client.post("/api/cron/business-intelligence", params={"secret": CRON_SECRET})
    report_id = created.json()["report_id"]

    listing = await client.get(REPORTS_PATH, params={"secret": CRON_SECRET, "limit": 5})

    assert listing.status_code == status.HTTP_200_OK
    body = listing.json()
    assert body["limit"] == 5
    assert [item["id"] for item in body["items"]] == [report_id]
    assert body["items"][0]["type"] == "WEEKLY_INTELLIGENCE"
    assert "report_data" not in body["items"][0]

    detail = await client.get(f"{REPORTS_PATH}/{report_id}", params={"secret": CRON_SECRET})

    assert detail.status_code == status.HTTP_200_OK
    report_data = detail.json()["report_data"]
    assert set(report_data) == {"timestamp", "summary", "details"}
    assert report_data["summary"]["degraded_sections"] == []


async def test_missing_report_returns_not_found_envelope(client: AsyncClient) -> None:
    response = await client.get(f"{REPORTS_PATH}/999", params={"secret": CRON_SECRET})

    assert response.status_code == status.HTTP_404_NOT_FOUND
    payload = response.json()
    assert payload["code"] == "not_found"
    assert payload["details"]["report_id"] == 999
    assert payload["details"]["request_id"] == response.headers["X-Request-ID"]


async def test_list_limit_is_validated(client: AsyncClient) -> None:
    response = await client.get(REPORTS_PATH, params={"secret": CRON_SECRET, "limit": 0})

    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
    assert response.json()["code"] == "validation_error"
