"""Tests for POST /attendance/clock-in and GET /health."""

from datetime import datetime, timedelta, timezone

import pytest
from httpx import AsyncClient
from sqlalchemy import select

from timeclock.models.attendance import Attendance

URL = "/api/v1/attendance/clock-in"
JST = timezone(timedelta(hours=9))


@pytest.mark.asyncio
async def test_clock_in_returns_success(async_client: AsyncClient, employee):
    """A registered employee clocking in at a past time gets 200."""
    resp = await async_client.post(
        URL, json={"employee_id": "ij09080022", "timestamp": "2024-01-15T09:00:00+09:00"}
    )
    assert resp.status_code == 200
    assert resp.json() == {
        "success": True,
        "employee_id": "ij09080022",
        "clock_in_time": "2024-01-15T09:00:00+09:00",
    }


@pytest.mark.asyncio
async def test_clock_in_twice_keeps_one_working_row(async_client: AsyncClient, employee, session_factory):
    body = {"employee_id": "ij09080022", "timestamp": datetime.now(JST).isoformat()}
    r1 = await async_client.post(URL, json=body)
    r2 = await async_client.post(URL, json=body)
    assert r1.status_code == 200
    assert r2.status_code == 200

    async with session_factory() as session:
        rows = (await session.execute(select(Attendance))).scalars().all()
    assert len(rows) == 1
    assert rows[0].status == "working"


@pytest.mark.asyncio
async def test_clock_in_rejects_empty_employee_id(async_client: AsyncClient, employee):
    resp = await async_client.post(
        URL, json={"employee_id": "", "timestamp": "2024-01-15T09:00:00+09:00"}
    )
    assert resp.status_code == 400
    assert resp.json() == {"success": False, "error": "Employee ID cannot be empty"}


@pytest.mark.asyncio
async def test_clock_in_rejects_future_timestamp(async_client: AsyncClient, employee):
    future = (datetime.now(JST) + timedelta(hours=1)).isoformat()
    resp = await async_client.post(URL, json={"employee_id": "ij09080022", "timestamp": future})
    assert resp.status_code == 400
    data = resp.json()
    assert data["success"] is False
    assert data["error"].startswith("Future timestamp not allowed")


@pytest.mark.asyncio
async def test_clock_in_rejects_unknown_employee(async_client: AsyncClient, employee):
    resp = await async_client.post(
        URL, json={"employee_id": "UNKNOWN-99", "timestamp": "2024-01-15T09:00:00+09:00"}
    )
    assert resp.status_code == 400
    assert resp.json() == {"success": False, "error": "Employee not found: UNKNOWN-99"}


@pytest.mark.asyncio
async def test_clock_in_rejects_timestamp_without_offset(async_client: AsyncClient, employee):
    resp = await async_client.post(
        URL, json={"employee_id": "ij09080022", "timestamp": "2024-01-15T09:00:00"}
    )
    assert resp.status_code == 400
    assert "missing UTC offset" in resp.json()["error"]


@pytest.mark.asyncio
async def test_clock_in_rejects_timestamp_outside_utc_range(
    async_client: AsyncClient, employee, session_factory
):
    """Year-1 local time that falls before year 1 in UTC is a validation error."""
    resp = await async_client.post(
        URL, json={"employee_id": "ij09080022", "timestamp": "0001-01-01T00:00:00+09:00"}
    )
    assert resp.status_code == 400
    assert resp.json() == {
        "success": False,
        "error": "Invalid timestamp: '0001-01-01T00:00:00+09:00' (out of range)",
    }

    async with session_factory() as session:
        assert (await session.execute(select(Attendance))).scalars().all() == []


@pytest.mark.asyncio
async def test_clock_in_rejects_malformed_body(async_client: AsyncClient):
    """Missing fields use the same 400 envelope as workflow errors."""
    resp = await async_client.post(URL, json={"employee_id": "ij09080022"})
    assert resp.status_code == 400
    data = resp.json()
    assert data["success"] is False
    assert "timestamp" in data["error"]


@pytest.mark.asyncio
async def test_clock_in_database_failure_is_reported(async_client: AsyncClient, employee):
    from unittest.mock import patch

    from sqlalchemy.exc import OperationalError
    from sqlalchemy.ext.asyncio import AsyncSession

    failure = OperationalError("SELECT", {}, Exception("server closed the connection"))
    with patch.object(AsyncSession, "execute", side_effect=failure):
        resp = await async_client.post(
            URL, json={"employee_id": "ij09080022", "timestamp": "2024-01-15T09:00:00+09:00"}
        )
    assert resp.status_code == 400
    data = resp.json()
    assert data["success"] is False
    assert data["error"].startswith("Database error:")
    assert "server closed the connection" in data["error"]


@pytest.mark.asyncio
async def test_health_reports_db(async_client: AsyncClient):
    resp = await async_client.get("/api/v1/health")
    assert resp.status_code == 200
    assert resp.json() == {"db": True}
