"""Integration tests for the admin status and settings endpoints."""

from datetime import date, datetime, timezone

import pytest
from libs.auth.dependencies import get_current_user
from libs.auth.models import AuthUser
from libs.common.config import get_settings
from services.members_service.app.main import app
from services.members_service.models import MemberStatus
from tests.factories import create_member


@pytest.fixture
def mock_dates(monkeypatch):
    monkeypatch.setenv("MOCK_DATE_ENABLED", "true")
    get_settings.cache_clear()
    yield {"X-Mock-Date": "2025-06-15"}
    get_settings.cache_clear()


# ---------------------------------------------------------------------------
# Status sync
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.integration
async def test_sync_member_statuses(client, db_session, mock_dates):
    """POST /admin/status/sync-member-statuses — both passes, camelCase body."""
    await create_member(
        db_session,
        status=MemberStatus.PENDING,
        registration_completed=False,
        card_number="12345",
    )
    await create_member(
        db_session,
        periods=[(date(2023, 3, 1), None)],
        payment_year=2023,
        payment_date=date(2023, 3, 1),
    )

    response = await client.post(
        "/admin/status/sync-member-statuses", headers=mock_dates
    )
    assert response.status_code == 200, response.text
    data = response.json()
    assert data["success"] is True
    assert data["updatedCount"] == 1
    assert data["inactiveUpdatedCount"] == 1
    assert data["failedCount"] == 0

    again = await client.post(
        "/admin/status/sync-member-statuses", headers=mock_dates
    )
    assert again.json()["updatedCount"] == 0
    assert again.json()["inactiveUpdatedCount"] == 0


@pytest.mark.asyncio
@pytest.mark.integration
async def test_sync_reports_partial_failure_as_500(client, db_session, mock_dates):
    await create_member(
        db_session,
        periods=[(date(2020, 1, 1), None), (date(2022, 1, 1), None)],
        payment_year=2022,
        payment_date=date(2022, 2, 1),
    )
    await create_member(
        db_session,
        periods=[(date(2023, 3, 1), None)],
        payment_year=2023,
        payment_date=date(2023, 3, 1),
    )

    response = await client.post(
        "/admin/status/sync-member-statuses", headers=mock_dates
    )
    assert response.status_code == 500
    data = response.json()
    assert data["success"] is False
    assert data["failedCount"] == 1
    assert data["inactiveUpdatedCount"] == 1


@pytest.mark.asyncio
@pytest.mark.integration
async def test_sync_requires_admin(client):
    app.dependency_overrides[get_current_user] = lambda: AuthUser(
        user_id="member-auth-id", role="member"
    )
    response = await client.post("/admin/status/sync-member-statuses")
    assert response.status_code == 403


# ---------------------------------------------------------------------------
# Resolved status
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.integration
async def test_resolved_status_flags_stale_cache(client, db_session, mock_dates):
    """GET /admin/status/members/{id} — resolver verdict beside stored status."""
    member_id = await create_member(
        db_session,
        periods=[(date(2023, 3, 1), None)],
        payment_year=2023,
        payment_date=date(2023, 3, 1),
        activity_hours=1500,
    )

    response = await client.get(f"/admin/status/members/{member_id}", headers=mock_dates)
    assert response.status_code == 200, response.text
    data = response.json()
    assert data["status"] == "inactive"
    assert data["reason"] == "non_payment"
    assert data["stored_status"] == "registered"
    assert data["is_stale"] is True
    assert data["activity_status"] == "passive"
    assert data["fee_status"] == "payment_required"
    assert data["expiry_year"] == 2024


@pytest.mark.asyncio
@pytest.mark.integration
async def test_resolved_status_active_member(client, db_session, mock_dates):
    member_id = await create_member(
        db_session,
        periods=[(date(2019, 1, 1), None)],
        payment_year=2025,
        payment_date=date(2025, 1, 20),
        activity_hours=1200,
        created_at=datetime(2019, 1, 1, tzinfo=timezone.utc),
    )

    response = await client.get(f"/admin/status/members/{member_id}", headers=mock_dates)
    data = response.json()
    assert data["status"] == "registered"
    assert data["is_stale"] is False
    assert data["activity_status"] == "active"
    assert data["activity_hours"] == 20.0
    assert data["fee_status"] == "current"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_resolved_status_unknown_member(client):
    response = await client.get(
        "/admin/status/members/00000000-0000-0000-0000-000000000000"
    )
    assert response.status_code == 404


# ---------------------------------------------------------------------------
# Renewal settings
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.integration
async def test_renewal_settings_defaults_and_update(client):
    response = await client.get("/admin/settings/renewal")
    assert response.status_code == 200
    assert response.json()["renewal_start_month"] == 11
    assert response.json()["renewal_start_day"] == 1
    assert response.json()["activity_hours_threshold"] == 20

    response = await client.put(
        "/admin/settings/renewal",
        json={
            "renewal_start_month": 10,
            "renewal_start_day": 15,
            "activity_hours_threshold": 25,
        },
    )
    assert response.status_code == 200, response.text

    data = (await client.get("/admin/settings/renewal")).json()
    assert data["renewal_start_month"] == 10
    assert data["renewal_start_day"] == 15
    assert data["activity_hours_threshold"] == 25
    assert data["updated_by"] == "admin-auth-id"


@pytest.mark.asyncio
@pytest.mark.integration
@pytest.mark.parametrize(
    "payload",
    [
        {"renewal_start_month": 13, "renewal_start_day": 1, "activity_hours_threshold": 20},
        {"renewal_start_month": 0, "renewal_start_day": 1, "activity_hours_threshold": 20},
        {"renewal_start_month": 4, "renewal_start_day": 31, "activity_hours_threshold": 20},
        {"renewal_start_month": 11, "renewal_start_day": 1, "activity_hours_threshold": -1},
    ],
)
async def test_invalid_renewal_settings_rejected(client, payload):
    response = await client.put("/admin/settings/renewal", json=payload)
    assert response.status_code == 422


@pytest.mark.asyncio
@pytest.mark.integration
async def test_health(client):
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"
