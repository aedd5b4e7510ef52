"""Integration tests for the admin membership endpoints."""

from datetime import date

import pytest
from services.members_service.models import EndReason, MemberStatus
from tests.factories import create_member


@pytest.mark.asyncio
@pytest.mark.integration
async def test_record_fee_payment(client, db_session):
    """POST /admin/members/{id}/fee-payment — opens the first period."""
    member_id = await create_member(
        db_session, status=MemberStatus.PENDING, registration_completed=False
    )

    response = await client.post(
        f"/admin/members/{member_id}/fee-payment",
        json={"payment_date": "2024-03-10"},
    )
    assert response.status_code == 200, response.text
    data = response.json()
    assert data["details"]["fee_payment_year"] == 2024
    assert data["periods"][0]["start_date"] == "2024-03-10"
    assert data["periods"][0]["end_date"] is None


@pytest.mark.asyncio
@pytest.mark.integration
async def test_assign_card_number(client, db_session):
    """PUT /admin/members/{id}/card — five digits, unique."""
    taken_by = await create_member(db_session, card_number="20001")
    member_id = await create_member(db_session)

    bad = await client.put(f"/admin/members/{member_id}/card", json={"card_number": "12"})
    assert bad.status_code == 422

    taken = await client.put(
        f"/admin/members/{member_id}/card", json={"card_number": "20001"}
    )
    assert taken.status_code == 409
    assert str(taken_by) not in taken.text

    ok = await client.put(
        f"/admin/members/{member_id}/card",
        json={"card_number": "20002", "stamp_issued": True},
    )
    assert ok.status_code == 200, ok.text
    assert ok.json()["details"]["card_number"] == "20002"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_terminate_and_history(client, db_session):
    """POST /terminate then GET /membership — closed period in history."""
    member_id = await create_member(db_session, periods=[(date(2020, 1, 1), None)])

    response = await client.post(
        f"/admin/members/{member_id}/terminate",
        json={"reason": "withdrawal", "end_date": "2020-12-31"},
    )
    assert response.status_code == 200, response.text
    assert response.json()["status"] == "inactive"

    history = await client.get(f"/admin/members/{member_id}/membership")
    assert history.status_code == 200
    data = history.json()
    assert data["current_period"] is None
    assert data["periods"][0]["end_reason"] == EndReason.WITHDRAWAL.value
    assert data["total_days"] == 365


@pytest.mark.asyncio
@pytest.mark.integration
async def test_terminate_with_broken_periods_conflicts(client, db_session):
    member_id = await create_member(
        db_session, periods=[(date(2019, 1, 1), None), (date(2021, 1, 1), None)]
    )
    response = await client.post(
        f"/admin/members/{member_id}/terminate", json={"reason": "other"}
    )
    assert response.status_code == 409
    assert "open membership periods" in response.json()["detail"]
