"""Unit tests for organization renewal settings."""

import uuid

import pytest
from services.members_service.services import settings as settings_service
from services.members_service.services.renewal import RenewalSettings
from tests.factories import ORG_ID, OrganizationSettingsFactory


@pytest.mark.asyncio
@pytest.mark.unit
async def test_defaults_when_nothing_is_stored(db_session):
    result = await settings_service.get_renewal_settings(db_session, ORG_ID)
    assert result == RenewalSettings(
        renewal_start_month=11, renewal_start_day=1, activity_hours_threshold=20
    )


@pytest.mark.asyncio
@pytest.mark.unit
async def test_unset_columns_fall_back_to_defaults(db_session):
    db_session.add(
        OrganizationSettingsFactory.create(
            renewal_start_month=10,
            renewal_start_day=None,
            activity_hours_threshold=0,
        )
    )
    await db_session.commit()

    result = await settings_service.get_renewal_settings(db_session, ORG_ID)

    assert result.renewal_start_month == 10
    assert result.renewal_start_day == 1
    assert result.activity_hours_threshold == 0


@pytest.mark.asyncio
@pytest.mark.unit
async def test_update_upserts_and_invalidates_cache(db_session):
    before = await settings_service.get_renewal_settings(db_session, ORG_ID)
    assert before.renewal_start_month == 11

    await settings_service.update_renewal_settings(
        db_session,
        ORG_ID,
        renewal_start_month=10,
        renewal_start_day=15,
        activity_hours_threshold=30,
        updated_by="admin-auth-id",
    )
    after = await settings_service.get_renewal_settings(db_session, ORG_ID)
    row = await settings_service.get_settings_row(db_session, ORG_ID)

    assert after.cutoff.month == 10
    assert after.cutoff.day == 15
    assert after.activity_hours_threshold == 30
    assert row.updated_by == "admin-auth-id"


@pytest.mark.asyncio
@pytest.mark.unit
async def test_settings_are_per_organization(db_session):
    other_org = uuid.uuid4()
    db_session.add(OrganizationSettingsFactory.create(renewal_start_month=9))
    await db_session.commit()

    assert (await settings_service.get_renewal_settings(db_session, ORG_ID)).cutoff.month == 9
    assert (
        await settings_service.get_renewal_settings(db_session, other_org)
    ).cutoff.month == 11


@pytest.mark.asyncio
@pytest.mark.unit
async def test_lookup_failure_falls_back_to_defaults(db_session, monkeypatch):
    async def _broken(db, organization_id):
        raise RuntimeError("settings table unavailable")

    monkeypatch.setattr(settings_service, "get_settings_row", _broken)

    result = await settings_service.get_renewal_settings(db_session, ORG_ID)

    assert result == settings_service.default_renewal_settings()
