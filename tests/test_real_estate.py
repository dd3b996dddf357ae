"""Tests for the real estate services that read and write property data."""

import uuid
from datetime import date

import pytest

from lifeos_backend.core.exceptions import NotFoundError
from lifeos_backend.modules.real_estate import crud, services
from lifeos_backend.modules.real_estate.schemas import (
    OperatingDataUpsert,
    TechnicalStatusUpsert,
    TenantChangeCreate,
)

TODAY = date(2026, 10, 16)


class TestOperatingData:
    async def test_month_is_normalised(self, db_session, user_id, make_property):
        prop = await make_property()

        row = await services.upsert_operating_data(
            db_session,
            user_id,
            prop.id,
            OperatingDataUpsert(month=date(2026, 10, 17), actual_cold_rent=2000.0),
        )

        assert row.month == date(2026, 10, 1)
        assert row.actual_cold_rent == 2000.0

    async def test_same_month_updates_row(self, db_session, user_id, make_property):
        prop = await make_property()
        first = await services.upsert_operating_data(
            db_session,
            user_id,
            prop.id,
            OperatingDataUpsert(month=date(2026, 10, 1), actual_cold_rent=2000.0),
        )

        second = await services.upsert_operating_data(
            db_session,
            user_id,
            prop.id,
            OperatingDataUpsert(month=date(2026, 10, 31), non_allocable_costs=250.0),
        )

        assert second.id == first.id
        assert second.actual_cold_rent == 2000.0
        assert second.non_allocable_costs == 250.0
        rows = await crud.get_operating_data_since(
            db_session, user_id, date(2026, 1, 1), property_id=prop.id
        )
        assert len(rows) == 1

    async def test_new_month_inserts_row(self, db_session, user_id, make_property):
        prop = await make_property()
        for month in [date(2026, 9, 1), date(2026, 10, 1)]:
            await services.upsert_operating_data(
                db_session,
                user_id,
                prop.id,
                OperatingDataUpsert(month=month, actual_cold_rent=2000.0),
            )

        rows = await crud.get_operating_data_since(
            db_session, user_id, date(2026, 1, 1), property_id=prop.id
        )

        assert len(rows) == 2

    async def test_unknown_property(self, db_session, user_id):
        with pytest.raises(NotFoundError):
            await services.upsert_operating_data(
                db_session,
                user_id,
                uuid.uuid4(),
                OperatingDataUpsert(month=date(2026, 10, 1)),
            )

    async def test_list_is_limited_to_window(self, db_session, user_id, make_property):
        prop = await make_property()
        other = await make_property(name="Dresdner Str. 5", city="Dresden")
        for prop_id, month in [
            (prop.id, date(2026, 1, 1)),
            (prop.id, date(2026, 9, 1)),
            (prop.id, date(2026, 10, 1)),
            (other.id, date(2026, 10, 1)),
        ]:
            await services.upsert_operating_data(
                db_session,
                user_id,
                prop_id,
                OperatingDataUpsert(month=month, actual_cold_rent=1000.0),
            )

        rows = await services.list_operating_data(db_session, user_id, prop.id, 3, TODAY)

        assert [r.month for r in rows] == [date(2026, 10, 1), date(2026, 9, 1)]
        assert all(r.property_id == prop.id for r in rows)


class TestTechnicalStatus:
    async def test_upsert_keeps_other_components(self, db_session, user_id, make_property):
        prop = await make_property()
        first = await services.upsert_technical_status(
            db_session, user_id, prop.id, TechnicalStatusUpsert(heating_status="red")
        )

        second = await services.upsert_technical_status(
            db_session,
            user_id,
            prop.id,
            TechnicalStatusUpsert(roof_status="yellow", last_inspection_date=TODAY),
        )

        assert second.id == first.id
        assert second.heating_status == "red"
        assert second.roof_status == "yellow"
        assert second.last_inspection_date == TODAY
        assert (
            await services.get_technical_status(db_session, user_id, prop.id)
        ).id == first.id

    async def test_no_status_yet(self, db_session, user_id, make_property):
        prop = await make_property()

        assert await services.get_technical_status(db_session, user_id, prop.id) is None


class TestTenantChanges:
    async def test_newest_first(self, db_session, user_id, make_property):
        prop = await make_property()
        for change_date, change_type in [
            (date(2025, 3, 1), "auszug"),
            (date(2026, 6, 1), "einzug"),
            (date(2025, 11, 15), "mieterhöhung"),
        ]:
            await services.add_tenant_change(
                db_session,
                user_id,
                prop.id,
                TenantChangeCreate(change_date=change_date, change_type=change_type),
            )

        changes = await services.list_tenant_changes(db_session, user_id, prop.id)

        assert [c.change_type for c in changes] == ["einzug", "mieterhöhung", "auszug"]

    async def test_changes_are_per_property(self, db_session, user_id, make_property):
        prop = await make_property()
        other = await make_property(name="Dresdner Str. 5")
        await services.add_tenant_change(
            db_session,
            user_id,
            other.id,
            TenantChangeCreate(change_date=TODAY, change_type="einzug"),
        )

        assert await services.list_tenant_changes(db_session, user_id, prop.id) == []


class TestPropertyCities:
    async def test_distinct_sorted_cities(self, db_session, user_id, make_property):
        await make_property(city="Leipzig")
        await make_property(name="Dresdner Str. 5", city="Dresden")
        await make_property(name="Karl-Heine-Str. 2", city="Leipzig")
        await make_property(name="Ohne Ort", city=None)

        cities = await crud.get_property_cities(db_session, user_id)

        assert cities == ["Dresden", "Leipzig"]

    async def test_cities_of_other_users_are_hidden(self, db_session, make_property):
        await make_property(city="Leipzig")

        assert await crud.get_property_cities(db_session, uuid.uuid4()) == []

    async def test_cities_endpoint(self, client, auth_headers, make_property):
        await make_property(city="Leipzig")
        await make_property(name="Dresdner Str. 5", city="Dresden")

        response = await client.get("/api/properties/cities", headers=auth_headers)

        assert response.status_code == 200
        assert response.json()["data"] == ["Dresden", "Leipzig"]
