"""
Tests for the facility persistence service.

Uses the in-memory FakeSupabase client from conftest.py, plus MagicMock
where the exact query builder calls matter (search filter).
"""

from unittest.mock import MagicMock

import pytest

from backend.services.facility_service import (
    FACILITY_NOT_FOUND,
    create_facility,
    delete_facility,
    escape_like,
    get_business_types,
    get_facility_by_id,
    get_facility_stats,
    list_facilities,
    update_facility,
)
from backend.services.keyword_service import get_keywords, replace_keywords
from backend.utils.errors import NotFoundError, UpstreamError, ValidationError


class TestCreateFacility:
    """Tests for create_facility."""

    @pytest.mark.asyncio
    async def test_create_sets_audit_fields(self, fake_db, sample_facility):
        created = await create_facility(fake_db, "user-1", sample_facility)

        assert created["id"] is not None
        assert created["facility_name"] == "Sample Diner"
        assert created["created_by"] == "user-1"
        assert created["updated_by"] == "user-1"
        assert created["created_at"] == created["updated_at"]

    @pytest.mark.asyncio
    async def test_empty_name_is_rejected_without_insert(self, fake_db):
        with pytest.raises(ValidationError) as exc_info:
            await create_facility(fake_db, "user-1", {"facility_name": "   "})

        assert exc_info.value.message == "Facility name is required"
        assert fake_db.tables["facilities"] == []

    @pytest.mark.asyncio
    async def test_malformed_url_is_rejected(self, fake_db):
        with pytest.raises(ValidationError):
            await create_facility(
                fake_db,
                "user-1",
                {"facility_name": "Cafe", "official_site_url": "not a url"},
            )

        assert fake_db.tables["facilities"] == []

    @pytest.mark.asyncio
    async def test_unknown_fields_are_not_written(self, fake_db):
        created = await create_facility(
            fake_db, "user-1", {"facility_name": "Cafe", "created_by": "someone-else", "extra": 1}
        )

        assert created["created_by"] == "user-1"
        assert "extra" not in created

    @pytest.mark.asyncio
    async def test_database_failure_is_upstream_error(self, fake_db):
        fake_db.fail_on("facilities", "insert", Exception("connection refused"))

        with pytest.raises(UpstreamError):
            await create_facility(fake_db, "user-1", {"facility_name": "Cafe"})


class TestGetAndUpdateFacility:
    """Tests for get_facility_by_id and update_facility."""

    @pytest.mark.asyncio
    async def test_missing_facility_raises_not_found(self, fake_db):
        with pytest.raises(NotFoundError) as exc_info:
            await get_facility_by_id(fake_db, "999")

        assert exc_info.value.message == FACILITY_NOT_FOUND

    @pytest.mark.asyncio
    async def test_update_writes_only_supplied_fields(self, fake_db, sample_facility):
        created = await create_facility(fake_db, "user-1", sample_facility)

        updated = await update_facility(
            fake_db, "user-2", str(created["id"]), {"phone": "03-0000-0000"}
        )

        assert updated["phone"] == "03-0000-0000"
        assert updated["facility_name"] == "Sample Diner"
        assert updated["address"] == sample_facility["address"]
        assert updated["updated_by"] == "user-2"
        assert updated["created_by"] == "user-1"

    @pytest.mark.asyncio
    async def test_update_rejects_blank_name(self, fake_db, sample_facility):
        created = await create_facility(fake_db, "user-1", sample_facility)

        with pytest.raises(ValidationError):
            await update_facility(fake_db, "user-1", str(created["id"]), {"facility_name": ""})

    @pytest.mark.asyncio
    async def test_update_missing_facility_raises_not_found(self, fake_db):
        with pytest.raises(NotFoundError):
            await update_facility(fake_db, "user-1", "999", {"phone": "03"})


class TestDeleteFacility:
    """delete_facility removes the facility and all of its keywords."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("keyword_count", [0, 1, 5])
    async def test_delete_clears_keywords(self, fake_db, sample_facility, keyword_count):
        created = await create_facility(fake_db, "user-1", sample_facility)
        other = await create_facility(fake_db, "user-1", {"facility_name": "Other"})
        facility_id = str(created["id"])

        await replace_keywords(
            fake_db,
            facility_id,
            {"menu_service": [f"kw{i}" for i in range(keyword_count)]},
        )
        await replace_keywords(fake_db, str(other["id"]), {"recommended_scene": ["keep me"]})

        await delete_facility(fake_db, facility_id)

        with pytest.raises(NotFoundError):
            await get_facility_by_id(fake_db, facility_id)
        remaining = [row for row in fake_db.tables["keywords"] if str(row["facility_id"]) == facility_id]
        assert remaining == []

        other_keywords = await get_keywords(fake_db, str(other["id"]))
        assert other_keywords["recommended_scene"] == ["keep me"]

    @pytest.mark.asyncio
    async def test_delete_missing_facility_raises_not_found(self, fake_db):
        with pytest.raises(NotFoundError):
            await delete_facility(fake_db, "999")


class TestListFacilities:
    """Tests for list_facilities."""

    @pytest.mark.asyncio
    async def test_pagination_returns_exact_total(self, fake_db):
        for i in range(5):
            await create_facility(fake_db, "user-1", {"facility_name": f"Shop {i}"})

        rows, total = await list_facilities(fake_db, limit=2, offset=0)

        assert len(rows) == 2
        assert total == 5

    @pytest.mark.asyncio
    async def test_business_type_filter(self, fake_db):
        await create_facility(fake_db, "user-1", {"facility_name": "A", "business_type": "hotel"})
        await create_facility(fake_db, "user-1", {"facility_name": "B", "business_type": "cafe"})

        rows, total = await list_facilities(fake_db, business_type="hotel")

        assert total == 1
        assert rows[0]["facility_name"] == "A"

    @pytest.mark.asyncio
    async def test_search_uses_escaped_ilike_filter(self):
        mock_client = MagicMock()
        query = mock_client.table.return_value.select.return_value
        query.or_.return_value = query
        query.order.return_value = query
        query.range.return_value = query
        query.execute.return_value = MagicMock(data=[], count=0)

        await list_facilities(mock_client, search="100%_off")

        query.or_.assert_called_once_with(
            'facility_name.ilike."%100\\\\%\\\\_off%",'
            'address.ilike."%100\\\\%\\\\_off%"'
        )

    def test_escape_like(self):
        assert escape_like("a%b_c\\d") == "a\\%b\\_c\\\\d"


class TestFacilityReports:
    """Tests for get_business_types and get_facility_stats."""

    @pytest.mark.asyncio
    async def test_business_types_are_distinct_and_sorted(self, fake_db):
        for name, business_type in [("A", "hotel"), ("B", "cafe"), ("C", "hotel"), ("D", None)]:
            await create_facility(fake_db, "user-1", {"facility_name": name, "business_type": business_type})

        assert await get_business_types(fake_db) == ["cafe", "hotel"]

    @pytest.mark.asyncio
    async def test_stats_count_per_business_type(self, fake_db):
        for name, business_type in [("A", "hotel"), ("B", "cafe"), ("C", "hotel"), ("D", None)]:
            await create_facility(fake_db, "user-1", {"facility_name": name, "business_type": business_type})

        stats = await get_facility_stats(fake_db)

        assert stats["total_count"] == 4
        assert stats["business_type_counts"] == {"hotel": 2, "cafe": 1}
