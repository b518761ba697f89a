"""
Integration tests for the DuckDB-backed region store.

Each test runs against a fresh database file under tmp_path.
"""
import duckdb
import pytest
from datetime import date

from revenue.exceptions import (
    ConflictError,
    DuplicateError,
    NotFoundError,
    NotFoundTable,
    UnknownError,
    ValidationError,
)
from revenue.models import Region
from revenue.store import RegionStore


class TestAccounts:
    """Tests for per-region account CRUD."""

    @pytest.mark.asyncio
    async def test_create_and_list_ordered(self, store):
        await store.create_account(Region.UK, "UK-002", "Manchester")
        await store.create_account("uk", "UK-001", "London")

        accounts = await store.list_accounts(Region.UK)
        assert [a.account_id for a in accounts] == ["UK-001", "UK-002"]
        assert accounts[0].name == "London"
        assert accounts[0].active is True

    @pytest.mark.asyncio
    async def test_regions_are_isolated(self, store):
        await store.create_account(Region.UK, "UK-001", "London")

        assert await store.list_accounts(Region.USA) == []
        assert await store.list_accounts(Region.ALE) == []

    @pytest.mark.asyncio
    async def test_default_name(self, store):
        account = await store.create_account(Region.USA, "C-001")
        assert account.name == "Account C-001"

    @pytest.mark.asyncio
    async def test_duplicate_id_rejected(self, store):
        await store.create_account(Region.USA, "C-001", "One")

        with pytest.raises(DuplicateError):
            await store.create_account(Region.USA, "C-001", "Again")

    @pytest.mark.asyncio
    async def test_same_id_allowed_in_other_region(self, store):
        await store.create_account(Region.USA, "C-BONUSES", "Bonuses")
        account = await store.create_account(Region.ALE, "C-BONUSES", "Bonuses")
        assert account.account_id == "C-BONUSES"

    @pytest.mark.asyncio
    async def test_update_name_and_status(self, store):
        await store.create_account(Region.USA, "C-001", "One")

        account = await store.update_account(Region.USA, "C-001", name="Renamed", active=False)
        assert account.name == "Renamed"
        assert account.active is False

    @pytest.mark.asyncio
    async def test_update_missing_account(self, store):
        with pytest.raises(NotFoundError):
            await store.update_account(Region.USA, "C-404", name="Ghost")

    @pytest.mark.asyncio
    async def test_delete_account(self, store):
        await store.create_account(Region.USA, "C-001", "One")
        await store.delete_account(Region.USA, "C-001")
        assert await store.get_account(Region.USA, "C-001") is None

    @pytest.mark.asyncio
    async def test_delete_missing_account(self, store):
        with pytest.raises(NotFoundError):
            await store.delete_account(Region.UK, "UK-404")

    @pytest.mark.asyncio
    async def test_delete_with_records_conflicts(self, store):
        """Delete is blocked and leaves the account and its records untouched."""
        await store.create_account(Region.USA, "C-001", "One")
        record = await store.create_record(Region.USA, "2026-03-01", "C-001", gmv=100, sales=2)

        with pytest.raises(ConflictError) as exc_info:
            await store.delete_account(Region.USA, "C-001")

        assert "records exist" in str(exc_info.value)
        assert await store.get_account(Region.USA, "C-001") is not None
        assert [r.id for r in await store.list_records(Region.USA)] == [record.id]

    @pytest.mark.asyncio
    async def test_invalid_region(self, store):
        with pytest.raises(ValidationError):
            await store.list_accounts("br")


class TestRecords:
    """Tests for per-region revenue record CRUD."""

    @pytest.mark.asyncio
    async def test_create_record(self, store):
        await store.create_account(Region.UK, "UK-001", "London")

        record = await store.create_record(
            Region.UK, date(2026, 3, 1), "UK-001",
            gmv=100.5, sales=1, commission_secondary=30,
        )

        assert record.id
        assert record.date == date(2026, 3, 1)
        assert record.gmv == 100.5
        assert record.commission_primary == 0
        assert record.commission_secondary == 30
        assert record.created_at is not None

    @pytest.mark.asyncio
    async def test_list_newest_first(self, store):
        await store.create_account(Region.USA, "C-001", "One")
        for day in ("2026-03-02", "2026-03-10", "2026-02-27"):
            await store.create_record(Region.USA, day, "C-001", gmv=1)

        records = await store.list_records(Region.USA)
        assert [r.date for r in records] == [date(2026, 3, 10), date(2026, 3, 2), date(2026, 2, 27)]

    @pytest.mark.asyncio
    async def test_account_from_other_region_rejected(self, store):
        await store.create_account(Region.USA, "C-001", "One")

        with pytest.raises(ValidationError):
            await store.create_record(Region.UK, "2026-03-01", "C-001", gmv=1)

    @pytest.mark.asyncio
    async def test_negative_amount_rejected(self, store):
        await store.create_account(Region.USA, "C-001", "One")

        with pytest.raises(ValidationError):
            await store.create_record(Region.USA, "2026-03-01", "C-001", gmv=-5)

    @pytest.mark.asyncio
    async def test_update_partial_fields(self, store):
        await store.create_account(Region.USA, "C-001", "One")
        record = await store.create_record(Region.USA, "2026-03-01", "C-001", gmv=10, sales=1)

        updated = await store.update_record(Region.USA, record.id, gmv=25.25, date="2026-03-02")

        assert updated.gmv == 25.25
        assert updated.date == date(2026, 3, 2)
        assert updated.sales == 1

    @pytest.mark.asyncio
    async def test_update_unknown_field(self, store):
        await store.create_account(Region.USA, "C-001", "One")
        record = await store.create_record(Region.USA, "2026-03-01", "C-001")

        with pytest.raises(ValidationError):
            await store.update_record(Region.USA, record.id, commission_tier=3)

    @pytest.mark.asyncio
    async def test_update_missing_record(self, store):
        with pytest.raises(NotFoundError):
            await store.update_record(Region.USA, "nope", gmv=1)

    @pytest.mark.asyncio
    async def test_delete_record(self, store):
        await store.create_account(Region.ALE, "ALE-001", "Berlin")
        record = await store.create_record(Region.ALE, "2026-03-01", "ALE-001", gmv=5)

        await store.delete_record(Region.ALE, record.id)

        assert await store.list_records(Region.ALE) == []
        with pytest.raises(NotFoundError):
            await store.delete_record(Region.ALE, record.id)

    @pytest.mark.asyncio
    async def test_last_update_time(self, store):
        assert await store.get_last_update_time(Region.USA) is None

        await store.create_account(Region.USA, "C-001", "One")
        record = await store.create_record(Region.USA, "2026-03-01", "C-001")

        assert await store.get_last_update_time(Region.USA) == record.updated_at


class TestMissingTables:
    """Tests for the missing-table policy."""

    @pytest.mark.asyncio
    async def test_ale_missing_lists_empty(self, store_without_ale):
        assert await store_without_ale.list_accounts(Region.ALE) == []
        assert await store_without_ale.list_records(Region.ALE) == []
        assert await store_without_ale.get_last_update_time(Region.ALE) is None

    @pytest.mark.asyncio
    async def test_ale_missing_still_fails_writes(self, store_without_ale):
        with pytest.raises(NotFoundTable):
            await store_without_ale.create_account(Region.ALE, "ALE-001", "Berlin")

    @pytest.mark.asyncio
    async def test_uk_missing_is_hard_error(self, store):
        await store.execute("DROP TABLE accounts_uk")

        with pytest.raises(NotFoundTable) as exc_info:
            await store.list_accounts(Region.UK)
        assert exc_info.value.region == "UK"

    @pytest.mark.asyncio
    async def test_stats_tolerate_missing_ale(self, store_without_ale):
        await store_without_ale.create_account(Region.USA, "C-001", "One")

        stats = await store_without_ale.get_stats()
        assert stats["usa"] == {"accounts": 1, "records": 0}
        assert stats["ale"] == {"accounts": 0, "records": 0}


class TestConnect:
    @pytest.mark.asyncio
    async def test_connect_failure_keeps_message(self, tmp_path, monkeypatch):
        def locked(path):
            raise duckdb.IOException("IO Error: Could not set lock on file")

        monkeypatch.setattr("revenue.repositories.base.duckdb.connect", locked)
        region_store = RegionStore(db_path=tmp_path / "locked.duckdb")

        with pytest.raises(UnknownError) as exc_info:
            await region_store.list_accounts(Region.USA)

        assert "Could not set lock" in str(exc_info.value)
        assert region_store._connection is None

    @pytest.mark.asyncio
    async def test_schema_failure_drops_connection(self, tmp_path, monkeypatch):
        region_store = RegionStore(db_path=tmp_path / "broken.duckdb")

        def broken_schema():
            raise duckdb.CatalogException("Catalog Error: schema init failed")

        monkeypatch.setattr(region_store, "_init_schema", broken_schema)

        with pytest.raises(NotFoundTable) as exc_info:
            await region_store.connect()

        assert "schema init failed" in str(exc_info.value)
        assert region_store._connection is None
