"""
Pytest configuration and shared fixtures.
"""
import pytest
from datetime import date, datetime
from typing import List

from revenue.models import Account, Region, RevenueRecord
from revenue.store import RegionStore


def make_record(
    account_id: str,
    day: date,
    gmv: float = 0.0,
    sales: int = 0,
    commission_primary: float = 0.0,
    commission_secondary: float = 0.0,
    record_id: str = None,
) -> RevenueRecord:
    """Build an in-memory RevenueRecord."""
    return RevenueRecord(
        id=record_id or f"{account_id}-{day.isoformat()}",
        date=day,
        account_id=account_id,
        gmv=gmv,
        sales=sales,
        commission_primary=commission_primary,
        commission_secondary=commission_secondary,
    )


@pytest.fixture
def fixed_now() -> datetime:
    """Reference evaluation time for date filters."""
    return datetime(2026, 3, 15, 10, 30)


@pytest.fixture
def sample_accounts() -> List[Account]:
    """Accounts from all three regions, one inactive."""
    return [
        Account("C-001", "Store One", region=Region.USA),
        Account("C-002", "Store Two", active=False, region=Region.USA),
        Account("C-BONUSES", "Bonuses", region=Region.USA),
        Account("UK-001", "London", region=Region.UK),
        Account("ALE-001", "Berlin", region=Region.ALE),
    ]


@pytest.fixture
def usa_records() -> List[RevenueRecord]:
    """USA ledger: commission in the primary column, one bonus entry."""
    return [
        make_record("C-001", date(2026, 3, 14), gmv=1000.0, sales=10, commission_primary=290.0),
        make_record("C-002", date(2026, 3, 10), gmv=500.0, sales=5, commission_primary=145.0),
        make_record("C-001", date(2026, 2, 20), gmv=200.0, sales=2, commission_primary=58.0),
        make_record("C-BONUSES", date(2026, 3, 1), gmv=300.0, sales=1),
    ]


@pytest.fixture
def mixed_records() -> List[RevenueRecord]:
    """Records from every region, no bonus accounts."""
    return [
        make_record("C-001", date(2026, 3, 5), gmv=100.0, sales=3, commission_primary=29.0),
        make_record("C-002", date(2026, 3, 6), gmv=40.0, sales=1, commission_primary=11.6),
        make_record("UK-001", date(2026, 3, 5), gmv=50.0, sales=2, commission_secondary=15.0),
        make_record("ALE-001", date(2026, 3, 7), gmv=80.0, sales=4, commission_secondary=24.0),
    ]


@pytest.fixture
def store(tmp_path):
    """Fresh DuckDB store with all regional tables."""
    region_store = RegionStore(db_path=tmp_path / "revenue.duckdb", provision_ale=True)
    yield region_store
    if region_store._connection is not None:
        region_store._connection.close()
        region_store._connection = None


@pytest.fixture
def store_without_ale(tmp_path):
    """Store whose database never provisioned the ALE tables."""
    region_store = RegionStore(db_path=tmp_path / "legacy.duckdb", provision_ale=False)
    yield region_store
    if region_store._connection is not None:
        region_store._connection.close()
        region_store._connection = None
