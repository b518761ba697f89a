"""
Tests for revenue.models module.
"""
import pytest
from datetime import date, datetime

from revenue.models import (
    Account,
    BucketMode,
    ChartPoint,
    DateFilter,
    Region,
    RevenueRecord,
    Totals,
    classify_account,
)


class TestClassifyAccount:
    """Tests for the account-id prefix convention."""

    def test_uk_prefix(self):
        assert classify_account("UK-001") is Region.UK

    def test_ale_prefix(self):
        assert classify_account("ALE-007") is Region.ALE

    def test_usa_prefix(self):
        assert classify_account("C-123") is Region.USA

    def test_unknown_prefix_defaults_to_usa(self):
        """Anything without a UK-/ALE- prefix is USA."""
        assert classify_account("LEGACY-9") is Region.USA
        assert classify_account("") is Region.USA

    def test_shared_bonus_sentinel_is_usa(self):
        assert classify_account("C-BONUSES") is Region.USA

    def test_uk_bonus_sentinel(self):
        assert classify_account("UK-BONUSES") is Region.UK


class TestRegion:
    """Tests for Region enum properties."""

    def test_values(self):
        assert Region("usa") is Region.USA
        assert Region("uk") is Region.UK
        assert Region("ale") is Region.ALE

    def test_label(self):
        assert Region.USA.label == "USA"
        assert Region.ALE.label == "ALE"

    def test_currency(self):
        assert Region.USA.currency == "USD"
        assert Region.UK.currency == "GBP"
        assert Region.ALE.currency == "EUR"

    def test_bonus_account_ids(self):
        """USA and ALE share the C-BONUSES sentinel."""
        assert Region.USA.bonus_account_id == "C-BONUSES"
        assert Region.UK.bonus_account_id == "UK-BONUSES"
        assert Region.ALE.bonus_account_id == "C-BONUSES"

    def test_commission_column(self):
        record = RevenueRecord("r1", date(2026, 1, 1), "C-1", commission_primary=10, commission_secondary=20)
        assert Region.USA.commission_of(record) == 10
        assert Region.UK.commission_of(record) == 20
        assert Region.ALE.commission_of(record) == 20


class TestDateFilter:
    def test_window_days(self):
        assert DateFilter.LAST_7_DAYS.window_days == 7
        assert DateFilter.LAST_30_DAYS.window_days == 30
        assert DateFilter.THIS_MONTH.window_days is None

    def test_vocabulary(self):
        values = {f.value for f in DateFilter}
        assert values == {"all", "yesterday", "thisMonth", "lastMonth", "7days", "14days", "30days", "custom"}


class TestAccount:
    def test_from_row(self):
        created = datetime(2026, 1, 1, 12, 0)
        account = Account.from_row(("UK-001", "London", False, created, created))
        assert account.account_id == "UK-001"
        assert account.active is False
        assert account.region is None
        assert account.inferred_region is Region.UK

    def test_from_row_null_active_defaults_true(self):
        account = Account.from_row(("C-001", "A", None, None, None))
        assert account.active is True

    def test_to_dict_region_label(self):
        account = Account("ALE-001", "Berlin", region=Region.ALE)
        assert account.to_dict()["region"] == "ALE"
        assert account.to_dict()["is_active"] is True


class TestRevenueRecord:
    def test_from_row_converts_decimals(self):
        from decimal import Decimal

        row = ("id-1", date(2026, 2, 3), "C-001", Decimal("10.50"), 2, Decimal("3.05"), Decimal("0"), None, None)
        record = RevenueRecord.from_row(row)
        assert record.gmv == 10.5
        assert isinstance(record.gmv, float)
        assert record.commission_primary == pytest.approx(3.05)
        assert record.sales == 2

    def test_from_dict_parses_iso_date(self):
        record = RevenueRecord.from_dict({"id": "x", "date": "2026-02-03", "account_id": "UK-1", "gmv": 5})
        assert record.date == date(2026, 2, 3)
        assert record.region is Region.UK

    def test_to_dict_date_is_iso(self):
        record = RevenueRecord("x", date(2026, 2, 3), "C-1")
        assert record.to_dict()["date"] == "2026-02-03"


class TestDerivedViews:
    def test_totals_to_dict_keys(self):
        data = Totals(total_gmv=1.005, total_sales=2).to_dict()
        assert set(data) == {"totalGMV", "totalSales", "totalCommissionPrimary", "totalCommissionSecondary"}

    def test_chart_point_day_key(self):
        assert ChartPoint(bucket=5, gmv=1.0).to_dict()["day"] == 5

    def test_chart_point_date_key(self):
        assert ChartPoint(bucket=date(2026, 1, 5)).to_dict()["date"] == "2026-01-05"

    def test_bucket_modes(self):
        assert BucketMode("day") is BucketMode.DAY_OF_MONTH
        assert BucketMode("date") is BucketMode.DATE
