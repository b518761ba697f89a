"""
Record filtering by account, account status and date window.

Date windows are evaluated against "now" at call time, not at load time,
so the same loaded dataset can filter differently across a day boundary.
"""
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Dict, List, Optional, Sequence, Tuple, Union

from revenue.models import Account, DateFilter, RevenueRecord, StatusFilter
from revenue.validators import validate_date_filter, validate_status_filter


@dataclass(frozen=True)
class CustomRange:
    """Inclusive custom window; either bound may be missing."""
    start: Optional[Union[date, datetime]] = None
    end: Optional[Union[date, datetime]] = None

    @property
    def is_complete(self) -> bool:
        return self.start is not None and self.end is not None


def _as_datetime(value: Union[date, datetime]) -> datetime:
    if isinstance(value, datetime):
        return value
    return datetime.combine(value, time.min)


def _previous_month(now: datetime) -> Tuple[int, int]:
    if now.month == 1:
        return now.year - 1, 12
    return now.year, now.month - 1


def _matches_date(
    record_date: date,
    date_filter: DateFilter,
    now: datetime,
    custom_range: Optional[CustomRange],
) -> bool:
    # Stored dates are plain calendar days; compare them as local midnight
    record_dt = datetime.combine(record_date, time.min)

    if date_filter is DateFilter.YESTERDAY:
        return record_date == now.date() - timedelta(days=1)

    if date_filter is DateFilter.THIS_MONTH:
        return (record_date.year, record_date.month) == (now.year, now.month)

    if date_filter is DateFilter.LAST_MONTH:
        return (record_date.year, record_date.month) == _previous_month(now)

    if date_filter.window_days is not None:
        return record_dt > now - timedelta(days=date_filter.window_days)

    if date_filter is DateFilter.CUSTOM:
        if custom_range is None or not custom_range.is_complete:
            return True
        return _as_datetime(custom_range.start) <= record_dt <= _as_datetime(custom_range.end)

    return True


def filter_records(
    records: Sequence[RevenueRecord],
    accounts: Sequence[Account] = (),
    account_filter: str = "all",
    status_filter: Union[str, StatusFilter] = StatusFilter.ALL,
    date_filter: Union[str, DateFilter] = DateFilter.ALL,
    custom_range: Optional[CustomRange] = None,
    now: Optional[datetime] = None,
) -> List[RevenueRecord]:
    """
    Narrow a record set by account, status and date window.

    Args:
        records: Loaded revenue records (never mutated)
        accounts: Accounts used to resolve each record's active flag
        account_filter: "all" or an exact account_id
        status_filter: all, active or inactive; unknown accounts count as active
        date_filter: One of the DateFilter vocabulary
        custom_range: Bounds for the custom filter
        now: Evaluation time (defaults to the current local time)

    Returns:
        New list with the matching records in input order

    Raises:
        ValidationError: On unknown status or date filter values
    """
    status_filter = validate_status_filter(status_filter)
    date_filter = validate_date_filter(date_filter)
    now = now or datetime.now()

    filtered = list(records)

    if account_filter and account_filter != "all":
        filtered = [r for r in filtered if r.account_id == account_filter]

    if status_filter is not StatusFilter.ALL:
        active_by_id: Dict[str, bool] = {}
        for account in accounts:
            active_by_id.setdefault(account.account_id, account.active)

        want_active = status_filter is StatusFilter.ACTIVE
        filtered = [
            r for r in filtered
            if bool(active_by_id.get(r.account_id, True)) == want_active
        ]

    if date_filter is not DateFilter.ALL:
        filtered = [
            r for r in filtered
            if _matches_date(r.date, date_filter, now, custom_range)
        ]

    return filtered
