"""
Input validation functions for dashboard and store parameters.

All validators raise ValidationError on invalid input.
"""
from datetime import date, datetime
from typing import Optional, Tuple, Union

from revenue.exceptions import ValidationError
from revenue.models import (
    CONSOLIDATED,
    BucketMode,
    DateFilter,
    Region,
    StatusFilter,
)

# Accepted spellings of the cross-region scope
CONSOLIDATED_ALIASES = {"geral", "consolidated", "all"}

MAX_ACCOUNT_ID_LENGTH = 64
MAX_NAME_LENGTH = 255


def validate_region(value: Union[str, Region], field: str = "region") -> Region:
    """
    Validate a region identifier.

    Raises:
        ValidationError: If value is not one of usa, uk, ale
    """
    if isinstance(value, Region):
        return value
    if not value or not isinstance(value, str):
        raise ValidationError(field, "Region is required", value)
    try:
        return Region(value.strip().lower())
    except ValueError:
        valid = ", ".join(r.value for r in Region)
        raise ValidationError(field, f"Invalid region. Must be one of: {valid}", value)


def validate_scope(value: Optional[str], field: str = "scope") -> Union[Region, str]:
    """
    Validate a dashboard scope: a region or the consolidated view.

    Returns:
        Region for single-region scopes, CONSOLIDATED otherwise
    """
    if value and isinstance(value, str) and value.strip().lower() in CONSOLIDATED_ALIASES:
        return CONSOLIDATED
    return validate_region(value, field)


def validate_date_filter(value: Optional[str], field: str = "date_filter") -> DateFilter:
    """Validate date filter vocabulary (None means 'all')."""
    if value is None or isinstance(value, DateFilter):
        return value or DateFilter.ALL
    try:
        return DateFilter(value)
    except ValueError:
        valid = ", ".join(f.value for f in DateFilter)
        raise ValidationError(field, f"Invalid date filter. Must be one of: {valid}", value)


def validate_status_filter(value: Optional[str], field: str = "status") -> StatusFilter:
    """Validate account status filter (None means 'all')."""
    if value is None or isinstance(value, StatusFilter):
        return value or StatusFilter.ALL
    try:
        return StatusFilter(value.strip().lower())
    except (ValueError, AttributeError):
        valid = ", ".join(s.value for s in StatusFilter)
        raise ValidationError(field, f"Invalid status. Must be one of: {valid}", value)


def validate_bucket_mode(value: Optional[str], field: str = "bucket_by") -> BucketMode:
    if value is None or isinstance(value, BucketMode):
        return value or BucketMode.DAY_OF_MONTH
    try:
        return BucketMode(value)
    except ValueError:
        raise ValidationError(field, "Must be 'day' or 'date'", value)


def validate_date_string(
    value: Union[str, date],
    field: str = "date",
    format: str = "%Y-%m-%d"
) -> date:
    """
    Validate and parse a date string.

    Raises:
        ValidationError: If date is invalid or in wrong format
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value

    if not value:
        raise ValidationError(field, "Date is required", value)

    if not isinstance(value, str):
        raise ValidationError(field, "Must be a string", value)

    try:
        return datetime.strptime(value, format).date()
    except ValueError:
        raise ValidationError(
            field,
            f"Invalid date format. Expected {format}",
            value
        )


def validate_date_range(
    start_date: Optional[str],
    end_date: Optional[str],
) -> Tuple[Optional[date], Optional[date]]:
    """
    Validate an optional custom date range.

    Either bound may be missing; the record filter passes everything through
    in that case. When both are present start must not be after end.
    """
    start = validate_date_string(start_date, "start_date") if start_date else None
    end = validate_date_string(end_date, "end_date") if end_date else None

    if start and end and start > end:
        raise ValidationError(
            "date_range",
            "Start date must be before or equal to end date",
            f"{start_date} to {end_date}"
        )

    return start, end


def validate_account_id(value: str, field: str = "account_id") -> str:
    """Validate an account id (non-empty, no surrounding whitespace)."""
    if not value or not isinstance(value, str) or not value.strip():
        raise ValidationError(field, "Account id is required", value)

    value = value.strip()
    if len(value) > MAX_ACCOUNT_ID_LENGTH:
        raise ValidationError(field, f"Must be at most {MAX_ACCOUNT_ID_LENGTH} characters", value)
    return value


def validate_account_name(value: Optional[str], field: str = "name") -> Optional[str]:
    if value is None:
        return None
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(field, "Name cannot be empty", value)
    if len(value) > MAX_NAME_LENGTH:
        raise ValidationError(field, f"Must be at most {MAX_NAME_LENGTH} characters")
    return value.strip()


def validate_amount(value: Union[int, float], field: str) -> float:
    """Validate a non-negative monetary amount."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValidationError(field, "Must be a number", value)
    if value < 0:
        raise ValidationError(field, "Must be non-negative", value)
    return float(value)


def validate_sales(value: int, field: str = "sales") -> int:
    """Validate a non-negative sales count."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(field, "Must be an integer", value)
    if value < 0:
        raise ValidationError(field, "Must be non-negative", value)
    return value


def validate_exchange_rate(value: Union[int, float], field: str = "exchange_rate") -> float:
    """Validate an operator-supplied base exchange rate."""
    rate = validate_amount(value, field)
    if rate == 0:
        raise ValidationError(field, "Must be positive", value)
    return rate
