"""
Core library for the multi-region revenue dashboard.

- exceptions: Store error hierarchy and ValidationError
- models: Region enum, accounts, records, derived totals
- filters: Account/status/date-window record filter
- totals: Single-region and consolidated totals
- currency: Derived cross-rates into the reporting currency
- charts: Day-of-month chart buckets
- loader: Region and consolidated loading, DashboardSession
- store: DuckDB-backed region store
- config: Centralized configuration
"""

from revenue.exceptions import (
    RevenueStoreError,
    NotFoundTable,
    DuplicateError,
    ConflictError,
    NotFoundError,
    UnknownError,
    ValidationError,
)

from revenue.models import (
    Region,
    classify_account,
    Account,
    RevenueRecord,
    DashboardSettings,
    Totals,
    ConsolidatedTotals,
    BonusTotals,
    ChartPoint,
    DashboardData,
    DateFilter,
    StatusFilter,
    BucketMode,
    CONSOLIDATED,
)

from revenue.filters import CustomRange, filter_records
from revenue.totals import (
    calculate_totals,
    calculate_consolidated_totals,
    calculate_bonus_totals,
)
from revenue.currency import CrossRates, convert_commission, convert_bonus
from revenue.charts import prepare_chart_data
from revenue.loader import load, load_region, load_consolidated, DashboardSession
from revenue.store import RegionStore, get_store, close_store

from revenue.config import config

__all__ = [
    # Exceptions
    "RevenueStoreError",
    "NotFoundTable",
    "DuplicateError",
    "ConflictError",
    "NotFoundError",
    "UnknownError",
    "ValidationError",
    # Models
    "Region",
    "classify_account",
    "Account",
    "RevenueRecord",
    "DashboardSettings",
    "Totals",
    "ConsolidatedTotals",
    "BonusTotals",
    "ChartPoint",
    "DashboardData",
    "DateFilter",
    "StatusFilter",
    "BucketMode",
    "CONSOLIDATED",
    # Aggregation
    "CustomRange",
    "filter_records",
    "calculate_totals",
    "calculate_consolidated_totals",
    "calculate_bonus_totals",
    "CrossRates",
    "convert_commission",
    "convert_bonus",
    "prepare_chart_data",
    # Loading
    "load",
    "load_region",
    "load_consolidated",
    "DashboardSession",
    "RegionStore",
    "get_store",
    "close_store",
    # Config
    "config",
]
