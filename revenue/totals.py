"""
Totals calculation over filtered record sets.

Two modes:
- single-region: native currency, both commission tiers kept apart,
  bonus account excluded from GMV
- consolidated: every record converted with its region's cross-rate and
  the two commission tiers collapsed into one column
"""
from typing import Sequence, Union

from revenue.config import DEFAULT_EXCHANGE_RATE
from revenue.currency import CrossRates
from revenue.models import (
    BonusTotals,
    ConsolidatedTotals,
    Region,
    RevenueRecord,
    Totals,
)
from revenue.validators import validate_region


def _by_account(records: Sequence[RevenueRecord], account_filter: str) -> Sequence[RevenueRecord]:
    if account_filter and account_filter != "all":
        return [r for r in records if r.account_id == account_filter]
    return records


def calculate_totals(
    records: Sequence[RevenueRecord],
    account_filter: str = "all",
    region: Union[str, Region] = Region.USA,
) -> Totals:
    """
    Sum GMV, sales and both commission columns for one region.

    Records of the region's bonus account are left out of GMV only; their
    sales and commission fields are still summed.
    """
    region = validate_region(region)
    bonus_account_id = region.bonus_account_id

    total_gmv = 0.0
    total_sales = 0
    total_primary = 0.0
    total_secondary = 0.0

    for record in _by_account(records, account_filter):
        if record.account_id != bonus_account_id:
            total_gmv += record.gmv
        total_sales += record.sales
        total_primary += record.commission_primary
        total_secondary += record.commission_secondary

    return Totals(
        total_gmv=total_gmv,
        total_sales=total_sales,
        total_commission_primary=total_primary,
        total_commission_secondary=total_secondary,
    )


def calculate_consolidated_totals(
    records: Sequence[RevenueRecord],
    account_filter: str = "all",
    base_rate: float = DEFAULT_EXCHANGE_RATE,
) -> ConsolidatedTotals:
    """
    Totals across all regions in the reporting currency.

    Each record's region is inferred from its account-id prefix, so rows
    from accounts that were never tagged still convert correctly.
    """
    rates = CrossRates(base_rate)

    total_gmv = 0.0
    total_sales = 0
    total_commission = 0.0

    for record in _by_account(records, account_filter):
        gmv, commission = rates.normalize(record)
        total_gmv += gmv
        total_sales += record.sales
        total_commission += commission

    return ConsolidatedTotals(
        total_gmv=total_gmv,
        total_sales=total_sales,
        total_commission=total_commission,
    )


def calculate_bonus_totals(
    records: Sequence[RevenueRecord],
    region: Union[str, Region] = Region.USA,
) -> BonusTotals:
    """Sum the GMV field of the region's bonus account as cash bonus."""
    bonus_account_id = validate_region(region).bonus_account_id
    return BonusTotals(
        total_bonus=sum(r.gmv for r in records if r.account_id == bonus_account_id)
    )
