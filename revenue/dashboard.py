"""
Dashboard report assembly.

Derives the totals and chart views from one filtered record set. The
consolidated scope gets converted totals; single regions get native
totals, bonus totals and their commission converted for display.
"""
from typing import Any, Dict, Optional, Sequence

from revenue.charts import prepare_chart_data
from revenue.currency import CrossRates, convert_bonus, convert_commission
from revenue.models import BucketMode, DashboardData, Region, RevenueRecord
from revenue.totals import (
    calculate_bonus_totals,
    calculate_consolidated_totals,
    calculate_totals,
)


def build_report(
    data: DashboardData,
    records: Sequence[RevenueRecord],
    exchange_rate: float,
    account_filter: str = "all",
    convert_chart: Optional[bool] = None,
    bucket_by: BucketMode = BucketMode.DAY_OF_MONTH,
) -> Dict[str, Any]:
    """
    Build the dashboard payload for already-filtered records.

    Args:
        data: Loaded dataset the records were filtered from
        records: Filtered records
        exchange_rate: Base exchange rate from settings
        account_filter: Account filter applied to totals
        convert_chart: Convert chart values; defaults to True for the
            consolidated scope and False otherwise
        bucket_by: Chart grouping key
    """
    if convert_chart is None:
        convert_chart = data.is_consolidated

    report: Dict[str, Any] = {
        "scope": data.scope,
        "exchangeRate": exchange_rate,
        "crossRates": CrossRates(exchange_rate).as_dict(),
        "recordCount": len(records),
        "accounts": [a.to_dict() for a in data.accounts],
        "chart": [
            p.to_dict()
            for p in prepare_chart_data(records, convert_chart, exchange_rate, bucket_by)
        ],
    }

    if data.is_consolidated:
        report["totals"] = calculate_consolidated_totals(records, account_filter, exchange_rate).to_dict()
        return report

    region = Region(data.scope)
    totals = calculate_totals(records, account_filter, region)
    bonus = calculate_bonus_totals(records, region)

    report["totals"] = totals.to_dict()
    report["bonus"] = bonus.to_dict()
    report["converted"] = {
        "commission": round(convert_commission(totals, region, exchange_rate), 2),
        "bonus": round(convert_bonus(bonus, region, exchange_rate), 2),
    }
    return report
