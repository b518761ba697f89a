"""
Chart-ready time series from filtered records.

The default grouping key is the day of the month (1-31), not the full
date: records from different months that share a day number land in the
same bucket. Existing daily charts depend on that shape. BucketMode.DATE
groups by full calendar date instead.
"""
from typing import Dict, List, Sequence, Union

from revenue.config import DEFAULT_EXCHANGE_RATE
from revenue.currency import CrossRates
from revenue.models import BucketMode, ChartPoint, RevenueRecord
from revenue.validators import validate_bucket_mode


def prepare_chart_data(
    records: Sequence[RevenueRecord],
    convert: bool = False,
    base_rate: float = DEFAULT_EXCHANGE_RATE,
    bucket_by: Union[str, BucketMode] = BucketMode.DAY_OF_MONTH,
) -> List[ChartPoint]:
    """
    Group records into chart buckets sorted ascending.

    Args:
        records: Filtered revenue records
        convert: Convert GMV and commission into the reporting currency
            using each record's regional cross-rate
        base_rate: Base exchange rate for conversion
        bucket_by: Day of month (default) or full date

    Without conversion, commission is primary + secondary, which is only
    meaningful for a single-region record set.
    """
    bucket_by = validate_bucket_mode(bucket_by)
    rates = CrossRates(base_rate)
    buckets: Dict[object, ChartPoint] = {}

    for record in records:
        key = record.date.day if bucket_by is BucketMode.DAY_OF_MONTH else record.date

        point = buckets.get(key)
        if point is None:
            point = buckets[key] = ChartPoint(bucket=key)

        if convert:
            gmv, commission = rates.normalize(record)
            point.gmv += gmv
            point.commission += commission
        else:
            point.gmv += record.gmv
            point.commission += record.commission_primary + record.commission_secondary

        point.sales += record.sales

    return [buckets[key] for key in sorted(buckets)]
