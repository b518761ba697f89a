"""
Cross-currency normalization into the reporting currency.

Cross-rates are derived from the single operator-supplied base rate
(USD -> reporting currency) by fixed multipliers: changing the base rate
rescales every regional rate proportionally. The multipliers approximate
historical spreads and are deliberately not market-driven.
"""
from dataclasses import dataclass
from typing import Dict, Tuple

from revenue.config import DEFAULT_EXCHANGE_RATE, config
from revenue.models import BonusTotals, Region, RevenueRecord, Totals


@dataclass(frozen=True)
class CrossRates:
    """Per-region conversion rates derived from one base rate."""
    base_rate: float = DEFAULT_EXCHANGE_RATE

    def rate_for(self, region: Region) -> float:
        return self.base_rate * config.currency.multiplier(region.currency)

    def as_dict(self) -> Dict[str, float]:
        return {region.currency: self.rate_for(region) for region in Region}

    def normalize(self, record: RevenueRecord) -> Tuple[float, float]:
        """
        Convert one record into the reporting currency.

        The region comes from the account-id prefix, which also picks the
        commission column the region populates.

        Returns:
            (gmv, commission) in the reporting currency
        """
        region = record.region
        rate = self.rate_for(region)
        return record.gmv * rate, region.commission_of(record) * rate


def convert_commission(totals: Totals, region: Region, base_rate: float = DEFAULT_EXCHANGE_RATE) -> float:
    """Region-appropriate commission column of single-region totals, converted."""
    commission = (
        totals.total_commission_primary
        if region.uses_primary_commission
        else totals.total_commission_secondary
    )
    return commission * CrossRates(base_rate).rate_for(region)


def convert_bonus(bonus: BonusTotals, region: Region, base_rate: float = DEFAULT_EXCHANGE_RATE) -> float:
    return bonus.total_bonus * CrossRates(base_rate).rate_for(region)
