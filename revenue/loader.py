"""
Dashboard data loading for one region or the consolidated view.

The consolidated load fetches all three regions concurrently and fails as a
whole if any region fails; no partially merged dataset is ever returned.
"""
import asyncio
from dataclasses import replace
from datetime import datetime
from typing import List, Optional, Sequence, Union

from revenue.config import config
from revenue.filters import CustomRange, filter_records
from revenue.models import (
    CONSOLIDATED,
    Account,
    DashboardData,
    DateFilter,
    Region,
    RevenueRecord,
    StatusFilter,
)
from revenue.observability import correlation_context, get_correlation_id, get_logger, timed
from revenue.validators import validate_scope

logger = get_logger(__name__)

# Shared sentinel that lives in the ALE ledger despite its USA-style prefix
_SHARED_BONUS_IDS = {Region.ALE.bonus_account_id}


def _tag_accounts(accounts: Sequence[Account], region: Region) -> List[Account]:
    tagged = []
    for account in accounts:
        if account.inferred_region is not region and not (
            region is Region.ALE and account.account_id in _SHARED_BONUS_IDS
        ):
            logger.warning(
                f"Account {account.account_id} does not match the {region.label} prefix convention"
            )
        tagged.append(replace(account, region=region))
    return tagged


def _drop_excluded(accounts: List[Account]) -> List[Account]:
    excluded = set(config.ledger.excluded_account_ids)
    return [a for a in accounts if a.account_id not in excluded]


@timed("load_region")
async def load_region(store, region: Region) -> DashboardData:
    """Load one region's accounts (tagged with the region) and records."""
    accounts = await store.list_accounts(region)
    records = await store.list_records(region)

    return DashboardData(
        scope=region.value,
        accounts=_drop_excluded(_tag_accounts(accounts, region)),
        records=records,
    )


@timed("load_consolidated")
async def load_consolidated(store) -> DashboardData:
    """
    Load every region concurrently and merge in memory.

    Accounts are concatenated in USA, UK, ALE order, each tagged with its
    source region; records likewise.

    Raises:
        RevenueStoreError: If any region fails to load
    """
    regions = list(Region)
    results = await asyncio.gather(
        *(store.list_accounts(region) for region in regions),
        *(store.list_records(region) for region in regions),
    )
    account_sets, record_sets = results[:len(regions)], results[len(regions):]

    accounts: List[Account] = []
    records: List[RevenueRecord] = []
    for region, region_accounts, region_records in zip(regions, account_sets, record_sets):
        accounts.extend(_tag_accounts(region_accounts, region))
        records.extend(region_records)

    return DashboardData(
        scope=CONSOLIDATED,
        accounts=_drop_excluded(accounts),
        records=records,
    )


async def load(store, scope: Union[str, Region]) -> DashboardData:
    """Load the dataset for a region or the consolidated scope."""
    scope = validate_scope(scope)
    if scope == CONSOLIDATED:
        return await load_consolidated(store)
    return await load_region(store, scope)


class DashboardSession:
    """
    Caller-visible current dataset for one dashboard scope.

    refresh() clears the previous dataset before loading and only installs
    the new one after the load fully succeeds. A failed load therefore
    leaves the dataset empty with `error` set for display.
    """

    def __init__(self, store, scope: Union[str, Region] = Region.USA):
        self.store = store
        self.scope = validate_scope(scope)
        self.data = DashboardData(scope=self._scope_key)
        self.exchange_rate: float = config.currency.default_exchange_rate
        self.error: Optional[str] = None
        self.loading = False

    @property
    def _scope_key(self) -> str:
        return self.scope if self.scope == CONSOLIDATED else self.scope.value

    @property
    def region(self) -> Optional[Region]:
        return None if self.scope == CONSOLIDATED else self.scope

    async def refresh(self) -> DashboardData:
        """
        Reload the dataset; errors are captured, not raised.

        Runs under the caller's correlation id, or a fresh one when none is set.
        """
        self.loading = True
        self.error = None
        self.data = DashboardData(scope=self._scope_key)

        with correlation_context(get_correlation_id()):
            try:
                data = await load(self.store, self.scope)
                self.data = data

                settings = await self.store.get_settings()
                self.exchange_rate = settings.exchange_rate
            except Exception as e:
                logger.error(f"Failed to load dashboard data ({self._scope_key}): {e}", exc_info=True)
                self.data = DashboardData(scope=self._scope_key)
                self.error = str(e) or "Unknown error while loading data"
            finally:
                self.loading = False

        return self.data

    def filtered_records(
        self,
        account_filter: str = "all",
        status_filter: Union[str, StatusFilter] = StatusFilter.ALL,
        date_filter: Union[str, DateFilter] = DateFilter.ALL,
        custom_range: Optional[CustomRange] = None,
        now: Optional[datetime] = None,
    ) -> List[RevenueRecord]:
        """Apply the record filter to the current dataset."""
        return filter_records(
            self.data.records,
            self.data.accounts,
            account_filter=account_filter,
            status_filter=status_filter,
            date_filter=date_filter,
            custom_range=custom_range,
            now=now,
        )
