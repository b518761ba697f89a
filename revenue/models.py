"""
Domain models for the regional revenue ledgers.

Provides the Region enum (the single home of the account-id prefix
convention) and type-safe dataclasses for accounts, revenue records,
dashboard settings and the derived totals/chart views.
"""
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Union

from revenue.config import config


# ═══════════════════════════════════════════════════════════════════════════════
# ENUMS
# ═══════════════════════════════════════════════════════════════════════════════

class Region(str, Enum):
    """Independent regional ledgers."""
    USA = "usa"
    UK = "uk"
    ALE = "ale"

    @property
    def label(self) -> str:
        """Tag assigned to loaded accounts."""
        return self.name

    @property
    def account_prefix(self) -> str:
        prefixes = {
            Region.USA: "C-",
            Region.UK: "UK-",
            Region.ALE: "ALE-",
        }
        return prefixes[self]

    @property
    def currency(self) -> str:
        """Native currency of the region's ledger."""
        currencies = {
            Region.USA: "USD",
            Region.UK: "GBP",
            Region.ALE: "EUR",
        }
        return currencies[self]

    @property
    def uses_primary_commission(self) -> bool:
        """USA books commission in the primary column, UK and ALE in the secondary one."""
        return self is Region.USA

    @property
    def bonus_account_id(self) -> str:
        return config.ledger.bonus_account_ids[self.value]

    def commission_of(self, record: "RevenueRecord") -> float:
        """Commission amount from the column this region populates."""
        if self.uses_primary_commission:
            return record.commission_primary or 0.0
        return record.commission_secondary or 0.0


def classify_account(account_id: str) -> Region:
    """
    Infer the owning region from an account id prefix.

    `UK-` and `ALE-` prefixes identify their regions; everything else
    (including `C-###` and the shared `C-BONUSES` sentinel) is USA.
    """
    if account_id.startswith(Region.UK.account_prefix):
        return Region.UK
    if account_id.startswith(Region.ALE.account_prefix):
        return Region.ALE
    return Region.USA


CONSOLIDATED = "geral"


class DateFilter(str, Enum):
    """Fixed vocabulary of dashboard date windows."""
    ALL = "all"
    YESTERDAY = "yesterday"
    THIS_MONTH = "thisMonth"
    LAST_MONTH = "lastMonth"
    LAST_7_DAYS = "7days"
    LAST_14_DAYS = "14days"
    LAST_30_DAYS = "30days"
    CUSTOM = "custom"

    @property
    def window_days(self) -> Optional[int]:
        """Length of rolling windows; None for calendar-based filters."""
        windows = {
            DateFilter.LAST_7_DAYS: 7,
            DateFilter.LAST_14_DAYS: 14,
            DateFilter.LAST_30_DAYS: 30,
        }
        return windows.get(self)


class StatusFilter(str, Enum):
    ALL = "all"
    ACTIVE = "active"
    INACTIVE = "inactive"


class BucketMode(str, Enum):
    """Chart grouping key."""
    DAY_OF_MONTH = "day"
    DATE = "date"


# ═══════════════════════════════════════════════════════════════════════════════
# DATACLASSES
# ═══════════════════════════════════════════════════════════════════════════════

def _parse_date(value: Union[str, date, datetime]) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(value[:10])


@dataclass(frozen=True)
class Account:
    """Seller account within one regional ledger."""
    account_id: str
    name: str
    active: bool = True
    region: Optional[Region] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_row(cls, row: Sequence[Any]) -> "Account":
        """Create Account from an (account_id, name, is_active, created_at, updated_at) row."""
        return cls(
            account_id=row[0],
            name=row[1],
            active=bool(row[2]) if row[2] is not None else True,
            created_at=row[3],
            updated_at=row[4],
        )

    @property
    def inferred_region(self) -> Region:
        return classify_account(self.account_id)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "account_id": self.account_id,
            "name": self.name,
            "is_active": self.active,
            "region": self.region.label if self.region else None,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }


@dataclass(frozen=True)
class RevenueRecord:
    """Daily revenue entry for one account, in the account's native currency."""
    id: str
    date: date
    account_id: str
    gmv: float = 0.0
    sales: int = 0
    commission_primary: float = 0.0
    commission_secondary: float = 0.0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_row(cls, row: Sequence[Any]) -> "RevenueRecord":
        """Create RevenueRecord from a records-table row (column order of RECORD_COLUMNS)."""
        return cls(
            id=row[0],
            date=_parse_date(row[1]),
            account_id=row[2],
            gmv=float(row[3] or 0),
            sales=int(row[4] or 0),
            commission_primary=float(row[5] or 0),
            commission_secondary=float(row[6] or 0),
            created_at=row[7],
            updated_at=row[8],
        )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RevenueRecord":
        return cls(
            id=str(data.get("id", "")),
            date=_parse_date(data["date"]),
            account_id=data["account_id"],
            gmv=float(data.get("gmv") or 0),
            sales=int(data.get("sales") or 0),
            commission_primary=float(data.get("commission_primary") or 0),
            commission_secondary=float(data.get("commission_secondary") or 0),
        )

    @property
    def region(self) -> Region:
        return classify_account(self.account_id)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "date": self.date.isoformat(),
            "account_id": self.account_id,
            "gmv": self.gmv,
            "sales": self.sales,
            "commission_primary": self.commission_primary,
            "commission_secondary": self.commission_secondary,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }


@dataclass(frozen=True)
class DashboardSettings:
    """Singleton operator settings."""
    id: str
    exchange_rate: float
    last_updated: Optional[datetime] = None
    updated_by: str = "System"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "exchange_rate": self.exchange_rate,
            "last_updated": self.last_updated.isoformat() if self.last_updated else None,
            "updated_by": self.updated_by,
        }


@dataclass(frozen=True)
class Totals:
    """Single-region totals in native currency."""
    total_gmv: float = 0.0
    total_sales: int = 0
    total_commission_primary: float = 0.0
    total_commission_secondary: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalGMV": round(self.total_gmv, 2),
            "totalSales": self.total_sales,
            "totalCommissionPrimary": round(self.total_commission_primary, 2),
            "totalCommissionSecondary": round(self.total_commission_secondary, 2),
        }


@dataclass(frozen=True)
class ConsolidatedTotals:
    """Cross-region totals in the reporting currency."""
    total_gmv: float = 0.0
    total_sales: int = 0
    total_commission: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalGMV": round(self.total_gmv, 2),
            "totalSales": self.total_sales,
            "totalCommission": round(self.total_commission, 2),
        }


@dataclass(frozen=True)
class BonusTotals:
    """Cash bonuses booked on a region's bonus account (native currency)."""
    total_bonus: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {"totalBonus": round(self.total_bonus, 2)}


@dataclass
class ChartPoint:
    """One chart bucket."""
    bucket: Union[int, date]
    gmv: float = 0.0
    sales: int = 0
    commission: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        key = "date" if isinstance(self.bucket, date) else "day"
        bucket = self.bucket.isoformat() if isinstance(self.bucket, date) else self.bucket
        return {
            key: bucket,
            "gmv": round(self.gmv, 2),
            "sales": self.sales,
            "commission": round(self.commission, 2),
        }


@dataclass(frozen=True)
class DashboardData:
    """Accounts and records loaded for one dashboard scope."""
    scope: str
    accounts: List[Account] = field(default_factory=list)
    records: List[RevenueRecord] = field(default_factory=list)

    @property
    def is_consolidated(self) -> bool:
        return self.scope == CONSOLIDATED
