"""
Pydantic request and response models for API endpoints.
"""
import datetime as dt
from typing import Dict, List, Optional, Union

from pydantic import BaseModel, Field


# ═══════════════════════════════════════════════════════════════════════════════
# HEALTH CHECK
# ═══════════════════════════════════════════════════════════════════════════════

class RegionCounts(BaseModel):
    accounts: int
    records: int


class HealthResponse(BaseModel):
    """Health check response."""
    status: str = Field(description="Service status: healthy or degraded")
    version: str = Field(description="Application version")
    uptime_seconds: int = Field(description="Uptime in seconds")
    correlation_id: Optional[str] = Field(None, description="Request correlation ID")
    store: str = Field(description="Store status: connected or error message")
    regions: Optional[Dict[str, RegionCounts]] = None


# ═══════════════════════════════════════════════════════════════════════════════
# ACCOUNTS
# ═══════════════════════════════════════════════════════════════════════════════

class AccountCreate(BaseModel):
    account_id: str = Field(min_length=1, description="Region-prefixed id, e.g. C-001 or UK-001")
    name: Optional[str] = None


class AccountUpdate(BaseModel):
    name: Optional[str] = None
    is_active: Optional[bool] = None


class AccountResponse(BaseModel):
    account_id: str
    name: str
    is_active: bool
    region: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


# ═══════════════════════════════════════════════════════════════════════════════
# REVENUE RECORDS
# ═══════════════════════════════════════════════════════════════════════════════

class RecordCreate(BaseModel):
    date: dt.date
    account_id: str
    gmv: float = Field(0, ge=0)
    sales: int = Field(0, ge=0)
    commission_primary: float = Field(0, ge=0)
    commission_secondary: float = Field(0, ge=0)


class RecordUpdate(BaseModel):
    date: Optional[dt.date] = None
    account_id: Optional[str] = None
    gmv: Optional[float] = Field(None, ge=0)
    sales: Optional[int] = Field(None, ge=0)
    commission_primary: Optional[float] = Field(None, ge=0)
    commission_secondary: Optional[float] = Field(None, ge=0)


class RecordResponse(BaseModel):
    id: str
    date: str
    account_id: str
    gmv: float
    sales: int
    commission_primary: float
    commission_secondary: float
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


# ═══════════════════════════════════════════════════════════════════════════════
# SETTINGS
# ═══════════════════════════════════════════════════════════════════════════════

class ExchangeRateUpdate(BaseModel):
    exchange_rate: float = Field(gt=0, description="Base rate, USD to reporting currency")
    updated_by: Optional[str] = None


class SettingsResponse(BaseModel):
    id: str
    exchange_rate: float
    last_updated: Optional[str] = None
    updated_by: str


# ═══════════════════════════════════════════════════════════════════════════════
# DASHBOARD
# ═══════════════════════════════════════════════════════════════════════════════

class DashboardResponse(BaseModel):
    """Totals and chart series for one scope and filter set."""
    scope: str
    exchangeRate: float
    crossRates: Dict[str, float]
    recordCount: int
    totals: Dict[str, Union[int, float]]
    bonus: Optional[Dict[str, float]] = None
    converted: Optional[Dict[str, float]] = None
    chart: List[Dict]
    accounts: List[AccountResponse]
    lastUpdate: Optional[str] = None
