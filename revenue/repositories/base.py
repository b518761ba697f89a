"""
Base repository with connection management and schema initialization.

All domain repositories inherit from this class. Physical table names are
resolved here through REGION_TABLES and never leave this package.
"""
import asyncio
from contextlib import asynccontextmanager, contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Union

import duckdb

from revenue.config import config
from revenue.exceptions import (
    DuplicateError,
    NotFoundTable,
    RevenueStoreError,
    UnknownError,
)
from revenue.models import Region
from revenue.observability import get_logger

logger = get_logger(__name__)

IN_MEMORY = ":memory:"


@dataclass(frozen=True)
class RegionTables:
    """Physical tables backing one regional ledger."""
    accounts: str
    records: str


REGION_TABLES: Dict[Region, RegionTables] = {
    Region.USA: RegionTables(accounts="accounts", records="revenue_records"),
    Region.UK: RegionTables(accounts="accounts_uk", records="revenue_records_uk"),
    Region.ALE: RegionTables(accounts="accounts_ale", records="revenue_records_ale"),
}

SETTINGS_TABLE = "dashboard_settings"

ACCOUNT_COLUMNS = "account_id, name, is_active, created_at, updated_at"
RECORD_COLUMNS = (
    'id, "date", account_id, gmv, sales, commission_primary, '
    "commission_secondary, created_at, updated_at"
)


def tables_for(region: Region) -> RegionTables:
    return REGION_TABLES[region]


@contextmanager
def store_errors(operation: str, region: Optional[Region] = None):
    """
    Translate DuckDB errors into the store exception hierarchy.

    Catalog errors (missing table) become NotFoundTable, constraint
    violations DuplicateError, everything else UnknownError with the
    original message preserved.
    """
    label = region.label if region else "settings"
    try:
        yield
    except RevenueStoreError:
        raise
    except duckdb.CatalogException as e:
        raise NotFoundTable(f"Table not found while trying to {operation} ({label})", str(e), region=label)
    except duckdb.ConstraintException as e:
        logger.error(f"Constraint violation while trying to {operation} ({label}): {e}")
        raise DuplicateError(f"Duplicate entry while trying to {operation} ({label})", str(e))
    except duckdb.Error as e:
        logger.error(f"Failed to {operation} ({label}): {e}", exc_info=True)
        raise UnknownError(f"Failed to {operation} ({label})", str(e))


class BaseRepository:
    """
    Base repository with DuckDB connection management.

    Usage:
        class AccountsRepository(BaseRepository):
            async def count(self, region: Region) -> int:
                async with self.connection() as conn:
                    table = tables_for(region).accounts
                    return conn.execute(f"SELECT COUNT(*) FROM {table}").fetchone()[0]
    """

    def __init__(
        self,
        db_path: Optional[Union[Path, str]] = None,
        provision_ale: Optional[bool] = None,
    ):
        self.db_path = str(db_path if db_path is not None else config.store.db_path)
        self.provision_ale = config.store.provision_ale if provision_ale is None else provision_ale
        self._connection: Optional[duckdb.DuckDBPyConnection] = None
        self._lock = asyncio.Lock()
        self._schema_initialized = False

    async def connect(self) -> None:
        """Initialize database connection and schema."""
        if self.db_path != IN_MEMORY:
            Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)

        async with self._lock:
            if self._connection is None:
                with store_errors("connect to store"):
                    self._connection = duckdb.connect(self.db_path)
                    try:
                        if not self._schema_initialized:
                            self._init_schema()
                            self._schema_initialized = True
                    except duckdb.Error:
                        self._connection.close()
                        self._connection = None
                        raise
                logger.info(f"DuckDB connected: {self.db_path}")

    async def close(self) -> None:
        """Close database connection."""
        async with self._lock:
            if self._connection:
                self._connection.close()
                self._connection = None
                logger.info("DuckDB connection closed")

    @asynccontextmanager
    async def connection(self):
        """Get database connection with automatic reconnection."""
        if self._connection is None:
            await self.connect()
        yield self._connection

    async def execute(self, sql: str, params: list = None) -> Any:
        """Execute SQL and return the result cursor."""
        async with self.connection() as conn:
            with store_errors("execute query"):
                if params:
                    return conn.execute(sql, params)
                return conn.execute(sql)

    def _init_schema(self) -> None:
        """Create regional tables and the settings table if missing."""
        conn = self._connection

        for region, tables in REGION_TABLES.items():
            if region is Region.ALE and not self.provision_ale:
                logger.info("Skipping ALE tables (provisioning disabled)")
                continue

            conn.execute(f"""
                CREATE TABLE IF NOT EXISTS {tables.accounts} (
                    account_id VARCHAR PRIMARY KEY,
                    name VARCHAR NOT NULL,
                    is_active BOOLEAN NOT NULL DEFAULT TRUE,
                    created_at TIMESTAMP,
                    updated_at TIMESTAMP
                )
            """)
            conn.execute(f"""
                CREATE TABLE IF NOT EXISTS {tables.records} (
                    id VARCHAR PRIMARY KEY,
                    "date" DATE NOT NULL,
                    account_id VARCHAR NOT NULL,
                    gmv DECIMAL(14, 2) NOT NULL DEFAULT 0,
                    sales INTEGER NOT NULL DEFAULT 0,
                    commission_primary DECIMAL(14, 2) NOT NULL DEFAULT 0,
                    commission_secondary DECIMAL(14, 2) NOT NULL DEFAULT 0,
                    created_at TIMESTAMP,
                    updated_at TIMESTAMP
                )
            """)

        conn.execute(f"""
            CREATE TABLE IF NOT EXISTS {SETTINGS_TABLE} (
                id VARCHAR PRIMARY KEY,
                exchange_rate DOUBLE NOT NULL,
                last_updated TIMESTAMP,
                updated_by VARCHAR,
                created_at TIMESTAMP
            )
        """)
