"""
Region store: uniform CRUD over each region's accounts and records tables.

The ALE ledger may not be provisioned in older databases; listing its
accounts or records then yields an empty set instead of an error. The same
failure for USA or UK is a hard NotFoundTable.
"""
import uuid
from datetime import date, datetime
from typing import Any, Dict, List, Optional, Union

from revenue.exceptions import ConflictError, NotFoundError, NotFoundTable, ValidationError
from revenue.models import Account, Region, RevenueRecord
from revenue.observability import get_logger
from revenue.repositories.base import (
    ACCOUNT_COLUMNS,
    RECORD_COLUMNS,
    store_errors,
    tables_for,
)
from revenue.validators import (
    validate_account_id,
    validate_account_name,
    validate_amount,
    validate_date_string,
    validate_region,
    validate_sales,
)

logger = get_logger(__name__)

# Record fields accepted by update_record, with their validators
_RECORD_FIELDS = {
    "date": lambda v: validate_date_string(v, "date"),
    "account_id": validate_account_id,
    "gmv": lambda v: validate_amount(v, "gmv"),
    "sales": validate_sales,
    "commission_primary": lambda v: validate_amount(v, "commission_primary"),
    "commission_secondary": lambda v: validate_amount(v, "commission_secondary"),
}


class RegionStoreMixin:
    """Accounts and revenue records CRUD, dispatched by region."""

    def _tolerate_missing(self, region: Region, error: NotFoundTable, what: str) -> None:
        if region is not Region.ALE:
            logger.error(f"Missing {what} table for {region.label}: {error}")
            raise error
        logger.warning(f"ALE {what} table not found, returning empty result")

    # ─── Accounts ────────────────────────────────────────────────────────────

    async def list_accounts(self, region: Union[str, Region]) -> List[Account]:
        """List a region's accounts ordered by account_id."""
        region = validate_region(region)
        table = tables_for(region).accounts

        async with self.connection() as conn:
            try:
                with store_errors("list accounts", region):
                    rows = conn.execute(
                        f"SELECT {ACCOUNT_COLUMNS} FROM {table} ORDER BY account_id"
                    ).fetchall()
            except NotFoundTable as e:
                self._tolerate_missing(region, e, "accounts")
                return []

        return [Account.from_row(row) for row in rows]

    async def get_account(self, region: Union[str, Region], account_id: str) -> Optional[Account]:
        region = validate_region(region)
        table = tables_for(region).accounts

        async with self.connection() as conn:
            with store_errors("get account", region):
                row = conn.execute(
                    f"SELECT {ACCOUNT_COLUMNS} FROM {table} WHERE account_id = ?",
                    [account_id],
                ).fetchone()

        return Account.from_row(row) if row else None

    async def create_account(
        self,
        region: Union[str, Region],
        account_id: str,
        name: Optional[str] = None,
    ) -> Account:
        """
        Create an account.

        Raises:
            DuplicateError: If account_id already exists in the region
        """
        region = validate_region(region)
        account_id = validate_account_id(account_id)
        name = validate_account_name(name) or f"Account {account_id}"
        table = tables_for(region).accounts
        now = datetime.now()

        async with self.connection() as conn:
            with store_errors("create account", region):
                conn.execute(
                    f"INSERT INTO {table} (account_id, name, is_active, created_at, updated_at) "
                    "VALUES (?, ?, TRUE, ?, ?)",
                    [account_id, name, now, now],
                )

        logger.info(f"Account created: {account_id} ({region.label})")
        return await self.get_account(region, account_id)

    async def update_account(
        self,
        region: Union[str, Region],
        account_id: str,
        name: Optional[str] = None,
        active: Optional[bool] = None,
    ) -> Account:
        """
        Rename an account and/or toggle its active flag.

        Raises:
            NotFoundError: If the account does not exist
        """
        region = validate_region(region)
        name = validate_account_name(name)
        table = tables_for(region).accounts

        assignments = ["updated_at = ?"]
        params: List[Any] = [datetime.now()]
        if name is not None:
            assignments.append("name = ?")
            params.append(name)
        if active is not None:
            assignments.append("is_active = ?")
            params.append(bool(active))

        if await self.get_account(region, account_id) is None:
            raise NotFoundError(f"Account {account_id} not found ({region.label})", key=account_id)

        async with self.connection() as conn:
            with store_errors("update account", region):
                conn.execute(
                    f"UPDATE {table} SET {', '.join(assignments)} WHERE account_id = ?",
                    params + [account_id],
                )

        return await self.get_account(region, account_id)

    async def delete_account(self, region: Union[str, Region], account_id: str) -> None:
        """
        Delete an account with no revenue records.

        Raises:
            ConflictError: If any record still references the account
            NotFoundError: If the account does not exist
        """
        region = validate_region(region)
        tables = tables_for(region)

        async with self.connection() as conn:
            with store_errors("delete account", region):
                referenced = conn.execute(
                    f"SELECT 1 FROM {tables.records} WHERE account_id = ? LIMIT 1",
                    [account_id],
                ).fetchone()
                if referenced:
                    raise ConflictError(
                        "Cannot delete account: records exist",
                        f"{region.label} account {account_id} still has revenue records; delete them first",
                        key=account_id,
                    )

                exists = conn.execute(
                    f"SELECT 1 FROM {tables.accounts} WHERE account_id = ?",
                    [account_id],
                ).fetchone()
                if not exists:
                    raise NotFoundError(f"Account {account_id} not found ({region.label})", key=account_id)

                conn.execute(f"DELETE FROM {tables.accounts} WHERE account_id = ?", [account_id])

        logger.info(f"Account deleted: {account_id} ({region.label})")

    # ─── Revenue records ─────────────────────────────────────────────────────

    async def list_records(self, region: Union[str, Region]) -> List[RevenueRecord]:
        """List a region's revenue records, newest date first."""
        region = validate_region(region)
        table = tables_for(region).records

        async with self.connection() as conn:
            try:
                with store_errors("list records", region):
                    rows = conn.execute(
                        f'SELECT {RECORD_COLUMNS} FROM {table} ORDER BY "date" DESC, created_at DESC'
                    ).fetchall()
            except NotFoundTable as e:
                self._tolerate_missing(region, e, "records")
                return []

        return [RevenueRecord.from_row(row) for row in rows]

    async def get_record(self, region: Union[str, Region], record_id: str) -> Optional[RevenueRecord]:
        region = validate_region(region)
        table = tables_for(region).records

        async with self.connection() as conn:
            with store_errors("get record", region):
                row = conn.execute(
                    f"SELECT {RECORD_COLUMNS} FROM {table} WHERE id = ?",
                    [record_id],
                ).fetchone()

        return RevenueRecord.from_row(row) if row else None

    async def _require_account(self, region: Region, account_id: str) -> None:
        if await self.get_account(region, account_id) is None:
            raise ValidationError(
                "account_id",
                f"Unknown account for region {region.label}",
                account_id,
            )

    async def create_record(
        self,
        region: Union[str, Region],
        date: Union[str, date],
        account_id: str,
        gmv: float = 0.0,
        sales: int = 0,
        commission_primary: float = 0.0,
        commission_secondary: float = 0.0,
    ) -> RevenueRecord:
        """
        Create a revenue record for an existing account of the region.

        Raises:
            ValidationError: On invalid values or an account from another region
        """
        region = validate_region(region)
        values = {
            name: validator(value)
            for name, validator, value in (
                ("date", _RECORD_FIELDS["date"], date),
                ("account_id", _RECORD_FIELDS["account_id"], account_id),
                ("gmv", _RECORD_FIELDS["gmv"], gmv),
                ("sales", _RECORD_FIELDS["sales"], sales),
                ("commission_primary", _RECORD_FIELDS["commission_primary"], commission_primary),
                ("commission_secondary", _RECORD_FIELDS["commission_secondary"], commission_secondary),
            )
        }
        await self._require_account(region, values["account_id"])

        record_id = str(uuid.uuid4())
        now = datetime.now()
        table = tables_for(region).records

        async with self.connection() as conn:
            with store_errors("create record", region):
                conn.execute(
                    f"INSERT INTO {table} ({RECORD_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)",
                    [
                        record_id,
                        values["date"],
                        values["account_id"],
                        values["gmv"],
                        values["sales"],
                        values["commission_primary"],
                        values["commission_secondary"],
                        now,
                        now,
                    ],
                )

        logger.debug(f"Record created: {record_id} ({region.label})")
        return await self.get_record(region, record_id)

    async def update_record(
        self,
        region: Union[str, Region],
        record_id: str,
        **fields: Any,
    ) -> RevenueRecord:
        """
        Update selected fields of a revenue record.

        Raises:
            ValidationError: On unknown fields or invalid values
            NotFoundError: If the record does not exist
        """
        region = validate_region(region)

        unknown = set(fields) - set(_RECORD_FIELDS)
        if unknown:
            raise ValidationError("fields", "Unknown record fields", sorted(unknown))

        updates: Dict[str, Any] = {
            name: _RECORD_FIELDS[name](value)
            for name, value in fields.items()
            if value is not None
        }

        if await self.get_record(region, record_id) is None:
            raise NotFoundError(f"Record {record_id} not found ({region.label})", key=record_id)
        if "account_id" in updates:
            await self._require_account(region, updates["account_id"])

        assignments = ["updated_at = ?"] + [f'"{name}" = ?' for name in updates]
        params = [datetime.now()] + list(updates.values()) + [record_id]
        table = tables_for(region).records

        async with self.connection() as conn:
            with store_errors("update record", region):
                conn.execute(
                    f"UPDATE {table} SET {', '.join(assignments)} WHERE id = ?",
                    params,
                )

        return await self.get_record(region, record_id)

    async def delete_record(self, region: Union[str, Region], record_id: str) -> None:
        """
        Delete a revenue record.

        Raises:
            NotFoundError: If the record does not exist
        """
        region = validate_region(region)
        table = tables_for(region).records

        async with self.connection() as conn:
            with store_errors("delete record", region):
                exists = conn.execute(f"SELECT 1 FROM {table} WHERE id = ?", [record_id]).fetchone()
                if not exists:
                    raise NotFoundError(f"Record {record_id} not found ({region.label})", key=record_id)
                conn.execute(f"DELETE FROM {table} WHERE id = ?", [record_id])

    async def get_last_update_time(self, region: Union[str, Region]) -> Optional[datetime]:
        """Most recent updated_at among the region's records, or None."""
        region = validate_region(region)
        table = tables_for(region).records

        async with self.connection() as conn:
            try:
                with store_errors("get last update time", region):
                    row = conn.execute(f"SELECT MAX(updated_at) FROM {table}").fetchone()
            except NotFoundTable as e:
                self._tolerate_missing(region, e, "records")
                return None

        return row[0] if row else None

    async def get_stats(self) -> Dict[str, Dict[str, int]]:
        """Account and record counts per region (for health checks)."""
        stats = {}
        async with self.connection() as conn:
            for region in Region:
                tables = tables_for(region)
                try:
                    with store_errors("count rows", region):
                        accounts = conn.execute(f"SELECT COUNT(*) FROM {tables.accounts}").fetchone()[0]
                        records = conn.execute(f"SELECT COUNT(*) FROM {tables.records}").fetchone()[0]
                except NotFoundTable as e:
                    self._tolerate_missing(region, e, "ledger")
                    accounts = records = 0
                stats[region.value] = {"accounts": int(accounts), "records": int(records)}
        return stats
