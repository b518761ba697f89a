"""
Dashboard settings repository.

Exactly one settings row should be live. Duplicates are pruned (the first
row wins) and a default row is synthesized when none exists.
"""
import uuid
from datetime import datetime

from revenue.config import config
from revenue.exceptions import RevenueStoreError
from revenue.models import DashboardSettings
from revenue.observability import get_logger
from revenue.repositories.base import SETTINGS_TABLE, store_errors
from revenue.validators import validate_exchange_rate

logger = get_logger(__name__)

DEFAULT_SETTINGS_ID = "default"


def _default_settings() -> DashboardSettings:
    return DashboardSettings(
        id=DEFAULT_SETTINGS_ID,
        exchange_rate=config.currency.default_exchange_rate,
        last_updated=datetime.now(),
        updated_by=config.ledger.settings_default_editor,
    )


class SettingsMixin:
    """Singleton DashboardSettings access."""

    async def get_settings(self) -> DashboardSettings:
        """
        Get the live settings row, healing the table if needed.

        Returns an in-memory default (id "default") when the store cannot
        provide or create a row.
        """
        try:
            async with self.connection() as conn:
                with store_errors("get settings"):
                    rows = conn.execute(f"""
                        SELECT id, exchange_rate, last_updated, updated_by
                        FROM {SETTINGS_TABLE}
                        ORDER BY created_at, rowid
                    """).fetchall()
        except RevenueStoreError as e:
            logger.error(f"Failed to read dashboard settings: {e}")
            return await self._create_default_settings()

        if not rows:
            return await self._create_default_settings()

        if len(rows) > 1:
            stale_ids = [row[0] for row in rows[1:]]
            logger.warning(f"Removing {len(stale_ids)} duplicate settings rows")
            async with self.connection() as conn:
                with store_errors("prune duplicate settings"):
                    conn.execute(
                        f"DELETE FROM {SETTINGS_TABLE} WHERE id IN ({','.join('?' * len(stale_ids))})",
                        stale_ids,
                    )

        first = rows[0]
        return DashboardSettings(
            id=first[0],
            exchange_rate=float(first[1]),
            last_updated=first[2],
            updated_by=first[3] or config.ledger.settings_default_editor,
        )

    async def _create_default_settings(self) -> DashboardSettings:
        settings = _default_settings()
        settings_id = str(uuid.uuid4())
        try:
            async with self.connection() as conn:
                with store_errors("create default settings"):
                    conn.execute(f"DELETE FROM {SETTINGS_TABLE}")
                    conn.execute(
                        f"INSERT INTO {SETTINGS_TABLE} (id, exchange_rate, last_updated, updated_by, created_at) "
                        "VALUES (?, ?, ?, ?, ?)",
                        [settings_id, settings.exchange_rate, settings.last_updated,
                         settings.updated_by, settings.last_updated],
                    )
        except RevenueStoreError as e:
            logger.error(f"Failed to create default settings, using in-memory default: {e}")
            return settings

        logger.info("Default dashboard settings created")
        return DashboardSettings(
            id=settings_id,
            exchange_rate=settings.exchange_rate,
            last_updated=settings.last_updated,
            updated_by=settings.updated_by,
        )

    async def update_exchange_rate(
        self,
        rate: float,
        updated_by: str = None,
    ) -> DashboardSettings:
        """
        Set the base exchange rate on the live settings row.

        Raises:
            ValidationError: If rate is not positive
            RevenueStoreError: If the write fails
        """
        rate = validate_exchange_rate(rate)
        updated_by = updated_by or config.ledger.settings_admin_editor
        now = datetime.now()

        current = await self.get_settings()

        async with self.connection() as conn:
            with store_errors("update exchange rate"):
                if current.id == DEFAULT_SETTINGS_ID:
                    settings_id = str(uuid.uuid4())
                    conn.execute(
                        f"INSERT INTO {SETTINGS_TABLE} (id, exchange_rate, last_updated, updated_by, created_at) "
                        "VALUES (?, ?, ?, ?, ?)",
                        [settings_id, rate, now, updated_by, now],
                    )
                else:
                    settings_id = current.id
                    conn.execute(
                        f"UPDATE {SETTINGS_TABLE} SET exchange_rate = ?, last_updated = ?, updated_by = ? "
                        "WHERE id = ?",
                        [rate, now, updated_by, settings_id],
                    )

        logger.info(f"Exchange rate updated to {rate}", extra={"updated_by": updated_by})
        return DashboardSettings(id=settings_id, exchange_rate=rate, last_updated=now, updated_by=updated_by)
