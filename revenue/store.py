"""
DuckDB-backed store for the regional ledgers.

Composes the repository mixins into one object:
- RegionStoreMixin: accounts and revenue records per region
- SettingsMixin: dashboard settings singleton
"""
import asyncio
from typing import Optional

from revenue.repositories import BaseRepository, RegionStoreMixin, SettingsMixin


class RegionStore(RegionStoreMixin, SettingsMixin, BaseRepository):
    """Region-aware CRUD store over a single DuckDB database."""


_store_instance: Optional[RegionStore] = None
_store_lock = asyncio.Lock()


async def get_store() -> RegionStore:
    """Get singleton store instance (coroutine-safe)."""
    global _store_instance
    async with _store_lock:
        if _store_instance is None:
            _store_instance = RegionStore()
            await _store_instance.connect()
    return _store_instance


async def close_store() -> None:
    """Close singleton store instance."""
    global _store_instance
    if _store_instance:
        await _store_instance.close()
        _store_instance = None
