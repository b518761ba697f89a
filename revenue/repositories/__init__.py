"""
Repository layer for the DuckDB store.

- BaseRepository: Connection management, schema and region -> table mapping
- RegionStoreMixin: Accounts and revenue records CRUD per region
- SettingsMixin: Singleton dashboard settings
"""
from revenue.repositories.base import BaseRepository, REGION_TABLES, RegionTables
from revenue.repositories.region_store import RegionStoreMixin
from revenue.repositories.settings_repo import SettingsMixin

__all__ = [
    "BaseRepository",
    "REGION_TABLES",
    "RegionTables",
    "RegionStoreMixin",
    "SettingsMixin",
]
