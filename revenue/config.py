"""
Centralized configuration for the revenue dashboard.

Configuration is loaded from environment variables with sensible defaults.

Usage:
    from revenue.config import config

    db_path = config.store.db_path
    rate = config.currency.default_exchange_rate
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Tuple

from dotenv import load_dotenv

# Load environment variables
load_dotenv()


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _env_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if not value:
        return default
    try:
        return float(value)
    except ValueError:
        raise ConfigurationError(f"{name} must be a number (got {value!r})")


@dataclass(frozen=True)
class StoreConfig:
    """DuckDB store configuration."""

    db_path: Path = field(
        default_factory=lambda: Path(
            os.getenv("REVENUE_DB_PATH", str(Path(__file__).parent.parent / "data" / "revenue.duckdb"))
        )
    )
    # ALE tables may legitimately be absent from an older database
    provision_ale: bool = field(default_factory=lambda: _env_bool("REVENUE_PROVISION_ALE", True))


@dataclass(frozen=True)
class CurrencyConfig:
    """Reporting currency and derived cross-rate multipliers."""

    reporting_currency: str = "BRL"
    default_exchange_rate: float = field(
        default_factory=lambda: _env_float("REVENUE_DEFAULT_EXCHANGE_RATE", 5.6)
    )

    # Multipliers applied to the base (USD) rate
    multipliers: Dict[str, float] = field(default_factory=lambda: {
        "USD": 1.0,
        "GBP": 1.36,  # ~7.50 / 5.50
        "EUR": 1.18,  # ~6.50 / 5.50
    })

    def multiplier(self, currency: str) -> float:
        """Get cross-rate multiplier for a native currency."""
        return self.multipliers.get(currency, 1.0)


@dataclass(frozen=True)
class LedgerConfig:
    """Account conventions shared by all regions."""

    # Legacy account removed from every loaded account list
    excluded_account_ids: Tuple[str, ...] = ("C-040",)

    bonus_account_ids: Dict[str, str] = field(default_factory=lambda: {
        "usa": "C-BONUSES",
        "uk": "UK-BONUSES",
        "ale": "C-BONUSES",
    })

    settings_default_editor: str = "System"
    settings_admin_editor: str = "Admin"


@dataclass(frozen=True)
class WebConfig:
    """Web API configuration."""

    host: str = field(default_factory=lambda: os.getenv("WEB_HOST", "0.0.0.0"))
    port: int = field(default_factory=lambda: int(os.getenv("WEB_PORT", "8080")))

    # Rate limiting
    read_limit: str = "60/minute"
    write_limit: str = "20/minute"


@dataclass(frozen=True)
class LogConfig:
    """Logging configuration."""

    level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))
    format: str = field(default_factory=lambda: os.getenv("LOG_FORMAT", "text"))

    @property
    def json_format(self) -> bool:
        return self.format == "json"


@dataclass(frozen=True)
class AppConfig:
    """Main application configuration."""

    version: str = "1.0.0"
    store: StoreConfig = field(default_factory=StoreConfig)
    currency: CurrencyConfig = field(default_factory=CurrencyConfig)
    ledger: LedgerConfig = field(default_factory=LedgerConfig)
    web: WebConfig = field(default_factory=WebConfig)
    logging: LogConfig = field(default_factory=LogConfig)


class ConfigurationError(Exception):
    """Raised when required configuration is missing or invalid."""
    pass


# Global config instance
config = AppConfig()

VERSION = config.version
DEFAULT_EXCHANGE_RATE = config.currency.default_exchange_rate


def validate_config(app_config: AppConfig = None) -> None:
    """
    Validate configuration values.

    Call this on application startup to fail fast with clear error messages.

    Raises:
        ConfigurationError: If any value is invalid
    """
    app_config = app_config or config
    errors: List[str] = []

    if app_config.currency.default_exchange_rate <= 0:
        errors.append("REVENUE_DEFAULT_EXCHANGE_RATE must be positive")

    for currency, multiplier in app_config.currency.multipliers.items():
        if multiplier <= 0:
            errors.append(f"Cross-rate multiplier for {currency} must be positive")

    if app_config.logging.format not in ("text", "json"):
        errors.append("LOG_FORMAT must be 'text' or 'json'")

    if not (0 < app_config.web.port < 65536):
        errors.append("WEB_PORT must be between 1 and 65535")

    if errors:
        error_msg = "Configuration validation failed:\n" + "\n".join(f"  - {e}" for e in errors)
        raise ConfigurationError(error_msg)
