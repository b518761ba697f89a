"""
Tests for revenue.config module.
"""
import pytest
from dataclasses import replace

from revenue.config import (
    AppConfig,
    ConfigurationError,
    CurrencyConfig,
    LogConfig,
    StoreConfig,
    WebConfig,
    validate_config,
)


class TestDefaults:
    def test_currency_defaults(self):
        currency = CurrencyConfig()
        assert currency.reporting_currency == "BRL"
        assert currency.multiplier("USD") == 1.0
        assert currency.multiplier("GBP") == 1.36
        assert currency.multiplier("EUR") == 1.18

    def test_unknown_currency_multiplier(self):
        assert CurrencyConfig().multiplier("JPY") == 1.0

    def test_ledger_defaults(self):
        ledger = AppConfig().ledger
        assert ledger.excluded_account_ids == ("C-040",)
        assert ledger.bonus_account_ids["uk"] == "UK-BONUSES"


class TestEnvironment:
    def test_db_path_from_env(self, monkeypatch, tmp_path):
        monkeypatch.setenv("REVENUE_DB_PATH", str(tmp_path / "x.duckdb"))
        assert StoreConfig().db_path == tmp_path / "x.duckdb"

    @pytest.mark.parametrize("raw,expected", [("false", False), ("0", False), ("yes", True), ("TRUE", True)])
    def test_provision_ale_flag(self, monkeypatch, raw, expected):
        monkeypatch.setenv("REVENUE_PROVISION_ALE", raw)
        assert StoreConfig().provision_ale is expected

    def test_exchange_rate_from_env(self, monkeypatch):
        monkeypatch.setenv("REVENUE_DEFAULT_EXCHANGE_RATE", "5.25")
        assert CurrencyConfig().default_exchange_rate == 5.25

    def test_bad_exchange_rate(self, monkeypatch):
        monkeypatch.setenv("REVENUE_DEFAULT_EXCHANGE_RATE", "five")
        with pytest.raises(ConfigurationError):
            CurrencyConfig()

    def test_json_log_format(self, monkeypatch):
        monkeypatch.setenv("LOG_FORMAT", "json")
        assert LogConfig().json_format is True


class TestValidateConfig:
    def test_defaults_valid(self):
        validate_config(AppConfig(logging=LogConfig(level="INFO", format="text")))

    def test_non_positive_rate(self):
        app_config = AppConfig(currency=replace(CurrencyConfig(), default_exchange_rate=0))
        with pytest.raises(ConfigurationError) as exc_info:
            validate_config(app_config)
        assert "REVENUE_DEFAULT_EXCHANGE_RATE" in str(exc_info.value)

    def test_bad_multiplier(self):
        app_config = AppConfig(currency=replace(CurrencyConfig(), multipliers={"USD": 1.0, "GBP": -1}))
        with pytest.raises(ConfigurationError) as exc_info:
            validate_config(app_config)
        assert "GBP" in str(exc_info.value)

    def test_collects_all_errors(self):
        app_config = AppConfig(
            logging=LogConfig(level="INFO", format="xml"),
            web=WebConfig(host="0.0.0.0", port=70000),
        )
        with pytest.raises(ConfigurationError) as exc_info:
            validate_config(app_config)
        message = str(exc_info.value)
        assert "LOG_FORMAT" in message
        assert "WEB_PORT" in message
