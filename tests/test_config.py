"""
設定モジュールのテスト
"""
import logging

import sales_report
from sales_report import config as config_module
from sales_report.config import Config, DevelopmentConfig, ProductionConfig, get_config


def test_default_environment_is_development(monkeypatch):
    monkeypatch.delenv("SALES_REPORT_ENV", raising=False)
    assert get_config() is DevelopmentConfig


def test_production_environment(monkeypatch):
    monkeypatch.setenv("SALES_REPORT_ENV", "production")
    assert get_config() is ProductionConfig
    assert ProductionConfig.LOG_LEVEL == Config.LOG_LEVEL


def test_unknown_environment_falls_back_to_default(monkeypatch):
    monkeypatch.setenv("SALES_REPORT_ENV", "staging")
    assert get_config() is config_module.config["default"]


def test_development_logs_debug():
    assert DevelopmentConfig.LOG_LEVEL == "DEBUG"


def test_init_app_configures_logging(monkeypatch):
    calls = []
    monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: calls.append(kwargs))

    ProductionConfig.init_app()

    assert calls == [{"level": Config.LOG_LEVEL, "format": Config.LOG_FORMAT}]


def test_package_init_app_uses_environment(monkeypatch):
    calls = []
    monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: calls.append(kwargs))
    monkeypatch.setenv("SALES_REPORT_ENV", "development")

    applied = sales_report.init_app()

    assert applied is DevelopmentConfig
    assert calls == [{"level": "DEBUG", "format": Config.LOG_FORMAT}]


def test_package_init_app_with_explicit_config(monkeypatch):
    calls = []
    monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: calls.append(kwargs))
    monkeypatch.setenv("SALES_REPORT_ENV", "development")

    assert sales_report.init_app(ProductionConfig) is ProductionConfig
    assert calls[0]["level"] == ProductionConfig.LOG_LEVEL
