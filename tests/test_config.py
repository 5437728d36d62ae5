"""
Tests for settings parsing and logging setup.
"""
import logging

from parcel_hub.core.config import DEFAULT_ENABLED_CARRIERS, Settings
from parcel_hub.core.logging_config import setup_logging


def test_enabled_carriers_comma_separated():
    s = Settings(ENABLED_CARRIERS="dhl, fedex,,DHL")

    assert s.ENABLED_CARRIERS == ["DHL", "FEDEX"]


def test_enabled_carriers_json_array():
    s = Settings(ENABLED_CARRIERS='["ups", "dhl"]')

    assert s.ENABLED_CARRIERS == ["UPS", "DHL"]


def test_enabled_carriers_blank_uses_defaults():
    s = Settings(ENABLED_CARRIERS="  ")

    assert s.ENABLED_CARRIERS == DEFAULT_ENABLED_CARRIERS


def test_enabled_carriers_from_environment(monkeypatch):
    monkeypatch.setenv("ENABLED_CARRIERS", "fedex,ups")
    monkeypatch.setenv("CARRIER_HTTP_TIMEOUT_SECONDS", "5")

    s = Settings()

    assert s.ENABLED_CARRIERS == ["FEDEX", "UPS"]
    assert s.CARRIER_HTTP_TIMEOUT_SECONDS == 5.0


def test_unknown_log_level_falls_back_to_info():
    assert Settings(LOG_LEVEL="verbose").LOG_LEVEL == "INFO"
    assert Settings(LOG_LEVEL="debug").LOG_LEVEL == "DEBUG"


def test_setup_logging_sets_root_level():
    root = logging.getLogger()
    previous_level = root.level
    previous_handlers = list(root.handlers)

    try:
        setup_logging("DEBUG", force=True)
        assert root.level == logging.DEBUG
        assert logging.getLogger("httpx").level == logging.WARNING
    finally:
        root.handlers = previous_handlers
        root.setLevel(previous_level)
