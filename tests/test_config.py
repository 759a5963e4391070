import logging

from invoice_studio.config import Settings, configure_logging


def test_settings_read_prefixed_environment(monkeypatch):
    monkeypatch.setenv("INVOICE_STUDIO_DEFAULT_CURRENCY", "GBP")
    monkeypatch.setenv("INVOICE_STUDIO_DEFAULT_DUE_DAYS", "30")
    settings = Settings.load()
    assert settings.default_currency == "GBP"
    assert settings.default_due_days == 30
    assert settings.default_locale == "en-US"


def test_configure_logging_tolerates_unknown_level():
    configure_logging("chatty")
    configure_logging("debug")
    assert logging.getLevelName(logging.DEBUG) == "DEBUG"
