import logging

import pytest

from splitledger.config import configure_logging, get_settings


def test_defaults():
    settings = get_settings()

    assert settings.decimals == 2
    assert settings.settle_algorithm == "greedy"
    assert settings.strict is True
    assert settings.log_level == "INFO"


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("LEDGER_DECIMALS", "0")
    monkeypatch.setenv("LEDGER_SETTLE_ALGORITHM", " Pairs ")
    monkeypatch.setenv("LEDGER_STRICT", "no")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    get_settings.cache_clear()

    settings = get_settings()

    assert (settings.decimals, settings.settle_algorithm, settings.strict, settings.log_level) == (
        0, "pairs", False, "DEBUG"
    )


def test_bad_decimals(monkeypatch):
    monkeypatch.setenv("LEDGER_DECIMALS", "two")
    get_settings.cache_clear()

    with pytest.raises(ValueError):
        get_settings()


def test_configure_logging(monkeypatch):
    calls = {}
    monkeypatch.setattr(logging, "basicConfig", lambda **kw: calls.update(kw))

    configure_logging("WARNING")

    assert calls["level"] == "WARNING"
