from decimal import Decimal

import pytest

from propath.adapters.config import AppConfig


def test_env_overrides_with_percent_strings(monkeypatch):
    monkeypatch.setenv("PROPATH_DEFAULT_VACANCY_RATE", "7.5%")
    monkeypatch.setenv("PROPATH_DEFAULT_LOAN_TERM_MONTHS", "240")
    monkeypatch.setenv("PROPATH_SAVE_SNAPSHOTS", "true")

    cfg = AppConfig()

    assert cfg.DEFAULT_VACANCY_RATE == Decimal("7.5")
    assert cfg.DEFAULT_LOAN_TERM_MONTHS == 240
    assert cfg.SAVE_SNAPSHOTS is True


def test_defaults_follow_simulator_form():
    cfg = AppConfig()
    assert cfg.DEFAULT_INTEREST_RATE == Decimal("4.5")
    assert cfg.DEFAULT_LOAN_TERM_MONTHS == 360
    assert cfg.DEFAULT_MANAGEMENT_RATE == Decimal("8.0")


def test_negative_rate_rejected(monkeypatch):
    monkeypatch.setenv("PROPATH_DEFAULT_INTEREST_RATE", "-1")
    with pytest.raises(ValueError):
        AppConfig()
