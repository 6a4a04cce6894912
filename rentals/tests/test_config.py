"""
Tests for environment-driven settings.
"""

import pytest

from core.config import Settings


@pytest.fixture
def legacy_dev_env(monkeypatch):
    monkeypatch.delenv("DEV_ENV", raising=False)

    def load(value):
        monkeypatch.setenv("VITE_DEVELOPMENT_ENV", value)
        return Settings(_env_file=None)

    return load


@pytest.mark.parametrize("value", ["true", "1", "local", "development", "yes"])
def test_legacy_dev_flag_enables_development(legacy_dev_env, value):
    assert legacy_dev_env(value).dev_env is True


@pytest.mark.parametrize("value", ["false", "0", "no", "", "FALSE"])
def test_legacy_dev_flag_disables_development(legacy_dev_env, value):
    assert legacy_dev_env(value).dev_env is False


def test_dev_env_defaults_off(monkeypatch):
    monkeypatch.delenv("DEV_ENV", raising=False)
    monkeypatch.delenv("VITE_DEVELOPMENT_ENV", raising=False)

    assert Settings(_env_file=None).dev_env is False


def test_allowed_origins_drop_blanks():
    config = Settings(_env_file=None, allow_site_uris=" https://a.test, ,https://b.test ")

    assert config.allowed_origins == ["https://a.test", "https://b.test"]


def test_email_send_url_joins_site_url():
    config = Settings(_env_file=None, site_url="https://rent.test/", email_send_path="/send")

    assert config.email_send_url == "https://rent.test/send"
