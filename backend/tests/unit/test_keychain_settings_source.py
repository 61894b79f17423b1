"""Tests for KeychainSettingsSource integration in config.py."""

import os
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from config import KeychainSettingsSource, Settings
from services.credential_manager import CREDENTIAL_KEYS

# Environment variables that would interfere with Settings defaults if
# set in the test runner's shell.  We clear them for isolation.
_ENV_VARS_TO_CLEAR = {
    "DATABASE_URL",
    "LOG_LEVEL",
    "SNAPSHOT_TIMEZONE",
    "ANALYTICS_WINDOW_DAYS",
    "PRICE_CACHE_TTL_SECONDS",
    "PRICE_REQUEST_TIMEOUT_SECONDS",
    "HOLDING_EPSILON",
    *CREDENTIAL_KEYS,
}


def _clean_env():
    """Return a dict suitable for ``os.environ`` patching that removes
    any variables the Settings class reads."""
    return {k: v for k, v in os.environ.items() if k not in _ENV_VARS_TO_CLEAR}


class TestKeychainSettingsSource:
    """Test the KeychainSettingsSource pydantic-settings source."""

    def test_keychain_value_overrides_default(self):
        with (
            patch.dict(os.environ, _clean_env(), clear=True),
            patch("config.get_credential") as mock_get,
        ):
            mock_get.side_effect = lambda key: (
                "keychain-value" if key == "TWELVEDATA_API_KEY" else None
            )
            s = Settings(_env_file=None)
            assert s.TWELVEDATA_API_KEY == "keychain-value"
            assert s.COINGECKO_API_KEY == ""

    def test_init_value_overrides_keychain(self):
        with (
            patch.dict(os.environ, _clean_env(), clear=True),
            patch("config.get_credential", return_value="keychain-value"),
        ):
            s = Settings(_env_file=None, TWELVEDATA_API_KEY="init-value")
            assert s.TWELVEDATA_API_KEY == "init-value"

    def test_non_credential_fields_skip_keychain(self):
        with (
            patch.dict(os.environ, _clean_env(), clear=True),
            patch("config.get_credential") as mock_get,
        ):
            mock_get.return_value = "should-not-be-used"
            s = Settings(_env_file=None)
            assert s.DATABASE_URL == "sqlite:///./wallets.db"
            called_keys = {call.args[0] for call in mock_get.call_args_list}
            assert called_keys <= CREDENTIAL_KEYS

    def test_env_fallback_when_keychain_empty(self):
        env = _clean_env()
        env["COINGECKO_API_KEY"] = "from-env"
        with (
            patch.dict(os.environ, env, clear=True),
            patch("config.get_credential", return_value=None),
        ):
            s = Settings(_env_file=None)
            assert s.COINGECKO_API_KEY == "from-env"
            assert s.TWELVEDATA_API_KEY == ""

    def test_empty_keychain_value_does_not_shadow_env(self):
        env = _clean_env()
        env["TWELVEDATA_API_KEY"] = "from-env"
        with (
            patch.dict(os.environ, env, clear=True),
            patch("config.get_credential", return_value=""),
        ):
            assert Settings(_env_file=None).TWELVEDATA_API_KEY == "from-env"

    def test_keychain_overrides_env_var(self):
        env = _clean_env()
        env["TWELVEDATA_API_KEY"] = "from-env"
        with (
            patch.dict(os.environ, env, clear=True),
            patch("config.get_credential") as mock_get,
        ):
            mock_get.side_effect = lambda key: (
                "from-keychain" if key == "TWELVEDATA_API_KEY" else None
            )
            s = Settings(_env_file=None)
            assert s.TWELVEDATA_API_KEY == "from-keychain"

    def test_source_is_in_priority_chain(self):
        sources = Settings.settings_customise_sources(
            Settings,
            init_settings=object(),
            env_settings=object(),
            dotenv_settings=object(),
            file_secret_settings=object(),
        )
        source_types = [type(s) for s in sources]
        assert source_types.index(KeychainSettingsSource) == 1


class TestSettingsValidation:
    def test_defaults(self):
        with (
            patch.dict(os.environ, _clean_env(), clear=True),
            patch("config.get_credential", return_value=None),
        ):
            s = Settings(_env_file=None)
        assert s.SNAPSHOT_TIMEZONE == "Europe/Bratislava"
        assert s.ANALYTICS_WINDOW_DAYS == 60
        assert s.PRICE_CACHE_TTL_SECONDS == 60.0

    def test_unknown_timezone_rejected(self):
        with (
            patch.dict(os.environ, _clean_env(), clear=True),
            patch("config.get_credential", return_value=None),
            pytest.raises(ValidationError, match="SNAPSHOT_TIMEZONE"),
        ):
            Settings(_env_file=None, SNAPSHOT_TIMEZONE="Mars/Olympus_Mons")

    def test_window_must_be_positive(self):
        with (
            patch.dict(os.environ, _clean_env(), clear=True),
            patch("config.get_credential", return_value=None),
            pytest.raises(ValidationError, match="ANALYTICS_WINDOW_DAYS"),
        ):
            Settings(_env_file=None, ANALYTICS_WINDOW_DAYS=0)

    def test_window_from_env(self):
        env = _clean_env()
        env["ANALYTICS_WINDOW_DAYS"] = "30"
        with (
            patch.dict(os.environ, env, clear=True),
            patch("config.get_credential", return_value=None),
        ):
            assert Settings(_env_file=None).ANALYTICS_WINDOW_DAYS == 30

    def test_fields(self):
        assert set(Settings.model_fields) == {
            "DATABASE_URL",
            "TWELVEDATA_API_KEY",
            "COINGECKO_API_KEY",
            "PRICE_CACHE_TTL_SECONDS",
            "PRICE_REQUEST_TIMEOUT_SECONDS",
            "SNAPSHOT_TIMEZONE",
            "ANALYTICS_WINDOW_DAYS",
            "HOLDING_EPSILON",
            "LOG_LEVEL",
        }

    def test_unused_env_vars_ignored(self):
        env = _clean_env()
        env.update({"ENVIRONMENT": "production", "DEBUG": "false"})
        with (
            patch.dict(os.environ, env, clear=True),
            patch("config.get_credential", return_value=None),
        ):
            s = Settings(_env_file=None)
        assert not hasattr(s, "ENVIRONMENT")
        assert not hasattr(s, "DEBUG")
