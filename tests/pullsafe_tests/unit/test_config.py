"""
Unit tests for environment-based configuration loading.
"""

import logging

import pytest

from pullsafe.core.config import (
    DEFAULT_MAX_PER_PULL,
    DEFAULT_RPC_URL,
    load_authorization_config,
    load_reader_settings,
)
from pullsafe.core.pull_exceptions import ConfigurationError
from pullsafe.core.types import Address, Hash32


class TestLoadAuthorizationConfig:
    def test_defaults(self, auth_env):
        config = load_authorization_config(auth_env)

        assert config.token_address == Address(auth_env["PULLSAFE_TOKEN_ADDRESS"])
        assert config.authorization_hash == Hash32(auth_env["PULLSAFE_AUTH_HASH"])
        assert config.max_per_pull == DEFAULT_MAX_PER_PULL
        assert config.valid_after == 0
        assert config.valid_before == 9999999999

    def test_overrides(self, auth_env):
        auth_env.update(
            {
                "PULLSAFE_MAX_PER_PULL": "0xff",
                "PULLSAFE_VALID_AFTER": "100",
                "PULLSAFE_VALID_BEFORE": "200",
            }
        )
        config = load_authorization_config(auth_env)

        assert config.max_per_pull == 255
        assert config.valid_after == 100
        assert config.valid_before == 200

    @pytest.mark.parametrize(
        "missing",
        [
            "PULLSAFE_TOKEN_ADDRESS",
            "PULLSAFE_REGISTRY_ADDRESS",
            "PULLSAFE_SPENDER_ADDRESS",
            "PULLSAFE_OWNER_ADDRESS",
            "PULLSAFE_AUTH_HASH",
        ],
    )
    def test_missing_required(self, auth_env, missing):
        del auth_env[missing]

        with pytest.raises(ConfigurationError) as exc_info:
            load_authorization_config(auth_env)

        assert exc_info.value.details["env_var"] == missing

    def test_placeholder_address_rejected(self, auth_env):
        auth_env["PULLSAFE_TOKEN_ADDRESS"] = "0xTOKEN"

        with pytest.raises(ConfigurationError):
            load_authorization_config(auth_env)

    def test_non_integer_rejected(self, auth_env):
        auth_env["PULLSAFE_VALID_BEFORE"] = "tomorrow"

        with pytest.raises(ConfigurationError):
            load_authorization_config(auth_env)

    def test_oversized_cap_rejected(self, auth_env):
        auth_env["PULLSAFE_MAX_PER_PULL"] = str(2**256)

        with pytest.raises(ConfigurationError):
            load_authorization_config(auth_env)

    def test_empty_window_warns(self, auth_env, caplog):
        auth_env.update({"PULLSAFE_VALID_AFTER": "200", "PULLSAFE_VALID_BEFORE": "100"})

        with caplog.at_level(logging.WARNING, logger="pullsafe.core.config"):
            config = load_authorization_config(auth_env)

        assert config.window_is_empty
        assert any("never be LIVE" in record.getMessage() for record in caplog.records)


class TestLoadReaderSettings:
    def test_defaults(self):
        settings = load_reader_settings({})

        assert settings.rpc_url == DEFAULT_RPC_URL
        assert settings.rpc_timeout == 30.0
        assert settings.evaluation_timeout is None
        assert settings.log_level == "INFO"
        assert settings.log_file is None
        assert settings.environment == "production"

    def test_overrides(self):
        settings = load_reader_settings(
            {
                "PULLSAFE_RPC_URL": "http://localhost:8545",
                "PULLSAFE_RPC_TIMEOUT": "2.5",
                "PULLSAFE_EVALUATION_TIMEOUT": "10",
                "PULLSAFE_LOG_LEVEL": "debug",
                "PULLSAFE_ENVIRONMENT": "staging",
            }
        )

        assert settings.rpc_url == "http://localhost:8545"
        assert settings.rpc_timeout == 2.5
        assert settings.evaluation_timeout == 10.0
        assert settings.log_level == "DEBUG"
        assert settings.environment == "staging"

    @pytest.mark.parametrize("value", ["0", "-1", "soon"])
    def test_bad_timeout_rejected(self, value):
        with pytest.raises(ConfigurationError):
            load_reader_settings({"PULLSAFE_RPC_TIMEOUT": value})

    def test_bad_log_level_rejected(self):
        with pytest.raises(ConfigurationError):
            load_reader_settings({"PULLSAFE_LOG_LEVEL": "LOUD"})
