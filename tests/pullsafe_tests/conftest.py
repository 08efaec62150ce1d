import pytest

from fakes import AUTH_HASH, OWNER, REGISTRY, SPENDER, TOKEN, make_config, make_reader


@pytest.fixture
def auth_config():
    """Authorization with an open window and a per-pull cap of 100."""
    return make_config()


@pytest.fixture
def fake_reader():
    """Reader for a live, unrevoked authorization (balance 50, allowance 30)."""
    return make_reader()


@pytest.fixture
def auth_env():
    """Complete PULLSAFE_* environment for config loading tests."""
    return {
        "PULLSAFE_TOKEN_ADDRESS": TOKEN,
        "PULLSAFE_REGISTRY_ADDRESS": REGISTRY,
        "PULLSAFE_SPENDER_ADDRESS": SPENDER,
        "PULLSAFE_OWNER_ADDRESS": OWNER,
        "PULLSAFE_AUTH_HASH": AUTH_HASH,
    }


@pytest.fixture(name="make_config")
def make_config_fixture():
    """Factory for AuthorizationConfig with keyword overrides."""
    return make_config


@pytest.fixture(name="make_reader")
def make_reader_fixture():
    """Factory for FakeContractReader with canned revoked/balance/allowance values."""
    return make_reader
