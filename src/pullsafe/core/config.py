"""
pullsafe Configuration

Builds the AuthorizationConfig and reader settings from PULLSAFE_*
environment variables. Nothing is stored at module level: the embedding
application loads configuration once at startup and passes the values on.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional

from .evaluator import build_read_calls
from .pull_exceptions import ConfigurationError, EncodingError, ValidationError
from .types import AuthorizationConfig

logger = logging.getLogger(__name__)

DEFAULT_RPC_URL = "https://sepolia.base.org"
DEFAULT_MAX_PER_PULL = 100 * 10**18
DEFAULT_VALID_AFTER = 0
DEFAULT_VALID_BEFORE = 9999999999
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

_ADDRESS_VARS = {
    "token_address": "PULLSAFE_TOKEN_ADDRESS",
    "registry_address": "PULLSAFE_REGISTRY_ADDRESS",
    "spender_address": "PULLSAFE_SPENDER_ADDRESS",
    "owner_address": "PULLSAFE_OWNER_ADDRESS",
}


@dataclass(frozen=True)
class ReaderSettings:
    """Transport and process settings that sit beside the authorization."""

    rpc_url: str = DEFAULT_RPC_URL
    rpc_timeout: float = 30.0
    evaluation_timeout: Optional[float] = None
    log_level: str = "INFO"
    log_file: Optional[str] = None
    environment: str = "production"


def _get_required(environ: Mapping[str, str], env_var: str) -> str:
    value = environ.get(env_var, "").strip()
    if not value:
        raise ConfigurationError(
            f"{env_var} environment variable is required",
            details={"env_var": env_var},
        )
    return value


def _get_int(environ: Mapping[str, str], env_var: str, default: int) -> int:
    raw = environ.get(env_var, "").strip()
    if not raw:
        return default
    try:
        return int(raw, 0)
    except ValueError as exc:
        raise ConfigurationError(
            f"{env_var} must be an integer, got {raw!r}",
            details={"env_var": env_var},
        ) from exc


def _get_float(environ: Mapping[str, str], env_var: str, default: Optional[float]) -> Optional[float]:
    raw = environ.get(env_var, "").strip()
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError as exc:
        raise ConfigurationError(
            f"{env_var} must be a number, got {raw!r}",
            details={"env_var": env_var},
        ) from exc
    if value <= 0:
        raise ConfigurationError(f"{env_var} must be positive", details={"env_var": env_var})
    return value


def validate_authorization_config(config: AuthorizationConfig) -> None:
    """
    Check a config at startup.

    Encodes the three read calls once so that encoding problems fail here
    rather than on the first evaluation, and warns about windows that can
    never be LIVE.
    """
    try:
        build_read_calls(config)
    except EncodingError as exc:
        raise ConfigurationError(f"Authorization cannot be encoded: {exc.message}") from exc

    if config.window_is_empty:
        logger.warning(
            "valid_after %s is later than valid_before %s; authorization can never be LIVE",
            config.valid_after,
            config.valid_before,
            extra={"event": "config.empty_window"},
        )


def load_authorization_config(environ: Optional[Mapping[str, str]] = None) -> AuthorizationConfig:
    """
    Load the authorization record from the environment.

    Raises:
        ConfigurationError: If a required variable is missing or invalid
    """
    environ = os.environ if environ is None else environ

    values = {field: _get_required(environ, var) for field, var in _ADDRESS_VARS.items()}
    try:
        config = AuthorizationConfig(
            authorization_hash=_get_required(environ, "PULLSAFE_AUTH_HASH"),
            max_per_pull=_get_int(environ, "PULLSAFE_MAX_PER_PULL", DEFAULT_MAX_PER_PULL),
            valid_after=_get_int(environ, "PULLSAFE_VALID_AFTER", DEFAULT_VALID_AFTER),
            valid_before=_get_int(environ, "PULLSAFE_VALID_BEFORE", DEFAULT_VALID_BEFORE),
            **values,
        )
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid authorization configuration: {exc.message}", details=exc.details) from exc

    validate_authorization_config(config)
    logger.info(
        "Loaded authorization %s",
        config.authorization_hash,
        extra={"event": "config.loaded", "token": str(config.token_address)},
    )
    return config


def load_reader_settings(environ: Optional[Mapping[str, str]] = None) -> ReaderSettings:
    """Load RPC, timeout and logging settings from the environment."""
    environ = os.environ if environ is None else environ

    log_level = environ.get("PULLSAFE_LOG_LEVEL", "").strip().upper() or "INFO"
    if log_level not in LOG_LEVELS:
        raise ConfigurationError(
            f"PULLSAFE_LOG_LEVEL must be one of {', '.join(LOG_LEVELS)}, got {log_level!r}",
            details={"env_var": "PULLSAFE_LOG_LEVEL"},
        )

    log_file = environ.get("PULLSAFE_LOG_FILE", "").strip() or None
    return ReaderSettings(
        rpc_url=environ.get("PULLSAFE_RPC_URL", "").strip() or DEFAULT_RPC_URL,
        rpc_timeout=_get_float(environ, "PULLSAFE_RPC_TIMEOUT", 30.0),
        evaluation_timeout=_get_float(environ, "PULLSAFE_EVALUATION_TIMEOUT", None),
        log_level=log_level,
        log_file=log_file,
        environment=environ.get("PULLSAFE_ENVIRONMENT", "").strip() or "production",
    )
