"""
Configuration Loader (``invoice_config.loader``).

Responsibility
--------------
Collects raw configuration values from their sources and turns them into a
validated ``AppConfig``.  Sources are layered, later ones winning:

1. built-in defaults (``AppConfig`` field defaults)
2. an optional YAML file
3. environment variables

The single public entry point for runtime config is
``invoice_config.get_active_config()``.

Failure modes
-------------
* Missing YAML file  -> ``ConfigurationError``.
* Malformed YAML or a non-mapping document  -> ``ConfigurationError``.
* Unknown YAML keys  -> ``ConfigurationError`` naming them.
* Missing secret, bad TTL, bad rate or log level  -> ``ConfigurationError``.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import fields
from pathlib import Path
from typing import Any

import yaml

from invoice_config.schema import AppConfig, ConfigurationError
from invoice_kernel.domain.values import Rate
from invoice_kernel.exceptions import InvalidAmountError

# AppConfig field -> environment variable
ENV_VARS: dict[str, str] = {
    "database_url": "DATABASE_URL",
    "jwt_secret_key": "JWT_SECRET_KEY",
    "jwt_algorithm": "JWT_ALGORITHM",
    "token_ttl_seconds": "JWT_EXPIRES_IN",
    "default_fee_rate": "INVOICE_FEE_RATE",
    "default_tax_rate": "INVOICE_TAX_RATE",
    "log_level": "LOG_LEVEL",
}

CONFIG_FILE_ENV_VAR = "INVOICE_CONFIG_FILE"

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
_RATE_MIN = Rate.of("0")
_RATE_MAX = Rate.of("1")


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a YAML configuration file.

    Raises:
        ConfigurationError: If the file is missing, not valid YAML, has a
            top level that is not a mapping, or contains unknown keys.
    """
    try:
        with open(path) as f:
            data = yaml.safe_load(f) or {}
    except FileNotFoundError as e:
        raise ConfigurationError(f"Configuration file not found: {path}") from e
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigurationError(f"Configuration file {path} must contain a mapping")

    known = {f.name for f in fields(AppConfig)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ConfigurationError(f"Unknown configuration keys in {path}: {', '.join(unknown)}")
    return data


def read_environment(env: Mapping[str, str]) -> dict[str, Any]:
    """Pick the configuration variables out of env, ignoring empty ones."""
    values: dict[str, Any] = {}
    for field_name, var in ENV_VARS.items():
        raw = env.get(var)
        if raw is not None and raw.strip() != "":
            values[field_name] = raw.strip()
    return values


def parse_rate(name: str, raw: Any) -> Rate:
    if isinstance(raw, Rate):
        rate = raw
    else:
        if isinstance(raw, float):
            # YAML reads 0.04 as a float
            raw = repr(raw)
        try:
            rate = Rate.of(raw)
        except InvalidAmountError as e:
            raise ConfigurationError(f"{name} must be a decimal rate, got {raw!r}") from e
    if rate < _RATE_MIN or rate > _RATE_MAX:
        raise ConfigurationError(f"{name} must be between 0 and 1, got {rate}")
    return rate


def parse_ttl(raw: Any) -> int:
    if isinstance(raw, bool):
        raise ConfigurationError(f"token_ttl_seconds must be an integer, got {raw!r}")
    try:
        ttl = int(raw)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"token_ttl_seconds must be an integer, got {raw!r}") from e
    if ttl <= 0:
        raise ConfigurationError(f"token_ttl_seconds must be positive, got {ttl}")
    return ttl


def build_config(values: Mapping[str, Any]) -> AppConfig:
    """
    Validate merged raw values and build the AppConfig.

    Raises:
        ConfigurationError: On the first invalid value.
    """
    secret = values.get("jwt_secret_key")
    if not secret or not str(secret).strip():
        raise ConfigurationError(
            f"jwt_secret_key is required (set {ENV_VARS['jwt_secret_key']})"
        )

    kwargs: dict[str, Any] = {"jwt_secret_key": str(secret)}

    if "database_url" in values:
        kwargs["database_url"] = str(values["database_url"])
    if "jwt_algorithm" in values:
        kwargs["jwt_algorithm"] = str(values["jwt_algorithm"])
    if "token_ttl_seconds" in values:
        kwargs["token_ttl_seconds"] = parse_ttl(values["token_ttl_seconds"])
    if "default_fee_rate" in values:
        kwargs["default_fee_rate"] = parse_rate("default_fee_rate", values["default_fee_rate"])
    if "default_tax_rate" in values:
        kwargs["default_tax_rate"] = parse_rate("default_tax_rate", values["default_tax_rate"])
    if "log_level" in values:
        level = str(values["log_level"]).upper()
        if level not in _LOG_LEVELS:
            raise ConfigurationError(
                f"log_level must be one of {', '.join(_LOG_LEVELS)}, got {values['log_level']!r}"
            )
        kwargs["log_level"] = level

    return AppConfig(**kwargs)


def load_config(
    env: Mapping[str, str],
    config_file: Path | None = None,
) -> AppConfig:
    """Layer YAML (when given) under the environment and build the config."""
    values: dict[str, Any] = {}
    if config_file is not None:
        values.update(load_yaml_file(config_file))
    values.update(read_environment(env))
    return build_config(values)
