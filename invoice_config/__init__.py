"""
invoice_config -- single public entrypoint for application configuration.

Responsibility:
    Provides the ONLY way to obtain configuration at runtime through
    ``get_active_config()``.  No other component reads environment
    variables or configuration files directly.  Returns a frozen
    ``AppConfig``.

Architecture position:
    Configuration -- sits above ``invoice_kernel`` and below ``invoice_api``.
    The kernel MUST NEVER import from ``invoice_config``; the API hands the
    kernel what it needs (``AppConfig.default_rates``, the token settings)
    explicitly.

Failure modes:
    - ``ConfigurationError`` -- missing secret, unreadable or unknown YAML
      keys, or an invalid value.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from pathlib import Path

from invoice_config.loader import CONFIG_FILE_ENV_VAR, load_config
from invoice_config.schema import AppConfig, ConfigurationError

_logger = logging.getLogger("invoice_kernel.config")


def get_active_config(
    env: Mapping[str, str] | None = None,
    config_file: Path | str | None = None,
) -> AppConfig:
    """The ONLY public configuration entrypoint.

    Args:
        env: Environment mapping to read.  Defaults to ``os.environ``.
        config_file: YAML file to layer under the environment.  Defaults
            to the path in ``INVOICE_CONFIG_FILE`` when that is set.

    Returns:
        AppConfig.

    Raises:
        ConfigurationError: If the assembled configuration is invalid.
    """
    environ = os.environ if env is None else env

    if config_file is None and environ.get(CONFIG_FILE_ENV_VAR):
        config_file = environ[CONFIG_FILE_ENV_VAR]
    path = Path(config_file) if config_file is not None else None

    config = load_config(environ, path)

    _logger.info(
        "config_loaded",
        extra={
            "config_file": str(path) if path else None,
            "default_fee_rate": str(config.default_fee_rate),
            "default_tax_rate": str(config.default_tax_rate),
            "token_ttl_seconds": config.token_ttl_seconds,
        },
    )
    return config


__all__ = [
    "AppConfig",
    "ConfigurationError",
    "get_active_config",
]
