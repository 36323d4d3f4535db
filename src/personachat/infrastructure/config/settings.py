"""Process-wide client settings read from the environment."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Mapping

from personachat.domain.config import ClientSettings, ConfigError

from .validators import format_error

ENV_API_KEY = "PERSONACHAT_API_KEY"
ENV_TIMEOUT = "PERSONACHAT_TIMEOUT_S"
ENV_LOG_LEVEL = "PERSONACHAT_LOG_LEVEL"

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


def load_settings(environ: Mapping[str, str] | None = None) -> ClientSettings:
    """Build :class:`ClientSettings` from *environ* (``os.environ`` by default)."""

    env = os.environ if environ is None else environ
    source = Path("<environment>")

    raw_timeout = env.get(ENV_TIMEOUT, "").strip()
    timeout_s = ClientSettings.timeout_s
    if raw_timeout:
        try:
            timeout_s = float(raw_timeout)
        except ValueError:
            raise ConfigError(format_error(source, ENV_TIMEOUT, f"Expected a number, got '{raw_timeout}'.")) from None
        if timeout_s <= 0:
            raise ConfigError(format_error(source, ENV_TIMEOUT, "Timeout must be positive."))

    log_level = env.get(ENV_LOG_LEVEL, "").strip().upper() or ClientSettings.log_level
    if log_level not in _LOG_LEVELS:
        raise ConfigError(
            format_error(source, ENV_LOG_LEVEL, f"Expected one of {', '.join(_LOG_LEVELS)}, got '{log_level}'.")
        )

    return ClientSettings(
        default_credential=env.get(ENV_API_KEY, "").strip(),
        timeout_s=timeout_s,
        log_level=log_level,
    )


__all__ = ["ENV_API_KEY", "ENV_TIMEOUT", "ENV_LOG_LEVEL", "load_settings"]
