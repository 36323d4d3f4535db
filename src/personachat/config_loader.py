"""Convenience layer for configuration utilities."""

from __future__ import annotations

from personachat.domain.config import ClientSettings, ConfigError, KeyPoolCfg, PersonaCfg
from personachat.infrastructure.config.loader import collect_configs, load_persona
from personachat.infrastructure.config.settings import load_settings
from personachat.infrastructure.config.validators import validate_configs

__all__ = [
    "ClientSettings",
    "ConfigError",
    "KeyPoolCfg",
    "PersonaCfg",
    "collect_configs",
    "load_persona",
    "load_settings",
    "validate_configs",
]
