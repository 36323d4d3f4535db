"""Domain models representing configuration artifacts."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path


class ConfigError(Exception):
    """Raised when configuration files fail validation."""

    def __init__(self, message: str) -> None:
        super().__init__(message)


@dataclass(frozen=True, kw_only=True)
class PersonaCfg:
    path: Path = field(repr=False, compare=False)
    name: str
    description: str
    system_prompt: str
    model: str = ""
    base_url: str = ""
    api_key: str = field(default="", repr=False)
    key_pool: str | None = None
    notes: str | None = None


@dataclass(frozen=True, kw_only=True)
class KeyPoolCfg:
    path: Path = field(repr=False, compare=False)
    name: str
    provider: str
    keys: tuple[str, ...] = field(repr=False)
    notes: str | None = None


@dataclass(frozen=True, kw_only=True)
class ClientSettings:
    """Process-wide knobs injected into the session builder and exchanger."""

    default_credential: str = field(default="", repr=False)
    timeout_s: float = 600.0
    log_level: str = "WARNING"


__all__ = [
    "ConfigError",
    "PersonaCfg",
    "KeyPoolCfg",
    "ClientSettings",
]
