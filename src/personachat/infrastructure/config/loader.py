"""Config loading utilities coordinating schema validation and parsing."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Iterable, Mapping, Tuple

import yaml

from personachat.domain.config import ConfigError, KeyPoolCfg, PersonaCfg

from .validators import build_validator, format_error, validate_configs, validate_with_schema

__all__ = ["collect_configs", "load_persona", "validate_configs"]


def _read_yaml(path: Path) -> Mapping[str, Any]:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:  # pragma: no cover - filesystem error propagation
        raise ConfigError(format_error(path, "<file>", str(exc))) from exc
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(format_error(path, "<root>", f"Invalid YAML: {exc}")) from exc
    if not isinstance(data, Mapping):
        raise ConfigError(format_error(path, "<root>", "Top-level document must be a mapping."))
    return data


def _ensure_unique(name: str, seen: Dict[str, Path], path: Path, kind: str) -> None:
    existing = seen.get(name)
    if existing is not None:
        raise ConfigError(
            format_error(
                path,
                "name",
                f"Duplicate {kind} identifier '{name}' already defined in {existing}",
            )
        )
    seen[name] = path


def _optional_str(data: Mapping[str, Any], key: str) -> str:
    value = data.get(key)
    return "" if value is None else str(value)


def _build_persona(data: Mapping[str, Any], path: Path) -> PersonaCfg:
    key_pool = data.get("key_pool")
    return PersonaCfg(
        path=path,
        name=str(data["name"]),
        description=str(data.get("description", "")),
        system_prompt=str(data["system_prompt"]),
        model=_optional_str(data, "model"),
        base_url=_optional_str(data, "base_url"),
        api_key=_optional_str(data, "api_key"),
        key_pool=str(key_pool) if key_pool else None,
        notes=data.get("notes"),
    )


def _build_key_pool(data: Mapping[str, Any], path: Path) -> KeyPoolCfg:
    return KeyPoolCfg(
        path=path,
        name=str(data["name"]),
        provider=str(data["provider"]),
        keys=tuple(str(key) for key in data["keys"]),
        notes=data.get("notes"),
    )


def _gather(directory: Path, *, required: bool) -> Iterable[Path]:
    if not directory.exists():
        if required:
            raise ConfigError(format_error(directory, "<dir>", "Required configuration directory is missing."))
        return []
    return sorted(directory.glob("*.yaml"))


def collect_configs(base_dir: Path) -> Tuple[dict[str, PersonaCfg], dict[str, KeyPoolCfg]]:
    """Load every persona and key pool below *base_dir*.

    ``personas/`` is required; ``key_pools/`` is optional. Each document is
    schema-checked as it is read.
    """

    base_dir = base_dir.resolve()
    validator = build_validator()

    personas: dict[str, PersonaCfg] = {}
    key_pools: dict[str, KeyPoolCfg] = {}
    seen_personas: dict[str, Path] = {}
    seen_pools: dict[str, Path] = {}

    for path in _gather(base_dir / "key_pools", required=False):
        data = _read_yaml(path)
        validate_with_schema(validator, data, "#/$defs/key_pool", path)
        cfg = _build_key_pool(data, path)
        _ensure_unique(cfg.name, seen_pools, path, "key pool")
        key_pools[cfg.name] = cfg

    for path in _gather(base_dir / "personas", required=True):
        data = _read_yaml(path)
        validate_with_schema(validator, data, "#/$defs/persona", path)
        cfg = _build_persona(data, path)
        _ensure_unique(cfg.name, seen_personas, path, "persona")
        personas[cfg.name] = cfg

    return personas, key_pools


def load_persona(identifier: str | Path, base_dir: Path | None = None) -> PersonaCfg:
    """Load a persona configuration by name or path."""

    base_dir = base_dir or Path.cwd()
    personas, key_pools = collect_configs(base_dir)
    validate_configs(personas, key_pools)

    if isinstance(identifier, str) and identifier in personas:
        return personas[identifier]

    candidate = Path(identifier) if not isinstance(identifier, Path) else identifier
    candidate = candidate if candidate.is_absolute() else base_dir / "personas" / candidate
    candidate = candidate.resolve()

    for cfg in personas.values():
        if cfg.path.resolve() == candidate:
            return cfg

    raise ConfigError(format_error(candidate, "name", "Persona not found."))
