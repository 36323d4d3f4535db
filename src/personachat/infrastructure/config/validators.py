"""Schema and cross-reference validation for persona configuration."""

from __future__ import annotations

import json
from dataclasses import asdict
from functools import lru_cache
from pathlib import Path
from typing import Mapping

from jsonschema import Draft202012Validator, ValidationError
from rich.markup import escape

from personachat.domain.config import ConfigError, KeyPoolCfg, PersonaCfg

SCHEMA_FILE = Path(__file__).resolve().parent / "schemas" / "config-schema.json"


@lru_cache(maxsize=1)
def load_schema() -> Mapping[str, object]:
    return json.loads(SCHEMA_FILE.read_text(encoding="utf-8"))


def build_validator() -> Draft202012Validator:
    return Draft202012Validator(load_schema())


def format_error(path: Path, field: str, message: str) -> str:
    location = f"[cyan]{escape(str(path))}[/cyan]"
    target = f" → [magenta]{escape(field)}[/magenta]" if field else ""
    return f"[bold red]Config error[/bold red]: {location}{target} {escape(message)}"


def validate_with_schema(
    validator: Draft202012Validator,
    instance: Mapping[str, object],
    ref: str,
    path: Path,
) -> None:
    try:
        validator.evolve(schema={"$ref": ref}).validate(instance)
    except ValidationError as exc:
        field = "/".join(str(part) for part in exc.path)
        # schema messages echo the offending value; never echo a key
        message = exc.message if not _touches_secret(exc) else "Invalid credential value."
        raise ConfigError(format_error(path, field or "<root>", message)) from None


def _touches_secret(exc: ValidationError) -> bool:
    return any(part in ("api_key", "keys") for part in exc.path)


def dataclass_payload(instance: object) -> Mapping[str, object]:
    data = asdict(instance)
    data.pop("path", None)
    if isinstance(data.get("keys"), tuple):
        data["keys"] = list(data["keys"])
    return {key: value for key, value in data.items() if value is not None}


def validate_configs(
    personas: Mapping[str, PersonaCfg],
    key_pools: Mapping[str, KeyPoolCfg],
) -> None:
    validator = build_validator()

    for cfg in key_pools.values():
        validate_with_schema(validator, dataclass_payload(cfg), "#/$defs/key_pool", cfg.path)

    for cfg in personas.values():
        validate_with_schema(validator, dataclass_payload(cfg), "#/$defs/persona", cfg.path)
        if cfg.key_pool is not None and cfg.key_pool not in key_pools:
            raise ConfigError(
                format_error(
                    cfg.path,
                    f"key_pool[{cfg.key_pool}]",
                    "Referenced key pool is not defined.",
                )
            )


__all__ = [
    "SCHEMA_FILE",
    "load_schema",
    "build_validator",
    "format_error",
    "validate_with_schema",
    "dataclass_payload",
    "validate_configs",
]
