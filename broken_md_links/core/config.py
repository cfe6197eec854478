"""Checker options and their layered loading.

Options are resolved from, lowest to highest precedence: model defaults, an
optional YAML file, ``BROKEN_MD_LINKS_*`` environment variables, and explicit
overrides (usually command-line flags).
"""

from __future__ import annotations

import os
from collections.abc import Mapping, MutableMapping, Sequence
from pathlib import Path
from typing import Any, TypeAlias

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

ConfigInput: TypeAlias = "CheckerOptions | Mapping[str, Any] | str | Path | None"

ENV_PREFIX = "BROKEN_MD_LINKS_"
CONFIG_ENV_VAR = f"{ENV_PREFIX}CONFIG"

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"0", "false", "no", "off"})


class CheckerOptions(BaseModel):
    """Immutable options for one scan."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    ignore_header_links: bool = Field(
        default=False,
        description="Do not check that headers referenced by links exist",
    )
    disallow_dir_links: bool = Field(
        default=False,
        description="Report links to directories, only links to files are accepted",
    )


class ConfigError(RuntimeError):
    """Base exception for configuration failures."""


class ConfigSourceError(ConfigError):
    """Raised when a config source cannot be resolved."""


class ConfigValidationError(ConfigError):
    """Raised when configuration values are invalid."""

    def __init__(
        self,
        message: str,
        *,
        source: str | None = None,
        errors: Sequence[Any] | None = None,
    ) -> None:
        """Capture validation metadata for error reporting."""
        context = []
        if source:
            context.append(f"source={source}")
        if errors:
            context.append(f"errors={errors}")
        suffix = f" ({', '.join(context)})" if context else ""
        super().__init__(f"{message}{suffix}")
        self.source = source
        self.errors = errors


def load_options(
    source: ConfigInput = None,
    *,
    env: Mapping[str, str] | None = None,
    overrides: Mapping[str, bool | None] | None = None,
) -> CheckerOptions:
    """Resolve checker options from every configuration layer.

    Args:
        source: YAML file path, mapping or ``CheckerOptions`` instance
        env: Environment mapping, defaults to ``os.environ``
        overrides: Highest-precedence values, ``None`` entries are ignored

    Raises:
        ConfigSourceError: If the YAML source cannot be read.
        ConfigValidationError: If a value is invalid.
    """
    env = os.environ if env is None else env
    payload: dict[str, Any] = {}

    if source is not None:
        payload.update(_coerce_payload(source))

    payload.update(options_from_env(env))

    for key, value in (overrides or {}).items():
        if value is not None:
            payload[key] = value

    try:
        return CheckerOptions(**payload)
    except ValidationError as exc:
        raise ConfigValidationError(
            "Invalid checker options",
            source="payload",
            errors=exc.errors(),
        ) from exc


def options_from_env(env: Mapping[str, str]) -> dict[str, bool]:
    """Read ``BROKEN_MD_LINKS_<OPTION>`` boolean variables."""
    values: dict[str, bool] = {}
    for name in CheckerOptions.model_fields:
        raw = env.get(f"{ENV_PREFIX}{name.upper()}")
        if raw is None or not raw.strip():
            continue
        values[name] = parse_bool(raw, name=f"{ENV_PREFIX}{name.upper()}")
    return values


def parse_bool(raw: str, *, name: str) -> bool:
    normalized = raw.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    raise ConfigValidationError(f"Invalid boolean value for {name}: {raw!r}", source="env")


def load_yaml(path: str | Path) -> dict[str, Any]:
    """Read a YAML file and return its mapping payload."""
    resolved_path = Path(path).expanduser()
    if not resolved_path.is_file():
        raise ConfigSourceError(f"Config file not found: {resolved_path}")

    try:
        with resolved_path.open("r", encoding="utf-8") as handle:
            data = yaml.safe_load(handle) or {}
    except yaml.YAMLError as exc:
        raise ConfigSourceError(f"Invalid YAML in {resolved_path}: {exc}") from exc

    if not isinstance(data, MutableMapping):
        raise ConfigSourceError(f"YAML root must be a mapping: {resolved_path}")

    return dict(data)


def _coerce_payload(source: ConfigInput) -> dict[str, Any]:
    if isinstance(source, CheckerOptions):
        return source.model_dump(mode="python")
    if isinstance(source, Mapping):
        return dict(source)
    if isinstance(source, (str, Path)):
        return load_yaml(source)
    raise ConfigSourceError(f"Unsupported config source: {type(source).__name__}")
