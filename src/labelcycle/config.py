from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, cast

import yaml

from .commands import DEFAULT_ALIAS
from .models import DEFAULT_LABEL_PREFIX

CONFIG_DEFAULT = "labelcycle.config.yaml"
DEFAULT_API_URL = "https://api.github.com"


class ConfigError(RuntimeError):
    pass


@dataclass(frozen=True)
class LifecycleSettings:
    prefix: str = DEFAULT_LABEL_PREFIX
    alias: str = DEFAULT_ALIAS


@dataclass
class LabelcycleConfig:
    version: int = 1
    source_file: Path | None = None
    api_url: str = DEFAULT_API_URL
    token_env: str = "GITHUB_TOKEN"
    settings: LifecycleSettings = field(default_factory=LifecycleSettings)
    # Retry configuration
    retry_attempts: int = 3
    retry_base_sleep: float = 0.5
    # Logging configuration
    logging_json_enabled: bool = False
    logging_level: str = "INFO"
    # Environment authentication configuration
    env_auth_load_dotenv: bool = True
    env_auth_dotenv_path: str | None = None


def _resolve_env_var(value: Any) -> Any:
    """Resolve environment variable if value starts with $."""
    if isinstance(value, str) and value.startswith('$'):
        return os.getenv(value[1:], value)  # Fallback to original if not found
    return value


def _section(raw: dict[str, Any], name: str) -> dict[str, Any]:
    value = raw.get(name) or {}
    if not isinstance(value, dict):
        raise ConfigError(f"Config section '{name}' must be a mapping")
    return cast(dict[str, Any], value)


def _string(value: Any, key: str) -> str:
    if not isinstance(value, str):
        raise ConfigError(f"Config value '{key}' must be a string")
    return value


def _number(value: Any, key: str, kind: type[int] | type[float]) -> Any:
    if isinstance(value, bool):
        raise ConfigError(f"Config value '{key}' must be a number")
    try:
        return kind(value)
    except (TypeError, ValueError):
        raise ConfigError(f"Config value '{key}' must be a number, got {value!r}") from None


def default_config() -> LabelcycleConfig:
    return LabelcycleConfig()


def load_config(path: str | Path) -> LabelcycleConfig:
    p = Path(path)
    if not p.exists():
        raise ConfigError(f'Configuration file not found: {p}')
    try:
        raw = yaml.safe_load(p.read_text()) or {}
    except yaml.YAMLError as exc:
        raise ConfigError(f'Invalid YAML in {p}: {exc}') from exc
    if not isinstance(raw, dict):
        raise ConfigError(f'Configuration root must be a mapping: {p}')
    raw = cast(dict[str, Any], raw)
    gh = _section(raw, 'github')
    lifecycle = _section(raw, 'lifecycle')
    retry = _section(raw, 'retry')
    logging_config = _section(raw, 'logging')
    env_auth = _section(raw, 'environment')

    settings = LifecycleSettings(
        prefix=_string(lifecycle.get('label_prefix', DEFAULT_LABEL_PREFIX), 'lifecycle.label_prefix'),
        # An empty alias disables the provider-specific command prefix.
        alias=_string(lifecycle.get('command_alias', DEFAULT_ALIAS) or '', 'lifecycle.command_alias'),
    )

    return LabelcycleConfig(
        version=_number(raw.get('version', 1), 'version', int),
        source_file=p,
        api_url=_string(_resolve_env_var(gh.get('api_url', DEFAULT_API_URL)), 'github.api_url'),
        token_env=_string(gh.get('token_env', 'GITHUB_TOKEN'), 'github.token_env'),
        settings=settings,
        retry_attempts=_number(retry.get('attempts', 3), 'retry.attempts', int),
        retry_base_sleep=_number(retry.get('base_sleep', 0.5), 'retry.base_sleep', float),
        logging_json_enabled=bool(logging_config.get('json_enabled', False)),
        logging_level=_string(logging_config.get('level', 'INFO'), 'logging.level'),
        env_auth_load_dotenv=bool(env_auth.get('load_dotenv', True)),
        env_auth_dotenv_path=_resolve_env_var(env_auth.get('dotenv_path')),
    )


__all__ = [
    "CONFIG_DEFAULT",
    "ConfigError",
    "LifecycleSettings",
    "LabelcycleConfig",
    "default_config",
    "load_config",
]
