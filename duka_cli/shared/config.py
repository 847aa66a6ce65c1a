"""Configuration loading utilities for the Duka console tools."""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Mapping, MutableMapping

import yaml

from . import paths
from .exceptions import ConfigurationError

DEFAULT_ENGINE_URL = "http://localhost:8080/api"


@dataclass(frozen=True, slots=True)
class EngineSettings:
    """Where and how to reach the remote engine."""

    base_url: str
    timeout: float


@dataclass(frozen=True, slots=True)
class ConsoleSettings:
    """Interactive console behaviour."""

    prompt: str
    refresh_interval: float  # seconds between background table-list refreshes
    ddl_refresh_delay: float  # seconds to wait after CREATE/DROP TABLE before refreshing


@dataclass(frozen=True, slots=True)
class FormSettings:
    """Defaults applied by the form builder."""

    default_varchar_size: int


@dataclass(frozen=True, slots=True)
class AppConfig:
    """Top-level application configuration."""

    source_path: Path
    engine: EngineSettings
    console: ConsoleSettings
    forms: FormSettings

    def with_engine_url(self, base_url: str) -> AppConfig:
        """Return a copy pointing at a different engine."""
        new_engine = replace(self.engine, base_url=base_url.rstrip("/"))
        return replace(self, engine=new_engine)


def _default_config() -> dict[str, Any]:
    return {
        "engine": {
            "base_url": DEFAULT_ENGINE_URL,
            "timeout": 10.0,
        },
        "console": {
            "prompt": "duka> ",
            "refresh_interval": 10.0,
            "ddl_refresh_delay": 0.5,
        },
        "forms": {
            "default_varchar_size": 100,
        },
    }


ENV_OVERRIDE_SPEC: dict[str, tuple[str, type]] = {
    "engine.base_url": ("DUKA_ENGINE_URL", str),
    "engine.timeout": ("DUKA_ENGINE_TIMEOUT", float),
    "console.prompt": ("DUKA_CONSOLE_PROMPT", str),
    "console.refresh_interval": ("DUKA_REFRESH_INTERVAL", float),
    "console.ddl_refresh_delay": ("DUKA_DDL_REFRESH_DELAY", float),
    "forms.default_varchar_size": ("DUKA_DEFAULT_VARCHAR_SIZE", int),
}


def load_config(
    config_path: str | Path | None = None,
    env: Mapping[str, str] | None = None,
) -> AppConfig:
    """Load configuration from defaults, YAML file, and env overrides."""
    env = dict(os.environ if env is None else env)
    resolved_config_path = _resolve_config_path(config_path, env)
    file_data = _load_yaml(resolved_config_path)
    merged: dict[str, Any] = _deep_merge(_default_config(), file_data)
    merged = _apply_env_overrides(merged, env)
    return _build_config(merged, resolved_config_path)


def _resolve_config_path(config_path: str | Path | None, env: Mapping[str, str]) -> Path:
    if config_path:
        return paths.resolve_path(config_path)
    return paths.default_config_path(env=env)


def _load_yaml(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}
    with path.open("r", encoding="utf-8") as handle:
        try:
            data = yaml.safe_load(handle) or {}
        except yaml.YAMLError as exc:
            raise ConfigurationError(f"Config file at {path} is not valid YAML: {exc}") from exc
        if not isinstance(data, MutableMapping):
            raise ConfigurationError(f"Config file at {path} must define a mapping root object.")
        return dict(data)


def _deep_merge(base: Mapping[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    result = dict(base)
    for key, value in override.items():
        if key in result and isinstance(result[key], Mapping) and isinstance(value, Mapping):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _apply_env_overrides(config: dict[str, Any], env: Mapping[str, str]) -> dict[str, Any]:
    config_copy = _deep_merge(config, {})
    for dotted_key, (env_key, expected_type) in ENV_OVERRIDE_SPEC.items():
        if env_key not in env:
            continue
        raw_value = env[env_key]
        try:
            value = _coerce_env_value(raw_value, expected_type)
        except ValueError as exc:
            raise ConfigurationError(
                f"Environment override {env_key} has invalid value '{raw_value}': {exc}"
            ) from exc
        _assign_nested(config_copy, dotted_key.split("."), value)
    return config_copy


def _coerce_env_value(raw: str, expected_type: type) -> Any:
    if expected_type is int:
        return int(raw.strip())
    if expected_type is float:
        return float(raw.strip())
    # Prompts may carry meaningful trailing whitespace.
    return raw


def _assign_nested(target: MutableMapping[str, Any], keys: list[str], value: Any) -> None:
    current = target
    for key in keys[:-1]:
        if key not in current or not isinstance(current[key], MutableMapping):
            current[key] = {}
        current = current[key]  # type: ignore[assignment]
    current[keys[-1]] = value


def _build_config(data: Mapping[str, Any], source_path: Path) -> AppConfig:
    try:
        engine_cfg = data["engine"]
        engine = EngineSettings(
            base_url=str(engine_cfg["base_url"]).rstrip("/"),
            timeout=float(engine_cfg["timeout"]),
        )
        console_cfg = data["console"]
        console = ConsoleSettings(
            prompt=str(console_cfg["prompt"]),
            refresh_interval=float(console_cfg["refresh_interval"]),
            ddl_refresh_delay=float(console_cfg["ddl_refresh_delay"]),
        )
        forms = FormSettings(
            default_varchar_size=int(data["forms"]["default_varchar_size"]),
        )
    except (KeyError, TypeError, ValueError) as exc:
        raise ConfigurationError(f"Invalid configuration structure: {exc}") from exc

    if engine.timeout <= 0:
        raise ConfigurationError("engine.timeout must be positive.")
    if console.refresh_interval <= 0:
        raise ConfigurationError("console.refresh_interval must be positive.")
    if console.ddl_refresh_delay < 0:
        raise ConfigurationError("console.ddl_refresh_delay must not be negative.")
    if forms.default_varchar_size <= 0:
        raise ConfigurationError("forms.default_varchar_size must be positive.")

    return AppConfig(
        source_path=source_path,
        engine=engine,
        console=console,
        forms=forms,
    )
