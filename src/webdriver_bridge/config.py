"""Configuration models for webdriver-bridge."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .models import Dialect


class DriverConfig(BaseModel):
    """Settings for the supervised driver process."""

    executable: Optional[Path] = None
    host: str = Field(default="127.0.0.1")
    port: int = Field(description="Port passed to the driver as --port.")
    args: list[str] = Field(default_factory=list)
    startup_timeout: float = Field(default=10.0, gt=0)
    poll_interval: float = Field(default=0.1, gt=0)
    status_path: str = Field(default="/status")
    log_file: Optional[Path] = None
    stop_timeout: Optional[float] = Field(
        default=None,
        description="Seconds to wait for the driver to exit before killing it.",
    )


class TransportConfig(BaseModel):
    """Settings for the wire transport."""

    dialect: Dialect
    endpoint: Optional[str] = Field(
        default=None,
        description="Attach to an already running driver instead of spawning one.",
    )
    timeout: float = Field(default=60.0, gt=0)
    teardown_timeout: float = Field(
        default=5.0,
        gt=0,
        description="Timeout for the delete-session request sent while closing.",
    )


class BridgeConfig(BaseSettings):
    """Top-level configuration for opening driver sessions."""

    model_config = SettingsConfigDict(
        env_prefix="WEBDRIVER_BRIDGE_",
        env_file=(".env",),
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
    )

    driver: DriverConfig
    transport: TransportConfig
    preset: str = Field(default="standard")
    capabilities: dict[str, Any] = Field(
        default_factory=dict,
        description="Wire-shaped capabilities merged over the preset.",
    )


def load_config(
    path: Path | None = None,
    *,
    env_file: Path | None = None,
    **overrides: object,
) -> BridgeConfig:
    """Build the configuration from all sources.

    Priority, lowest first: environment variables and ``env_file``, the
    YAML file at ``path``, then ``overrides``. Override values that are
    ``None`` count as unset, so command line options that were not given
    never mask a value from another source.
    """

    data = _read_config_file(path) if path else {}
    deep_update(data, _without_unset(overrides))
    if env_file is not None:
        return BridgeConfig(_env_file=env_file, **data)
    return BridgeConfig(**data)


def deep_update(target: dict[str, Any], updates: Mapping[str, Any]) -> dict[str, Any]:
    """Merge ``updates`` into ``target`` in place, descending into mappings."""

    for key, value in updates.items():
        current = target.get(key)
        if isinstance(value, Mapping) and isinstance(current, Mapping):
            target[key] = deep_update(dict(current), value)
        else:
            target[key] = value
    return target


def _read_config_file(path: Path) -> dict[str, Any]:
    import yaml

    data = yaml.safe_load(path.read_text()) or {}
    if not isinstance(data, dict):
        raise ValueError(f"{path} must contain a mapping at the top level")
    return data


def _without_unset(values: Mapping[str, Any]) -> dict[str, Any]:
    cleaned: dict[str, Any] = {}
    for key, value in values.items():
        if isinstance(value, Mapping):
            value = _without_unset(value)
            if not value:
                continue
        if value is not None:
            cleaned[key] = value
    return cleaned
