"""
Configuration for deeptrace.

Values come from the packaged config/default.yaml, overlaid by an optional
config/user.yaml next to it, overlaid by DEEPTRACE_SECTION__KEY environment
variables. The tracing section is validated on access.
"""

import copy
import os
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import BaseModel, Field

ENV_PREFIX = "DEEPTRACE_"


class RecorderSettings(BaseModel):
    max_events: int = Field(default=1000, gt=0)


class TracingSettings(BaseModel):
    path_prefix: str = ""
    suppress_listener_errors: bool = False
    recorder: RecorderSettings = Field(default_factory=RecorderSettings)


class Settings:
    """Process-wide configuration, loaded once and adjustable at runtime."""

    _instance: Optional["Settings"] = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._config = {}
            cls._instance._base_dir = Path(__file__).parent.parent
        return cls._instance

    @classmethod
    def initialize(cls, base_dir: Optional[str] = None) -> "Settings":
        """(Re)load configuration from disk and the environment."""
        instance = cls()
        instance._base_dir = Path(base_dir) if base_dir else Path(__file__).parent.parent

        config_dir = instance._base_dir / "config"
        config = _load_yaml(config_dir / "default.yaml")
        config = _deep_merge(config, _load_yaml(config_dir / "user.yaml"))
        instance._config = config

        for dotpath, value in _env_overrides(os.environ):
            instance.set(dotpath, value)

        return instance

    @classmethod
    def reset(cls):
        """Drop the singleton so the next get_settings() reloads from disk."""
        cls._instance = None

    @property
    def tracing(self) -> TracingSettings:
        return TracingSettings.model_validate(self._config.get("tracing") or {})

    def get(self, dotpath: str, default: Any = None) -> Any:
        """Get a config value using dot notation: 'tracing.path_prefix'."""
        node = self._config
        for key in dotpath.split("."):
            if not isinstance(node, dict) or key not in node:
                return default
            node = node[key]
        return node

    def set(self, dotpath: str, value: Any):
        """Set a config value at runtime, creating sections as needed."""
        *sections, leaf = dotpath.split(".")
        node = self._config
        for key in sections:
            if not isinstance(node.get(key), dict):
                node[key] = {}
            node = node[key]
        node[leaf] = value

    def resolve_path(self, relative_path: str) -> Path:
        """Resolve a path relative to the base directory."""
        p = Path(relative_path)
        return p if p.is_absolute() else self._base_dir / p


def _load_yaml(path: Path) -> dict:
    if not path.exists():
        return {}
    with open(path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def _deep_merge(base: dict, overlay: dict) -> dict:
    result = copy.deepcopy(base)
    for key, value in overlay.items():
        if isinstance(result.get(key), dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = copy.deepcopy(value)
    return result


def _env_overrides(environ) -> list[tuple[str, Any]]:
    """DEEPTRACE_TRACING__PATH_PREFIX=x becomes ("tracing.path_prefix", "x")."""
    overrides = []
    for key, raw in environ.items():
        if key.startswith(ENV_PREFIX):
            dotpath = key[len(ENV_PREFIX):].lower().replace("__", ".")
            overrides.append((dotpath, _cast(raw)))
    return overrides


def _cast(raw: str) -> Any:
    if raw.lower() in ("true", "false"):
        return raw.lower() == "true"
    if raw.isdigit():
        return int(raw)
    try:
        return float(raw)
    except ValueError:
        return raw


def get_settings() -> Settings:
    """Get the global Settings instance."""
    if Settings._instance is None:
        Settings.initialize()
    return Settings._instance
