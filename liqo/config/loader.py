"""Configuration loading helpers for Liqo."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

import yaml

from .models import DEFAULT_INDEXER_URL, GlobalConfig

CONFIG_EXTENSIONS = (".yaml", ".yml", ".json")
GLOBAL_CONFIG_FILENAME = "liqo.yaml"

# Highest priority first; the config file and the built-in default follow.
ENDPOINT_ENV_VARS = ("INDEXER_URL", "LIQO_GRAPHQL_ENDPOINT")


def _read_file(path: Path) -> dict:
    text = path.read_text(encoding="utf-8")
    if path.suffix in (".yaml", ".yml"):
        data = yaml.safe_load(text) or {}
    else:
        data = json.loads(text)
    if not isinstance(data, dict):
        raise ValueError(f"Configuration file must contain a mapping: {path}")
    return data


def _write_file(path: Path, payload: dict) -> None:
    with path.open("w", encoding="utf-8") as stream:
        if path.suffix in (".yaml", ".yml"):
            yaml.safe_dump(payload, stream, allow_unicode=True, sort_keys=False)
        else:
            json.dump(payload, stream, indent=2, ensure_ascii=False)


@dataclass(slots=True)
class ConfigLocator:
    """Resolve important paths from project root."""

    project_root: Path | None = None
    data_dir: Path | None = None
    outputs_dir: Path | None = None
    logs_dir: Path | None = None

    def __post_init__(self) -> None:
        env_root = os.environ.get("LIQO_HOME")
        if env_root:
            root = Path(env_root).expanduser().resolve()
        else:
            root = (self.project_root or Path(__file__).resolve().parents[2]).resolve()
        self.project_root = root
        self.data_dir = (root / "data").resolve()
        self.outputs_dir = (self.data_dir / "outputs").resolve()
        self.logs_dir = (root / "logs").resolve()
        self.ensure_directories()

    def ensure_directories(self) -> None:
        for directory in (self.data_dir, self.outputs_dir, self.logs_dir):
            directory.mkdir(parents=True, exist_ok=True)

    def global_config_path(self) -> Path:
        return self.data_dir / GLOBAL_CONFIG_FILENAME

    def resolve(self, path: Path) -> Path:
        """Anchor a configured relative path at the project root."""

        if path.is_absolute():
            return path
        return (self.project_root / path).resolve()


class ConfigRepository:
    """Repository encapsulating config IO and schema validation."""

    def __init__(self, locator: ConfigLocator | None = None) -> None:
        self.locator = locator or ConfigLocator()
        self._global_cache: GlobalConfig | None = None

    def load_global_config(self) -> GlobalConfig:
        if self._global_cache is not None:
            return self._global_cache
        path = self.locator.global_config_path()
        if path.exists():
            payload = _read_file(path)
            global_cfg = GlobalConfig.model_validate(payload)
        else:
            global_cfg = GlobalConfig()
            self.save_global_config(global_cfg)
        self._global_cache = global_cfg
        return global_cfg

    def save_global_config(self, config: GlobalConfig) -> None:
        path = self.locator.global_config_path()
        payload = config.model_dump(mode="json")
        _write_file(path, payload)
        self._global_cache = config

    def outputs_dir(self) -> Path:
        return self.locator.resolve(self.load_global_config().outputs_dir)

    def capture_path(self) -> Path | None:
        return self.load_global_config().export.resolved_capture_path(self.locator.project_root)


def resolve_endpoint(
    config: GlobalConfig,
    override: str | None = None,
    environ: Mapping[str, str] | None = None,
) -> str:
    """Pick the upstream indexer URL.

    Precedence: explicit ``override``, then ``INDEXER_URL``, then
    ``LIQO_GRAPHQL_ENDPOINT``, then ``indexer.endpoint`` from the config file,
    then the local default.
    """

    if override and override.strip():
        return override.strip()
    env = os.environ if environ is None else environ
    for name in ENDPOINT_ENV_VARS:
        value = env.get(name)
        if value and value.strip():
            return value.strip()
    if config.indexer.endpoint and config.indexer.endpoint.strip():
        return config.indexer.endpoint.strip()
    return DEFAULT_INDEXER_URL


__all__ = [
    "CONFIG_EXTENSIONS",
    "ENDPOINT_ENV_VARS",
    "ConfigLocator",
    "ConfigRepository",
    "resolve_endpoint",
]
