#!/usr/bin/env python3
"""Settings resolution
Order: --project → GCLOUD_PROJECT / GOOGLE_CLOUD_PROJECT → [project] id in config.toml → project of the default credentials (resolved by the CLI).
The config file is optional; [auth] scopes overrides the scope list used when widening credentials.
"""
from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple

import tomli

from storage_transfer.credentials import CLOUD_PLATFORM_SCOPE
from storage_transfer.exceptions import ConfigError

PROJECT_ENV_VARS = ("GCLOUD_PROJECT", "GOOGLE_CLOUD_PROJECT")
DEFAULT_CONFIG = Path("config.toml")


@dataclass(frozen=True)
class Settings:
    project_id: Optional[str] = None
    scopes: Tuple[str, ...] = field(default=(CLOUD_PLATFORM_SCOPE,))

    def require_project(self) -> str:
        if not self.project_id:
            raise ConfigError(
                "No project id. Pass --project, set GCLOUD_PROJECT, add [project] id to config.toml, "
                "or use default credentials that carry a project."
            )
        return self.project_id


def _read_toml(path: Path) -> Dict[str, Any]:
    try:
        with open(path, "rb") as f:
            return tomli.load(f)
    except tomli.TOMLDecodeError as e:
        raise ConfigError(f"Invalid config file {path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Cannot read config file {path}: {e}") from e


def _table(cfg: Dict[str, Any], name: str) -> Dict[str, Any]:
    value = cfg.get(name, {})
    if not isinstance(value, dict):
        raise ConfigError(f"config.toml: [{name}] must be a table, got {type(value).__name__}")
    return value


def load_settings(
    config_file: Optional[Path] = None,
    project_override: Optional[str] = None,
    env: Optional[Mapping[str, str]] = None,
) -> Settings:
    env = dict(os.environ) if env is None else dict(env)

    cfg: Dict[str, Any] = {}
    if config_file is not None:
        cfg = _read_toml(Path(config_file))
    elif DEFAULT_CONFIG.exists():
        cfg = _read_toml(DEFAULT_CONFIG)

    project_table = _table(cfg, "project")
    file_project = project_table.get("id")
    if file_project is not None and not isinstance(file_project, str):
        raise ConfigError("[project] id in config.toml must be a string")

    auth_table = _table(cfg, "auth")
    scopes = auth_table.get("scopes") or [CLOUD_PLATFORM_SCOPE]
    # space-delimited string or list, as google.auth accepts both
    if isinstance(scopes, str):
        scopes = scopes.split()
    if not isinstance(scopes, list) or not all(isinstance(s, str) for s in scopes):
        raise ConfigError("[auth] scopes in config.toml must be a list of strings")

    project = project_override
    if not project:
        project = next((env[k] for k in PROJECT_ENV_VARS if env.get(k)), None)
    if not project:
        project = file_project
    return Settings(project_id=project or None, scopes=tuple(scopes))
