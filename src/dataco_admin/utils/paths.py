# Rev 0.1.0

"""Paths and XDG helpers (Rev 0.1.0)
- Uses XDG Base Directory spec
- Logs live under XDG state, settings and the admin session under XDG config
"""
from __future__ import annotations
import os
from pathlib import Path


APP_NAME = "dataco-admin"


def xdg_state_home() -> Path:
    return Path(os.environ.get("XDG_STATE_HOME", Path.home() / ".local" / "state"))


def xdg_config_home() -> Path:
    return Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config"))


def logs_dir(app: str = APP_NAME) -> Path:
    d = xdg_state_home() / app / "logs"
    d.mkdir(parents=True, exist_ok=True)
    return d


def config_dir(app: str = APP_NAME) -> Path:
    d = xdg_config_home() / app
    d.mkdir(parents=True, exist_ok=True)
    return d
