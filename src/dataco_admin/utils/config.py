# Rev 0.1.2
# src/dataco_admin/utils/config.py
from __future__ import annotations
import copy
import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

from .paths import config_dir

log = logging.getLogger(__name__)

SETTINGS_FILENAME = "settings.json"

_DEFAULTS: Dict[str, Any] = {
    "api": {
        "base_url": "http://localhost:3000",
        "timeout": 15.0,
    },
    "realtime": {
        "interval": 30.0,
        "immediate": False,
    },
    "pages": {
        "recalculate_amount": True,
        "allow_loops": False,
    },
    "main_window": {
        "width": 1200,
        "height": 720,
        "is_maximized": False,
    },
}


def settings_file() -> Path:
    return config_dir() / SETTINGS_FILENAME


def _merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    out = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(out.get(key), dict):
            out[key] = _merge(out[key], value)
        else:
            out[key] = value
    return out


def load_settings(path: Optional[Path] = None) -> Dict[str, Any]:
    """Defaults, then settings.json, then environment overrides."""
    path = path or settings_file()
    data = copy.deepcopy(_DEFAULTS)
    if path.exists():
        try:
            stored = json.loads(path.read_text(encoding="utf-8"))
            if isinstance(stored, dict):
                data = _merge(data, stored)
            else:
                log.warning("Ignoring %s: top level is not an object", path)
        except (OSError, json.JSONDecodeError) as exc:
            log.warning("Ignoring unreadable settings file %s: %s", path, exc)

    env_url = os.environ.get("DATACO_API_URL")
    if env_url:
        data["api"]["base_url"] = env_url
    return data


def save_section(section: str, values: Dict[str, Any], path: Optional[Path] = None) -> None:
    """Persist one section; the rest of settings.json stays as stored (no env overrides leak in)."""
    path = path or settings_file()
    stored: Dict[str, Any] = {}
    if path.exists():
        try:
            raw = json.loads(path.read_text(encoding="utf-8"))
            if isinstance(raw, dict):
                stored = raw
        except (OSError, json.JSONDecodeError) as exc:
            log.warning("Rewriting unreadable settings file %s: %s", path, exc)
    stored[section] = values
    path.write_text(json.dumps(stored, indent=2), encoding="utf-8")
