# tests/test_config.py
from __future__ import annotations

import json

from dataco_admin.utils.config import load_settings, save_section
from dataco_admin.viewmodels.page_config import PageConfig


def test_defaults_when_file_missing(tmp_path, monkeypatch):
    monkeypatch.delenv("DATACO_API_URL", raising=False)
    data = load_settings(tmp_path / "settings.json")
    assert data["api"]["base_url"] == "http://localhost:3000"
    assert data["realtime"]["interval"] == 30.0


def test_stored_values_merge_over_defaults(tmp_path, monkeypatch):
    monkeypatch.delenv("DATACO_API_URL", raising=False)
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"pages": {"allow_loops": True}, "realtime": {"interval": 5}}), encoding="utf-8")

    data = load_settings(path)
    assert data["pages"] == {"recalculate_amount": True, "allow_loops": True}
    assert data["api"]["timeout"] == 15.0

    config = PageConfig.from_settings(data)
    assert config.allow_loops is True
    assert config.poll_interval == 5.0
    assert "loops" in config.subtask_types


def test_env_overrides_base_url(tmp_path, monkeypatch):
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"api": {"base_url": "http://stored"}}), encoding="utf-8")
    monkeypatch.setenv("DATACO_API_URL", "http://from-env")
    assert load_settings(path)["api"]["base_url"] == "http://from-env"


def test_broken_file_falls_back_to_defaults(tmp_path, monkeypatch):
    monkeypatch.delenv("DATACO_API_URL", raising=False)
    path = tmp_path / "settings.json"
    path.write_text("{oops", encoding="utf-8")
    assert load_settings(path)["pages"]["allow_loops"] is False


def test_save_section_keeps_other_stored_sections(tmp_path, monkeypatch):
    monkeypatch.setenv("DATACO_API_URL", "http://from-env")
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"api": {"base_url": "http://stored"}}), encoding="utf-8")

    save_section("main_window", {"width": 800, "height": 600, "is_maximized": True}, path)

    stored = json.loads(path.read_text(encoding="utf-8"))
    assert stored["api"] == {"base_url": "http://stored"}
    assert stored["main_window"]["is_maximized"] is True
    monkeypatch.delenv("DATACO_API_URL")
    assert load_settings(path)["main_window"]["width"] == 800
