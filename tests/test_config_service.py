"""
Regression tests for ConfigService defaults, path handling and isolation.

Goal: Avoid overwriting repository template configuration files and ensure
that the test environment does not pollute the real user directories.
"""

from __future__ import annotations

from pathlib import Path

import pytest
import yaml


@pytest.fixture(autouse=True)
def _reset_config_service():
    from services.config_service import ConfigService

    ConfigService.reset_instance()
    yield
    ConfigService.reset_instance()


def _sandbox_user_config_dir(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Path:
    base = tmp_path / "user-config"
    # Set for Windows/Mac/Linux to avoid platform differences leaking to real user directories
    monkeypatch.setenv("APPDATA", str(base))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(base))
    return base


def test_singleton(tmp_path: Path):
    from services.config_service import ConfigService

    config1 = ConfigService(str(tmp_path / "config.yaml"))
    config2 = ConfigService(str(tmp_path / "other.yaml"))

    assert config1 is config2


def test_defaults_cover_wear_limits(tmp_path: Path):
    from services.config_service import ConfigService

    config = ConfigService(str(tmp_path / "config.yaml"))

    assert config.get("wear.browse.max_songs") == 500
    assert config.get("wear.browse.max_albums") == 200
    assert config.get("wear.album_art.max_dimension") == 720
    assert config.get("wear.album_art.max_bytes") == 900_000
    assert config.get("wear.transport.send_timeout_seconds") == 10.0
    assert config.get("missing.key", "fallback") == "fallback"


def test_custom_file_is_deep_merged(tmp_path: Path):
    from services.config_service import ConfigService

    custom_path = tmp_path / "config.yaml"
    custom_path.write_text(yaml.safe_dump({"wear": {"browse": {"max_songs": 50}}}), encoding="utf-8")

    config = ConfigService(str(custom_path))

    assert config.get("wear.browse.max_songs") == 50
    assert config.get("wear.browse.max_albums") == 200


def test_custom_config_path_save_and_reload_round_trip(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    from services.config_service import ConfigService

    _sandbox_user_config_dir(monkeypatch, tmp_path)

    custom_path = tmp_path / "isolated.yaml"
    config = ConfigService(str(custom_path))
    config.set("wear.album_art.jpeg_quality", 80)

    assert config.save() is True
    assert custom_path.exists()

    # Custom mode should not write to the default user directory
    assert ConfigService._get_user_config_path().exists() is False

    ConfigService.reset_instance()
    config2 = ConfigService(str(custom_path))
    assert config2.get("wear.album_art.jpeg_quality") == 80


def test_corrupt_yaml_falls_back_to_defaults(tmp_path: Path):
    from services.config_service import ConfigService

    custom_path = tmp_path / "broken.yaml"
    custom_path.write_text("wear: [unclosed", encoding="utf-8")

    config = ConfigService(str(custom_path))

    assert config.get("wear.browse.max_songs") == 500


def test_reset_restores_defaults(tmp_path: Path):
    from services.config_service import ConfigService

    config = ConfigService(str(tmp_path / "config.yaml"))
    config.set("wear.browse.max_songs", 1)
    config.reset()

    assert config.get("wear.browse.max_songs") == 500


def test_repository_template_matches_builtin_defaults(tmp_path: Path):
    from services.config_service import ConfigService

    template_path = Path(__file__).parent.parent / "config" / "default_config.yaml"
    template = yaml.safe_load(template_path.read_text(encoding="utf-8"))

    config = ConfigService(str(tmp_path / "empty.yaml"))

    assert template["wear"] == config.get("wear")
    assert template["library"] == config.get("library")
