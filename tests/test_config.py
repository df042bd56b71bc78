"""Tests for configuration loading."""

from hdvsync import config as config_module
from hdvsync.config import get_config, load_config, reset_config


def test_defaults():
    config = load_config()
    assert config.update.safe_update is True
    assert config.update.max_sidecar_mb == 100
    assert config.update.max_sidecar_bytes == 100 * 1024 * 1024
    assert config.logging.level == "WARNING"
    assert config.logging.format == "console"


def test_yaml_file(tmp_path, monkeypatch):
    path = tmp_path / "config.yaml"
    path.write_text(
        "update:\n  safe_update: false\n  max_sidecar_mb: 5\nlogging:\n  level: info\n",
        encoding="utf-8",
    )
    monkeypatch.setattr(config_module, "CONFIG_LOCATIONS", [tmp_path / "missing.yaml", path])
    config = load_config()
    assert config.update.safe_update is False
    assert config.update.max_sidecar_mb == 5
    assert config.logging.level == "INFO"


def test_env_overrides_file(tmp_path, monkeypatch):
    path = tmp_path / "config.yaml"
    path.write_text("update:\n  safe_update: false\n", encoding="utf-8")
    monkeypatch.setattr(config_module, "CONFIG_LOCATIONS", [path])
    monkeypatch.setenv("HDVSYNC_SAFE_UPDATE", "yes")
    monkeypatch.setenv("HDVSYNC_MAX_SIDECAR_MB", "7")
    monkeypatch.setenv("HDVSYNC_LOG_FORMAT", "JSON")
    config = load_config()
    assert config.update.safe_update is True
    assert config.update.max_sidecar_mb == 7
    assert config.logging.format == "json"


def test_env_can_disable_safe_update(monkeypatch):
    monkeypatch.setenv("HDVSYNC_SAFE_UPDATE", "0")
    assert load_config().update.safe_update is False


def test_invalid_yaml_is_skipped(tmp_path, monkeypatch):
    path = tmp_path / "config.yaml"
    path.write_text("update: [unclosed\n", encoding="utf-8")
    monkeypatch.setattr(config_module, "CONFIG_LOCATIONS", [path])
    assert load_config().update.safe_update is True


def test_global_config_cached():
    first = get_config()
    assert get_config() is first
    reset_config()
    assert get_config() is not first
