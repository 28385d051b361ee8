"""Unit tests for settings loading."""

from pathlib import Path

import pytest
from omegaconf.errors import ConfigKeyError

from optrack.utils.config import DEFAULT_PROXY_BASE, TrackerSettings, load_settings


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("OPTRACK_CONFIG", "OPTRACK_STORE", "OPTRACK_LOGS"):
        monkeypatch.delenv(name, raising=False)


@pytest.mark.unit
def test_defaults():
    """Test settings with no file and no overrides."""
    settings = load_settings()

    assert isinstance(settings, TrackerSettings)
    assert settings.proxy_base == DEFAULT_PROXY_BASE
    assert settings.due_soon_days == 7
    assert settings.list_limit == 6
    assert settings.storage_prefix == "opportunity-tracker"
    assert settings.store_file == Path("~/.optrack/store.json").expanduser()


@pytest.mark.unit
def test_yaml_overrides_defaults(tmp_path):
    """Test merging a YAML file over the defaults."""
    config = tmp_path / "tracker.yaml"
    config.write_text("proxy_base: https://proxy.example.org\nfetch_timeout: 5\nlist_limit: 10\n")

    settings = load_settings(config)

    assert settings.proxy_base == "https://proxy.example.org"
    assert settings.fetch_timeout == 5.0
    assert settings.list_limit == 10
    assert settings.due_soon_days == 7


@pytest.mark.unit
def test_config_path_from_environment(tmp_path, monkeypatch):
    """Test OPTRACK_CONFIG naming the YAML file."""
    config = tmp_path / "tracker.yaml"
    config.write_text("due_soon_days: 14\n")
    monkeypatch.setenv("OPTRACK_CONFIG", str(config))

    assert load_settings().due_soon_days == 14


@pytest.mark.unit
def test_environment_overrides_paths(tmp_path, monkeypatch):
    """Test that path environment variables win over the file."""
    config = tmp_path / "tracker.yaml"
    config.write_text("store_path: /from/yaml.json\n")
    monkeypatch.setenv("OPTRACK_STORE", str(tmp_path / "store.json"))
    monkeypatch.setenv("OPTRACK_LOGS", str(tmp_path / "logs"))

    settings = load_settings(config)

    assert settings.store_file == tmp_path / "store.json"
    assert settings.log_dir == tmp_path / "logs"


@pytest.mark.unit
def test_unknown_keys_rejected(tmp_path):
    """Test that typos in the YAML file are reported."""
    config = tmp_path / "tracker.yaml"
    config.write_text("proxy_bsae: https://typo.example.org\n")

    with pytest.raises(ConfigKeyError):
        load_settings(config)


@pytest.mark.unit
def test_missing_file_uses_defaults(tmp_path):
    """Test that a configured path that does not exist is ignored."""
    assert load_settings(tmp_path / "absent.yaml").proxy_base == DEFAULT_PROXY_BASE


@pytest.mark.unit
def test_shipped_config_matches_defaults():
    """Test that configs/tracker.yaml loads and mirrors the defaults."""
    shipped = Path(__file__).parents[2] / "configs" / "tracker.yaml"

    assert load_settings(shipped) == TrackerSettings()
