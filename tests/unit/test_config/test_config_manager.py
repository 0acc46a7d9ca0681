"""
Unit tests for configuration loading, caching and environment overrides.
"""

import tomllib

import pytest

from stopmonitor.config import (
    API_URL_ENV_VAR,
    apply_env_overrides,
    clear_config_cache,
    get_config,
    get_config_info,
    is_config_loaded,
    set_config_path,
)
from stopmonitor.config import manager
from stopmonitor.models import DashboardConfig
from stopmonitor.validation import ValidationError


@pytest.fixture(autouse=True)
def no_api_url(monkeypatch):
    monkeypatch.delenv(API_URL_ENV_VAR, raising=False)


@pytest.mark.unit
class TestConfigLoading:

    def test_loads_file(self, config_file):
        set_config_path(config_file)
        config = get_config()

        assert config.backend.base_url == "http://factory.local:8080"
        assert config.backend.data_url == "http://factory.local:8080/api/data"
        assert config.backend.timeout_seconds == 4.0
        assert config.backend.connect_timeout_seconds == 2.0
        assert config.dashboard.monitored_machine == "M01"
        assert config.dashboard.poll_interval_ms == 2500
        assert config.dashboard.trend_window == 5
        assert config.dashboard.history_window == 8
        assert config.dashboard.hue_step_degrees == 45
        assert config.dashboard.display_timezone == "UTC"
        assert config.dashboard.labels.unknown_reason == "Unknown"

    def test_config_is_cached(self, config_file):
        set_config_path(config_file)
        first = get_config()
        assert is_config_loaded()
        assert get_config() is first

        clear_config_cache()
        assert not is_config_loaded()
        assert get_config() is not first

    def test_repository_config(self):
        config = get_config()
        assert config.dashboard.monitored_machine == DashboardConfig().monitored_machine
        assert config.dashboard.poll_interval_ms == 5000

    def test_missing_explicit_file(self, temp_dir):
        set_config_path(temp_dir / "absent.toml")
        with pytest.raises(FileNotFoundError):
            get_config()

    def test_missing_default_file_uses_defaults(self, temp_dir, monkeypatch):
        missing = temp_dir / "absent.toml"
        monkeypatch.setattr(manager, "_DEFAULT_CONFIG_FILE_PATH", missing)
        monkeypatch.setattr(manager, "_CONFIG_FILE_PATH", missing)
        config = get_config()
        assert config.dashboard == DashboardConfig()
        assert config.backend.base_url == "http://localhost:5000"

    def test_empty_base_url_in_file(self, temp_dir):
        path = temp_dir / "no_url.toml"
        path.write_text('[backend]\nbase_url = ""\n', encoding="utf-8")
        set_config_path(path)
        with pytest.raises(ValidationError):
            get_config()

    def test_malformed_file(self, temp_dir):
        path = temp_dir / "broken.toml"
        path.write_text("[dashboard\nmonitored_machine = ", encoding="utf-8")
        set_config_path(path)
        with pytest.raises(tomllib.TOMLDecodeError):
            get_config()

    def test_invalid_value(self, temp_dir):
        path = temp_dir / "invalid.toml"
        path.write_text("[dashboard]\npoll_interval_ms = 10\n", encoding="utf-8")
        set_config_path(path)
        with pytest.raises(ValidationError):
            get_config()

    def test_config_info(self, config_file):
        set_config_path(config_file)
        assert get_config_info()["config_loaded"] is False
        get_config()
        info = get_config_info()
        assert info["config_loaded"] is True
        assert info["config_path"] == str(config_file)
        assert info["monitored_machine"] == "M01"


@pytest.mark.unit
class TestEnvironmentOverrides:

    def test_env_var_overrides_file(self, config_file, monkeypatch):
        monkeypatch.setenv(API_URL_ENV_VAR, "https://stops.example.com/")
        set_config_path(config_file)
        assert get_config().backend.base_url == "https://stops.example.com"

    def test_empty_env_var_is_ignored(self):
        data = {"backend": {"base_url": "http://a"}}
        assert apply_env_overrides(data, environ={API_URL_ENV_VAR: ""}) == data

    def test_override_does_not_mutate_input(self):
        data = {"backend": {"base_url": "http://a"}}
        merged = apply_env_overrides(data, environ={API_URL_ENV_VAR: "http://b"})
        assert merged["backend"]["base_url"] == "http://b"
        assert data["backend"]["base_url"] == "http://a"

    def test_invalid_env_url_fails_validation(self, config_file, monkeypatch):
        monkeypatch.setenv(API_URL_ENV_VAR, "not-a-url")
        set_config_path(config_file)
        with pytest.raises(ValidationError):
            get_config()
