"""Tests for configuration loading and logging helpers."""

import logging

import pytest

import constants
from constants import Constants, apply_config, default_libs_dir, default_mappings_dir
from common.logging_utils import Timer, configure_logging, extra_context, safe_url
from mappings.catalog import VersionCatalog


@pytest.fixture(autouse=True)
def restore_constants(monkeypatch):
    """Let each test mutate Constants freely."""
    for attr in ("CONNECT_TIMEOUT", "READ_TIMEOUT", "USER_AGENT", "CATALOG_URL",
                 "CATALOG_CONNECT_TIMEOUT", "CATALOG_READ_TIMEOUT", "MAVEN_REPO_ROOT",
                 "MAPPINGS_DIR", "LIBS_DIR", "GRADLE_MCP_DIR", "HOME_DIR"):
        monkeypatch.setattr(Constants, attr, getattr(Constants, attr))
    for var in (Constants.ENV_CONFIG, Constants.ENV_MAPPINGS_DIR, Constants.ENV_LIBS_DIR):
        monkeypatch.delenv(var, raising=False)


class TestApplyConfig:
    """Test YAML and environment overrides."""

    def test_known_keys_are_applied(self):
        apply_config({
            "http": {"connect_timeout": "3", "user_agent": "tests/1.0"},
            "maven": {"repo_root": "https://mirror.invalid/maven2"},
            "unknown": {"x": 1},
        })

        assert Constants.CONNECT_TIMEOUT == 3.0
        assert Constants.USER_AGENT == "tests/1.0"
        assert Constants.MAVEN_REPO_ROOT == "https://mirror.invalid/maven2"

    def test_invalid_value_is_ignored(self):
        before = Constants.READ_TIMEOUT

        apply_config({"http": {"read_timeout": "soon"}})

        assert Constants.READ_TIMEOUT == before

    def test_environment_overrides_yaml(self, monkeypatch, tmp_path):
        monkeypatch.setenv(Constants.ENV_MAPPINGS_DIR, str(tmp_path / "env-mappings"))

        apply_config({"paths": {"mappings_dir": str(tmp_path / "yaml-mappings")}})

        assert default_mappings_dir() == str(tmp_path / "env-mappings")

    def test_yaml_file_from_environment(self, monkeypatch, tmp_path):
        config = tmp_path / "bonfetch.yml"
        config.write_text(
            "paths:\n  libs_dir: /srv/libs\ncatalog:\n  connect_timeout: 3\n  read_timeout: 2\n",
            encoding="utf-8",
        )
        monkeypatch.setenv(Constants.ENV_CONFIG, str(config))

        apply_config()

        assert default_libs_dir() == "/srv/libs"
        assert Constants.CATALOG_CONNECT_TIMEOUT == 3.0
        assert Constants.CATALOG_READ_TIMEOUT == 2.0
        assert VersionCatalog().timeout == (3.0, 2.0)

    def test_broken_yaml_is_ignored(self, monkeypatch, tmp_path):
        config = tmp_path / "bonfetch.yml"
        config.write_text("paths: [unclosed\n", encoding="utf-8")
        monkeypatch.setenv(Constants.ENV_CONFIG, str(config))

        assert constants._load_yaml_config() == {}  # pylint: disable=protected-access

    def test_directories_default_under_home(self, tmp_path):
        Constants.HOME_DIR = str(tmp_path)
        Constants.MAPPINGS_DIR = None
        Constants.LIBS_DIR = None

        assert default_mappings_dir() == str(tmp_path / "mappings")
        assert default_libs_dir() == str(tmp_path / "libs")


class TestLoggingUtils:
    """Test the structured logging helpers."""

    def test_safe_url_strips_credentials_and_secrets(self):
        cleaned = safe_url("https://user:pw@host.invalid:8443/path?token=abcdef&v=1")

        assert "user" not in cleaned
        assert "pw@" not in cleaned
        assert "abcdef" not in cleaned
        assert cleaned.startswith("https://host.invalid:8443/path?")
        assert "v=1" in cleaned

    def test_extra_context_drops_none(self):
        assert extra_context(a=1, b=None, c="x") == {"a": 1, "c": "x"}

    def test_timer_measures_elapsed_time(self):
        with Timer() as timer:
            pass

        assert timer.duration_ms() >= 0

    def test_configure_logging_sets_level(self, monkeypatch):
        root = logging.getLogger()
        monkeypatch.setattr(root, "level", root.level)
        monkeypatch.setattr(root, "handlers", list(root.handlers))
        monkeypatch.setenv(Constants.ENV_LOG_LEVEL, "debug")

        configure_logging()

        assert root.level == logging.DEBUG
