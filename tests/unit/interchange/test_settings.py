"""
Unit tests for runtime settings.
"""

import logging

import pytest

from interchange.config.settings import ENV_OVERRIDES, InterchangeSettings, build_registry
from interchange.core.exceptions import ConfigurationError
from interchange.storage.documents import DocumentLocations


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_OVERRIDES:
        monkeypatch.delenv(name, raising=False)


class TestInterchangeSettings:
    """Tests for InterchangeSettings."""

    def test_defaults(self):
        settings = InterchangeSettings()

        assert settings.get_locations() == DocumentLocations()
        assert settings.get("logging.level") == "INFO"
        assert settings.get_log_level() == logging.INFO
        assert settings.get("storage.s3.endpoint_url") is None

    def test_load_yaml(self, tmp_path):
        path = tmp_path / "settings.yaml"
        path.write_text(
            "documents:\n"
            "  config: config/tap.json\n"
            "  state: gs://pipelines/state.json\n"
            "storage:\n"
            "  s3:\n"
            "    region: eu-west-1\n"
            "logging:\n"
            "  level: debug\n",
            encoding="utf-8",
        )

        settings = InterchangeSettings(settings_path=path)

        assert settings.get_locations() == DocumentLocations(
            config="config/tap.json",
            state="gs://pipelines/state.json",
        )
        assert settings.get("storage.s3.region") == "eu-west-1"
        # Defaults are kept for keys the file does not set
        assert settings.get("storage.gs") == {"endpoint_url": None}
        assert settings.get_log_level() == logging.DEBUG

    def test_empty_file(self, tmp_path):
        path = tmp_path / "settings.yaml"
        path.write_text("", encoding="utf-8")

        settings = InterchangeSettings(settings_path=path)

        assert settings.get("logging.level") == "INFO"

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError):
            InterchangeSettings(settings_path=tmp_path / "missing.yaml")

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "settings.yaml"
        path.write_text("documents: [unclosed\n", encoding="utf-8")

        with pytest.raises(ConfigurationError):
            InterchangeSettings(settings_path=path)

    def test_non_mapping_yaml(self, tmp_path):
        path = tmp_path / "settings.yaml"
        path.write_text("- just\n- a list\n", encoding="utf-8")

        with pytest.raises(ConfigurationError):
            InterchangeSettings(settings_path=path)

    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("INTERCHANGE_STATE", "s3://bucket/state.json")
        monkeypatch.setenv("INTERCHANGE_S3_ENDPOINT_URL", "http://localhost:9000")

        settings = InterchangeSettings()

        assert settings.get_locations().state == "s3://bucket/state.json"
        assert settings.get("storage.s3.endpoint_url") == "http://localhost:9000"

    def test_get_default(self):
        settings = InterchangeSettings()

        assert settings.get("documents.config", "fallback") == "fallback"
        assert settings.get("logging.level.nested", "x") == "x"
        assert settings.get("no.such.key") is None

    def test_unknown_log_level(self):
        settings = InterchangeSettings()
        settings.set("logging.level", "LOUD")

        with pytest.raises(ConfigurationError):
            settings.get_log_level()

    def test_build_registry(self):
        registry = build_registry(InterchangeSettings())

        assert {"s3", "gs"} <= set(registry.schemes())
