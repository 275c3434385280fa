"""
Tests for Engine Configuration
==============================
"""

from pathlib import Path

import pytest

from axi_engine.config import CONFIG_ENV_VAR, EngineConfig, load_config

PROJECT_ROOT = Path(__file__).parent.parent.parent


class TestEngineConfig:
    """Test defaults and validation."""

    def test_defaults(self):
        config = EngineConfig()
        assert config.execute_threshold == 0.80
        assert config.confirm_threshold == 0.55
        assert config.clarify_threshold == 0.35
        assert config.destructive_threshold == 0.95
        assert config.max_history == 5
        assert config.context_ttl_seconds == 300
        assert config.confirmation_timeout_seconds == 30

    def test_destructive_intents(self):
        config = EngineConfig()
        for intent in ("delete_file", "delete_folder", "shutdown_system", "restart_system", "git_push", "git_commit"):
            assert config.is_destructive(intent)
        assert not config.is_destructive("play")

    @pytest.mark.parametrize("overrides", [
        {"confirm_threshold": 0.9},
        {"clarify_threshold": 0.6},
        {"destructive_threshold": 0.7},
        {"destructive_threshold": 1.1},
        {"clarify_threshold": -0.1},
    ])
    def test_threshold_ordering(self, overrides):
        with pytest.raises(ValueError):
            EngineConfig(**overrides)

    @pytest.mark.parametrize("overrides", [
        {"max_history": 0},
        {"context_ttl_seconds": 0},
        {"cleanup_interval_seconds": -1},
        {"classifier_backend": "transformer"},
        {"semantic_threshold": 2.0},
    ])
    def test_invalid_values(self, overrides):
        with pytest.raises(ValueError):
            EngineConfig(**overrides)

    def test_skill_settings(self):
        config = EngineConfig(skills={"files": {"base_dir": "/tmp"}})
        assert config.skill_settings("files") == {"base_dir": "/tmp"}
        assert config.skill_settings("media") == {}


class TestLoading:
    """Test YAML loading and lookup order."""

    def test_from_dict_ignores_unknown_keys(self):
        config = EngineConfig.from_dict({"execute_threshold": 0.85, "bogus": 1})
        assert config.execute_threshold == 0.85

    def test_relative_paths_resolved(self, tmp_path):
        config = EngineConfig.from_dict({"intents_dir": "config/intents"}, base_dir=tmp_path)
        assert config.intents_dir == str(tmp_path / "config" / "intents")

    def test_from_yaml(self, tmp_path):
        path = tmp_path / "engine.yaml"
        path.write_text("execute_threshold: 0.9\nvectors_path: data/v.json\n")
        config = EngineConfig.from_yaml(path)
        assert config.execute_threshold == 0.9
        assert config.vectors_path == str(tmp_path / "data" / "v.json")

    def test_config_dir_resolves_to_parent(self, tmp_path):
        (tmp_path / "config").mkdir()
        path = tmp_path / "config" / "engine.yaml"
        path.write_text("intents_dir: config/intents\n")
        assert EngineConfig.from_yaml(path).intents_dir == str(tmp_path / "config" / "intents")

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            EngineConfig.from_yaml(tmp_path / "missing.yaml")

    def test_not_a_mapping(self, tmp_path):
        path = tmp_path / "engine.yaml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ValueError):
            EngineConfig.from_yaml(path)

    def test_env_var(self, tmp_path, monkeypatch):
        path = tmp_path / "custom.yaml"
        path.write_text("confirmation_timeout_seconds: 10\n")
        monkeypatch.setenv(CONFIG_ENV_VAR, str(path))
        assert load_config().confirmation_timeout_seconds == 10

    def test_shipped_config_is_valid(self):
        config = EngineConfig.from_yaml(PROJECT_ROOT / "config" / "engine.yaml")
        assert config.classifier_backend == "keyword"
        assert Path(config.intents_dir).is_dir()
        assert config.site_map["github"] == "https://github.com"
