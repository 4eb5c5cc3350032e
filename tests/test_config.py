"""Tests for config loading."""

import pytest

from statement_fitter.config import AppConfig, FittingConfig, LLMConfig, StoreConfig, load_config
from statement_fitter.fitting.measure import AF1206_LINE_WIDTH_PX


class TestConfig:
    def test_defaults(self):
        config = AppConfig()
        assert config.llm.revision_model == "claude-haiku-4-5-20251001"
        assert config.fitting.line_width_px == AF1206_LINE_WIDTH_PX
        assert config.fitting.target_lines == 2
        assert config.store.ttl_days == 7

    def test_load_config_defaults(self, tmp_path):
        """Loading from non-existent path returns defaults."""
        config = load_config(tmp_path / "nonexistent.yaml")
        assert config.llm.enforcement_model == "claude-sonnet-4-5-20250929"
        assert config.revision.version_count == 3

    def test_load_config_from_yaml(self, tmp_path):
        yaml_path = tmp_path / "config.yaml"
        yaml_path.write_text(
            "llm:\n  revision_model: test-model\nfitting:\n  line_width_px: 765.95\n"
        )
        config = load_config(yaml_path)
        assert config.llm.revision_model == "test-model"
        assert config.fitting.line_width_px == 765.95
        # Defaults for unspecified
        assert config.fitting.character_limit == 350
        assert config.enforcement.max_retries == 2

    def test_empty_yaml(self, tmp_path):
        yaml_path = tmp_path / "config.yaml"
        yaml_path.write_text("")
        assert load_config(yaml_path) == AppConfig()

    def test_store_resolved_path(self):
        store = StoreConfig(db_path="~/test.db")
        resolved = store.resolved_db_path
        assert "~" not in str(resolved)

    def test_frozen_config(self):
        config = LLMConfig()
        with pytest.raises(AttributeError):
            config.revision_model = "changed"

    def test_fitting_override(self):
        assert FittingConfig(target_lines=3).target_lines == 3
