"""Tests for the generator configuration."""

from __future__ import annotations

import pytest

from class_db_to_dts.pipeline.config import FormatterConfig, GeneratorConfig, OutputConfig, OutputMode


class TestGeneratorConfig:
    """Test cases for GeneratorConfig"""

    def test_defaults(self):
        config = GeneratorConfig()
        assert config.emit_docs
        assert config.emit_api_map
        assert not config.sort_members
        assert config.output.mode == OutputMode.ERROR_IF_EXISTS
        assert not config.formatter.enabled

    def test_from_dict(self):
        config = GeneratorConfig.from_dict(
            {
                "only_classes": ["Node"],
                "sort_members": True,
                "public_underscore_names": ["_custom"],
                "formatter": {"enabled": True, "timeout": 10},
                "output": {"mode": "force", "atomic_write": False},
                "unknown_option": 1,
            }
        )
        assert config.only_classes == ["Node"]
        assert config.sort_members
        assert config.public_underscore_names == ["_custom"]
        assert config.formatter == FormatterConfig(enabled=True, timeout=10)
        assert config.output == OutputConfig(mode=OutputMode.FORCE, validate_before_write=True, atomic_write=False)
        assert not hasattr(config, "unknown_option")

    def test_invalid_output_mode(self):
        with pytest.raises(ValueError):
            GeneratorConfig.from_dict({"output": {"mode": "append"}})

    def test_round_trip(self):
        config = GeneratorConfig(ignore_classes=["Vector2"], version="4.4-stable")
        config.output.mode = OutputMode.FORCE
        data = config.to_dict()
        assert data["output"]["mode"] == "force"
        assert GeneratorConfig.from_dict(data) == config

    def test_output_config_instances_are_independent(self):
        first = GeneratorConfig()
        first.output.mode = OutputMode.FORCE
        assert GeneratorConfig().output.mode == OutputMode.ERROR_IF_EXISTS
