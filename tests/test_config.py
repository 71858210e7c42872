"""Tests for engine configuration."""

import pytest

from slac.config import EngineConfig


class TestEngineConfig:
    """Tests for defaults and environment variable loading."""

    def test_defaults(self):
        config = EngineConfig()
        assert config.optimize is True
        assert config.fold_constants is False
        assert config.validate is False
        assert config.zero_based_strings is False
        assert config.string_offset == 1

    def test_from_env_without_variables(self, monkeypatch):
        for name in ("SLAC_OPTIMIZE", "SLAC_FOLD_CONSTANTS", "SLAC_VALIDATE", "SLAC_ZERO_BASED_STRINGS"):
            monkeypatch.delenv(name, raising=False)
        assert EngineConfig.from_env() == EngineConfig()

    @pytest.mark.parametrize("raw", ["1", "true", "YES", " on "])
    def test_truthy_values(self, monkeypatch, raw):
        monkeypatch.setenv("SLAC_VALIDATE", raw)
        assert EngineConfig.from_env().validate is True

    @pytest.mark.parametrize("raw", ["0", "false", "off", "nope"])
    def test_falsy_values(self, monkeypatch, raw):
        monkeypatch.setenv("SLAC_OPTIMIZE", raw)
        assert EngineConfig.from_env().optimize is False

    def test_blank_keeps_default(self, monkeypatch):
        monkeypatch.setenv("SLAC_OPTIMIZE", "  ")
        assert EngineConfig.from_env().optimize is True

    def test_zero_based_strings(self, monkeypatch):
        monkeypatch.setenv("SLAC_ZERO_BASED_STRINGS", "1")
        monkeypatch.setenv("SLAC_FOLD_CONSTANTS", "true")

        config = EngineConfig.from_env()

        assert config.string_offset == 0
        assert config.fold_constants is True
