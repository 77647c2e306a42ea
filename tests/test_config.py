"""Tests for environment-driven settings."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from blockman.config import Settings, parse_bool
from blockman.errors import ConfigError

NODE = "http://localhost:8545"


class TestFromEnv:
    def test_defaults(self) -> None:
        settings = Settings.from_env({"ETH_NODE_URL": NODE})
        assert settings.eth_node_url == NODE
        assert settings.host == "0.0.0.0"
        assert settings.port == 8080
        assert settings.cleanup_enabled is True
        assert settings.cleanup_hours == 24
        assert settings.cleanup_max_age == 24 * 3600
        assert settings.rpc_timeout == 30

    def test_missing_node_url(self) -> None:
        with pytest.raises(ConfigError, match="ETH_NODE_URL"):
            Settings.from_env({})
        with pytest.raises(ConfigError):
            Settings.from_env({"ETH_NODE_URL": "   "})

    def test_overrides(self) -> None:
        settings = Settings.from_env(
            {
                "ETH_NODE_URL": NODE,
                "HOST": "127.0.0.1",
                "PORT": "9000",
                "CLEANUP_ENABLED": "false",
                "CLEANUP_HOURS": "1.5",
                "RPC_TIMEOUT": "5",
            }
        )
        assert settings.host == "127.0.0.1"
        assert settings.port == 9000
        assert settings.cleanup_enabled is False
        assert settings.cleanup_max_age == 5400
        assert settings.rpc_timeout == 5

    @pytest.mark.parametrize(
        "key, value, attr, default",
        [
            ("PORT", "eighty", "port", 8080),
            ("CLEANUP_ENABLED", "maybe", "cleanup_enabled", True),
            ("CLEANUP_HOURS", "soon", "cleanup_hours", 24),
            ("CLEANUP_HOURS", "-2", "cleanup_hours", 24),
            ("RPC_TIMEOUT", "0", "rpc_timeout", 30),
        ],
    )
    def test_invalid_values_fall_back(
        self, key: str, value: str, attr: str, default: object, caplog: pytest.LogCaptureFixture
    ) -> None:
        with caplog.at_level(logging.WARNING, logger="blockman.config"):
            settings = Settings.from_env({"ETH_NODE_URL": NODE, key: value})
        assert getattr(settings, attr) == default
        assert f"Invalid {key}" in caplog.text

    def test_reads_dotenv_file(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        # setenv first so teardown restores whatever load_dotenv writes
        for key in ("ETH_NODE_URL", "PORT"):
            monkeypatch.setenv(key, "")
            monkeypatch.delenv(key)
        env_file = tmp_path / ".env"
        env_file.write_text(f"ETH_NODE_URL={NODE}\nPORT=8181\n", encoding="utf-8")

        settings = Settings.from_env(env_file=env_file)
        assert settings.eth_node_url == NODE
        assert settings.port == 8181


class TestParseBool:
    @pytest.mark.parametrize("value", ["1", "t", "T", "TRUE", "true", "True"])
    def test_true(self, value: str) -> None:
        assert parse_bool(value) is True

    @pytest.mark.parametrize("value", ["0", "f", "F", "FALSE", "false", "False"])
    def test_false(self, value: str) -> None:
        assert parse_bool(value) is False

    @pytest.mark.parametrize("value", ["yes", "tRuE", "2"])
    def test_invalid(self, value: str) -> None:
        with pytest.raises(ValueError):
            parse_bool(value)
