"""
Unit tests for ClientConfig.
"""

import pytest

from sockio.config import ClientConfig


class TestClientConfig:
    """Tests for defaults, validation and environment loading."""

    def test_defaults(self):
        config = ClientConfig()

        assert config.chunk_capacity == 8192
        assert config.encoding == "utf-8"
        assert config.errors == "replace"
        assert config.timeout is None
        assert config.flush_each_pass is False
        config.validate()

    @pytest.mark.parametrize("overrides", [
        {"port": 0},
        {"port": 70000},
        {"chunk_capacity": 0},
        {"timeout": 0},
        {"encoding": "no-such-codec"},
        {"encoding": "hex"},
    ])
    def test_validate_rejects(self, overrides):
        with pytest.raises(ValueError):
            ClientConfig(**overrides).validate()

    def test_tiny_chunk_is_valid(self):
        ClientConfig(chunk_capacity=1).validate()

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("SOCKIO_HOST", "10.0.0.5")
        monkeypatch.setenv("SOCKIO_PORT", "9000")
        monkeypatch.setenv("SOCKIO_CHUNK_CAPACITY", "8")
        monkeypatch.setenv("SOCKIO_TIMEOUT", "2.5")
        monkeypatch.setenv("SOCKIO_LOG_LEVEL", "DEBUG")

        config = ClientConfig.from_env()

        assert config.host == "10.0.0.5"
        assert config.port == 9000
        assert config.chunk_capacity == 8
        assert config.timeout == 2.5
        assert config.log_level == "DEBUG"

    @pytest.mark.parametrize("value, expected", [
        ("1", True), ("true", True), ("TRUE", True), ("0", False), ("", False),
    ])
    def test_from_env_decode_policy(self, monkeypatch, value, expected):
        monkeypatch.setenv("SOCKIO_ERRORS", "ignore")
        monkeypatch.setenv("SOCKIO_FLUSH_EACH_PASS", value)

        config = ClientConfig.from_env()

        assert config.errors == "ignore"
        assert config.flush_each_pass is expected

    def test_from_env_defaults(self, monkeypatch):
        for name in ("SOCKIO_HOST", "SOCKIO_PORT", "SOCKIO_CHUNK_CAPACITY",
                     "SOCKIO_ENCODING", "SOCKIO_ERRORS", "SOCKIO_FLUSH_EACH_PASS",
                     "SOCKIO_TIMEOUT", "SOCKIO_LOG_LEVEL"):
            monkeypatch.delenv(name, raising=False)

        config = ClientConfig.from_env()

        assert config == ClientConfig()
