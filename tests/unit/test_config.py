"""
Unit tests for ServerConfig.
"""

import pytest

from webserver.config import ServerConfig


class TestServerConfig:

    def test_defaults(self):
        config = ServerConfig()

        assert config.address == "127.0.0.1:8080"
        assert config.buffer_size == 65536
        assert config.workers == 4
        config.validate()

    def test_ipv6_address(self):
        assert ServerConfig(host="::1", port=9000).address == "[::1]:9000"

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("WEBSERVER_HOST", "0.0.0.0")
        monkeypatch.setenv("WEBSERVER_PORT", "3000")
        monkeypatch.setenv("WEBSERVER_WORKERS", "8")
        monkeypatch.setenv("WEBSERVER_ROOT", "/srv/www")
        monkeypatch.setenv("WEBSERVER_LOG_LEVEL", "DEBUG")

        config = ServerConfig.from_env()

        assert config.host == "0.0.0.0"
        assert config.port == 3000
        assert config.workers == 8
        assert config.root_dir == "/srv/www"
        assert config.log_level == "DEBUG"

    @pytest.mark.parametrize("overrides", [
        {"port": 70000},
        {"port": -1},
        {"workers": 0},
        {"buffer_size": 10},
        {"poll_interval": 0},
        {"log_level": "LOUD"},
    ])
    def test_validate_rejects(self, overrides):
        with pytest.raises(ValueError):
            ServerConfig(**overrides).validate()
