import pytest
from pydantic import ValidationError

from keep.server.settings import DEFAULT_STATIC_DIR, KeepServerSettings


class TestKeepServerSettings:
    def test_defaults(self, monkeypatch):
        for name in ("KEEP_LOG_DIR", "KEEP_CORS_ORIGINS", "KEEP_ALLOWED_HOSTS", "KEEP_STATIC_DIR"):
            monkeypatch.delenv(name, raising=False)
        settings = KeepServerSettings()
        assert settings.log_dir == "backend/logs/keep"
        assert settings.cors_origins == []
        assert "testserver" in settings.allowed_hosts
        assert settings.static_dir == str(DEFAULT_STATIC_DIR)

    def test_log_dir_override(self, monkeypatch):
        monkeypatch.setenv("KEEP_LOG_DIR", "custom/keep-logs")
        assert KeepServerSettings().log_dir == "custom/keep-logs"

    def test_cors_origins_csv(self, monkeypatch):
        monkeypatch.setenv("KEEP_CORS_ORIGINS", "http://x.com,http://y.com")
        assert KeepServerSettings().cors_origins == ["http://x.com", "http://y.com"]

    def test_cors_origins_json_array(self, monkeypatch):
        monkeypatch.setenv("KEEP_CORS_ORIGINS", '["http://x.com"]')
        assert KeepServerSettings().cors_origins == ["http://x.com"]

    def test_allowed_hosts_csv(self, monkeypatch):
        monkeypatch.setenv("KEEP_ALLOWED_HOSTS", "keep.example.com,*.keep.example.com")
        assert KeepServerSettings().allowed_hosts == ["keep.example.com", "*.keep.example.com"]

    def test_allowed_hosts_empty_raises(self, monkeypatch):
        monkeypatch.setenv("KEEP_ALLOWED_HOSTS", "[]")
        with pytest.raises(ValidationError, match="must not be empty"):
            KeepServerSettings()
