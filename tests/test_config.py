from __future__ import annotations

import pytest

from scriptviz.config import Config


def test_defaults(monkeypatch):
    for name in ("SCRIPTVIZ_PUBLIC_URL", "SCRIPTVIZ_MAX_EXECUTION_SECONDS", "SCRIPTVIZ_CORS_ORIGINS", "PORT"):
        monkeypatch.delenv(name, raising=False)
    config = Config.from_env()
    assert config.python_command == "python3"
    assert config.r_command == "Rscript"
    assert config.public_url is None
    assert config.cors_origins == ["*"]
    assert config.port == 3001


def test_overrides(monkeypatch):
    monkeypatch.setenv("SCRIPTVIZ_PUBLIC_URL", "http://localhost:3001/")
    monkeypatch.setenv("SCRIPTVIZ_MAX_EXECUTION_SECONDS", "5")
    monkeypatch.setenv("SCRIPTVIZ_VERIFY_ARTIFACTS", "false")
    monkeypatch.setenv("SCRIPTVIZ_CORS_ORIGINS", "http://a.test, http://b.test")
    config = Config.from_env()
    assert config.public_url == "http://localhost:3001"
    assert config.max_execution_seconds == 5
    assert config.verify_artifacts is False
    assert config.cors_origins == ["http://a.test", "http://b.test"]


def test_invalid_integer(monkeypatch):
    monkeypatch.setenv("PORT", "eighty")
    with pytest.raises(ValueError, match="PORT"):
        Config.from_env()


def test_timeout_must_be_positive(monkeypatch):
    monkeypatch.setenv("SCRIPTVIZ_MAX_EXECUTION_SECONDS", "0")
    with pytest.raises(ValueError):
        Config.from_env()


def test_invalid_log_level(monkeypatch):
    monkeypatch.setenv("SCRIPTVIZ_LOG_LEVEL", "chatty")
    with pytest.raises(ValueError, match="SCRIPTVIZ_LOG_LEVEL"):
        Config.from_env()


def test_log_level_is_case_insensitive(monkeypatch):
    monkeypatch.setenv("SCRIPTVIZ_LOG_LEVEL", "debug")
    assert Config.from_env().log_level == "DEBUG"
