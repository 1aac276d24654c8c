"""Tests for settings parsing."""
import pytest
from pydantic import ValidationError

from config import DatabaseSettings, LoggingSettings, SecuritySettings, ServerSettings, Settings


def test_defaults(monkeypatch):
    for name in ("DATABASE_URL", "DATABASE_NAME", "PORT", "CORS_ORIGINS", "LOG_LEVEL", "SERVICE_NAME"):
        monkeypatch.delenv(name, raising=False)

    settings = Settings()

    assert settings.database.database_url == "mongodb://localhost:27017"
    assert settings.database.database_name == "magazine"
    assert settings.server.port == 8000
    assert settings.server.allowed_origins == ["*"]
    assert settings.service_name == "magazine"


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("DATABASE_URL", "mongodb+srv://user:pw@cluster.example.net")
    monkeypatch.setenv("DATABASE_NAME", "editions")
    monkeypatch.setenv("PORT", "9000")

    assert DatabaseSettings().database_url == "mongodb+srv://user:pw@cluster.example.net"
    assert DatabaseSettings().database_name == "editions"
    assert ServerSettings().port == 9000


def test_rejects_non_mongo_url(monkeypatch):
    monkeypatch.setenv("DATABASE_URL", "postgresql://localhost/db")
    with pytest.raises(ValidationError):
        DatabaseSettings()


def test_cors_origins_split(monkeypatch):
    monkeypatch.setenv("CORS_ORIGINS", "http://localhost:5173, https://mag.example.com,")
    assert ServerSettings().allowed_origins == ["http://localhost:5173", "https://mag.example.com"]


def test_log_level_is_normalized(monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "debug")
    assert LoggingSettings().level == "DEBUG"

    monkeypatch.setenv("LOG_LEVEL", "chatty")
    with pytest.raises(ValidationError):
        LoggingSettings()


def test_bcrypt_rounds_bounds(monkeypatch):
    monkeypatch.setenv("BCRYPT_ROUNDS", "3")
    with pytest.raises(ValidationError):
        SecuritySettings()
