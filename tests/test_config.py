from __future__ import annotations

import pytest

from hrportal.core.config import DEFAULT_ADMIN_EMAIL, get_settings


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in (
        "DATABASE_URL",
        "JWT_SECRET_KEY",
        "JWT_ALGORITHM",
        "CORS_ALLOW_ORIGINS",
        "ADMIN_EMAIL",
        "ADMIN_INITIAL_PASSWORD",
        "LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)


def test_missing_jwt_secret_aborts(monkeypatch):
    monkeypatch.setenv("DATABASE_URL", "sqlite+pysqlite:///:memory:")
    with pytest.raises(RuntimeError, match="JWT_SECRET_KEY"):
        get_settings()


def test_missing_database_url_aborts(monkeypatch):
    monkeypatch.setenv("JWT_SECRET_KEY", "abc")
    with pytest.raises(RuntimeError, match="DATABASE_URL"):
        get_settings()


def test_defaults_and_origin_list(monkeypatch):
    monkeypatch.setenv("DATABASE_URL", "sqlite+pysqlite:///:memory:")
    monkeypatch.setenv("JWT_SECRET_KEY", "abc")
    monkeypatch.setenv("CORS_ALLOW_ORIGINS", "http://a.test, http://b.test")
    monkeypatch.setenv("LOG_LEVEL", "debug")

    settings = get_settings()

    assert settings.jwt_algorithm == "HS256"
    assert settings.cors_allow_origins == ["http://a.test", "http://b.test"]
    assert settings.admin_email == DEFAULT_ADMIN_EMAIL
    assert settings.log_level == "DEBUG"
