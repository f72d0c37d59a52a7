"""
Tests unitarios para la configuracion (Settings).
"""
import pytest
from pydantic import ValidationError

from app.core.config import Settings, get_cors_origins, normalize_async_dsn


@pytest.mark.parametrize(
    ("dsn", "expected"),
    [
        (
            "postgresql://root@localhost:26257/defaultdb?sslmode=disable",
            "postgresql+asyncpg://root@localhost:26257/defaultdb?sslmode=disable",
        ),
        ("postgres://user:pw@db/ratings", "postgresql+asyncpg://user:pw@db/ratings"),
        ("cockroachdb://root@crdb:26257/defaultdb", "postgresql+asyncpg://root@crdb:26257/defaultdb"),
        ("postgresql+asyncpg://root@db/x", "postgresql+asyncpg://root@db/x"),
        ("sqlite+aiosqlite:///:memory:", "sqlite+aiosqlite:///:memory:"),
    ],
)
def test_normalize_async_dsn(dsn, expected):
    assert normalize_async_dsn(dsn) == expected


def test_get_cors_origins():
    assert get_cors_origins("*") == ["*"]
    assert get_cors_origins('["http://a.test", "http://b.test"]') == ["http://a.test", "http://b.test"]
    assert get_cors_origins("http://a.test, http://b.test") == ["http://a.test", "http://b.test"]


def test_legacy_env_names_are_accepted(monkeypatch):
    """Los nombres del despliegue anterior siguen funcionando."""
    for name in ("DATABASE_URL", "UPSTREAM_URL", "UPSTREAM_TOKEN", "PORT", "CORS_ORIGINS"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("dsn", "postgresql://root@crdb:26257/defaultdb")
    monkeypatch.setenv("url", "https://feed.example/list")
    monkeypatch.setenv("token", "Bearer legacy")
    monkeypatch.setenv("portback", "9090")
    monkeypatch.setenv("urlfront", "http://localhost:5173")

    settings = Settings(_env_file=None)

    assert settings.effective_database_url == "postgresql+asyncpg://root@crdb:26257/defaultdb"
    assert settings.UPSTREAM_URL == "https://feed.example/list"
    assert settings.UPSTREAM_TOKEN == "Bearer legacy"
    assert settings.PORT == 9090
    assert get_cors_origins(settings.CORS_ORIGINS) == ["http://localhost:5173"]


def test_database_url_from_components(monkeypatch):
    monkeypatch.delenv("DATABASE_URL", raising=False)
    monkeypatch.delenv("dsn", raising=False)

    settings = Settings(_env_file=None, DATABASE_HOST="crdb", DATABASE_PASSWORD="pw")

    assert settings.effective_database_url == "postgresql+asyncpg://root:pw@crdb:26257/defaultdb"


def test_sync_defaults(monkeypatch):
    for name in ("UPSTREAM_TIMEOUT_S", "SYNC_MAX_PAGES", "SYNC_ATOMIC_REPLACE", "SYNC_INTERVAL_MINUTES"):
        monkeypatch.delenv(name, raising=False)

    settings = Settings(_env_file=None)

    assert settings.UPSTREAM_TIMEOUT_S is None
    assert settings.SYNC_MAX_PAGES == 10000
    assert settings.SYNC_ATOMIC_REPLACE is False
    assert settings.SYNC_INTERVAL_MINUTES == 0


def test_negative_max_pages_is_rejected():
    with pytest.raises(ValidationError):
        Settings(_env_file=None, SYNC_MAX_PAGES=-1)
