"""
Configuración de fixtures para pytest.
"""
import os

# Antes de importar `app`: settings y engine se crean al importar
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("UPSTREAM_URL", "https://feed.test/swechallenge/list")
os.environ.setdefault("UPSTREAM_TOKEN", "Bearer test-token")

from typing import Any, AsyncGenerator, Callable, List, Optional, Union

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from app.application.use_cases.sync_use_cases import SyncOrchestrator
from app.infrastructure.external.ratings_feed.run_guard import sync_run_guard


# URL de base de datos de prueba
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"
FEED_URL = "https://feed.test/swechallenge/list"


class FakeResponse:
    """Respuesta mínima compatible con lo que usa RatingsFeedClient."""

    def __init__(self, status_code: int = 200, payload: Any = None, text: Optional[str] = None):
        self.status_code = status_code
        self._payload = payload
        self.text = text if text is not None else ("" if payload is None else str(payload))

    def json(self) -> Any:
        if self._payload is None:
            raise ValueError("Expecting value: line 1 column 1 (char 0)")
        return self._payload


class FakeFeedSession:
    """
    Sustituto de requests.Session: devuelve respuestas en orden y registra
    cada llamada. Un Exception en la lista se lanza en lugar de responder.
    """

    def __init__(self, responses: List[Union[FakeResponse, Exception]]):
        self._responses = list(responses)
        self.calls: List[dict] = []

    def request(self, method, url, params=None, headers=None, timeout=None):
        self.calls.append(
            {"method": method, "url": url, "params": params, "headers": headers, "timeout": timeout}
        )
        if not self._responses:
            raise AssertionError("El feed recibio mas peticiones de las esperadas")
        response = self._responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


def rating_payload(ticker: str, time: str = "2024-01-01T00:00:00Z", **overrides: Any) -> dict:
    """Item del feed con valores realistas."""
    item = {
        "ticker": ticker,
        "target_from": "$150.00",
        "target_to": "$175.00",
        "company": f"{ticker} Inc.",
        "action": "target raised by",
        "brokerage": "Goldman Sachs",
        "rating_from": "Neutral",
        "rating_to": "Buy",
        "time": time,
    }
    item.update(overrides)
    return item


def page(items: List[dict], next_page: Optional[str] = "") -> FakeResponse:
    return FakeResponse(200, {"items": items, "next_page": next_page})


@pytest.fixture
def make_item() -> Callable[..., dict]:
    return rating_payload


@pytest.fixture
def make_page() -> Callable[..., FakeResponse]:
    return page


@pytest.fixture
def feed_session() -> Callable[[List[Union[FakeResponse, Exception]]], FakeFeedSession]:
    """Factory de FakeFeedSession."""
    return FakeFeedSession


@pytest.fixture(autouse=True)
def reset_sync_state():
    """Limpia el estado en memoria del orquestador y el single-flight."""
    SyncOrchestrator._last_report = None
    sync_run_guard._lock = None
    sync_run_guard._active_run_id = None
    yield
    SyncOrchestrator._last_report = None
    sync_run_guard._lock = None
    sync_run_guard._active_run_id = None


@pytest_asyncio.fixture
async def db_engine() -> AsyncGenerator[AsyncEngine, None]:
    """
    Engine SQLite en memoria compartido por todas las conexiones del test
    (StaticPool), para que refresher y repositorio vean la misma base.
    """
    engine = create_async_engine(TEST_DATABASE_URL, echo=False, poolclass=StaticPool)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(db_engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """Sesión de base de datos sobre el engine de prueba."""
    async_session = async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)
    async with async_session() as session:
        yield session


@pytest.fixture
def make_response() -> Callable[..., FakeResponse]:
    return FakeResponse

