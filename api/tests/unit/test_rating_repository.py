"""
Tests unitarios para RatingRepository (lectura del dataset).
"""
import pytest

from app.domain.entities.rating import Rating
from app.infrastructure.external.ratings_feed.refresher import RatingsRefresher
from app.infrastructure.repositories.rating_repository import RatingRepository
from app.shared.exceptions.sync import ReadScanError


@pytest.mark.asyncio
async def test_list_all_returns_loaded_records(db_engine, db_session, make_item):
    """Devuelve exactamente lo cargado, sin orden garantizado."""
    loaded = [
        Rating.model_validate(make_item("AAPL", time="2024-01-01T00:00:00Z")),
        Rating.model_validate(make_item("MSFT", time="2024-01-02T15:30:00Z", brokerage=None)),
    ]
    await RatingsRefresher(db_engine).replace_all(loaded)

    items = await RatingRepository(db_session).list_all()

    assert sorted(items, key=lambda r: r.ticker) == loaded


@pytest.mark.asyncio
async def test_list_all_normalizes_time_to_utc_z(db_engine, db_session, make_item):
    await RatingsRefresher(db_engine).replace_all(
        [Rating.model_validate(make_item("AAPL", time="2024-01-01T02:00:00+02:00"))]
    )

    items = await RatingRepository(db_session).list_all()

    assert items[0].time == "2024-01-01T00:00:00Z"


@pytest.mark.asyncio
async def test_list_all_empty_table(db_engine, db_session):
    await RatingsRefresher(db_engine).ensure_schema()

    assert await RatingRepository(db_session).list_all() == []


@pytest.mark.asyncio
async def test_list_all_without_table_raises_read_scan_error(db_session):
    with pytest.raises(ReadScanError) as exc_info:
        await RatingRepository(db_session).list_all()

    assert exc_info.value.message.startswith("Error obteniendo items")
    assert exc_info.value.details["step"] == "read"
