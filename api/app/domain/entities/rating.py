"""
Entidad Rating: un evento de rating de analista tal como lo publica el feed.

Es la unidad de sincronización. Los precios objetivo y los ratings se
mantienen como texto libre; la conversión a números es cosa de la capa de
presentación, no del pipeline.
"""
from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator

from app.shared.utils.datetime_utils import DateTimeUtils


class Rating(BaseModel):
    """
    Registro de rating de analista.

    Identidad: (ticker, time). El pipeline no deduplica; si el feed repite
    la clave, la carga en lote falla por PK. Un ticker vacio es un valor de
    clave valido.
    """

    model_config = ConfigDict(extra="ignore", frozen=True)

    ticker: str = ""
    target_from: str = ""
    target_to: str = ""
    company: str = ""
    action: str = ""
    brokerage: str = ""
    rating_from: str = ""
    rating_to: str = ""
    time: str

    @field_validator(
        "ticker",
        "target_from",
        "target_to",
        "company",
        "action",
        "brokerage",
        "rating_from",
        "rating_to",
        mode="before",
    )
    @classmethod
    def null_as_empty(cls, v: Any) -> Any:
        # El feed a veces manda null; se guarda como string vacio
        return "" if v is None else v

    @field_validator("time")
    @classmethod
    def time_is_iso8601(cls, v: str) -> str:
        # Se valida aqui para fallar antes de tocar la tabla
        DateTimeUtils.parse_feed_timestamp(v)
        return v

    @property
    def event_time(self) -> datetime:
        return DateTimeUtils.parse_feed_timestamp(self.time)

    def to_row(self) -> dict[str, Any]:
        """Fila lista para el bulk load (time como datetime aware)."""
        row = self.model_dump()
        row["time"] = self.event_time
        return row

    @classmethod
    def from_row(cls, row: Any) -> "Rating":
        """Construye un Rating desde una fila de la tabla `items`."""
        return cls(
            ticker=row.ticker,
            target_from=row.target_from,
            target_to=row.target_to,
            company=row.company,
            action=row.action,
            brokerage=row.brokerage,
            rating_from=row.rating_from,
            rating_to=row.rating_to,
            time=DateTimeUtils.to_iso_z(row.time),
        )


class RatingListResponse(BaseModel):
    """Respuesta de GET /item."""

    items: list[Rating]
