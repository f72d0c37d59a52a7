"""
Refresher: reemplaza el contenido completo de la tabla `items`.

Pasos (cada uno puede fallar por separado):
1. Asegurar esquema: CREATE TABLE IF NOT EXISTS con PK (ticker, time).
2. Descartar: TRUNCATE (Postgres/CockroachDB) o DELETE (otros motores).
3. Carga en lote: un único INSERT multi-fila con todos los registros.

Modo por defecto (atomic=False): el descarte se confirma antes de la carga.
Si la carga falla (PK duplicada, conexión caída) la tabla queda VACÍA, no
se restaura la generación anterior. Es el comportamiento histórico del
sistema y el caller lo recibe como BulkLoadError.

Modo atomic=True: descarte y carga van en una sola transacción; si la carga
falla se hace rollback y la tabla conserva la generación anterior.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, Sequence, Type

from loguru import logger
from sqlalchemy import delete, insert, text
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine
from sqlalchemy.schema import CreateTable

from app.domain.entities.rating import Rating
from app.infrastructure.database.models import RatingModel
from app.infrastructure.database.session import STORAGE_ERRORS as _STORAGE_ERRORS, describe_db_error
from app.shared.exceptions.sync import (
    BulkLoadError,
    DiscardError,
    SchemaError,
    SyncException,
)

_ITEMS = RatingModel.__table__


class RatingsRefresher:
    """Full refresh de la tabla `items` a partir de un lote de Rating."""

    def __init__(self, engine: AsyncEngine, *, atomic: bool = False) -> None:
        self._engine = engine
        self._atomic = atomic

    @property
    def atomic(self) -> bool:
        return self._atomic

    @asynccontextmanager
    async def _transaction(self, error_cls: Type[SyncException]) -> AsyncIterator[AsyncConnection]:
        """
        Abre una transacción y traduce fallos de conexión/commit a `error_cls`.
        Los SyncException levantados dentro se propagan sin cambios.
        """
        try:
            async with self._engine.begin() as conn:
                yield conn
        except SyncException:
            raise
        except _STORAGE_ERRORS as e:
            raise error_cls(describe_db_error(e)) from e

    async def ensure_schema(self) -> None:
        """Paso 1: crea la tabla si no existe. Idempotente."""
        logger.info("Paso 1: Verificando/creando tabla items...")
        async with self._transaction(SchemaError) as conn:
            try:
                await conn.execute(CreateTable(_ITEMS, if_not_exists=True))
            except _STORAGE_ERRORS as e:
                logger.error(f"Error creating table: {describe_db_error(e)}")
                raise SchemaError(describe_db_error(e)) from e

    async def _discard(self, conn: AsyncConnection) -> None:
        logger.info("Paso 2: Limpiando tabla items...")
        try:
            if conn.dialect.name == "postgresql" and not self._atomic:
                await conn.execute(text(f"TRUNCATE TABLE {_ITEMS.name}"))
            else:
                await conn.execute(delete(_ITEMS))
        except _STORAGE_ERRORS as e:
            logger.error(f"Error truncating table: {describe_db_error(e)}")
            raise DiscardError(describe_db_error(e)) from e

    async def _bulk_load(self, conn: AsyncConnection, rows: Sequence[dict]) -> int:
        if not rows:
            logger.info("Paso 3: Lote vacio, no hay items que insertar")
            return 0

        logger.info(f"Paso 3: Insertando {len(rows)} items en lote...")
        try:
            await conn.execute(insert(_ITEMS), list(rows))
        except _STORAGE_ERRORS as e:
            logger.error(f"Error insertando lote: {describe_db_error(e)}")
            raise BulkLoadError(describe_db_error(e), attempted=len(rows)) from e
        return len(rows)

    async def discard(self) -> None:
        """Paso 2 aislado: vacía la tabla y confirma."""
        async with self._transaction(DiscardError) as conn:
            await self._discard(conn)

    async def bulk_load(self, records: Sequence[Rating]) -> int:
        """Paso 3 aislado: inserta el lote y confirma."""
        rows = [r.to_row() for r in records]
        async with self._transaction(BulkLoadError) as conn:
            return await self._bulk_load(conn, rows)

    async def replace_all(self, records: Sequence[Rating]) -> int:
        """
        Reemplaza el dataset por `records`.

        Args:
            records: Lote completo (puede estar vacío: deja la tabla vacía)

        Returns:
            Cantidad de filas insertadas

        Raises:
            SchemaError, DiscardError, BulkLoadError
        """
        await self.ensure_schema()

        if not self._atomic:
            await self.discard()
            return await self.bulk_load(records)

        rows = [r.to_row() for r in records]
        async with self._transaction(BulkLoadError) as conn:
            await self._discard(conn)
            return await self._bulk_load(conn, rows)
