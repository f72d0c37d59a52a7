"""
Repositorio de lectura de ratings (Read Store).
"""
from typing import List

from loguru import logger
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.domain.entities.rating import Rating
from app.infrastructure.database.models import RatingModel
from app.infrastructure.database.session import STORAGE_ERRORS, describe_db_error
from app.shared.exceptions.sync import ReadScanError


class RatingRepository:
    """
    Lectura de la tabla `items`.

    No coordina con la sincronización: una lectura durante una corrida puede
    ver la tabla vacía (entre descarte y carga) o parcialmente cargada.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_all(self) -> List[Rating]:
        """
        Devuelve todo el dataset, sin orden garantizado ni paginación.

        Raises:
            ReadScanError: si la consulta falla (incluye tabla inexistente)
        """
        logger.info("Obteniendo items desde base de datos")
        query = select(RatingModel.__table__)
        try:
            result = await self.db.execute(query)
            rows = result.all()
        except STORAGE_ERRORS as e:
            message = describe_db_error(e)
            logger.error(f"Error obteniendo items: {message}")
            raise ReadScanError(message) from e

        return [Rating.from_row(row) for row in rows]
