"""
Dependencias para inyección de repositorios.
"""
from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.infrastructure.database.session import get_db
from app.infrastructure.repositories.rating_repository import RatingRepository


async def get_rating_repository(
    session: AsyncSession = Depends(get_db)
) -> RatingRepository:
    """
    Dependencia para obtener el repositorio de lectura de ratings.

    Args:
        session: Sesión de base de datos

    Returns:
        RatingRepository: Instancia del repositorio
    """
    return RatingRepository(session)
