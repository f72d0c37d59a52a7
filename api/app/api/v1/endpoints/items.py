"""
Endpoint de lectura del dataset de ratings.
"""
from fastapi import APIRouter, Depends, status

from app.api.v1.dependencies.repository_deps import get_rating_repository
from app.domain.entities.rating import RatingListResponse
from app.infrastructure.repositories.rating_repository import RatingRepository


router = APIRouter(tags=["Items"])


@router.get(
    "/item",
    response_model=RatingListResponse,
    status_code=status.HTTP_200_OK,
    summary="Listar ratings sincronizados"
)
async def list_items(
    repository: RatingRepository = Depends(get_rating_repository),
) -> RatingListResponse:
    """
    Devuelve el contenido actual de la tabla `items`.

    Sin orden garantizado ni paginacion. Si la lectura falla responde 500
    con el mensaje en texto plano (no hay datos parciales).
    """
    items = await repository.list_all()
    return RatingListResponse(items=items)
