"""
Endpoints para sincronizacion del feed de ratings.
Permite disparar el full refresh desde el dashboard.
"""
from fastapi import APIRouter, Depends, status

from app.api.v1.dependencies.use_case_deps import get_sync_orchestrator
from app.application.dto.sync_dto import SyncResponseDTO, SyncStatusDTO
from app.application.use_cases.sync_use_cases import SyncOrchestrator, current_status
from app.core.config import settings


router = APIRouter(prefix="/sync", tags=["Sync"])


@router.post(
    "",
    response_model=SyncResponseDTO,
    status_code=status.HTTP_200_OK,
    summary="Sincronizar el feed de ratings con la base de datos"
)
async def sync_items(
    orchestrator: SyncOrchestrator = Depends(get_sync_orchestrator),
) -> SyncResponseDTO:
    """
    Ejecuta una corrida completa: recorre todas las paginas del feed y
    reemplaza la tabla `items`.

    - 200: corrida en DONE, con la cantidad de items insertados
    - 409: ya hay una corrida en curso (no se encola)
    - 500: texto plano indicando el paso que fallo; no se reintenta
    """
    report = await orchestrator.run()
    if report.error is not None:
        raise report.error

    return SyncResponseDTO(
        message="Sincronizacion completada",
        items_synced=report.inserted_count or 0,
    )


@router.get(
    "/status",
    response_model=SyncStatusDTO,
    summary="Estado de la ultima sincronizacion"
)
async def sync_status() -> SyncStatusDTO:
    """
    Estado de la ultima corrida en este proceso (en memoria).

    Solo lee el reporte y el single-flight; no construye el pipeline.
    """
    return current_status(atomic_replace=settings.SYNC_ATOMIC_REPLACE)
