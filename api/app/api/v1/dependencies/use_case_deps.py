"""
Dependencias para inyeccion de casos de uso.
"""
from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncEngine

from app.application.use_cases.sync_use_cases import SyncOrchestrator, build_from_settings
from app.core.config import settings
from app.infrastructure.database.session import get_engine


def get_sync_orchestrator(
    engine: AsyncEngine = Depends(get_engine)
) -> SyncOrchestrator:
    """
    Dependencia para obtener el orquestador de sincronizacion.

    Se construye por request; el single-flight es compartido a nivel de
    proceso, asi que dos requests no pueden correr a la vez.

    Args:
        engine: Engine de base de datos compartido

    Returns:
        SyncOrchestrator: Orquestador listo para `run()`
    """
    return build_from_settings(settings, engine)
