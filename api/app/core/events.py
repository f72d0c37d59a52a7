"""
Manejadores de eventos de inicio y cierre de la aplicacion.
"""
from typing import Callable, Optional
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger
from fastapi import FastAPI
from loguru import logger

from app.application.use_cases.sync_use_cases import build_from_settings
from app.core.config import settings
from app.infrastructure.database.session import close_db, engine, init_db
from app.shared.exceptions.sync import SyncInProgressError


SCHEDULED_SYNC_JOB_ID = "ratings_sync"


async def run_scheduled_sync() -> None:
    """Job del scheduler: una corrida, sin reintentos."""
    orchestrator = build_from_settings(settings, engine)
    try:
        report = await orchestrator.run()
    except SyncInProgressError:
        logger.info("Sync programado omitido: ya hay una corrida en curso")
        return

    if report.error is not None:
        logger.error(f"Sync programado {report.run_id} fallido: {report.error.message}")
    else:
        logger.info(f"Sync programado {report.run_id}: {report.inserted_count} items")


def _build_scheduler() -> Optional[AsyncIOScheduler]:
    """Crea el scheduler solo si SYNC_INTERVAL_MINUTES > 0."""
    if settings.SYNC_INTERVAL_MINUTES <= 0:
        return None

    scheduler = AsyncIOScheduler(timezone="UTC")
    scheduler.add_job(
        run_scheduled_sync,
        trigger=IntervalTrigger(minutes=settings.SYNC_INTERVAL_MINUTES),
        id=SCHEDULED_SYNC_JOB_ID,
        max_instances=1,
        coalesce=True,
    )
    return scheduler


def startup_handler(app: FastAPI) -> Callable:
    """
    Manejador de eventos de inicio de la aplicacion.

    Args:
        app: Instancia de FastAPI

    Returns:
        Callable: Funcion asincrona de inicio
    """
    async def startup() -> None:
        """Inicializa recursos al inicio de la aplicacion."""
        try:
            logger.info(f"Iniciando {settings.APP_NAME} v{settings.APP_VERSION}")
            logger.info(f"Entorno: {settings.ENVIRONMENT}")

            # Validar configuracion critica
            _validate_config()

            # Configurar logging adicional
            logger.add(
                settings.LOG_FILE,
                rotation="500 MB",
                retention="10 days",
                level=settings.LOG_LEVEL
            )

            # Inicializar base de datos (crea tablas si no existen)
            await init_db()
            logger.info("Base de datos inicializada")

            app.state.scheduler = _build_scheduler()
            if app.state.scheduler:
                app.state.scheduler.start()
                logger.info(
                    f"Sync programado cada {settings.SYNC_INTERVAL_MINUTES} minuto(s)"
                )

            logger.success("Aplicacion iniciada correctamente")

        except Exception as e:
            logger.error(f"Error durante startup: {e}")
            logger.exception("Detalle del error:")
            raise

    return startup


def _validate_config() -> None:
    """Valida que la configuracion critica este presente."""
    warnings = []

    if not settings.UPSTREAM_URL:
        warnings.append("UPSTREAM_URL no configurada - POST /sync fallara en el fetch")
    if not settings.UPSTREAM_TOKEN:
        warnings.append("UPSTREAM_TOKEN no configurado - el feed puede rechazar las peticiones")
    if settings.SYNC_MAX_PAGES == 0:
        warnings.append("SYNC_MAX_PAGES=0 - paginacion sin limite")
    if not settings.SYNC_ATOMIC_REPLACE:
        warnings.append(
            "SYNC_ATOMIC_REPLACE=false - si la carga falla tras el TRUNCATE la tabla queda vacia"
        )

    # Mostrar advertencias
    for warning in warnings:
        logger.warning(f"CONFIG: {warning}")


def shutdown_handler(app: FastAPI) -> Callable:
    """
    Manejador de eventos de cierre de la aplicacion.

    Args:
        app: Instancia de FastAPI

    Returns:
        Callable: Funcion asincrona de cierre
    """
    async def shutdown() -> None:
        """Libera recursos al cerrar la aplicacion."""
        logger.info("Cerrando aplicacion...")

        scheduler = getattr(app.state, "scheduler", None)
        if scheduler:
            scheduler.shutdown(wait=False)
            logger.info("Scheduler detenido")

        # Cerrar conexiones de base de datos
        await close_db()
        logger.info("Conexiones de base de datos cerradas")

        logger.success("Aplicacion cerrada correctamente")

    return shutdown
