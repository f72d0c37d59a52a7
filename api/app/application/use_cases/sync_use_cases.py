"""
Casos de uso para la sincronización del feed de ratings (Sync Orchestrator).

Máquina de estados por corrida:

    IDLE -> FETCHING -> LOADING -> DONE
                  \\          \\
                   -> FAILED    -> FAILED

- FETCHING -> FAILED: el feed falló; el refresher NO se invoca y el dataset
  queda intacto.
- LOADING -> FAILED: falló esquema/descarte/carga; en modo no atómico el
  dataset puede quedar vacío.
- DONE y FAILED son terminales. No hay reintentos: el caller (humano o
  scheduler) decide si vuelve a disparar.
"""

from __future__ import annotations

import asyncio
import uuid
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import ClassVar, Optional

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncEngine

from app.application.dto.sync_dto import SyncErrorDTO, SyncStatusDTO
from app.core.config import Settings
from app.infrastructure.external.ratings_feed.feed_client import RatingsFeedClient
from app.infrastructure.external.ratings_feed.refresher import RatingsRefresher
from app.infrastructure.external.ratings_feed.run_guard import SyncRunGuard, sync_run_guard
from app.infrastructure.external.ratings_feed.types import FeedConfig
from app.shared.exceptions.sync import SyncException
from app.shared.utils.datetime_utils import DateTimeUtils


class SyncState(str, Enum):
    """Estados de una corrida de sincronización."""

    IDLE = "idle"
    FETCHING = "fetching"
    LOADING = "loading"
    DONE = "done"
    FAILED = "failed"


# Transiciones permitidas
_TRANSITIONS = {
    SyncState.IDLE: {SyncState.FETCHING},
    SyncState.FETCHING: {SyncState.LOADING, SyncState.FAILED},
    SyncState.LOADING: {SyncState.DONE, SyncState.FAILED},
    SyncState.DONE: set(),
    SyncState.FAILED: set(),
}


class InvalidTransitionError(RuntimeError):
    """Transición de estado no permitida (bug del orquestador)."""


@dataclass
class SyncRunReport:
    """Resultado (o estado en curso) de una corrida."""

    run_id: str
    atomic_replace: bool = False
    state: SyncState = SyncState.IDLE
    started_at: Optional[datetime] = None
    finished_at: Optional[datetime] = None
    fetched_count: Optional[int] = None
    inserted_count: Optional[int] = None
    error: Optional[SyncException] = None

    @property
    def is_terminal(self) -> bool:
        return self.state in (SyncState.DONE, SyncState.FAILED)

    def transition(self, new_state: SyncState) -> None:
        if new_state not in _TRANSITIONS[self.state]:
            raise InvalidTransitionError(f"{self.state.value} -> {new_state.value}")
        logger.debug(f"Sync {self.run_id}: {self.state.value} -> {new_state.value}")
        self.state = new_state
        if new_state == SyncState.FETCHING:
            self.started_at = DateTimeUtils.now_utc()
        if self.is_terminal:
            self.finished_at = DateTimeUtils.now_utc()

    def fail(self, error: SyncException) -> None:
        self.error = error
        self.transition(SyncState.FAILED)

    def abort(self) -> None:
        """Cierra como FAILED una corrida que no llego a un estado terminal."""
        self.state = SyncState.FAILED
        self.finished_at = DateTimeUtils.now_utc()

    def to_dto(self, running: bool = False) -> SyncStatusDTO:
        error = None
        if self.error is not None:
            error = SyncErrorDTO(
                error=self.error.error_code,
                message=self.error.message,
                step=self.error.details.get("step"),
            )
        return SyncStatusDTO(
            run_id=self.run_id,
            state=self.state.value,
            running=running,
            atomic_replace=self.atomic_replace,
            fetched_count=self.fetched_count,
            inserted_count=self.inserted_count,
            started_at=self.started_at,
            finished_at=self.finished_at,
            error=error,
        )


class SyncOrchestrator:
    """
    Secuencia Paginator -> Refresher y convierte cualquier fallo en un
    reporte terminal.

    La última corrida se guarda en memoria (a nivel de clase) para el
    endpoint de estado; no se persiste.
    """

    _last_report: ClassVar[Optional[SyncRunReport]] = None

    def __init__(
        self,
        feed_client: RatingsFeedClient,
        refresher: RatingsRefresher,
        *,
        guard: SyncRunGuard = sync_run_guard,
    ) -> None:
        self._feed = feed_client
        self._refresher = refresher
        self._guard = guard

    @classmethod
    def last_report(cls) -> Optional[SyncRunReport]:
        return cls._last_report

    def status(self) -> SyncStatusDTO:
        """Estado de la última corrida, o IDLE si no hubo ninguna."""
        return current_status(atomic_replace=self._refresher.atomic, guard=self._guard)

    async def run(self) -> SyncRunReport:
        """
        Ejecuta una corrida completa.

        Returns:
            SyncRunReport en DONE o FAILED (el error queda en `report.error`)

        Raises:
            SyncInProgressError: si ya hay otra corrida activa en el proceso
        """
        run_id = str(uuid.uuid4())
        async with self._guard.acquire(run_id):
            report = SyncRunReport(run_id=run_id, atomic_replace=self._refresher.atomic)
            SyncOrchestrator._last_report = report
            try:
                await self._execute(report)
            except BaseException:
                # Error inesperado o cancelacion (shutdown, tarea cancelada)
                if not report.is_terminal:
                    logger.error(f"Sync {report.run_id} interrumpido en {report.state.value}")
                    report.abort()
                raise
            return report

    async def _execute(self, report: SyncRunReport) -> None:
        logger.info(f"=== Iniciando sincronizacion de items ({report.run_id}) ===")

        report.transition(SyncState.FETCHING)
        logger.info("Obteniendo items desde la API (todas las paginas)...")
        try:
            # requests es bloqueante: se ejecuta en un thread para no frenar el event loop
            records = await asyncio.to_thread(self._feed.fetch_all)
        except SyncException as e:
            logger.error(f"Sync {report.run_id} fallido en fetch: {e.message}")
            report.fail(e)
            return

        report.fetched_count = len(records)
        logger.info(f"Se encontraron {len(records)} items para sincronizar")

        report.transition(SyncState.LOADING)
        try:
            inserted = await self._refresher.replace_all(records)
        except SyncException as e:
            logger.error(f"Sync {report.run_id} fallido en {e.details.get('step')}: {e.message}")
            if not self._refresher.atomic and e.details.get("step") in ("discard", "load"):
                logger.warning("La tabla items puede haber quedado vacia tras el fallo de carga")
            report.fail(e)
            return

        report.inserted_count = inserted
        report.transition(SyncState.DONE)
        logger.info(
            f"=== Sincronizacion completada: {inserted}/{len(records)} items insertados ==="
        )


def current_status(*, atomic_replace: bool, guard: SyncRunGuard = sync_run_guard) -> SyncStatusDTO:
    """
    Estado de la última corrida del proceso sin construir el pipeline.

    `atomic_replace` solo se usa mientras no hubo ninguna corrida.
    """
    report = SyncOrchestrator.last_report()
    if report is None:
        return SyncStatusDTO(
            state=SyncState.IDLE.value,
            running=guard.is_running,
            atomic_replace=atomic_replace,
        )
    return report.to_dto(running=guard.is_running)


def build_from_settings(settings: Settings, engine: AsyncEngine) -> SyncOrchestrator:
    """
    Constructor "oficial" del pipeline a partir de la configuración.

    El feed recibe su URL y credencial por inyección (FeedConfig), no lee
    variables de entorno por su cuenta.
    """
    feed_config = FeedConfig(
        base_url=settings.UPSTREAM_URL,
        token=settings.UPSTREAM_TOKEN,
        timeout_s=settings.UPSTREAM_TIMEOUT_S,
        max_pages=settings.SYNC_MAX_PAGES,
    )
    return SyncOrchestrator(
        RatingsFeedClient(feed_config),
        RatingsRefresher(engine, atomic=settings.SYNC_ATOMIC_REPLACE),
    )
