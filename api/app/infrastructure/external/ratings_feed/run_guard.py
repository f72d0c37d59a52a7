"""
Single-flight para corridas de sincronización.

Motivacion:
- Dos corridas simultáneas intercalan TRUNCATE/INSERT sobre la misma tabla
  y el resultado queda indefinido.
- El trigger puede llegar por HTTP, por el scheduler o por ambos a la vez.

Caracteristicas:
- Como mucho una corrida activa por proceso.
- Un trigger concurrente se RECHAZA (no se encola) con SyncInProgressError.
- No cubre varios procesos (varios workers de uvicorn o el CLI en paralelo).
"""

from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from loguru import logger

from app.shared.exceptions.sync import SyncInProgressError


class SyncRunGuard:
    """
    Guard de corrida única.

    Implementacion:
    - `asyncio.Lock` creado perezosamente (se liga al loop que lo usa).
    - La comprobación `locked()` + `acquire()` no tiene await intermedio,
      por lo que es atómica dentro del event loop.
    """

    def __init__(self) -> None:
        self._lock: Optional[asyncio.Lock] = None
        self._active_run_id: Optional[str] = None

    def _get_lock(self) -> asyncio.Lock:
        if self._lock is None:
            self._lock = asyncio.Lock()
        return self._lock

    @property
    def is_running(self) -> bool:
        return self._lock is not None and self._lock.locked()

    @property
    def active_run_id(self) -> Optional[str]:
        return self._active_run_id

    @asynccontextmanager
    async def acquire(self, run_id: str) -> AsyncIterator[None]:
        """
        Context manager async que reserva la corrida.

        Raises:
            SyncInProgressError: si ya hay otra corrida activa.

        Ejemplo:
            async with guard.acquire(run_id):
                await orchestrator._execute(...)
        """
        lock = self._get_lock()
        if lock.locked():
            logger.warning(
                f"Sync {run_id} rechazado: corrida {self._active_run_id} en curso"
            )
            raise SyncInProgressError(self._active_run_id)

        await lock.acquire()
        self._active_run_id = run_id
        try:
            yield
        finally:
            self._active_run_id = None
            lock.release()


# Guard compartido por el endpoint, el scheduler y el CLI del proceso
sync_run_guard = SyncRunGuard()
