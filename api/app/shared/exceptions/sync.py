"""
Excepciones del pipeline de sincronización de ratings.

Cada error identifica el paso que falló (`step`) para que el caller reciba
un mensaje atribuible. Ninguno se reintenta internamente.
"""
from typing import Any, Dict, Optional

from app.shared.exceptions.base import AppException


class SyncStep:
    """Pasos del pipeline, usados en mensajes y reportes."""

    FETCH = "fetch"
    SCHEMA = "schema"
    DISCARD = "discard"
    LOAD = "load"
    READ = "read"


class SyncException(AppException):
    """Excepción base para errores del pipeline de sincronización."""

    step: str = ""
    prefix: str = "Error de sincronizacion"

    def __init__(
        self,
        message: str,
        error_code: str = "SYNC_ERROR",
        status_code: int = 500,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            message=f"{self.prefix}: {message}",
            status_code=status_code,
            error_code=error_code,
            details={"step": self.step, **(details or {})},
        )


class UpstreamTransportError(SyncException):
    """Fallo de red o timeout al pedir una página del feed."""

    step = SyncStep.FETCH
    prefix = "Error obteniendo items desde API"

    def __init__(self, message: str, page: Optional[int] = None):
        super().__init__(message, error_code="UPSTREAM_TRANSPORT_ERROR", details={"page": page})


class UpstreamProtocolError(SyncException):
    """Status no exitoso o cuerpo de página mal formado."""

    step = SyncStep.FETCH
    prefix = "Error obteniendo items desde API"

    def __init__(
        self,
        message: str,
        page: Optional[int] = None,
        status: Optional[int] = None,
        error_code: str = "UPSTREAM_PROTOCOL_ERROR",
    ):
        super().__init__(message, error_code=error_code, details={"page": page, "status": status})


class PageLimitExceededError(UpstreamProtocolError):
    """El feed siguió devolviendo cursor más allá del límite de páginas."""

    def __init__(self, max_pages: int):
        super().__init__(
            f"el feed supero el limite de {max_pages} paginas sin terminar",
            page=max_pages,
            error_code="PAGE_LIMIT_EXCEEDED",
        )
        self.max_pages = max_pages


class SchemaError(SyncException):
    """No se pudo crear/verificar la tabla destino."""

    step = SyncStep.SCHEMA
    prefix = "Error creating table"

    def __init__(self, message: str):
        super().__init__(message, error_code="SCHEMA_ERROR")


class DiscardError(SyncException):
    """No se pudo vaciar la tabla destino."""

    step = SyncStep.DISCARD
    prefix = "Error truncating table"

    def __init__(self, message: str):
        super().__init__(message, error_code="DISCARD_ERROR")


class BulkLoadError(SyncException):
    """Fallo la carga en lote (PK duplicada, conexión caída, etc.)."""

    step = SyncStep.LOAD
    prefix = "Error insertando lote"

    def __init__(self, message: str, attempted: int = 0):
        super().__init__(message, error_code="BULK_LOAD_ERROR", details={"attempted": attempted})


class ReadScanError(SyncException):
    """Fallo la lectura de la tabla de ratings."""

    step = SyncStep.READ
    prefix = "Error obteniendo items"

    def __init__(self, message: str):
        super().__init__(message, error_code="READ_SCAN_ERROR")


class SyncInProgressError(SyncException):
    """Ya hay una sincronización activa en este proceso."""

    prefix = "Sincronizacion rechazada"

    def __init__(self, run_id: Optional[str] = None):
        super().__init__(
            "ya hay una sincronizacion en curso",
            error_code="SYNC_IN_PROGRESS",
            status_code=409,
            details={"active_run_id": run_id},
        )
