"""
DTOs para la sincronización del feed de ratings.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class SyncResponseDTO(BaseModel):
    """Respuesta de POST /sync cuando la corrida termina en DONE."""

    message: str
    items_synced: int = Field(..., ge=0)


class SyncErrorDTO(BaseModel):
    """Error de una corrida fallida."""

    error: str
    message: str
    step: Optional[str] = None


class SyncStatusDTO(BaseModel):
    """Estado de la última corrida (GET /sync/status)."""

    run_id: Optional[str] = None
    state: str
    running: bool = False
    atomic_replace: bool = False
    fetched_count: Optional[int] = None
    inserted_count: Optional[int] = None
    started_at: Optional[datetime] = None
    finished_at: Optional[datetime] = None
    error: Optional[SyncErrorDTO] = None
