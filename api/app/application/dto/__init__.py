"""
Data Transfer Objects (DTOs) para la capa de aplicacion.
"""
from .sync_dto import SyncErrorDTO, SyncResponseDTO, SyncStatusDTO

__all__ = [
    "SyncErrorDTO",
    "SyncResponseDTO",
    "SyncStatusDTO",
]
