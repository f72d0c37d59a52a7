"""
Casos de uso de la aplicacion.
"""
from .sync_use_cases import SyncOrchestrator, SyncRunReport, SyncState

__all__ = ["SyncOrchestrator", "SyncRunReport", "SyncState"]
