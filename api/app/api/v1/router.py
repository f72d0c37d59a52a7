"""
Router principal de la API.
Agrupa todos los endpoints expuestos al dashboard.

Las rutas se montan en la raiz (/item, /sync) porque el dashboard las
consume asi.
"""
from fastapi import APIRouter

from app.api.v1.endpoints import items, sync


# Router principal de la API
api_router = APIRouter()

# Incluir routers de endpoints especificos
api_router.include_router(items.router)
api_router.include_router(sync.router)
