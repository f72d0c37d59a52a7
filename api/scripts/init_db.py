"""
Script para inicializar la base de datos.

Crea la tabla `items` si no existe (mismo DDL que usa el sync en su paso 1).
"""
import asyncio
import sys
from pathlib import Path

from loguru import logger

_API_ROOT = Path(__file__).resolve().parents[1]
if str(_API_ROOT) not in sys.path:
    sys.path.insert(0, str(_API_ROOT))

from app.infrastructure.database.session import close_db, engine
from app.infrastructure.external.ratings_feed.refresher import RatingsRefresher
from app.shared.exceptions.sync import SchemaError


async def main() -> int:
    """Función principal para inicializar la base de datos."""
    logger.info("Inicializando base de datos...")

    try:
        await RatingsRefresher(engine).ensure_schema()
        logger.success("Base de datos inicializada correctamente")
        return 0
    except SchemaError as e:
        logger.error(f"Error al inicializar base de datos: {e.message}")
        return 1
    finally:
        await close_db()


if __name__ == "__main__":
    raise SystemExit(asyncio.run(main()))
