"""
CLI: feed de ratings -> tabla items (full refresh, una corrida).

Uso recomendado:
  - Ejecutar como job (cron/systemd timer) cuando no se usa el scheduler del API.
  - No se reintenta: si falla, el siguiente disparo del cron es el reintento.

Variables de entorno requeridas:
  - UPSTREAM_URL  (alias historico: url)
  - UPSTREAM_TOKEN (alias historico: token)
  - DATABASE_URL  (alias historico: dsn)

Ejecución:
  python scripts/sync_ratings.py
  python scripts/sync_ratings.py --atomic
  python scripts/sync_ratings.py --no-atomic
  python scripts/sync_ratings.py --schema-only

Codigos de salida: 0 = DONE, 1 = FAILED, 2 = ya hay una corrida en curso.

Nota: el single-flight es por proceso; este CLI no se coordina con un API
que esté sincronizando al mismo tiempo.
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path
from typing import Optional, Sequence

from loguru import logger
from dotenv import load_dotenv

# Permite ejecutar este script desde cualquier cwd sin configurar PYTHONPATH.
# La carpeta "api" contiene el paquete raíz `app/`.
_API_ROOT = Path(__file__).resolve().parents[1]
if str(_API_ROOT) not in sys.path:
    sys.path.insert(0, str(_API_ROOT))

# Cargar variables desde .env si existe (api/.env o raiz del repo).
load_dotenv(_API_ROOT / ".env", override=False)
load_dotenv(_API_ROOT.parent / ".env", override=False)

from sqlalchemy.dialects import postgresql
from sqlalchemy.schema import CreateTable

from app.application.use_cases.sync_use_cases import build_from_settings
from app.core.config import settings
from app.infrastructure.database.models import RatingModel
from app.infrastructure.database.session import build_engine
from app.shared.exceptions.sync import SyncInProgressError


def _schema_sql() -> str:
    ddl = CreateTable(RatingModel.__table__, if_not_exists=True)
    return str(ddl.compile(dialect=postgresql.dialect())).strip() + ";"


async def _run(atomic: bool) -> int:
    run_settings = settings.model_copy(update={"SYNC_ATOMIC_REPLACE": atomic})
    engine = build_engine(run_settings.effective_database_url)
    try:
        orchestrator = build_from_settings(run_settings, engine)
        try:
            report = await orchestrator.run()
        except SyncInProgressError as e:
            logger.warning(e.message)
            return 2

        if report.error is not None:
            logger.error(f"Sync FAILED: {report.error.message}")
            return 1

        logger.info(
            f"Sync OK: fetched={report.fetched_count}, inserted={report.inserted_count}"
        )
        return 0
    finally:
        await engine.dispose()


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Full refresh del feed de ratings")
    parser.add_argument(
        "--schema-only",
        action="store_true",
        help="Solo imprime el DDL de la tabla items (no ejecuta sync).",
    )
    parser.add_argument(
        "--atomic",
        action=argparse.BooleanOptionalAction,
        default=settings.SYNC_ATOMIC_REPLACE,
        help=(
            "Descarte y carga en una sola transaccion: si la carga falla, "
            "la tabla conserva los datos anteriores. --no-atomic fuerza el modo "
            "historico aunque SYNC_ATOMIC_REPLACE=true."
        ),
    )
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = _build_parser().parse_args(argv)

    if args.schema_only:
        print(_schema_sql())
        return 0

    logger.info("Iniciando sync feed de ratings -> items...")
    return asyncio.run(_run(args.atomic))


if __name__ == "__main__":
    raise SystemExit(main())
