"""
Cliente HTTP del feed de ratings (Paginator).

Requisitos cubiertos:
- requests
- paginación por cursor opaco (`next_page`)
- credencial estática en cada petición
- sin reintentos: cualquier fallo aborta la corrida completa
"""

from __future__ import annotations

from typing import Any, Optional

import requests
from loguru import logger
from pydantic import ValidationError

from app.domain.entities.rating import Rating
from app.shared.exceptions.sync import (
    PageLimitExceededError,
    UpstreamProtocolError,
    UpstreamTransportError,
)

from .types import FeedConfig, FeedPage


def parse_page(payload: Any, *, page: int) -> FeedPage:
    """
    Valida el cuerpo JSON de una página: `{items: [...], next_page: str}`.

    `items` ausente o null se trata como página vacía; `next_page`
    ausente o null marca el final del feed.
    """
    if not isinstance(payload, dict):
        raise UpstreamProtocolError("la respuesta no es un objeto JSON", page=page)

    raw_items = payload.get("items")
    if raw_items is None:
        raw_items = []
    if not isinstance(raw_items, list):
        raise UpstreamProtocolError("'items' no es una lista", page=page)

    next_page = payload.get("next_page")
    if next_page is None:
        next_page = ""
    if not isinstance(next_page, str):
        raise UpstreamProtocolError("'next_page' no es un string", page=page)

    items: list[Rating] = []
    for idx, raw in enumerate(raw_items):
        if not isinstance(raw, dict):
            raise UpstreamProtocolError(f"item {idx} no es un objeto", page=page)
        try:
            items.append(Rating.model_validate(raw))
        except ValidationError as e:
            raise UpstreamProtocolError(
                f"item {idx} invalido: "
                f"{e.errors(include_url=False, include_context=False, include_input=False)}",
                page=page,
            ) from e

    return FeedPage(items=items, next_page=next_page)


class RatingsFeedClient:
    """
    Recorre el feed de ratings página a página hasta que el cursor venga vacío.

    Importante:
    - No interpreta el cursor: lo devuelve tal cual en `?next_page=`.
    - Acumula todo en memoria y solo entrega el resultado si el feed terminó
      limpio; ante un error el caller no ve registros parciales.
    - El límite de páginas (`max_pages`) es un tope defensivo; 0 lo desactiva.
    """

    def __init__(
        self,
        config: FeedConfig,
        *,
        session: Optional[requests.Session] = None,
    ) -> None:
        self._config = config
        # Una sesion propia se cierra al terminar cada fetch_all; una inyectada no
        self._owns_session = session is None
        self._session = session or requests.Session()

    def fetch_page(self, cursor: str = "", *, page: int = 1) -> FeedPage:
        """Pide una página. Cursor vacío = primera página."""
        params = {"next_page": cursor} if cursor else None
        headers = {
            "Authorization": self._config.token,
            "Content-Type": "application/json",
        }

        try:
            resp = self._session.request(
                method="GET",
                url=self._config.base_url,
                params=params,
                headers=headers,
                timeout=self._config.timeout_s,
            )
        except requests.RequestException as e:
            raise UpstreamTransportError(f"error making request: {e}", page=page) from e

        if resp.status_code != 200:
            raise UpstreamProtocolError(
                f"API returned status {resp.status_code}: {resp.text}",
                page=page,
                status=resp.status_code,
            )

        try:
            payload = resp.json()
        except ValueError as e:
            raise UpstreamProtocolError(f"error parsing response JSON: {e}", page=page) from e

        return parse_page(payload, page=page)

    def fetch_all(self) -> list[Rating]:
        """
        Trae todas las páginas del feed.

        Returns:
            Lista de Rating en orden de página y de aparición dentro de cada página.

        Raises:
            UpstreamTransportError: fallo de red en alguna página
            UpstreamProtocolError: status no exitoso o cuerpo mal formado
            PageLimitExceededError: el feed no terminó dentro de `max_pages`
        """
        try:
            all_items, pages = self._walk_pages()
        finally:
            if self._owns_session:
                self._session.close()

        logger.info(f"Feed recorrido: {pages} pagina(s), {len(all_items)} items")
        return all_items

    def _walk_pages(self) -> tuple[list[Rating], int]:
        all_items: list[Rating] = []
        cursor = ""
        page = 0

        while True:
            if self._config.max_pages and page >= self._config.max_pages:
                logger.error(
                    f"Feed sin fin tras {page} paginas ({len(all_items)} items acumulados). Abortando."
                )
                raise PageLimitExceededError(self._config.max_pages)

            page += 1
            result = self.fetch_page(cursor, page=page)
            all_items.extend(result.items)
            logger.debug(f"Pagina {page}: {len(result.items)} items (acumulados: {len(all_items)})")

            if result.is_last:
                return all_items, page
            cursor = result.next_page
