"""
Tipos del pipeline de ratings.

Se mantienen libres de I/O para poder testearlos fácilmente.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from app.domain.entities.rating import Rating


@dataclass(frozen=True)
class FeedConfig:
    """
    Configuración inyectada del feed upstream.

    - base_url: endpoint del feed (sin querystring)
    - token: credencial estática, se envía tal cual en `Authorization`
    - timeout_s: espera máxima por página; None = sin límite
    - max_pages: tope de páginas por corrida; 0 = sin límite
    """

    base_url: str
    token: str
    timeout_s: Optional[float] = None
    max_pages: int = 10000


@dataclass(frozen=True)
class FeedPage:
    """Una página ya parseada del feed."""

    items: list[Rating] = field(default_factory=list)
    next_page: str = ""

    @property
    def is_last(self) -> bool:
        return not self.next_page
