"""
Entidades del dominio.
"""
from app.domain.entities.rating import Rating, RatingListResponse

__all__ = [
    "Rating",
    "RatingListResponse",
]
