"""
Modelos de base de datos (ORM).
"""
from sqlalchemy import Column, DateTime, String

from app.infrastructure.database.session import Base


class RatingModel(Base):
    """
    Modelo de base de datos para eventos de rating de analistas.

    La identidad del registro es (ticker, time). Los precios objetivo se
    guardan como texto formateado, tal como llegan del feed.
    """

    __tablename__ = "items"

    ticker = Column(String, primary_key=True)
    target_from = Column(String, nullable=True)
    target_to = Column(String, nullable=True)
    company = Column(String, nullable=True)
    action = Column(String, nullable=True)
    brokerage = Column(String, nullable=True)
    rating_from = Column(String, nullable=True)
    rating_to = Column(String, nullable=True)
    time = Column(DateTime(timezone=True), primary_key=True)

    def __repr__(self):
        return f"<Rating(ticker={self.ticker}, time={self.time}, action={self.action})>"
