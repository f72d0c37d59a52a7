"""
Utilidades para manejo de fechas y horas.

El feed entrega timestamps RFC3339 con 'Z' y hasta nanosegundos
(p.ej. "2025-01-13T00:30:05.813548892Z"); Python solo conserva microsegundos.
"""
import re
from datetime import datetime, timezone


# Fraccion de segundos con mas de 6 digitos (nanosegundos del feed)
_LONG_FRACTION = re.compile(r"(\.\d{6})\d+")


class DateTimeUtils:
    """Clase de utilidades para operaciones con fechas y horas."""

    @staticmethod
    def now_utc() -> datetime:
        """Obtiene la fecha y hora actual en UTC."""
        return datetime.now(timezone.utc)

    @staticmethod
    def ensure_utc(dt: datetime) -> datetime:
        """
        Normaliza datetime a UTC (aware).

        Los naive se interpretan como UTC: SQLite los devuelve sin zona.
        """
        if dt.tzinfo is None:
            return dt.replace(tzinfo=timezone.utc)
        return dt.astimezone(timezone.utc)

    @staticmethod
    def parse_feed_timestamp(value: str) -> datetime:
        """
        Convierte un timestamp ISO 8601 del feed a datetime UTC.

        Args:
            value: String ISO 8601 (acepta 'Z', offsets y fracciones largas)

        Returns:
            datetime: Instante aware en UTC

        Raises:
            ValueError: Si el string no es ISO 8601 valido
        """
        if not isinstance(value, str) or not value.strip():
            raise ValueError("timestamp vacio")
        normalized = value.strip().replace("Z", "+00:00").replace("z", "+00:00")
        normalized = _LONG_FRACTION.sub(r"\1", normalized)
        return DateTimeUtils.ensure_utc(datetime.fromisoformat(normalized))

    @staticmethod
    def to_iso_z(dt: datetime) -> str:
        """
        Serializa un datetime a ISO 8601 en UTC con sufijo 'Z'.

        Args:
            dt: Objeto datetime (naive = UTC)

        Returns:
            str: Fecha en formato "YYYY-MM-DDTHH:MM:SS[.ffffff]Z"
        """
        return DateTimeUtils.ensure_utc(dt).isoformat().replace("+00:00", "Z")
