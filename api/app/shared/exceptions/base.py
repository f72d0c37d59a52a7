"""
Excepción base de la aplicación.

Las excepciones del pipeline heredan de aquí; el handler global de `main.py`
decide cómo renderizarlas (JSON o texto plano).
"""
from typing import Optional, Dict, Any


class AppException(Exception):
    """
    Excepción base de la aplicación.

    Attributes:
        message: Mensaje listo para mostrar al caller
        status_code: Código de estado HTTP con el que se responde
        error_code: Código estable para clientes y logs
        details: Contexto adicional (paso, página, status upstream...)
    """

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        error_code: str = "INTERNAL_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.status_code = status_code
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)

    def to_payload(self) -> Dict[str, Any]:
        """Representación JSON usada por el handler global y los reportes."""
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details,
        }
