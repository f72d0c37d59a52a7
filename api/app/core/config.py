"""
Configuracion central de la aplicacion.
Gestiona variables de entorno y configuraciones globales.

Los nombres historicos del despliegue anterior (dsn, url, token, portback,
urlfront) se siguen aceptando como alias de las variables nuevas.
"""
import json
from typing import List, Optional
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import AliasChoices, Field, computed_field


class Settings(BaseSettings):
    """
    Clase de configuracion de la aplicacion.
    Lee variables de entorno y proporciona valores por defecto.

    - DATABASE_URL se puede especificar completa o por componentes
    - UPSTREAM_URL / UPSTREAM_TOKEN identifican el feed de ratings
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",  # Ignorar campos extra del .env
        populate_by_name=True,
    )

    # Configuracion de la aplicacion
    APP_NAME: str = Field(default="Analyst Ratings Sync")
    APP_VERSION: str = Field(default="1.0.0")
    DEBUG: bool = Field(default=False)
    ENVIRONMENT: str = Field(default="production")

    # Configuracion del servidor
    HOST: str = Field(default="0.0.0.0")
    PORT: int = Field(default=8080, validation_alias=AliasChoices("PORT", "portback"))

    # Base de datos - Componentes separados
    DATABASE_HOST: str = Field(default="localhost")
    DATABASE_PORT: int = Field(default=26257)
    DATABASE_USER: str = Field(default="root")
    DATABASE_PASSWORD: str = Field(default="")
    DATABASE_NAME: str = Field(default="defaultdb")

    # Base de datos - URL completa (override de componentes si se proporciona)
    DATABASE_URL: str = Field(default="", validation_alias=AliasChoices("DATABASE_URL", "dsn"))
    DB_POOL_SIZE: int = Field(default=5)
    DB_MAX_OVERFLOW: int = Field(default=10)

    # Feed de ratings (origen de la sincronizacion)
    UPSTREAM_URL: str = Field(default="", validation_alias=AliasChoices("UPSTREAM_URL", "url"))
    UPSTREAM_TOKEN: str = Field(default="", validation_alias=AliasChoices("UPSTREAM_TOKEN", "token"))
    # Sin valor: la peticion de cada pagina espera indefinidamente (comportamiento historico)
    UPSTREAM_TIMEOUT_S: Optional[float] = Field(default=None)

    # Sincronizacion
    SYNC_MAX_PAGES: int = Field(default=10000, ge=0)
    SYNC_ATOMIC_REPLACE: bool = Field(default=False)
    SYNC_INTERVAL_MINUTES: int = Field(default=0, ge=0)

    # CORS (acepta lista JSON, lista separada por comas o "*")
    CORS_ORIGINS: str = Field(default="*", validation_alias=AliasChoices("CORS_ORIGINS", "urlfront"))

    # Logging
    LOG_LEVEL: str = Field(default="INFO")
    LOG_FILE: str = Field(default="logs/app.log")

    @computed_field
    @property
    def effective_database_url(self) -> str:
        """
        Retorna la URL de base de datos efectiva.
        Si DATABASE_URL esta definida, la usa directamente (normalizada a asyncpg).
        Si no, construye la URL desde los componentes individuales.
        """
        if self.DATABASE_URL:
            return normalize_async_dsn(self.DATABASE_URL)
        return (
            f"postgresql+asyncpg://{self.DATABASE_USER}:{self.DATABASE_PASSWORD}"
            f"@{self.DATABASE_HOST}:{self.DATABASE_PORT}/{self.DATABASE_NAME}"
        )


def normalize_async_dsn(dsn: str) -> str:
    """
    Normaliza DSNs estilo libpq/pgx hacia el dialecto async de SQLAlchemy.

    Ejemplos:
    - postgres://user@host:26257/db        -> postgresql+asyncpg://user@host:26257/db
    - postgresql://user@host/db            -> postgresql+asyncpg://user@host/db
    - postgresql+asyncpg://...             -> sin cambios
    - sqlite+aiosqlite:///:memory:         -> sin cambios
    """
    if "://" not in dsn:
        return dsn

    scheme, rest = dsn.split("://", 1)
    if scheme in ("postgres", "postgresql", "cockroachdb"):
        scheme = "postgresql+asyncpg"
    return f"{scheme}://{rest}"


def get_cors_origins(cors_string: str) -> List[str]:
    """
    Parsea la configuracion de CORS.
    Acepta "*" para todos los origenes o una lista JSON.
    """
    if cors_string == "*":
        return ["*"]
    try:
        return json.loads(cors_string)
    except json.JSONDecodeError:
        # Si no es JSON valido, retornar como lista simple
        return [origin.strip() for origin in cors_string.split(",") if origin.strip()]


# Instancia global de configuracion
settings = Settings()
