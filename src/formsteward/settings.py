"""
Configuración de formsteward.

Los valores se leen de variables de entorno con prefijo FORMSTEWARD_
(por ejemplo FORMSTEWARD_LOG_LEVEL=DEBUG).
"""

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Ajustes globales de la librería y de la CLI."""

    model_config = SettingsConfigDict(env_prefix="FORMSTEWARD_", extra="ignore")

    # Logging
    log_level: str = "INFO"
    log_to_file: bool = False
    log_file: Optional[Path] = None
    log_rotation: str = "20 MB"
    log_retention: str = "1 week"

    # Servicios externos
    fetch_timeout_s: float = Field(default=10.0, gt=0, description="Timeout HTTP (s)")

    # Dependencias: codificar el valor del padre al sustituirlo en la URL
    encode_placeholder_values: bool = True

    # Tema de la CLI
    theme: str = "default"

    def get_log_file(self) -> Path:
        """Ruta del archivo de log (por defecto en el directorio actual)."""
        if self.log_file is not None:
            return self.log_file
        return Path.cwd() / "formsteward.log"


@lru_cache
def get_settings() -> Settings:
    """Obtiene la configuración (cacheada)."""
    return Settings()
