"""
Utilidades de logging basadas en loguru.

La librería queda silenciada al importarse; la CLI (o la aplicación que
la use) llama a setup_logging para activarla.
"""

import sys
from pathlib import Path
from typing import Optional

from loguru import logger

DEFAULT_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)


def setup_logging(
    level: str = "INFO",
    format: Optional[str] = None,
    log_to_file: bool = False,
    log_file: Optional[str | Path] = None,
    rotation: str = "20 MB",
    retention: str = "1 week",
) -> None:
    """
    Configura el logging de formsteward.

    Args:
        level: Nivel mínimo a registrar
        format: Formato de los mensajes
        log_to_file: Si además de consola se escribe a archivo
        log_file: Ruta del archivo de log
        rotation: Cuándo rotar el archivo (tamaño o tiempo)
        retention: Cuánto tiempo conservar los archivos rotados
    """
    if format is None:
        format = DEFAULT_FORMAT

    logger.remove()

    logger.add(
        sys.stderr,
        level=level,
        format=format,
        colorize=True,
        backtrace=False,
        diagnose=False,
    )

    if log_to_file and log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            str(log_path),
            level=level,
            format=format,
            rotation=rotation,
            retention=retention,
            compression="zip",
        )

    logger.enable("formsteward")


def setup_logging_from_settings(settings=None) -> None:
    """Configura el logging a partir de Settings."""
    from formsteward.settings import get_settings

    settings = settings or get_settings()
    setup_logging(
        level=settings.log_level,
        log_to_file=settings.log_to_file,
        log_file=settings.get_log_file() if settings.log_to_file else None,
        rotation=settings.log_rotation,
        retention=settings.log_retention,
    )


__all__ = ["logger", "setup_logging", "setup_logging_from_settings"]
