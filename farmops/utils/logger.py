"""
Logger configuration for FarmOps API.

Proporciona configuración centralizada de logging con formato consistente
y niveles apropiados según el ambiente (local/production).

Características:
- Nivel DEBUG en local, LOG_LEVEL en el resto
- Handler a stdout
- Formato: [TIMESTAMP] [LEVEL] [MODULE] MESSAGE
"""

import logging
import sys
from farmops.config import config


def setup_logger() -> None:
    """
    Configura logging global del sistema.

    - ENVIRONMENT=local → DEBUG (máxima verbosidad para desarrollo)
    - Otros ambientes → nivel de LOG_LEVEL (INFO por defecto)

    Formato de log:
        [2026-10-18 14:30:00] [INFO] [farmops.services.lifecycle_service] Transition applied ...

    Usage:
        >>> from farmops.utils.logger import setup_logger
        >>> setup_logger()
        >>> logger = logging.getLogger(__name__)
        >>> logger.info("API iniciada correctamente")
    """
    if config.ENVIRONMENT == "local":
        level = logging.DEBUG
    else:
        level = logging.getLevelName(config.LOG_LEVEL.upper())
        if not isinstance(level, int):
            level = logging.INFO

    logging.basicConfig(
        level=level,
        format='[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S',
        handlers=[logging.StreamHandler(sys.stdout)]
    )

    logger = logging.getLogger(__name__)
    logger.info(f"Logging configurado: nivel={logging.getLevelName(level)}, ambiente={config.ENVIRONMENT}")


def get_logger(name: str) -> logging.Logger:
    """
    Factory de loggers por módulo.

    Args:
        name: Nombre del módulo (típicamente __name__).

    Returns:
        Logger configurado listo para uso.

    Note:
        setup_logger() debe ser llamado antes, típicamente en el startup de FastAPI.
    """
    return logging.getLogger(name)
