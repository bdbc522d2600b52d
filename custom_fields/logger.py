# custom_fields/logger.py
import logging
from typing import Optional

from custom_fields.config.settings import Settings

# Formato del log: Tiempo | Nivel | Módulo | Mensaje
LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

_configured_level: Optional[int] = None


def _resolve_level(level_name: str) -> int:
    """Traduce el nombre configurado a un nivel de logging (INFO por defecto)."""
    level = logging.getLevelName(level_name.upper())
    return level if isinstance(level, int) else logging.INFO


def configure_logging(level_name: Optional[str] = None) -> int:
    """
    Configura el logging raíz una sola vez.

    Args:
        level_name: Nivel explícito; si es None se toma de Settings (CUSTOM_FIELDS_LOG_LEVEL).

    Returns:
        Nivel numérico aplicado.
    """
    global _configured_level

    level = _resolve_level(level_name or Settings().log_level)
    if not logging.getLogger().handlers:
        logging.basicConfig(level=level, format=LOG_FORMAT)
    _configured_level = level
    return level


def get_logger(name: str) -> logging.Logger:
    """
    Return a configured logger. Initializes basicConfig once.
    """
    if _configured_level is None:
        configure_logging()
    logger = logging.getLogger(name)
    logger.setLevel(_configured_level)
    return logger
