# foyer/logging_config.py
"""
Logging estructurado (JSON) en stdout. Cada registro lleva el servicio y el
entorno para poder filtrar los logs de la API del foyer.
"""

import logging
import sys
from pythonjsonlogger import jsonlogger

from foyer.config import settings

SERVICE_NAME = "foyer-api"

# Librerías que solo interesan a partir de WARNING
QUIET_LOGGERS = ("uvicorn.access", "sqlalchemy", "aiosqlite", "asyncio")


class ContextFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        record.service = SERVICE_NAME
        record.environment = settings.environment
        return True


def setup_logging() -> logging.Logger:
    """Configura el logger raíz una sola vez (uvicorn --reload reimporta el módulo)."""
    root = logging.getLogger()
    if any(getattr(h, "_foyer", False) for h in root.handlers):
        return logging.getLogger(SERVICE_NAME)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(jsonlogger.JsonFormatter(
        fmt="%(asctime)s %(levelname)s %(name)s %(message)s %(service)s %(environment)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
    ))
    handler.addFilter(ContextFilter())
    handler._foyer = True

    root.addHandler(handler)
    root.setLevel(settings.log_level.upper())

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    return logging.getLogger(SERVICE_NAME)


logger = setup_logging()
