"""Configuração centralizada de logging."""

import logging
import logging.config
import sys
from pathlib import Path

LOGGER_NAME = "http_shortcuts"

# Bibliotecas de transporte: só avisos, para não repetir cada requisição
QUIET_LOGGERS = ("httpx", "httpcore")

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _file_handler(log_file: str | Path, level: str) -> dict:
    log_path = Path(log_file)
    log_path.parent.mkdir(parents=True, exist_ok=True)
    return {
        "class": "logging.handlers.RotatingFileHandler",
        "level": level,
        "formatter": "standard",
        "filename": str(log_path),
        "maxBytes": 5_242_880,  # 5MB
        "backupCount": 3,
        "encoding": "utf-8",
    }


def setup_logging(
    level: str = "WARNING",
    log_file: str | Path | None = None,
    format: str | None = None,
) -> None:
    """
    Configura o logging do pacote e dos clientes de transporte.

    Logs vão para stderr, deixando stdout livre para a saída da CLI.

    Args:
        level: Nível de log do pacote (DEBUG, INFO, WARNING, ERROR)
        log_file: Arquivo rotativo adicional (None para apenas stderr)
        format: Formato personalizado dos logs
    """
    level = level.upper()
    handlers = {
        "console": {
            "class": "logging.StreamHandler",
            "level": level,
            "formatter": "standard",
            "stream": sys.stderr,
        },
    }
    if log_file:
        handlers["file"] = _file_handler(log_file, level)

    names = list(handlers)
    loggers = {
        LOGGER_NAME: {"handlers": names, "level": level, "propagate": False},
    }
    for name in QUIET_LOGGERS:
        loggers[name] = {"handlers": names, "level": "WARNING", "propagate": False}

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "standard": {
                    "format": format or DEFAULT_FORMAT,
                    "datefmt": "%Y-%m-%d %H:%M:%S",
                },
            },
            "handlers": handlers,
            "loggers": loggers,
        }
    )

    logging.getLogger(LOGGER_NAME).debug(
        f"Logging configurado (level: {level}, arquivo: {log_file})"
    )


def get_logger(name: str) -> logging.Logger:
    """Retorna logger com nome qualificado (geralmente __name__)."""
    return logging.getLogger(name)
