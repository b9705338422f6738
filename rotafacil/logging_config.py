"""Configuração centralizada de logging para a aplicação RotaFácil."""

import logging
import os
from pathlib import Path


LOG_FILE = Path(os.getenv('LOG_FILE', 'rotafacil.log'))


def configure_logging(level: int = logging.INFO) -> None:
    """Configura o logging apenas uma vez, evitando handlers duplicados."""
    root_logger = logging.getLogger()
    if root_logger.handlers:
        return

    LOG_FILE.parent.mkdir(parents=True, exist_ok=True)

    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.StreamHandler(),
            logging.FileHandler(LOG_FILE, encoding='utf-8')
        ]
    )


__all__ = ["configure_logging"]
