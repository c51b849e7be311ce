import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path

_ROOT_LOGGER = "pousada"
_LOG_FILE = Path(os.getenv("POUSADA_LOG_FILE", "pousada_logs.txt"))
_LOG_LEVEL = os.getenv("POUSADA_LOG_LEVEL", "INFO").upper()


def _configure_root() -> logging.Logger:
    root = logging.getLogger(_ROOT_LOGGER)
    if root.handlers:
        return root

    root.setLevel(getattr(logging, _LOG_LEVEL, logging.INFO))
    root.propagate = False

    try:
        handler = RotatingFileHandler(_LOG_FILE, maxBytes=1_000_000, backupCount=3, encoding="utf-8")
    except OSError:
        handler = logging.StreamHandler()

    # El área va en el nombre del logger: pousada.reservas, pousada.disponibilidad...
    handler.setFormatter(logging.Formatter("%(asctime)s | %(levelname)s | %(name)s | %(message)s"))
    root.addHandler(handler)
    return root


_configure_root()


def log_event(area: str, usuario: str, accion: str, detalle: str = "", nivel: int = logging.INFO) -> None:
    logger = logging.getLogger(f"{_ROOT_LOGGER}.{area.lower()}")
    message = f"Usuario: {usuario} | Accion: {accion}"
    if detalle:
        message += f" | Detalle: {detalle}"
    logger.log(nivel, message)
