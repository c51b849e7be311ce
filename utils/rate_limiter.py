"""
Rate limiting de la API
El formulario público de solicitudes tiene un límite propio, más estricto.
"""

from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address

from config import RATE_LIMIT_DEFAULT, RATE_LIMIT_ENABLED, RATE_LIMIT_SOLICITUDES, RATE_LIMIT_STORAGE
from utils.logging_utils import log_event


limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[RATE_LIMIT_DEFAULT],
    storage_uri=RATE_LIMIT_STORAGE,  # redis:// en producción
    strategy="fixed-window",
    enabled=RATE_LIMIT_ENABLED,
)

# Decorador para el endpoint público de solicitudes
limite_solicitudes = limiter.limit(RATE_LIMIT_SOLICITUDES)


def setup_rate_limiting(app):
    """Registra limiter, handler de 429 y middleware de límites por defecto"""
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    app.add_middleware(SlowAPIMiddleware)

    log_event(
        "sistema", "sistema", "Rate limiting",
        f"habilitado={RATE_LIMIT_ENABLED} default={RATE_LIMIT_DEFAULT} solicitudes={RATE_LIMIT_SOLICITUDES}"
    )
    return limiter
