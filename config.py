"""
Configuración general de la pousada
"""
import os

from dotenv import load_dotenv

load_dotenv()

# Zona horaria del hotel (define qué es "hoy" para el calendario)
HOTEL_TIMEZONE = os.getenv("HOTEL_TIMEZONE", "America/Sao_Paulo")

# CORS
CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv("CORS_ORIGINS", "http://localhost:5173,http://127.0.0.1:5173").split(",")
    if origin.strip()
]

# Calendario
CALENDAR_DEFAULT_DAYS = 30
CALENDAR_MAX_DAYS = min(int(os.getenv("CALENDAR_MAX_DAYS", "366")), 366)

# Rate limiting
RATE_LIMIT_DEFAULT = os.getenv("RATE_LIMIT_DEFAULT", "100/minute")
RATE_LIMIT_SOLICITUDES = os.getenv("RATE_LIMIT_SOLICITUDES", "10/minute")
RATE_LIMIT_STORAGE = os.getenv("REDIS_URL", "memory://")
RATE_LIMIT_ENABLED = os.getenv("RATE_LIMIT_ENABLED", "true").lower() == "true"

# Estadísticas
MESES_ESTADISTICAS = 6
