"""Configuración de pytest y fixtures compartidos."""

import os
import sys
import tempfile
from datetime import date
from pathlib import Path

# Base SQLite en memoria y sin rate limiting: debe configurarse antes de importar la app
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ.setdefault("POUSADA_LOG_FILE", str(Path(tempfile.gettempdir()) / "pousada_test_logs.txt"))

# Agregar directorio raíz al PYTHONPATH para imports
sys.path.insert(0, str(Path(__file__).parent.parent))

import pytest
from fastapi.testclient import TestClient

from database.conexion import Base, SessionLocal, engine
from main import app

HOY = date(2024, 5, 1)


@pytest.fixture
def db_session():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def hoy(monkeypatch):
    """Fija 'hoy' en todos los endpoints que consultan el reloj del hotel"""
    import endpoints.disponibilidad
    import endpoints.estadisticas
    import endpoints.pedidos
    import endpoints.reservas
    import endpoints.solicitudes

    modulos = (
        endpoints.disponibilidad, endpoints.estadisticas, endpoints.pedidos,
        endpoints.reservas, endpoints.solicitudes,
    )
    for modulo in modulos:
        monkeypatch.setattr(modulo, "get_hotel_today", lambda: HOY)
    return HOY


@pytest.fixture
def client(db_session, hoy):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def crear_habitacion(client):
    def _crear(numero="101", tipo="Casal", precio_diaria=250):
        response = client.post("/api/rooms", json={
            "numero": numero,
            "tipo": tipo,
            "precio_diaria": precio_diaria,
            "capacidad": 2,
        })
        assert response.status_code == 201, response.text
        return response.json()
    return _crear
