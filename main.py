import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import SQLAlchemyError

from config import CORS_ORIGINS
from database.conexion import Base, engine
import models  # 👈 asegura que todos los modelos estén registrados
from utils.logging_utils import log_event
from utils.rate_limiter import setup_rate_limiting

try:
    Base.metadata.create_all(bind=engine)
    log_event("sistema", "sistema", "Tablas creadas (o ya existian)")
except SQLAlchemyError as e:
    log_event("sistema", "sistema", "Error creando tablas", f"error={e}", nivel=logging.ERROR)

app = FastAPI(title="Pousada API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
setup_rate_limiting(app)

from endpoints import habitaciones, disponibilidad, reservas, solicitudes, estadisticas, pedidos
app.include_router(habitaciones.router)
app.include_router(disponibilidad.router)
app.include_router(reservas.router)
app.include_router(solicitudes.router)
app.include_router(estadisticas.router)
app.include_router(pedidos.router)


@app.get("/")
def read_root():
    return {"message": "Pousada API"}
