from typing import List
from datetime import date
from pydantic import BaseModel


class EstadisticaMensual(BaseModel):
    mes: str  # YYYY-MM
    reservas: int
    ingresos: float


class EstadisticasRead(BaseModel):
    fecha: date
    total_habitaciones: int
    total_reservas: int
    solicitudes_pendientes: int
    habitaciones_ocupadas: int
    tasa_ocupacion: float
    ingresos_totales: float
    mensual: List[EstadisticaMensual]
