from typing import List, Optional
from datetime import date
from pydantic import BaseModel

from utils.availability_engine import (
    CalendarDay, DateStatus, DateStatusKind, RejectionReason, SelectionResult
)


class EstadoFechaRead(BaseModel):
    fecha: date
    estado: DateStatusKind
    huesped: Optional[str] = None

    @classmethod
    def desde_status(cls, fecha: date, status: DateStatus) -> "EstadoFechaRead":
        return cls(fecha=fecha, estado=status.kind, huesped=status.guest_name)


class ValidacionRead(EstadoFechaRead):
    permitido: bool
    motivo: Optional[RejectionReason] = None
    mensaje: Optional[str] = None

    @classmethod
    def desde_resultado(cls, fecha: date, resultado: SelectionResult) -> "ValidacionRead":
        return cls(
            fecha=fecha,
            estado=resultado.status.kind,
            huesped=resultado.status.guest_name,
            permitido=resultado.ok,
            motivo=resultado.reason,
            mensaje=resultado.message,
        )


class HabitacionResumen(BaseModel):
    id: str
    numero: str
    tipo: str


class CalendarioRead(BaseModel):
    habitacion: HabitacionResumen
    inicio: date
    fin: date
    dias: int
    calendario: List[EstadoFechaRead]

    @staticmethod
    def dias_desde(calendario: List[CalendarDay]) -> List[EstadoFechaRead]:
        return [EstadoFechaRead.desde_status(dia.fecha, dia.status) for dia in calendario]
