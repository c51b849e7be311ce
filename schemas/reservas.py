from typing import Optional
from datetime import date, datetime
from pydantic import BaseModel, Field, EmailStr, condecimal, constr, model_validator, ConfigDict

from models.reserva import EstadoReservaEnum, EstadoSolicitudEnum


class HuespedBase(BaseModel):
    huesped_nombre: constr(strip_whitespace=True, min_length=1, max_length=100)
    huesped_email: Optional[EmailStr] = None
    huesped_telefono: Optional[constr(strip_whitespace=True, max_length=30)] = None


class RangoFechas(BaseModel):
    fecha_checkin: date
    fecha_checkout: date

    @model_validator(mode="after")
    def validar_rango(self):
        # checkin == checkout es válido (estadía de un día)
        if self.fecha_checkout < self.fecha_checkin:
            raise ValueError("fecha_checkout no puede ser anterior a fecha_checkin")
        return self


# ----------- SOLICITUDES -----------

class SolicitudCreate(HuespedBase, RangoFechas):
    habitacion_id: str
    cantidad_huespedes: int = Field(1, ge=1)
    notas: Optional[str] = None


class SolicitudRead(BaseModel):
    id: str
    habitacion_id: str
    fecha_checkin: date
    fecha_checkout: date
    huesped_nombre: str
    huesped_email: Optional[str] = None
    huesped_telefono: Optional[str] = None
    cantidad_huespedes: Optional[int] = 1
    estado: EstadoSolicitudEnum
    notas: Optional[str] = None
    creado_en: Optional[datetime] = None
    actualizado_por: Optional[str] = None
    habitacion_numero: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


# ----------- RESERVAS -----------

class ReservaCreate(HuespedBase, RangoFechas):
    habitacion_id: str
    estado: EstadoReservaEnum = EstadoReservaEnum.CONFIRMED
    total: condecimal(ge=0, max_digits=12, decimal_places=2) = 0
    notas: Optional[str] = None

    @model_validator(mode="after")
    def validar_estado_inicial(self):
        if self.estado not in (EstadoReservaEnum.CONFIRMED, EstadoReservaEnum.SCHEDULED):
            raise ValueError("Una reserva nueva sólo puede ser confirmed o scheduled")
        return self


class ReservaEstadoUpdate(BaseModel):
    estado: EstadoReservaEnum


class ReservaRead(BaseModel):
    id: str
    habitacion_id: str
    solicitud_id: Optional[str] = None
    fecha_checkin: date
    fecha_checkout: date
    huesped_nombre: str
    huesped_email: Optional[str] = None
    huesped_telefono: Optional[str] = None
    estado: EstadoReservaEnum
    total: Optional[condecimal(max_digits=12, decimal_places=2)] = None
    notas: Optional[str] = None
    creado_en: Optional[datetime] = None
    actualizado_en: Optional[datetime] = None
    # Campos calculados para el frontend
    habitacion_numero: Optional[str] = None
    habitacion_tipo: Optional[str] = None
    numero_noches: Optional[int] = None

    model_config = ConfigDict(from_attributes=True)

    @classmethod
    def desde_reserva(cls, reserva) -> "ReservaRead":
        data = cls.model_validate(reserva)
        if reserva.habitacion is not None:
            data.habitacion_numero = reserva.habitacion.numero
            data.habitacion_tipo = reserva.habitacion.tipo
        # checkin == checkout cuenta como una diaria
        data.numero_noches = max((reserva.fecha_checkout - reserva.fecha_checkin).days, 1)
        return data
