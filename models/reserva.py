"""
Modelos de Reserva y Solicitud de Reserva
Flujo: solicitud (pending) -> aprobación -> reserva (confirmed)
"""

from sqlalchemy import (
    Column, Integer, String, ForeignKey, Date, DateTime, Numeric, Text, Index
)
from sqlalchemy.orm import relationship
from database.conexion import Base
from datetime import datetime
from enum import Enum
from uuid import uuid4


def _nuevo_id() -> str:
    return str(uuid4())


# ========================================================================
# ENUMS
# ========================================================================

class EstadoReservaEnum(str, Enum):
    """Estados de una reserva (confirmed y scheduled bloquean el calendario)"""
    CONFIRMED = "confirmed"
    SCHEDULED = "scheduled"
    CANCELLED = "cancelled"
    COMPLETED = "completed"


class EstadoSolicitudEnum(str, Enum):
    """Estados de una solicitud de reserva (ninguno bloquea el calendario)"""
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


# ----------- RESERVA -----------
class Reserva(Base):
    __tablename__ = "reservas"
    __table_args__ = (
        Index('idx_reserva_habitacion', 'habitacion_id'),
        Index('idx_reserva_estado', 'estado'),
        Index('idx_reserva_fechas', 'fecha_checkin', 'fecha_checkout'),
    )

    id = Column(String(36), primary_key=True, default=_nuevo_id)
    habitacion_id = Column(String(36), ForeignKey("habitaciones.id"), nullable=False)
    solicitud_id = Column(String(36), ForeignKey("solicitudes_reserva.id"), nullable=True)

    # Fechas
    fecha_checkin = Column(Date, nullable=False)
    fecha_checkout = Column(Date, nullable=False)

    # Huésped
    huesped_nombre = Column(String(100), nullable=False)
    huesped_email = Column(String(120), nullable=True)
    huesped_telefono = Column(String(30), nullable=True)

    estado = Column(String(20), nullable=False, default=EstadoReservaEnum.CONFIRMED.value)
    total = Column(Numeric(12, 2), nullable=False, default=0)
    notas = Column(Text, nullable=True)

    # Auditoría
    creado_en = Column(DateTime, default=datetime.utcnow)
    actualizado_en = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    habitacion = relationship("Habitacion", back_populates="reservas")
    solicitud = relationship("SolicitudReserva", back_populates="reserva")

    def __repr__(self):
        return f"<Reserva(id={self.id}, habitacion_id={self.habitacion_id}, estado='{self.estado}')>"


# ----------- SOLICITUD DE RESERVA -----------
class SolicitudReserva(Base):
    __tablename__ = "solicitudes_reserva"
    __table_args__ = (
        Index('idx_solicitud_habitacion', 'habitacion_id'),
        Index('idx_solicitud_estado', 'estado'),
    )

    id = Column(String(36), primary_key=True, default=_nuevo_id)
    habitacion_id = Column(String(36), ForeignKey("habitaciones.id"), nullable=False)

    fecha_checkin = Column(Date, nullable=False)
    fecha_checkout = Column(Date, nullable=False)

    huesped_nombre = Column(String(100), nullable=False)
    huesped_email = Column(String(120), nullable=True)
    huesped_telefono = Column(String(30), nullable=True)
    cantidad_huespedes = Column(Integer, default=1)

    estado = Column(String(20), nullable=False, default=EstadoSolicitudEnum.PENDING.value)
    notas = Column(Text, nullable=True)

    creado_en = Column(DateTime, default=datetime.utcnow, index=True)
    actualizado_por = Column(String(50), nullable=True)

    habitacion = relationship("Habitacion", back_populates="solicitudes")
    reserva = relationship("Reserva", back_populates="solicitud", uselist=False)

    def __repr__(self):
        return f"<SolicitudReserva(id={self.id}, habitacion_id={self.habitacion_id}, estado='{self.estado}')>"
