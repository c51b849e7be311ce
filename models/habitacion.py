"""
Modelo de Habitación (quarto) de la pousada
"""

from sqlalchemy import Column, Integer, String, DateTime, Boolean, Numeric, Text, Index
from sqlalchemy.orm import relationship
from database.conexion import Base
from datetime import datetime
from uuid import uuid4


def _nuevo_id() -> str:
    return str(uuid4())


class Habitacion(Base):
    """
    Habitación reservable
    - id opaco (UUID en texto)
    - numero visible, único
    - tipo = categoría libre (Casal, Suite, Família...)
    """
    __tablename__ = "habitaciones"

    id = Column(String(36), primary_key=True, default=_nuevo_id)
    numero = Column(String(20), nullable=False, unique=True, index=True)
    tipo = Column(String(50), nullable=False)
    precio_diaria = Column(Numeric(10, 2), nullable=False, default=0)
    capacidad = Column(Integer, nullable=False, default=1)
    descripcion = Column(Text, nullable=True)

    # Control
    activo = Column(Boolean, default=True, nullable=False)

    # Auditoría
    creado_en = Column(DateTime, default=datetime.utcnow)
    actualizado_en = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relaciones
    reservas = relationship("Reserva", back_populates="habitacion")
    solicitudes = relationship("SolicitudReserva", back_populates="habitacion")

    __table_args__ = (
        Index('idx_habitacion_tipo', 'tipo'),
    )

    def __repr__(self):
        return f"<Habitacion(id={self.id}, numero='{self.numero}', tipo='{self.tipo}')>"
