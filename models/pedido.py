"""
Modelo de Pedido del restaurante (servicio de cuarto)
Un pedido se carga a una habitación ocupada hoy.
"""

from sqlalchemy import Column, String, ForeignKey, DateTime, Numeric, Text, JSON, Index
from sqlalchemy.orm import relationship
from database.conexion import Base
from datetime import datetime
from enum import Enum
from uuid import uuid4


def _nuevo_id() -> str:
    return str(uuid4())


class EstadoPedidoEnum(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class Pedido(Base):
    __tablename__ = "pedidos"
    __table_args__ = (
        Index('idx_pedido_estado', 'estado'),
        Index('idx_pedido_habitacion', 'habitacion_id'),
    )

    id = Column(String(36), primary_key=True, default=_nuevo_id)
    habitacion_id = Column(String(36), ForeignKey("habitaciones.id"), nullable=False)

    # Copia al momento del pedido: el huésped de la habitación cambia con el tiempo
    habitacion_numero = Column(String(20), nullable=False)
    huesped_nombre = Column(String(100), nullable=True)

    items = Column(JSON, nullable=False, default=list)  # [{"id", "nombre", "precio", "categoria", "cantidad"}]
    total = Column(Numeric(12, 2), nullable=False, default=0)
    estado = Column(String(20), nullable=False, default=EstadoPedidoEnum.PENDING.value)
    notas = Column(Text, nullable=True)

    # Auditoría
    creado_por = Column(String(50), nullable=True)
    creado_en = Column(DateTime, default=datetime.utcnow, index=True)
    actualizado_en = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    habitacion = relationship("Habitacion")

    def __repr__(self):
        return f"<Pedido(id={self.id}, habitacion='{self.habitacion_numero}', estado='{self.estado}')>"
