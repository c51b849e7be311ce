from typing import List, Optional
from datetime import datetime
from pydantic import BaseModel, Field, ConfigDict, condecimal, constr

from models.pedido import EstadoPedidoEnum


class ItemCarta(BaseModel):
    id: str
    nombre: str
    precio: condecimal(max_digits=10, decimal_places=2)
    categoria: str


class PedidoItemCreate(BaseModel):
    item_id: constr(strip_whitespace=True, min_length=1)
    cantidad: int = Field(1, ge=1, le=50)


class PedidoCreate(BaseModel):
    habitacion_id: str
    items: List[PedidoItemCreate] = Field(..., min_length=1)
    notas: Optional[str] = None


class PedidoItemRead(BaseModel):
    id: str
    nombre: str
    precio: float
    categoria: str
    cantidad: int


class PedidoEstadoUpdate(BaseModel):
    estado: EstadoPedidoEnum


class PedidoRead(BaseModel):
    id: str
    habitacion_id: str
    habitacion_numero: str
    huesped_nombre: Optional[str] = None
    items: List[PedidoItemRead]
    total: condecimal(max_digits=12, decimal_places=2)
    estado: EstadoPedidoEnum
    notas: Optional[str] = None
    creado_por: Optional[str] = None
    creado_en: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class HabitacionOcupada(BaseModel):
    """Habitación que puede recibir pedidos hoy"""
    habitacion_id: str
    numero: str
    huesped_nombre: Optional[str] = None
