"""
Servicios de negocio del flujo de reservas
"""

from .booking_service import (
    SolicitudService,
    ReservaService,
    EstadisticasService,
    ReservaError,
    RecursoNoEncontrado,
    SeleccionRechazada,
    TransicionInvalida,
    intervals_for_room,
    obtener_habitacion
)
from .pedido_service import PedidoService, HabitacionNoOcupada

__all__ = [
    "SolicitudService",
    "ReservaService",
    "EstadisticasService",
    "ReservaError",
    "RecursoNoEncontrado",
    "SeleccionRechazada",
    "TransicionInvalida",
    "intervals_for_room",
    "obtener_habitacion",
    "PedidoService",
    "HabitacionNoOcupada"
]
