"""
Archivo de inicialización del paquete models.
Expone todas las clases para que SQLAlchemy (Base.metadata)
las detecte al importar 'models'.
"""

from .habitacion import Habitacion

from .reserva import (
    Reserva,
    SolicitudReserva,
    EstadoReservaEnum,
    EstadoSolicitudEnum
)

from .pedido import Pedido, EstadoPedidoEnum

__all__ = [
    "Habitacion",
    "Reserva", "SolicitudReserva",
    "EstadoReservaEnum", "EstadoSolicitudEnum",
    "Pedido", "EstadoPedidoEnum"
]
