"""
Endpoints de Pedidos del restaurante
"""
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError

from database import conexion
from schemas.pedidos import HabitacionOcupada, ItemCarta, PedidoCreate, PedidoEstadoUpdate, PedidoRead
from services.booking_service import RecursoNoEncontrado, TransicionInvalida
from services.pedido_service import CARTA, HabitacionNoOcupada, PedidoService
from utils.logging_utils import log_event
from utils.timezone import get_hotel_today


router = APIRouter(prefix="/pedidos", tags=["Pedidos"])


def _error_http(e: Exception) -> HTTPException:
    if isinstance(e, RecursoNoEncontrado):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))


@router.get("/carta", response_model=List[ItemCarta])
def obtener_carta():
    return CARTA


@router.get("/habitaciones-ocupadas", response_model=List[HabitacionOcupada])
def listar_habitaciones_ocupadas(db: Session = Depends(conexion.get_db)):
    """
    Habitaciones que pueden recibir pedidos: ocupadas hoy por una reserva confirmada
    """
    return PedidoService.habitaciones_ocupadas(db, get_hotel_today())


@router.get("", response_model=List[PedidoRead])
def listar_pedidos(
    estado: Optional[str] = Query(None, description="pending | completed | cancelled"),
    limite: Optional[int] = Query(None, ge=1, le=500),
    db: Session = Depends(conexion.get_db)
):
    return PedidoService.listar(db, estado, limite)


@router.post("", response_model=PedidoRead, status_code=status.HTTP_201_CREATED)
def crear_pedido(payload: PedidoCreate, usuario: str = Query("admin"), db: Session = Depends(conexion.get_db)):
    try:
        return PedidoService.crear_pedido(db, payload.model_dump(), get_hotel_today(), usuario)

    except (RecursoNoEncontrado, HabitacionNoOcupada) as e:
        raise _error_http(e)
    except SQLAlchemyError as e:
        db.rollback()
        log_event("pedidos", usuario, "Error al crear pedido", f"error={str(e)}", nivel=logging.ERROR)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error al registrar el pedido"
        )


@router.put("/{pedido_id}/estado", response_model=PedidoRead)
def cambiar_estado_pedido(
    pedido_id: str,
    payload: PedidoEstadoUpdate,
    usuario: str = Query("admin"),
    db: Session = Depends(conexion.get_db)
):
    try:
        return PedidoService.cambiar_estado(db, pedido_id, payload.estado, usuario)

    except (RecursoNoEncontrado, TransicionInvalida) as e:
        raise _error_http(e)
    except SQLAlchemyError as e:
        db.rollback()
        log_event("pedidos", usuario, "Error al cambiar estado", f"id={pedido_id} error={str(e)}", nivel=logging.ERROR)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error al actualizar el pedido"
        )


@router.delete("/{pedido_id}", status_code=status.HTTP_204_NO_CONTENT)
def eliminar_pedido(pedido_id: str, usuario: str = Query("admin"), db: Session = Depends(conexion.get_db)):
    try:
        PedidoService.eliminar_pedido(db, pedido_id, usuario)

    except RecursoNoEncontrado as e:
        raise _error_http(e)
    except SQLAlchemyError as e:
        db.rollback()
        log_event("pedidos", usuario, "Error al eliminar pedido", f"id={pedido_id} error={str(e)}", nivel=logging.ERROR)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error al eliminar el pedido"
        )
