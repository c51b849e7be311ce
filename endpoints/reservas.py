"""
Endpoints de Reservas (confirmadas / agendadas) e historial
"""
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session, joinedload
from sqlalchemy.exc import SQLAlchemyError

from database import conexion
from models.reserva import Reserva
from schemas.reservas import ReservaCreate, ReservaEstadoUpdate, ReservaRead
from services.booking_service import (
    RecursoNoEncontrado, ReservaService, SeleccionRechazada, TransicionInvalida
)
from utils.logging_utils import log_event
from utils.timezone import get_hotel_today


router = APIRouter(prefix="/reservas", tags=["Reservas"])


@router.get("", response_model=List[ReservaRead])
def listar_reservas(
    habitacion_id: Optional[str] = Query(None),
    estado: Optional[str] = Query(None),
    db: Session = Depends(conexion.get_db)
):
    query = db.query(Reserva).options(joinedload(Reserva.habitacion))
    if habitacion_id:
        query = query.filter(Reserva.habitacion_id == habitacion_id)
    if estado:
        query = query.filter(Reserva.estado == estado)
    return [ReservaRead.desde_reserva(r) for r in query.order_by(Reserva.fecha_checkin).all()]


@router.get("/historial", response_model=List[ReservaRead])
def historial_reservas(
    habitacion_id: Optional[str] = Query(None),
    huesped: Optional[str] = Query(None, description="Filtra por nombre de huésped"),
    db: Session = Depends(conexion.get_db)
):
    """
    Historial de reservas, más recientes primero
    """
    return [ReservaRead.desde_reserva(r) for r in ReservaService.historial(db, habitacion_id, huesped)]


@router.post("", response_model=ReservaRead, status_code=status.HTTP_201_CREATED)
def crear_reserva(payload: ReservaCreate, usuario: str = Query("admin"), db: Session = Depends(conexion.get_db)):
    data = payload.model_dump()
    data["estado"] = payload.estado.value
    try:
        reserva = ReservaService.crear_reserva(db, data, get_hotel_today(), usuario)
        return ReservaRead.desde_reserva(reserva)

    except RecursoNoEncontrado as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except SeleccionRechazada as e:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail={"motivo": e.motivo.value, "mensaje": str(e)}
        )
    except SQLAlchemyError as e:
        db.rollback()
        log_event("reservas", usuario, "Error al crear reserva", f"error={str(e)}", nivel=logging.ERROR)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error al crear la reserva"
        )


@router.put("/{reserva_id}/estado", response_model=ReservaRead)
def cambiar_estado_reserva(
    reserva_id: str,
    payload: ReservaEstadoUpdate,
    usuario: str = Query("admin"),
    db: Session = Depends(conexion.get_db)
):
    try:
        reserva = ReservaService.cambiar_estado(db, reserva_id, payload.estado, usuario)
        return ReservaRead.desde_reserva(reserva)

    except RecursoNoEncontrado as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except TransicionInvalida as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except SQLAlchemyError as e:
        db.rollback()
        log_event("reservas", usuario, "Error al cambiar estado", f"id={reserva_id} error={str(e)}", nivel=logging.ERROR)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error al actualizar la reserva"
        )
