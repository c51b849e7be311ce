"""
Endpoints para consulta de disponibilidad de habitaciones
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError

from config import CALENDAR_DEFAULT_DAYS, CALENDAR_MAX_DAYS
from database import conexion
from schemas.disponibilidad import CalendarioRead, EstadoFechaRead, HabitacionResumen, ValidacionRead
from services.booking_service import RecursoNoEncontrado, intervals_for_room, obtener_habitacion
from utils.availability_engine import (
    InvalidDateError, build_calendar, classify, parse_to_date, validate_selection
)
from utils.logging_utils import log_event
from utils.timezone import get_hotel_today


router = APIRouter(prefix="/disponibilidad", tags=["Disponibilidad"])


def _fecha_o_hoy(fecha: Optional[str]):
    if fecha is None:
        return get_hotel_today()
    return parse_to_date(fecha)


def _cargar(db: Session, room_id: str):
    try:
        habitacion = obtener_habitacion(db, room_id)
    except RecursoNoEncontrado as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return habitacion, intervals_for_room(db, room_id)


@router.get("/{room_id}", response_model=EstadoFechaRead)
def consultar_fecha(
    room_id: str,
    fecha: Optional[str] = Query(None, description="Fecha a consultar YYYY-MM-DD (default: hoy)"),
    db: Session = Depends(conexion.get_db)
):
    """
    Estado de una fecha para la habitación: past, booked, scheduled o available
    """
    try:
        dia = _fecha_o_hoy(fecha)
        _, intervals = _cargar(db, room_id)
        resultado = classify(dia, room_id, intervals, get_hotel_today())
        return EstadoFechaRead.desde_status(dia, resultado)

    except HTTPException:
        raise
    except InvalidDateError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except SQLAlchemyError as e:
        log_event("disponibilidad", "admin", "Error al consultar fecha", f"error={str(e)}", nivel=logging.ERROR)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error al consultar disponibilidad"
        )


@router.get("/{room_id}/validar", response_model=ValidacionRead)
def validar_seleccion(
    room_id: str,
    fecha: str = Query(..., description="Fecha elegida en el calendario YYYY-MM-DD"),
    db: Session = Depends(conexion.get_db)
):
    """
    Valida si la fecha puede iniciar una reserva.
    Un rechazo se devuelve con 200 y permitido=false: no es un error.
    """
    try:
        dia = parse_to_date(fecha)
        _, intervals = _cargar(db, room_id)
        resultado = validate_selection(dia, room_id, intervals, get_hotel_today())

        log_event(
            "disponibilidad", "admin", "Validar selección",
            f"habitacion_id={room_id} fecha={dia} permitido={resultado.ok}"
        )
        return ValidacionRead.desde_resultado(dia, resultado)

    except HTTPException:
        raise
    except InvalidDateError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except SQLAlchemyError as e:
        log_event("disponibilidad", "admin", "Error al validar selección", f"error={str(e)}", nivel=logging.ERROR)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error al validar la fecha"
        )


@router.get("/{room_id}/calendario", response_model=CalendarioRead)
def obtener_calendario(
    room_id: str,
    fecha_inicio: Optional[str] = Query(None, description="Primer día del calendario (default: hoy)"),
    dias: int = Query(CALENDAR_DEFAULT_DAYS, ge=1, le=CALENDAR_MAX_DAYS, description="Cantidad de días"),
    db: Session = Depends(conexion.get_db)
):
    """
    Calendario de disponibilidad de una habitación, un estado por día
    """
    try:
        inicio = _fecha_o_hoy(fecha_inicio)
        habitacion, intervals = _cargar(db, room_id)
        calendario = build_calendar(room_id, intervals, inicio, dias, get_hotel_today())

        log_event(
            "disponibilidad", "admin", "Calendario de disponibilidad",
            f"habitacion_id={room_id} desde={inicio} dias={dias}"
        )

        return CalendarioRead(
            habitacion=HabitacionResumen(id=habitacion.id, numero=habitacion.numero, tipo=habitacion.tipo),
            inicio=inicio,
            fin=calendario[-1].fecha,
            dias=dias,
            calendario=CalendarioRead.dias_desde(calendario),
        )

    except HTTPException:
        raise
    except InvalidDateError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except SQLAlchemyError as e:
        log_event("disponibilidad", "admin", "Error al obtener calendario", f"error={str(e)}", nivel=logging.ERROR)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error al obtener calendario de disponibilidad"
        )
