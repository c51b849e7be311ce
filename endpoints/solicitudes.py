"""
Endpoints de Solicitudes de Reserva
El formulario público crea solicitudes; el staff las aprueba o rechaza.
"""
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from sqlalchemy.orm import Session, joinedload
from sqlalchemy.exc import SQLAlchemyError

from database import conexion
from models.reserva import SolicitudReserva
from schemas.reservas import ReservaRead, SolicitudCreate, SolicitudRead
from services.booking_service import (
    RecursoNoEncontrado, SeleccionRechazada, SolicitudService, TransicionInvalida
)
from utils.logging_utils import log_event
from utils.rate_limiter import limite_solicitudes
from utils.timezone import get_hotel_today


router = APIRouter(prefix="/solicitudes", tags=["Solicitudes"])


def _to_read(solicitud: SolicitudReserva) -> SolicitudRead:
    data = SolicitudRead.model_validate(solicitud)
    if solicitud.habitacion is not None:
        data.habitacion_numero = solicitud.habitacion.numero
    return data


def _error_http(e: Exception) -> HTTPException:
    if isinstance(e, RecursoNoEncontrado):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    if isinstance(e, SeleccionRechazada):
        return HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail={"motivo": e.motivo.value, "mensaje": str(e)}
        )
    return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))


@router.get("", response_model=List[SolicitudRead])
def listar_solicitudes(
    estado: Optional[str] = Query(None, description="pending | approved | rejected"),
    limite: Optional[int] = Query(None, ge=1, le=500),
    db: Session = Depends(conexion.get_db)
):
    """
    Solicitudes más recientes primero
    """
    query = db.query(SolicitudReserva).options(joinedload(SolicitudReserva.habitacion))
    if estado:
        query = query.filter(SolicitudReserva.estado == estado)
    query = query.order_by(SolicitudReserva.creado_en.desc())
    if limite:
        query = query.limit(limite)
    return [_to_read(s) for s in query.all()]


@router.post("", response_model=SolicitudRead, status_code=status.HTTP_201_CREATED)
@limite_solicitudes
def crear_solicitud(request: Request, payload: SolicitudCreate, db: Session = Depends(conexion.get_db)):
    try:
        solicitud = SolicitudService.crear_solicitud(db, payload.model_dump(), get_hotel_today())
        return _to_read(solicitud)

    except (RecursoNoEncontrado, SeleccionRechazada) as e:
        raise _error_http(e)
    except SQLAlchemyError as e:
        db.rollback()
        log_event("solicitudes", "publico", "Error al crear solicitud", f"error={str(e)}", nivel=logging.ERROR)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error al crear la solicitud"
        )


@router.put("/{solicitud_id}/aprobar", response_model=ReservaRead)
def aprobar_solicitud(solicitud_id: str, usuario: str = Query("admin"), db: Session = Depends(conexion.get_db)):
    try:
        reserva = SolicitudService.aprobar_solicitud(db, solicitud_id, usuario)
        return ReservaRead.desde_reserva(reserva)

    except (RecursoNoEncontrado, TransicionInvalida) as e:
        raise _error_http(e)
    except SQLAlchemyError as e:
        db.rollback()
        log_event("solicitudes", usuario, "Error al aprobar", f"id={solicitud_id} error={str(e)}", nivel=logging.ERROR)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error al aprobar la solicitud"
        )


@router.put("/{solicitud_id}/rechazar", response_model=SolicitudRead)
def rechazar_solicitud(solicitud_id: str, usuario: str = Query("admin"), db: Session = Depends(conexion.get_db)):
    try:
        return _to_read(SolicitudService.rechazar_solicitud(db, solicitud_id, usuario))

    except (RecursoNoEncontrado, TransicionInvalida) as e:
        raise _error_http(e)
    except SQLAlchemyError as e:
        db.rollback()
        log_event("solicitudes", usuario, "Error al rechazar", f"id={solicitud_id} error={str(e)}", nivel=logging.ERROR)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error al rechazar la solicitud"
        )


@router.delete("/{solicitud_id}", status_code=status.HTTP_204_NO_CONTENT)
def eliminar_solicitud(solicitud_id: str, usuario: str = Query("admin"), db: Session = Depends(conexion.get_db)):
    try:
        SolicitudService.eliminar_solicitud(db, solicitud_id, usuario)

    except (RecursoNoEncontrado, TransicionInvalida) as e:
        raise _error_http(e)
    except SQLAlchemyError as e:
        db.rollback()
        log_event("solicitudes", usuario, "Error al eliminar", f"id={solicitud_id} error={str(e)}", nivel=logging.ERROR)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error al eliminar la solicitud"
        )
