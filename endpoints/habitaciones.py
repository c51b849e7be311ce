"""
Endpoints para gestión de Habitaciones
"""
import logging
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from database import conexion
from models.habitacion import Habitacion
from schemas.habitacion import HabitacionCreate, HabitacionUpdate, HabitacionRead
from utils.availability_engine import filter_rooms
from utils.logging_utils import log_event

router = APIRouter(prefix="/api/rooms", tags=["rooms"])


def _get_or_404(db: Session, room_id: str) -> Habitacion:
    habitacion = db.query(Habitacion).filter(Habitacion.id == room_id).first()
    if not habitacion:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Habitación no encontrada")
    return habitacion


def _numero_duplicado(numero: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_409_CONFLICT,
        detail=f"Ya existe una habitación con el número {numero}"
    )


@router.get("", response_model=List[HabitacionRead])
def list_rooms(
    buscar: Optional[str] = Query(None, description="Busca por número o tipo"),
    activas_solo: bool = Query(True),
    db: Session = Depends(conexion.get_db)
):
    query = db.query(Habitacion)
    if activas_solo:
        query = query.filter(Habitacion.activo.is_(True))
    habitaciones = query.order_by(Habitacion.numero).all()
    return filter_rooms(habitaciones, buscar)


@router.get("/{room_id}", response_model=HabitacionRead)
def get_room(room_id: str, db: Session = Depends(conexion.get_db)):
    return _get_or_404(db, room_id)


@router.post("", response_model=HabitacionRead, status_code=status.HTTP_201_CREATED)
def create_room(room: HabitacionCreate, usuario: str = Query("admin"), db: Session = Depends(conexion.get_db)):
    if db.query(Habitacion).filter(Habitacion.numero == room.numero).first():
        raise _numero_duplicado(room.numero)

    nueva = Habitacion(**room.model_dump())
    db.add(nueva)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise _numero_duplicado(room.numero)
    db.refresh(nueva)

    log_event("habitaciones", usuario, "Crear habitación", f"id={nueva.id} numero={nueva.numero}")
    return nueva


@router.put("/{room_id}", response_model=HabitacionRead)
def update_room(room_id: str, room: HabitacionUpdate, usuario: str = Query("admin"), db: Session = Depends(conexion.get_db)):
    habitacion = _get_or_404(db, room_id)

    update_data = room.model_dump(exclude_unset=True)
    nuevo_numero = update_data.get("numero")
    if nuevo_numero and nuevo_numero != habitacion.numero:
        if db.query(Habitacion).filter(Habitacion.numero == nuevo_numero).first():
            raise _numero_duplicado(nuevo_numero)

    for field, value in update_data.items():
        setattr(habitacion, field, value)

    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        log_event("habitaciones", usuario, "Error al actualizar habitación", f"id={room_id} error={str(e)}", nivel=logging.ERROR)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error al actualizar la habitación"
        )
    db.refresh(habitacion)

    log_event("habitaciones", usuario, "Actualizar habitación", f"id={room_id} campos={sorted(update_data)}")
    return habitacion


@router.delete("/{room_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_room(room_id: str, usuario: str = Query("admin"), db: Session = Depends(conexion.get_db)):
    """Baja lógica: las reservas históricas siguen apuntando a la habitación"""
    habitacion = _get_or_404(db, room_id)
    habitacion.activo = False
    db.commit()
    log_event("habitaciones", usuario, "Desactivar habitación", f"id={room_id} numero={habitacion.numero}")
