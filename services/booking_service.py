"""
Services para el flujo de reservas de la pousada
Contiene lógica de negocio para:
- Solicitudes de reserva (crear, aprobar, rechazar, eliminar)
- Reservas directas y cambios de estado
- Estadísticas de ocupación

La disponibilidad se decide siempre con utils.availability_engine.
Ninguna operación bloquea la fecha: dos llamadores concurrentes pueden
ver la misma fecha disponible y ambos crear la reserva.
"""

from datetime import date
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload

from config import MESES_ESTADISTICAS
from models.habitacion import Habitacion
from models.reserva import (
    Reserva, SolicitudReserva, EstadoReservaEnum, EstadoSolicitudEnum
)
from utils.availability_engine import (
    BookingInterval, DateStatusKind, RejectionReason, classify, to_intervals, validate_selection
)
from utils.logging_utils import log_event


# ========================================================================
# ERRORES
# ========================================================================

class ReservaError(Exception):
    """Error base del flujo de reservas"""


class RecursoNoEncontrado(ReservaError):
    pass


class SeleccionRechazada(ReservaError):
    """La fecha elegida no está disponible"""

    def __init__(self, motivo: RejectionReason, mensaje: str):
        super().__init__(mensaje)
        self.motivo = motivo


class TransicionInvalida(ReservaError):
    pass


ESTADOS_BLOQUEANTES = (EstadoReservaEnum.CONFIRMED.value, EstadoReservaEnum.SCHEDULED.value)


# ========================================================================
# HELPERS
# ========================================================================

def obtener_habitacion(db: Session, habitacion_id: str, solo_activas: bool = False) -> Habitacion:
    """
    Con solo_activas=True una habitación dada de baja se trata como inexistente:
    no admite solicitudes, reservas ni pedidos nuevos.
    """
    query = db.query(Habitacion).filter(Habitacion.id == habitacion_id)
    if solo_activas:
        query = query.filter(Habitacion.activo.is_(True))
    habitacion = query.first()
    if not habitacion:
        raise RecursoNoEncontrado(f"Habitación {habitacion_id} no encontrada")
    return habitacion


def intervals_for_room(db: Session, habitacion_id: str) -> List[BookingInterval]:
    """Snapshot de reservas que bloquean la habitación (las solicitudes nunca bloquean)"""
    reservas = db.query(Reserva).filter(
        Reserva.habitacion_id == habitacion_id,
        Reserva.estado.in_(ESTADOS_BLOQUEANTES),
    ).all()
    return to_intervals(reservas)


def _validar_disponibilidad(db: Session, habitacion_id: str, fecha: date, today: date, usuario: str) -> None:
    resultado = validate_selection(fecha, habitacion_id, intervals_for_room(db, habitacion_id), today)
    if not resultado.ok:
        log_event(
            "reservas", usuario, "Selección rechazada",
            f"habitacion_id={habitacion_id} fecha={fecha} motivo={resultado.reason.value}"
        )
        raise SeleccionRechazada(resultado.reason, resultado.message)


# ========================================================================
# SOLICITUDES
# ========================================================================

class SolicitudService:
    """Solicitudes de reserva: pending -> approved | rejected"""

    @staticmethod
    def crear_solicitud(db: Session, data: dict, today: date, usuario: str = "publico") -> SolicitudReserva:
        obtener_habitacion(db, data["habitacion_id"], solo_activas=True)
        _validar_disponibilidad(db, data["habitacion_id"], data["fecha_checkin"], today, usuario)

        solicitud = SolicitudReserva(**data, estado=EstadoSolicitudEnum.PENDING.value)
        db.add(solicitud)
        db.commit()
        db.refresh(solicitud)

        log_event(
            "solicitudes", usuario, "Crear solicitud",
            f"id={solicitud.id} habitacion_id={solicitud.habitacion_id} "
            f"checkin={solicitud.fecha_checkin} checkout={solicitud.fecha_checkout}"
        )
        return solicitud

    @staticmethod
    def obtener_solicitud(db: Session, solicitud_id: str) -> SolicitudReserva:
        solicitud = db.query(SolicitudReserva).filter(SolicitudReserva.id == solicitud_id).first()
        if not solicitud:
            raise RecursoNoEncontrado(f"Solicitud {solicitud_id} no encontrada")
        return solicitud

    @staticmethod
    def _exigir_pendiente(solicitud: SolicitudReserva) -> None:
        if solicitud.estado != EstadoSolicitudEnum.PENDING.value:
            raise TransicionInvalida(f"La solicitud ya fue procesada (estado: {solicitud.estado})")

    @staticmethod
    def aprobar_solicitud(db: Session, solicitud_id: str, usuario: str) -> Reserva:
        """
        Aprueba la solicitud y crea la reserva confirmada.

        El total de la reserva es la tarifa diaria de la habitación.
        No se vuelve a validar disponibilidad: la aprobación es una decisión del staff.
        """
        solicitud = SolicitudService.obtener_solicitud(db, solicitud_id)
        SolicitudService._exigir_pendiente(solicitud)
        habitacion = obtener_habitacion(db, solicitud.habitacion_id)

        reserva = Reserva(
            habitacion_id=solicitud.habitacion_id,
            solicitud_id=solicitud.id,
            fecha_checkin=solicitud.fecha_checkin,
            fecha_checkout=solicitud.fecha_checkout,
            huesped_nombre=solicitud.huesped_nombre,
            huesped_email=solicitud.huesped_email,
            huesped_telefono=solicitud.huesped_telefono,
            estado=EstadoReservaEnum.CONFIRMED.value,
            total=habitacion.precio_diaria or Decimal("0"),
            notas=solicitud.notas,
        )
        db.add(reserva)
        solicitud.estado = EstadoSolicitudEnum.APPROVED.value
        solicitud.actualizado_por = usuario
        db.commit()
        db.refresh(reserva)

        log_event("solicitudes", usuario, "Aprobar solicitud", f"id={solicitud.id} reserva_id={reserva.id}")
        return reserva

    @staticmethod
    def rechazar_solicitud(db: Session, solicitud_id: str, usuario: str) -> SolicitudReserva:
        solicitud = SolicitudService.obtener_solicitud(db, solicitud_id)
        SolicitudService._exigir_pendiente(solicitud)

        solicitud.estado = EstadoSolicitudEnum.REJECTED.value
        solicitud.actualizado_por = usuario
        db.commit()
        db.refresh(solicitud)

        log_event("solicitudes", usuario, "Rechazar solicitud", f"id={solicitud.id}")
        return solicitud

    @staticmethod
    def eliminar_solicitud(db: Session, solicitud_id: str, usuario: str) -> None:
        solicitud = SolicitudService.obtener_solicitud(db, solicitud_id)
        if solicitud.reserva is not None:
            raise TransicionInvalida("La solicitud tiene una reserva asociada")

        db.delete(solicitud)
        db.commit()
        log_event("solicitudes", usuario, "Eliminar solicitud", f"id={solicitud_id}")


# ========================================================================
# RESERVAS
# ========================================================================

class ReservaService:

    @staticmethod
    def crear_reserva(db: Session, data: dict, today: date, usuario: str) -> Reserva:
        """Reserva directa (confirmed o scheduled), sujeta a la misma validación que el calendario"""
        obtener_habitacion(db, data["habitacion_id"], solo_activas=True)
        _validar_disponibilidad(db, data["habitacion_id"], data["fecha_checkin"], today, usuario)

        reserva = Reserva(**data)
        db.add(reserva)
        db.commit()
        db.refresh(reserva)

        log_event(
            "reservas", usuario, "Crear reserva",
            f"id={reserva.id} habitacion_id={reserva.habitacion_id} estado={reserva.estado}"
        )
        return reserva

    @staticmethod
    def cambiar_estado(db: Session, reserva_id: str, estado: EstadoReservaEnum, usuario: str) -> Reserva:
        reserva = db.query(Reserva).filter(Reserva.id == reserva_id).first()
        if not reserva:
            raise RecursoNoEncontrado(f"Reserva {reserva_id} no encontrada")
        if reserva.estado in (EstadoReservaEnum.CANCELLED.value, EstadoReservaEnum.COMPLETED.value):
            raise TransicionInvalida(f"La reserva está cerrada (estado: {reserva.estado})")

        estado_anterior = reserva.estado
        reserva.estado = estado.value
        db.commit()
        db.refresh(reserva)

        log_event("reservas", usuario, "Cambiar estado", f"id={reserva.id} {estado_anterior} -> {reserva.estado}")
        return reserva

    @staticmethod
    def historial(db: Session, habitacion_id: Optional[str] = None, huesped: Optional[str] = None) -> List[Reserva]:
        """Reservas más recientes primero"""
        query = db.query(Reserva).options(joinedload(Reserva.habitacion))
        if habitacion_id:
            query = query.filter(Reserva.habitacion_id == habitacion_id)
        if huesped:
            query = query.filter(func.lower(Reserva.huesped_nombre).contains(huesped.lower()))
        return query.order_by(Reserva.creado_en.desc()).all()


# ========================================================================
# ESTADÍSTICAS
# ========================================================================

def _meses_hacia_atras(today: date, cantidad: int) -> List[tuple]:
    """[(año, mes), ...] del más antiguo al actual"""
    meses = []
    anio, mes = today.year, today.month
    for _ in range(cantidad):
        meses.append((anio, mes))
        mes -= 1
        if mes == 0:
            anio, mes = anio - 1, 12
    return list(reversed(meses))


class EstadisticasService:

    @staticmethod
    def calcular(db: Session, today: date) -> dict:
        habitaciones = db.query(Habitacion).filter(Habitacion.activo.is_(True)).all()
        reservas = db.query(Reserva).all()
        solicitudes_pendientes = db.query(SolicitudReserva).filter(
            SolicitudReserva.estado == EstadoSolicitudEnum.PENDING.value
        ).count()

        intervals = to_intervals(reservas)
        ocupadas_hoy = sum(
            1 for habitacion in habitaciones
            if classify(today, habitacion.id, intervals, today).kind == DateStatusKind.BOOKED
        )
        total_habitaciones = len(habitaciones)
        tasa_ocupacion = (ocupadas_hoy / total_habitaciones * 100) if total_habitaciones > 0 else 0

        facturables = [r for r in reservas if r.estado != EstadoReservaEnum.CANCELLED.value]
        ingresos = sum((Decimal(r.total or 0) for r in facturables), Decimal("0"))

        mensual = []
        for anio, mes in _meses_hacia_atras(today, MESES_ESTADISTICAS):
            del_mes = [
                r for r in facturables
                if r.creado_en and r.creado_en.year == anio and r.creado_en.month == mes
            ]
            mensual.append({
                "mes": f"{anio:04d}-{mes:02d}",
                "reservas": len(del_mes),
                "ingresos": float(sum((Decimal(r.total or 0) for r in del_mes), Decimal("0"))),
            })

        return {
            "fecha": today,
            "total_habitaciones": total_habitaciones,
            "total_reservas": len(reservas),
            "solicitudes_pendientes": solicitudes_pendientes,
            "habitaciones_ocupadas": ocupadas_hoy,
            "tasa_ocupacion": round(tasa_ocupacion, 2),
            "ingresos_totales": float(ingresos),
            "mensual": mensual,
        }
