"""
Availability Engine - Motor de disponibilidad del calendario de habitaciones
SINGLE SOURCE OF TRUTH para decidir si una fecha está pasada, reservada,
agendada o disponible.

Funciones puras: no consultan la base ni el reloj. El llamador entrega las
reservas de la habitación (snapshot inmutable) y la fecha de "hoy".
"""

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Any, Iterable, List, Optional, Sequence


# Constantes
CHECKOUT_BLOCK_DAYS = 1  # el día de checkout también queda bloqueado (cambio de huésped)
MAX_CALENDAR_DAYS = 366


class InvalidDateError(ValueError):
    """Fecha nula o con formato inválido"""


# ========================================================================
# TIPOS
# ========================================================================

class IntervalStatus(str, Enum):
    """Estados que bloquean una fecha"""
    CONFIRMED = "confirmed"
    SCHEDULED = "scheduled"


class DateStatusKind(str, Enum):
    PAST = "past"
    BOOKED = "booked"
    SCHEDULED = "scheduled"
    AVAILABLE = "available"


class RejectionReason(str, Enum):
    DATE_IN_PAST = "date_in_past"
    ALREADY_BOOKED = "already_booked"
    ALREADY_SCHEDULED = "already_scheduled"


REJECTION_MESSAGES = {
    RejectionReason.DATE_IN_PAST: "No es posible seleccionar fechas pasadas",
    RejectionReason.ALREADY_BOOKED: "Esta fecha ya está reservada",
    RejectionReason.ALREADY_SCHEDULED: "Esta fecha ya está agendada",
}


@dataclass(frozen=True)
class BookingInterval:
    """Reserva confirmada o agendada sobre una habitación"""
    room_id: str
    check_in: date
    check_out: date
    status: IntervalStatus
    guest_name: Optional[str] = None

    @property
    def blocked_until(self) -> date:
        """Límite superior exclusivo del bloqueo"""
        return self.check_out + timedelta(days=CHECKOUT_BLOCK_DAYS)

    def contains(self, fecha: date) -> bool:
        return self.check_in <= fecha < self.blocked_until


@dataclass(frozen=True)
class DateStatus:
    kind: DateStatusKind
    guest_name: Optional[str] = None

    @classmethod
    def past(cls) -> "DateStatus":
        return cls(DateStatusKind.PAST)

    @classmethod
    def booked(cls, guest_name: Optional[str]) -> "DateStatus":
        return cls(DateStatusKind.BOOKED, guest_name)

    @classmethod
    def scheduled(cls, guest_name: Optional[str]) -> "DateStatus":
        return cls(DateStatusKind.SCHEDULED, guest_name)

    @classmethod
    def available(cls) -> "DateStatus":
        return cls(DateStatusKind.AVAILABLE)

    @property
    def is_available(self) -> bool:
        return self.kind == DateStatusKind.AVAILABLE


@dataclass(frozen=True)
class SelectionResult:
    status: DateStatus
    reason: Optional[RejectionReason] = None

    @property
    def ok(self) -> bool:
        return self.reason is None

    @property
    def message(self) -> Optional[str]:
        return REJECTION_MESSAGES.get(self.reason) if self.reason else None


@dataclass(frozen=True)
class CalendarDay:
    fecha: date
    status: DateStatus


# ========================================================================
# HELPERS
# ========================================================================

def parse_to_date(value) -> date:
    """Convierte string/datetime/date a date (descarta hora y zona horaria)"""
    if value is None:
        raise InvalidDateError("Date value is None")

    if isinstance(value, datetime):
        return value.date()

    if isinstance(value, date):
        return value

    if isinstance(value, str):
        texto = value.strip()
        try:
            return date.fromisoformat(texto)
        except ValueError:
            pass
        try:
            return datetime.fromisoformat(texto.replace("Z", "+00:00")).date()
        except ValueError:
            raise InvalidDateError(f"Invalid date format: {value!r}")

    raise InvalidDateError(f"Unsupported date type: {type(value).__name__}")


def _campo(record: Any, *nombres: str, default=None):
    """Lee el primer campo presente, sea un dict o un objeto (ORM/dataclass)"""
    for nombre in nombres:
        if isinstance(record, dict):
            if nombre in record:
                return record[nombre]
        elif hasattr(record, nombre):
            return getattr(record, nombre)
    return default


def _status_value(raw) -> Optional[str]:
    if raw is None:
        return None
    return raw.value if isinstance(raw, Enum) else str(raw)


def to_intervals(records: Iterable[Any]) -> List[BookingInterval]:
    """
    Convierte registros de reservas (filas ORM o dicts) en BookingInterval.

    Sólo los estados confirmed/scheduled bloquean; el resto
    (pending, rejected, cancelled, completed...) se descarta aquí.
    """
    bloqueantes = {status.value for status in IntervalStatus}
    intervals = []
    for record in records:
        estado = _status_value(_campo(record, "estado", "status"))
        if estado not in bloqueantes:
            continue
        intervals.append(
            BookingInterval(
                room_id=str(_campo(record, "habitacion_id", "room_id")),
                check_in=parse_to_date(_campo(record, "fecha_checkin", "check_in_date", "check_in")),
                check_out=parse_to_date(_campo(record, "fecha_checkout", "check_out_date", "check_out")),
                status=IntervalStatus(estado),
                guest_name=_campo(record, "huesped_nombre", "guest_name"),
            )
        )
    return intervals


# ========================================================================
# OPERACIONES
# ========================================================================

def classify(fecha, room_id: str, intervals: Sequence[BookingInterval], today) -> DateStatus:
    """
    Clasifica una fecha para una habitación.

    Orden de evaluación (gana la primera regla que aplica):
        1. fecha < hoy           -> Past
        2. intervalo confirmed   -> Booked(huésped)
        3. intervalo scheduled   -> Scheduled(huésped)
        4. resto                 -> Available

    Los intervalos de otras habitaciones se ignoran. Una habitación sin
    intervalos es válida y siempre queda Available (salvo fechas pasadas).

    Raises:
        InvalidDateError: si `fecha` o `today` no son fechas válidas
    """
    fecha = parse_to_date(fecha)
    today = parse_to_date(today)

    if fecha < today:
        return DateStatus.past()

    room_id = str(room_id)
    agendada = None
    for interval in intervals:
        if interval.room_id != room_id or not interval.contains(fecha):
            continue
        if interval.status == IntervalStatus.CONFIRMED:
            return DateStatus.booked(interval.guest_name)
        if interval.status == IntervalStatus.SCHEDULED and agendada is None:
            agendada = interval

    if agendada is not None:
        return DateStatus.scheduled(agendada.guest_name)
    return DateStatus.available()


_REJECTIONS = {
    DateStatusKind.PAST: RejectionReason.DATE_IN_PAST,
    DateStatusKind.BOOKED: RejectionReason.ALREADY_BOOKED,
    DateStatusKind.SCHEDULED: RejectionReason.ALREADY_SCHEDULED,
}


def validate_selection(fecha, room_id: str, intervals: Sequence[BookingInterval], today) -> SelectionResult:
    """
    Valida si una fecha puede iniciar una reserva nueva.

    Es sólo consultiva: no reserva la fecha ni bloquea a otro llamador
    concurrente. Un rechazo es un resultado normal, no una excepción.
    """
    status = classify(fecha, room_id, intervals, today)
    return SelectionResult(status=status, reason=_REJECTIONS.get(status.kind))


def filter_rooms(rooms: Iterable[Any], search_term: Optional[str]) -> List[Any]:
    """Búsqueda por número o tipo de habitación, sin distinguir mayúsculas. Mantiene el orden."""
    rooms = list(rooms)
    if not search_term:
        return rooms

    termino = search_term.lower()
    resultado = []
    for room in rooms:
        numero = str(_campo(room, "numero", "number", default="") or "")
        tipo = str(_campo(room, "tipo", "room_type", default="") or "")
        if termino in numero.lower() or termino in tipo.lower():
            resultado.append(room)
    return resultado


def build_calendar(room_id: str, intervals: Sequence[BookingInterval], start, days: int, today) -> List[CalendarDay]:
    """Estado de cada día en la ventana [start, start + days)"""
    if days < 1 or days > MAX_CALENDAR_DAYS:
        raise ValueError(f"days must be between 1 and {MAX_CALENDAR_DAYS}")

    start = parse_to_date(start)
    today = parse_to_date(today)
    return [
        CalendarDay(fecha=dia, status=classify(dia, room_id, intervals, today))
        for dia in (start + timedelta(days=offset) for offset in range(days))
    ]
