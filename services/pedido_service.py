"""
Services de pedidos del restaurante
Sólo las habitaciones ocupadas hoy (classify == booked) reciben pedidos;
el total se calcula siempre con los precios de la carta.
"""

from datetime import date
from decimal import Decimal
from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from models.habitacion import Habitacion
from models.pedido import Pedido, EstadoPedidoEnum
from models.reserva import Reserva
from services.booking_service import (
    ESTADOS_BLOQUEANTES, ReservaError, RecursoNoEncontrado, TransicionInvalida, intervals_for_room, obtener_habitacion
)
from utils.availability_engine import DateStatus, DateStatusKind, classify, to_intervals
from utils.logging_utils import log_event


CARTA = [
    {"id": "p1", "nombre": "Batata Frita 500gr", "precio": Decimal("45.90"), "categoria": "porcoes"},
    {"id": "p2", "nombre": "Bolinho de Bacalhau (12 unid)", "precio": Decimal("55.90"), "categoria": "porcoes"},
    {"id": "p3", "nombre": "Bolinho de Queijo (12 unid)", "precio": Decimal("45.90"), "categoria": "porcoes"},
    {"id": "p4", "nombre": "Carne de Sol 400gr", "precio": Decimal("65.90"), "categoria": "porcoes"},
    {"id": "p5", "nombre": "Frango à Passarinho 500gr", "precio": Decimal("45.90"), "categoria": "porcoes"},
    {"id": "p6", "nombre": "Filé de Frango 500gr", "precio": Decimal("45.90"), "categoria": "porcoes"},
    {"id": "c1", "nombre": "Caldo de Abóbora 400 ml", "precio": Decimal("45.90"), "categoria": "caldos"},
    {"id": "c2", "nombre": "Caldo de Feijão com Costela 400 ml", "precio": Decimal("45.90"), "categoria": "caldos"},
    {"id": "c3", "nombre": "Caldo Verde 400 ml", "precio": Decimal("45.90"), "categoria": "caldos"},
    {"id": "b1", "nombre": "Água sem Gás 500ml", "precio": Decimal("4.90"), "categoria": "bebidas"},
    {"id": "b2", "nombre": "Água com Gás 500ml", "precio": Decimal("5.90"), "categoria": "bebidas"},
    {"id": "b3", "nombre": "Coca Cola Zero Lata", "precio": Decimal("5.90"), "categoria": "bebidas"},
    {"id": "b4", "nombre": "Guaraná Antarctica Lata", "precio": Decimal("5.90"), "categoria": "bebidas"},
    {"id": "v1", "nombre": "VH Cabernet Sauvignon", "precio": Decimal("89.90"), "categoria": "vinhos"},
    {"id": "v2", "nombre": "VH Chardonnay", "precio": Decimal("89.90"), "categoria": "vinhos"},
    {"id": "v3", "nombre": "VH Merlot", "precio": Decimal("89.90"), "categoria": "vinhos"},
]

_CARTA_POR_ID = {item["id"]: item for item in CARTA}

ESTADOS_CERRADOS = (EstadoPedidoEnum.COMPLETED.value, EstadoPedidoEnum.CANCELLED.value)


class HabitacionNoOcupada(ReservaError):
    """La habitación no tiene huésped confirmado hoy"""


def _estado_hoy(db: Session, habitacion: Habitacion, today: date) -> DateStatus:
    return classify(today, habitacion.id, intervals_for_room(db, habitacion.id), today)


def _armar_items(items: List[dict]) -> List[dict]:
    """Resuelve los items contra la carta; el mismo item repetido suma cantidades"""
    cantidades: Dict[str, int] = {}
    for item in items:
        if item["item_id"] not in _CARTA_POR_ID:
            raise RecursoNoEncontrado(f"Item {item['item_id']} no existe en la carta")
        cantidades[item["item_id"]] = cantidades.get(item["item_id"], 0) + item["cantidad"]

    return [
        {
            "id": item_id,
            "nombre": _CARTA_POR_ID[item_id]["nombre"],
            "precio": float(_CARTA_POR_ID[item_id]["precio"]),
            "categoria": _CARTA_POR_ID[item_id]["categoria"],
            "cantidad": cantidad,
        }
        for item_id, cantidad in cantidades.items()
    ]


def _total(items: List[dict]) -> Decimal:
    return sum(
        (_CARTA_POR_ID[item["id"]]["precio"] * item["cantidad"] for item in items),
        Decimal("0")
    )


class PedidoService:

    @staticmethod
    def habitaciones_ocupadas(db: Session, today: date) -> List[dict]:
        """Habitaciones activas cuyo estado de hoy es booked, con el huésped"""
        habitaciones = db.query(Habitacion).filter(Habitacion.activo.is_(True)).order_by(Habitacion.numero).all()
        reservas = db.query(Reserva).filter(Reserva.estado.in_(ESTADOS_BLOQUEANTES)).all()
        intervals = to_intervals(reservas)

        ocupadas = []
        for habitacion in habitaciones:
            estado = classify(today, habitacion.id, intervals, today)
            if estado.kind == DateStatusKind.BOOKED:
                ocupadas.append({
                    "habitacion_id": habitacion.id,
                    "numero": habitacion.numero,
                    "huesped_nombre": estado.guest_name,
                })
        return ocupadas

    @staticmethod
    def crear_pedido(db: Session, data: dict, today: date, usuario: str) -> Pedido:
        habitacion = obtener_habitacion(db, data["habitacion_id"], solo_activas=True)
        estado = _estado_hoy(db, habitacion, today)
        if estado.kind != DateStatusKind.BOOKED:
            log_event(
                "pedidos", usuario, "Pedido rechazado",
                f"habitacion_id={habitacion.id} estado_hoy={estado.kind.value}"
            )
            raise HabitacionNoOcupada(f"La habitación {habitacion.numero} no está ocupada hoy")

        items = _armar_items(data["items"])
        pedido = Pedido(
            habitacion_id=habitacion.id,
            habitacion_numero=habitacion.numero,
            huesped_nombre=estado.guest_name,
            items=items,
            total=_total(items),
            estado=EstadoPedidoEnum.PENDING.value,
            notas=data.get("notas"),
            creado_por=usuario,
        )
        db.add(pedido)
        db.commit()
        db.refresh(pedido)

        log_event(
            "pedidos", usuario, "Crear pedido",
            f"id={pedido.id} habitacion={pedido.habitacion_numero} total={pedido.total}"
        )
        return pedido

    @staticmethod
    def listar(db: Session, estado: Optional[str] = None, limite: Optional[int] = None) -> List[Pedido]:
        """Pedidos más recientes primero"""
        query = db.query(Pedido)
        if estado:
            query = query.filter(Pedido.estado == estado)
        query = query.order_by(Pedido.creado_en.desc())
        if limite:
            query = query.limit(limite)
        return query.all()

    @staticmethod
    def obtener_pedido(db: Session, pedido_id: str) -> Pedido:
        pedido = db.query(Pedido).filter(Pedido.id == pedido_id).first()
        if not pedido:
            raise RecursoNoEncontrado(f"Pedido {pedido_id} no encontrado")
        return pedido

    @staticmethod
    def cambiar_estado(db: Session, pedido_id: str, estado: EstadoPedidoEnum, usuario: str) -> Pedido:
        pedido = PedidoService.obtener_pedido(db, pedido_id)
        if pedido.estado in ESTADOS_CERRADOS:
            raise TransicionInvalida(f"El pedido está cerrado (estado: {pedido.estado})")

        estado_anterior = pedido.estado
        pedido.estado = estado.value
        db.commit()
        db.refresh(pedido)

        log_event("pedidos", usuario, "Cambiar estado", f"id={pedido.id} {estado_anterior} -> {pedido.estado}")
        return pedido

    @staticmethod
    def eliminar_pedido(db: Session, pedido_id: str, usuario: str) -> None:
        pedido = PedidoService.obtener_pedido(db, pedido_id)
        db.delete(pedido)
        db.commit()
        log_event("pedidos", usuario, "Eliminar pedido", f"id={pedido_id}")
