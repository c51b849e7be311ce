"""
Tests del flujo solicitud -> aprobación -> reserva (hoy = 2024-05-01)
"""
from datetime import datetime

import pytest

from models.reserva import SolicitudReserva


@pytest.fixture
def habitacion(crear_habitacion):
    return crear_habitacion("101", "Casal", precio_diaria=250)


def _solicitud(client, habitacion_id, checkin="2024-05-10", checkout="2024-05-12", **extra):
    payload = {
        "habitacion_id": habitacion_id,
        "fecha_checkin": checkin,
        "fecha_checkout": checkout,
        "huesped_nombre": "Joana Silva",
        "huesped_email": "joana@pousada.com.br",
        "huesped_telefono": "11999990000",
        "cantidad_huespedes": 2,
        **extra,
    }
    return client.post("/solicitudes", json=payload)


def test_crear_solicitud_no_bloquea(client, habitacion):
    response = _solicitud(client, habitacion["id"])
    assert response.status_code == 201, response.text
    assert response.json()["estado"] == "pending"
    assert response.json()["habitacion_numero"] == "101"

    estado = client.get(f"/disponibilidad/{habitacion['id']}", params={"fecha": "2024-05-10"}).json()
    assert estado["estado"] == "available"


def test_aprobar_crea_reserva_confirmada(client, habitacion):
    solicitud = _solicitud(client, habitacion["id"]).json()

    response = client.put(f"/solicitudes/{solicitud['id']}/aprobar")
    assert response.status_code == 200
    reserva = response.json()
    assert reserva["estado"] == "confirmed"
    assert reserva["solicitud_id"] == solicitud["id"]
    assert reserva["huesped_nombre"] == "Joana Silva"
    assert float(reserva["total"]) == 250.0
    assert reserva["habitacion_numero"] == "101"
    assert reserva["habitacion_tipo"] == "Casal"
    assert reserva["numero_noches"] == 2

    pendientes = client.get("/solicitudes", params={"estado": "pending"}).json()
    assert pendientes == []

    estado = client.get(f"/disponibilidad/{habitacion['id']}", params={"fecha": "2024-05-12"}).json()
    assert estado["estado"] == "booked"
    assert estado["huesped"] == "Joana Silva"


def test_no_se_aprueba_dos_veces(client, habitacion):
    solicitud = _solicitud(client, habitacion["id"]).json()
    assert client.put(f"/solicitudes/{solicitud['id']}/aprobar").status_code == 200
    assert client.put(f"/solicitudes/{solicitud['id']}/aprobar").status_code == 409
    assert client.put(f"/solicitudes/{solicitud['id']}/rechazar").status_code == 409


def test_rechazar(client, habitacion):
    solicitud = _solicitud(client, habitacion["id"]).json()
    response = client.put(f"/solicitudes/{solicitud['id']}/rechazar", params={"usuario": "recepcion"})
    assert response.status_code == 200
    assert response.json()["estado"] == "rejected"
    assert response.json()["actualizado_por"] == "recepcion"


def test_fecha_pasada_rechazada(client, habitacion):
    response = _solicitud(client, habitacion["id"], checkin="2024-04-20", checkout="2024-04-22")
    assert response.status_code == 409
    assert response.json()["detail"]["motivo"] == "date_in_past"


def test_fecha_reservada_rechazada(client, habitacion):
    aprobada = _solicitud(client, habitacion["id"]).json()
    client.put(f"/solicitudes/{aprobada['id']}/aprobar")

    response = _solicitud(client, habitacion["id"], checkin="2024-05-11", checkout="2024-05-11")
    assert response.status_code == 409
    assert response.json()["detail"]["motivo"] == "already_booked"


def test_fecha_agendada_rechazada(client, habitacion):
    response = client.post("/reservas", json={
        "habitacion_id": habitacion["id"],
        "fecha_checkin": "2024-06-01",
        "fecha_checkout": "2024-06-03",
        "huesped_nombre": "Pedro",
        "estado": "scheduled",
    })
    assert response.status_code == 201

    response = _solicitud(client, habitacion["id"], checkin="2024-06-02", checkout="2024-06-04")
    assert response.status_code == 409
    assert response.json()["detail"]["motivo"] == "already_scheduled"


def test_checkout_anterior_a_checkin(client, habitacion):
    response = _solicitud(client, habitacion["id"], checkin="2024-05-10", checkout="2024-05-09")
    assert response.status_code == 422


def test_mismo_dia_es_valido(client, habitacion):
    response = _solicitud(client, habitacion["id"], checkin="2024-05-10", checkout="2024-05-10")
    assert response.status_code == 201


def test_habitacion_inexistente(client):
    response = _solicitud(client, "no-existe")
    assert response.status_code == 404


def test_eliminar_solicitud(client, habitacion):
    pendiente = _solicitud(client, habitacion["id"]).json()
    assert client.delete(f"/solicitudes/{pendiente['id']}").status_code == 204
    assert client.delete(f"/solicitudes/{pendiente['id']}").status_code == 404


def test_no_se_elimina_solicitud_aprobada(client, habitacion):
    solicitud = _solicitud(client, habitacion["id"]).json()
    client.put(f"/solicitudes/{solicitud['id']}/aprobar")
    assert client.delete(f"/solicitudes/{solicitud['id']}").status_code == 409


def test_listar_mas_recientes_primero(client, db_session, habitacion):
    primera = _solicitud(client, habitacion["id"], checkin="2024-05-10", checkout="2024-05-10").json()
    segunda = _solicitud(client, habitacion["id"], checkin="2024-05-20", checkout="2024-05-20").json()

    # Fechas de creación distintas para que el orden no dependa del reloj
    db_session.get(SolicitudReserva, primera["id"]).creado_en = datetime(2024, 4, 28, 9, 0)
    db_session.get(SolicitudReserva, segunda["id"]).creado_en = datetime(2024, 4, 30, 18, 30)
    db_session.commit()

    ids = [s["id"] for s in client.get("/solicitudes").json()]
    assert ids == [segunda["id"], primera["id"]]

    ultima = client.get("/solicitudes", params={"limite": 1}).json()
    assert [s["id"] for s in ultima] == [segunda["id"]]
