"""
Tests for Availability Engine
Validación del motor de disponibilidad (availability_engine.py)
"""

from datetime import date, datetime, timedelta, timezone

import pytest

from utils.availability_engine import (
    BookingInterval,
    DateStatus,
    DateStatusKind,
    IntervalStatus,
    InvalidDateError,
    RejectionReason,
    build_calendar,
    classify,
    filter_rooms,
    parse_to_date,
    to_intervals,
    validate_selection,
)


TODAY = date(2024, 3, 1)


def _confirmed(check_in, check_out, guest="Maria", room_id="r1"):
    return BookingInterval(room_id, check_in, check_out, IntervalStatus.CONFIRMED, guest)


def _scheduled(check_in, check_out, guest="João", room_id="r1"):
    return BookingInterval(room_id, check_in, check_out, IntervalStatus.SCHEDULED, guest)


class TestParseToDate:

    def test_parse_iso_string(self):
        assert parse_to_date("2024-05-01") == date(2024, 5, 1)

    def test_parse_datetime_string_drops_time(self):
        assert parse_to_date("2024-05-01T23:59:59Z") == date(2024, 5, 1)

    def test_parse_datetime_drops_time_and_tz(self):
        dt = datetime(2024, 5, 1, 22, 30, tzinfo=timezone.utc)
        assert parse_to_date(dt) == date(2024, 5, 1)

    def test_parse_date(self):
        assert parse_to_date(date(2024, 5, 1)) == date(2024, 5, 1)

    @pytest.mark.parametrize("value", [None, "", "2024-13-01", "ayer", "01/05/2024", 20240501])
    def test_invalid_values_raise(self, value):
        with pytest.raises(InvalidDateError):
            parse_to_date(value)

    def test_invalid_date_is_value_error(self):
        assert issubclass(InvalidDateError, ValueError)


class TestClassify:

    def test_past_wins_over_bookings(self):
        intervals = [_confirmed(date(2024, 2, 1), date(2024, 2, 28)), _scheduled(date(2024, 2, 1), date(2024, 2, 28))]
        for offset in range(1, 30):
            d = TODAY - timedelta(days=offset)
            assert classify(d, "r1", intervals, TODAY) == DateStatus.past()

    def test_empty_intervals_available(self):
        for offset in range(0, 60):
            d = TODAY + timedelta(days=offset)
            assert classify(d, "r1", [], TODAY) == DateStatus.available()

    def test_confirmed_interval_blocks_through_checkout_day(self):
        intervals = [_confirmed(date(2024, 3, 10), date(2024, 3, 12))]

        assert classify(date(2024, 3, 9), "r1", intervals, TODAY).kind == DateStatusKind.AVAILABLE
        assert classify(date(2024, 3, 10), "r1", intervals, TODAY).kind == DateStatusKind.BOOKED
        assert classify(date(2024, 3, 11), "r1", intervals, TODAY).kind == DateStatusKind.BOOKED
        assert classify(date(2024, 3, 12), "r1", intervals, TODAY).kind == DateStatusKind.BOOKED
        assert classify(date(2024, 3, 13), "r1", intervals, TODAY).kind == DateStatusKind.AVAILABLE

    def test_scheduled_interval(self):
        intervals = [_scheduled(date(2024, 3, 10), date(2024, 3, 10), guest="Ana")]
        assert classify(date(2024, 3, 10), "r1", intervals, TODAY) == DateStatus.scheduled("Ana")
        assert classify(date(2024, 3, 11), "r1", intervals, TODAY) == DateStatus.available()

    def test_confirmed_wins_over_scheduled(self):
        # el agendado aparece primero en la lista y aun así gana la reserva confirmada
        intervals = [
            _scheduled(date(2024, 3, 10), date(2024, 3, 15), guest="Agendado"),
            _confirmed(date(2024, 3, 12), date(2024, 3, 13), guest="Confirmado"),
        ]
        assert classify(date(2024, 3, 12), "r1", intervals, TODAY) == DateStatus.booked("Confirmado")
        assert classify(date(2024, 3, 11), "r1", intervals, TODAY) == DateStatus.scheduled("Agendado")

    def test_today_is_not_past(self):
        intervals = [_confirmed(TODAY, TODAY)]
        assert classify(TODAY, "r1", intervals, TODAY).kind == DateStatusKind.BOOKED

    def test_other_rooms_ignored(self):
        intervals = [_confirmed(date(2024, 3, 10), date(2024, 3, 12), room_id="r2")]
        assert classify(date(2024, 3, 10), "r1", intervals, TODAY).is_available

    def test_accepts_strings_and_datetimes(self):
        intervals = [_confirmed(date(2024, 3, 10), date(2024, 3, 12))]
        assert classify("2024-03-11", "r1", intervals, "2024-03-01").kind == DateStatusKind.BOOKED
        assert classify(datetime(2024, 3, 11, 18, 0), "r1", intervals, datetime(2024, 3, 11, 20, 0)).kind == DateStatusKind.BOOKED

    def test_malformed_date_raises(self):
        with pytest.raises(InvalidDateError):
            classify("not-a-date", "r1", [], TODAY)
        with pytest.raises(InvalidDateError):
            classify(date(2024, 3, 10), "r1", [], None)

    def test_idempotent(self):
        intervals = (_confirmed(date(2024, 3, 10), date(2024, 3, 12)),)
        first = classify(date(2024, 3, 11), "r1", intervals, TODAY)
        second = classify(date(2024, 3, 11), "r1", intervals, TODAY)
        assert first == second
        assert intervals == (_confirmed(date(2024, 3, 10), date(2024, 3, 12)),)

    def test_end_to_end_scenario(self):
        records = [{
            "room_id": "r1",
            "check_in_date": "2024-05-01",
            "check_out_date": "2024-05-03",
            "status": "confirmed",
            "guest_name": "Maria",
        }]
        intervals = to_intervals(records)
        today = "2024-05-01"

        assert classify("2024-05-01", "r1", intervals, today) == DateStatus.booked("Maria")
        assert classify("2024-04-30", "r1", intervals, today) == DateStatus.past()
        assert classify("2024-05-04", "r1", intervals, today) == DateStatus.available()


class TestValidateSelection:

    def test_past_date_rejected(self):
        intervals = [_confirmed(date(2024, 2, 1), date(2024, 2, 28))]
        result = validate_selection(date(2024, 2, 15), "r1", intervals, TODAY)
        assert not result.ok
        assert result.reason == RejectionReason.DATE_IN_PAST
        assert result.status.kind == DateStatusKind.PAST

    def test_booked_rejected(self):
        result = validate_selection(date(2024, 3, 10), "r1", [_confirmed(date(2024, 3, 10), date(2024, 3, 12))], TODAY)
        assert result.reason == RejectionReason.ALREADY_BOOKED
        assert result.message

    def test_scheduled_rejected(self):
        result = validate_selection(date(2024, 3, 10), "r1", [_scheduled(date(2024, 3, 10), date(2024, 3, 12))], TODAY)
        assert result.reason == RejectionReason.ALREADY_SCHEDULED

    def test_available_ok(self):
        result = validate_selection(date(2024, 3, 20), "r1", [_confirmed(date(2024, 3, 10), date(2024, 3, 12))], TODAY)
        assert result.ok
        assert result.reason is None
        assert result.message is None


class TestToIntervals:

    def test_non_blocking_statuses_skipped(self):
        records = [
            {"room_id": "r1", "check_in_date": "2024-03-10", "check_out_date": "2024-03-11", "status": status}
            for status in ("pending", "rejected", "cancelled", "completed", "approved")
        ]
        assert to_intervals(records) == []

    def test_spanish_field_names(self):
        class Fila:
            habitacion_id = "r9"
            fecha_checkin = date(2024, 3, 10)
            fecha_checkout = date(2024, 3, 11)
            estado = "scheduled"
            huesped_nombre = "Ana"

        [interval] = to_intervals([Fila()])
        assert interval == BookingInterval("r9", date(2024, 3, 10), date(2024, 3, 11), IntervalStatus.SCHEDULED, "Ana")

    def test_malformed_record_date_raises(self):
        with pytest.raises(InvalidDateError):
            to_intervals([{"room_id": "r1", "check_in_date": "??", "check_out_date": "2024-03-11", "status": "confirmed"}])


class TestFilterRooms:

    ROOMS = [
        {"id": "a", "number": "101", "room_type": "Casal"},
        {"id": "b", "number": "102", "room_type": "Suite Master"},
        {"id": "c", "number": "201", "room_type": "Família"},
    ]

    def test_empty_term_returns_all_in_order(self):
        assert filter_rooms(self.ROOMS, "") == self.ROOMS
        assert filter_rooms(self.ROOMS, None) == self.ROOMS

    def test_no_match(self):
        assert filter_rooms(self.ROOMS, "zz-no-match") == []

    def test_matches_number_or_type_case_insensitive(self):
        assert [r["id"] for r in filter_rooms(self.ROOMS, "10")] == ["a", "b"]
        assert [r["id"] for r in filter_rooms(self.ROOMS, "SUITE")] == ["b"]
        assert [r["id"] for r in filter_rooms(self.ROOMS, "1")] == ["a", "b", "c"]

    def test_orm_like_objects(self):
        class Room:
            def __init__(self, numero, tipo):
                self.numero = numero
                self.tipo = tipo

        rooms = [Room("7", "Standard"), Room("8", "Luxo")]
        assert filter_rooms(rooms, "lux") == [rooms[1]]


class TestBuildCalendar:

    def test_window_statuses(self):
        intervals = [_confirmed(date(2024, 3, 2), date(2024, 3, 3)), _scheduled(date(2024, 3, 5), date(2024, 3, 5))]
        calendar = build_calendar("r1", intervals, date(2024, 2, 28), 8, TODAY)

        assert [day.fecha for day in calendar] == [date(2024, 2, 28) + timedelta(days=i) for i in range(8)]
        assert [day.status.kind for day in calendar] == [
            DateStatusKind.PAST,       # 28/02
            DateStatusKind.PAST,       # 29/02
            DateStatusKind.AVAILABLE,  # 01/03
            DateStatusKind.BOOKED,     # 02/03
            DateStatusKind.BOOKED,     # 03/03 (día de checkout)
            DateStatusKind.AVAILABLE,  # 04/03
            DateStatusKind.SCHEDULED,  # 05/03
            DateStatusKind.AVAILABLE,  # 06/03
        ]

    @pytest.mark.parametrize("days", [0, -1, 367])
    def test_invalid_window(self, days):
        with pytest.raises(ValueError):
            build_calendar("r1", [], TODAY, days, TODAY)
