# tests/test_domain_mappers.py
from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from washapp.domain import NewAppointment, slot_hour
from washapp.exceptions import MalformedRecordError
from washapp.mappers import (
    appointment_from_row,
    appointment_to_payload,
    appointment_to_row,
    new_appointment_from_payload,
    parse_any_date,
)

ROW = {
    "id": 7,
    "client_name": "Ana",
    "date": "2025-05-05",
    "time": "10:00",
    "service_type": "Lavado completo",
    "location": "Taller principal",
    "is_home_service": False,
    "status": "completed",
    "price": 15000,
    "payment_method": "Efectivo",
}


def test_slot_hour():
    assert slot_hour("09:30") == 9
    assert slot_hour("17:00") == 17
    with pytest.raises(ValueError):
        slot_hour("abc")
    with pytest.raises(ValueError):
        slot_hour("25:00")


def test_row_to_domain():
    a = appointment_from_row(ROW)
    assert a.date == date(2025, 5, 5)
    assert a.price == Decimal("15000")
    assert a.is_terminal


def test_row_time_with_seconds_is_trimmed():
    a = appointment_from_row({**ROW, "time": "10:00:00"})
    assert a.time == "10:00"


@pytest.mark.parametrize("bad", [
    {k: v for k, v in ROW.items() if k != "date"},
    {**ROW, "date": "05-2025"},
    {**ROW, "status": "archived"},
    "not a row",
])
def test_malformed_rows(bad):
    with pytest.raises(MalformedRecordError):
        appointment_from_row(bad)


def test_to_row_uses_iso_date():
    row = appointment_to_row(appointment_from_row(ROW))
    assert row["date"] == "2025-05-05"
    assert row["status"] == "completed"


def test_new_record_to_row_has_no_id():
    rec = NewAppointment("Ana", date(2025, 5, 5), "10:00", "Lavado básico")
    row = appointment_to_row(rec)
    assert "id" not in row and "status" not in row
    assert row["date"] == "2025-05-05"


def test_payload_shape():
    p = appointment_to_payload(appointment_from_row(ROW))
    assert p["id"] == "7"
    assert p["date"] == "05/05/2025"
    assert p["clientName"] == "Ana"
    assert p["price"] == 15000 and isinstance(p["price"], int)
    assert p["paymentMethod"] == "Efectivo"


def test_payload_accepts_both_date_formats():
    a = new_appointment_from_payload({"clientName": " Ana ", "date": "05/05/2025", "time": "10:00"})
    b = new_appointment_from_payload({"clientName": "Ana", "date": "2025-05-05", "time": "10:00"})
    assert a.client_name == "Ana"
    assert a.date == b.date == date(2025, 5, 5)


def test_payload_bad_date():
    with pytest.raises(MalformedRecordError):
        new_appointment_from_payload({"date": "31/02/2025"})


def test_parse_any_date_empty():
    assert parse_any_date("") is None
    assert parse_any_date(None) is None
