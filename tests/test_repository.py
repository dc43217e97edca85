# tests/test_repository.py
from __future__ import annotations

from datetime import date

import pytest
from django.db import DatabaseError

from washapp import models
from washapp.domain import NewAppointment
from washapp.exceptions import StoreUnavailableError
from washapp.repository import (
    DjangoAppointmentRepository,
    DjangoServiceCatalog,
    InMemoryAppointmentRepository,
    get_appointment_repository,
    get_service_catalog,
)

GOOD = {
    "id": "3",
    "client_name": "Ana",
    "date": "2025-05-05",
    "time": "10:00",
    "service_type": "Lavado básico",
    "location": "Taller principal",
    "is_home_service": False,
    "status": "pending",
}


def _db_down(*args, **kwargs):
    raise DatabaseError("server closed the connection unexpectedly")


def test_in_memory_skips_malformed_rows():
    repo = InMemoryAppointmentRepository([GOOD, {**GOOD, "date": "n/a"}, {"id": 9}])
    assert [a.id for a in repo.list()] == ["3"]


def test_in_memory_ids_continue_after_seed():
    repo = InMemoryAppointmentRepository([GOOD])
    a = repo.insert(NewAppointment("Pedro", date(2025, 5, 5), "11:00", "Lavado básico"))
    assert a.id == 4
    assert repo.get("4") == a


def test_in_memory_update_unknown():
    assert InMemoryAppointmentRepository().update(1, status="cancelled") is None


@pytest.mark.django_db
def test_django_repository_round_trip():
    repo = DjangoAppointmentRepository()
    a = repo.insert(NewAppointment("Ana", date(2025, 5, 5), "10:00", "Lavado básico", "Taller principal"))
    assert repo.get(a.id) == a
    assert repo.get("abc") is None
    updated = repo.update(a.id, status="cancelled")
    assert updated.status == "cancelled"
    assert repo.list(status="pending") == []
    assert repo.count_for_slot(date(2025, 5, 5), "10:00") == 0


@pytest.mark.django_db
def test_django_update_only_from_expected_status():
    repo = DjangoAppointmentRepository()
    a = repo.insert(NewAppointment("Ana", date(2025, 5, 5), "10:00", "Lavado básico", "Taller principal"))
    repo.update(a.id, expected_status="pending", status="completed", payment_method="Efectivo")
    assert repo.update(a.id, expected_status="pending", status="cancelled", payment_method=None) is None
    assert repo.get(a.id).payment_method == "Efectivo"


def test_in_memory_update_only_from_expected_status():
    repo = InMemoryAppointmentRepository([GOOD])
    repo.update("3", status="completed", payment_method="Efectivo")
    assert repo.update("3", expected_status="pending", status="cancelled") is None
    assert repo.get("3").status == "completed"


@pytest.mark.django_db
def test_django_get_skips_malformed_row(make_appointment):
    row = make_appointment(status="archived")
    assert DjangoAppointmentRepository().get(row.pk) is None


@pytest.mark.django_db
def test_django_repository_store_down(monkeypatch):
    monkeypatch.setattr(models.Appointment.objects, "all", _db_down)
    monkeypatch.setattr(models.Appointment.objects, "filter", _db_down)
    repo = DjangoAppointmentRepository()
    with pytest.raises(StoreUnavailableError):
        repo.list()
    with pytest.raises(StoreUnavailableError):
        repo.count_for_slot(date(2025, 5, 5), "10:00")
    with pytest.raises(StoreUnavailableError):
        repo.get(1)


@pytest.mark.django_db
def test_catalog_db_failure_gives_no_price(monkeypatch):
    monkeypatch.setattr(models.Service.objects, "filter", _db_down)
    assert DjangoServiceCatalog().lookup_price("Lavado completo") is None


def test_configured_implementations(settings):
    assert isinstance(get_appointment_repository(), DjangoAppointmentRepository)
    assert isinstance(get_service_catalog(), DjangoServiceCatalog)
    settings.WASHAPP_APPOINTMENT_REPOSITORY = "washapp.repository.InMemoryAppointmentRepository"
    assert isinstance(get_appointment_repository(), InMemoryAppointmentRepository)
