# tests/test_booking.py
from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from washapp.booking import (
    ERR_ALREADY_FINAL,
    ERR_INVALID,
    ERR_INVALID_PAYMENT,
    ERR_INVALID_STATUS,
    ERR_NOT_FOUND,
    ERR_PAYMENT_REQUIRED,
    ERR_SLOT_FULL,
    ERR_STORE_UNAVAILABLE,
    book_appointment,
    update_status,
    validate_booking,
)
from washapp.domain import NewAppointment
from washapp.repository import (
    DjangoAppointmentRepository,
    DjangoServiceCatalog,
    InMemoryAppointmentRepository,
    InMemoryServiceCatalog,
)


def _form(**extra) -> NewAppointment:
    fields = dict(
        client_name="Ana",
        date=date(2025, 5, 5),
        time="10:00",
        service_type="Lavado completo",
    )
    fields.update(extra)
    return NewAppointment(**fields)


# --- валидация ---

def test_validate_ok():
    assert validate_booking(_form()) == {}


def test_validate_reports_fields():
    errors = validate_booking(_form(client_name="", date=None, time="08:15", service_type=""))
    assert set(errors) == {"clientName", "date", "time", "serviceType"}


def test_home_service_needs_address():
    assert "location" in validate_booking(_form(is_home_service=True, location=""))
    assert validate_booking(_form(is_home_service=True, location="Av. Siempre Viva 742")) == {}


# --- новая запись ---

def test_booking_takes_price_from_catalog(repo, price_catalog):
    a, err = book_appointment(_form(), repo, price_catalog)
    assert err is None
    assert a.status == "pending"
    assert a.price == Decimal("15000")
    assert a.location == "Taller principal"
    assert repo.get(a.id) == a


def test_booking_without_catalog_price(repo):
    a, err = book_appointment(_form(service_type="Lavado premium"), repo, InMemoryServiceCatalog())
    assert err is None
    assert a.price is None


def test_home_service_keeps_address(repo, price_catalog):
    a, err = book_appointment(
        _form(is_home_service=True, location="Av. Siempre Viva 742"), repo, price_catalog
    )
    assert err is None
    assert a.location == "Av. Siempre Viva 742"


def test_third_booking_rejected(repo, price_catalog):
    assert book_appointment(_form(client_name="A"), repo, price_catalog)[1] is None
    assert book_appointment(_form(client_name="B"), repo, price_catalog)[1] is None
    a, err = book_appointment(_form(client_name="C"), repo, price_catalog)
    assert a is None and err == ERR_SLOT_FULL
    assert len(repo.list()) == 2


def test_cancel_frees_the_slot(repo, price_catalog):
    first, _ = book_appointment(_form(client_name="A"), repo, price_catalog)
    book_appointment(_form(client_name="B"), repo, price_catalog)
    update_status(first.id, "cancelled", repo)
    _, err = book_appointment(_form(client_name="C"), repo, price_catalog)
    assert err is None


def test_invalid_form_not_stored(repo, price_catalog):
    a, err = book_appointment(_form(client_name=""), repo, price_catalog)
    assert (a, err) == (None, ERR_INVALID)
    assert repo.list() == []


def test_store_down_blocks_booking(failing_repo, price_catalog):
    a, err = book_appointment(_form(), failing_repo, price_catalog)
    assert (a, err) == (None, ERR_STORE_UNAVAILABLE)
    assert failing_repo.inserted == []


@pytest.mark.django_db
def test_booking_with_django_stack(make_service):
    make_service("Lavado completo", 15000)
    repo = DjangoAppointmentRepository()
    a, err = book_appointment(_form(), repo, DjangoServiceCatalog())
    assert err is None
    assert a.price == Decimal("15000")
    assert repo.list(status="pending") == [a]


@pytest.mark.django_db
def test_django_catalog_miss_leaves_price_empty():
    assert DjangoServiceCatalog().lookup_price("Lavado de motor") is None


# --- смена статуса ---

@pytest.fixture
def booked(repo, price_catalog):
    a, _ = book_appointment(_form(), repo, price_catalog)
    return a


def test_complete_with_cash(repo, booked):
    a, err = update_status(booked.id, "completed", repo, payment_method="Efectivo")
    assert err is None
    assert a.status == "completed" and a.payment_method == "Efectivo"


def test_complete_requires_payment(repo, booked):
    assert update_status(booked.id, "completed", repo) == (None, ERR_PAYMENT_REQUIRED)
    assert update_status(booked.id, "completed", repo, "Bitcoin") == (None, ERR_INVALID_PAYMENT)
    assert repo.get(booked.id).status == "pending"


def test_cancel_drops_payment(repo, booked):
    a, err = update_status(booked.id, "cancelled", repo, payment_method="Efectivo")
    assert err is None
    assert a.status == "cancelled" and a.payment_method is None


def test_final_status_is_final(repo, booked):
    update_status(booked.id, "completed", repo, payment_method="Mercado Pago")
    a, err = update_status(booked.id, "cancelled", repo)
    assert (a, err) == (None, ERR_ALREADY_FINAL)
    assert repo.get(booked.id).payment_method == "Mercado Pago"


def test_status_errors(repo, booked, failing_repo):
    assert update_status(booked.id, "pending", repo) == (None, ERR_INVALID_STATUS)
    assert update_status(999, "cancelled", repo) == (None, ERR_NOT_FOUND)
    assert update_status(booked.id, "cancelled", failing_repo) == (None, ERR_STORE_UNAVAILABLE)


@pytest.mark.django_db
def test_status_update_in_database(make_appointment):
    row = make_appointment()
    repo = DjangoAppointmentRepository()
    a, err = update_status(row.pk, "completed", repo, payment_method="Efectivo")
    assert err is None
    row.refresh_from_db()
    assert row.status == "completed" and row.payment_method == "Efectivo"
    assert update_status(row.pk, "completed", repo, payment_method="Efectivo")[1] == ERR_ALREADY_FINAL


# --- гонка смены статуса: чтение видело pending, а запись уже завершена ---

def _stale_reader(base):
    """
    Репозиторий, у которого первое чтение записи отдаёт устаревший снимок
    `pending` (как у второго администратора, открывшего запись раньше).
    """

    class StaleReadRepository(base):
        stale_reads = 1

        def get(self, appointment_id):
            current = super().get(appointment_id)
            if current is not None and self.stale_reads:
                self.stale_reads -= 1
                return current.with_changes(status="pending", payment_method=None)
            return current

    return StaleReadRepository


def test_stale_pending_read_does_not_overwrite_final(price_catalog):
    stale = _stale_reader(InMemoryAppointmentRepository)()
    stale.stale_reads = 0
    a, _ = book_appointment(_form(), stale, price_catalog)
    update_status(a.id, "completed", stale, payment_method="Efectivo")

    stale.stale_reads = 1
    assert update_status(a.id, "cancelled", stale) == (None, ERR_ALREADY_FINAL)
    a = stale.get(a.id)
    assert a.status == "completed" and a.payment_method == "Efectivo"


@pytest.mark.django_db
def test_stale_pending_read_does_not_overwrite_final_in_database(make_appointment):
    row = make_appointment()
    update_status(row.pk, "completed", DjangoAppointmentRepository(), payment_method="Efectivo")

    stale = _stale_reader(DjangoAppointmentRepository)()
    assert update_status(row.pk, "cancelled", stale) == (None, ERR_ALREADY_FINAL)
    row.refresh_from_db()
    assert row.status == "completed" and row.payment_method == "Efectivo"


@pytest.mark.django_db
def test_status_update_on_malformed_row_is_not_found(make_appointment):
    row = make_appointment(status="archived")
    assert update_status(row.pk, "cancelled", DjangoAppointmentRepository()) == (None, ERR_NOT_FOUND)
