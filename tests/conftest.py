# tests/conftest.py
from __future__ import annotations

import os
import sys
from datetime import date
from decimal import Decimal

import pytest

# --- Путь к Django-проекту и настройка DJANGO_SETTINGS_MODULE ---
REPO_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))  # корень репо
WEBAPP_DIR = os.path.join(REPO_ROOT, "webapp")
if WEBAPP_DIR not in sys.path:
    sys.path.insert(0, WEBAPP_DIR)

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "webapp.settings_test")

import django  # noqa: E402
django.setup()  # noqa: E402

from rest_framework.test import APIClient  # noqa: E402

from washapp import models  # noqa: E402
from washapp.domain import Appointment  # noqa: E402
from washapp.exceptions import StoreUnavailableError  # noqa: E402
from washapp.repository import (  # noqa: E402
    AppointmentRepository,
    InMemoryAppointmentRepository,
    InMemoryServiceCatalog,
)


@pytest.fixture
def appt():
    """
    Фабрика доменных записей (без БД).
    """
    ids = iter(range(1, 10_000))

    def _create(
        day: date = date(2025, 5, 5),
        time: str = "10:00",
        status: str = "pending",
        **extra,
    ) -> Appointment:
        fields = dict(
            id=next(ids),
            client_name="Ana",
            date=day,
            time=time,
            service_type="Lavado básico",
            location="Taller principal",
            is_home_service=False,
            status=status,
        )
        fields.update(extra)
        return Appointment(**fields)
    return _create


@pytest.fixture
def repo():
    return InMemoryAppointmentRepository()


@pytest.fixture
def price_catalog():
    return InMemoryServiceCatalog({"Lavado completo": 15000, "Lavado básico": 10000})


class FailingRepository(AppointmentRepository):
    """Хранилище, которое всегда «лежит»."""

    def __init__(self):
        self.inserted = []

    def list(self, status=None):
        raise StoreUnavailableError("connection refused")

    def get(self, appointment_id):
        raise StoreUnavailableError("connection refused")

    def insert(self, record, status="pending", price=None):
        self.inserted.append(record)
        raise StoreUnavailableError("connection refused")

    def update(self, appointment_id, expected_status=None, **fields):
        raise StoreUnavailableError("connection refused")

    def count_for_slot(self, slot_date, time, exclude_status="cancelled"):
        raise StoreUnavailableError("connection refused")


@pytest.fixture
def failing_repo():
    return FailingRepository()


@pytest.fixture
def make_appointment(db):
    """
    Фабрика записей в таблице appointments через ORM.
    """
    def _create(
        date: str = "2025-05-05",
        time: str = "10:00",
        status: str = "pending",
        client_name: str = "Ana",
        service_type: str = "Lavado básico",
        **extra,
    ) -> models.Appointment:
        fields = dict(
            client_name=client_name,
            date=date,
            time=time,
            service_type=service_type,
            location="Taller principal",
            is_home_service=False,
            status=status,
        )
        fields.update(extra)
        return models.Appointment.objects.create(**fields)
    return _create


@pytest.fixture
def make_service(db):
    def _create(name: str = "Lavado completo", price: int = 15000) -> models.Service:
        return models.Service.objects.create(name=name, price=Decimal(price))
    return _create


@pytest.fixture
def api_client():
    return APIClient()
