"""
repository.py
=============

Слой доступа к хранилищу записей и каталогу услуг.

Слои:
- `AppointmentRepository` — интерфейс (list / get / insert / update / count_for_slot);
- `InMemoryAppointmentRepository` — список в памяти процесса (демо, тесты);
- `DjangoAppointmentRepository` — реляционное хранилище через Django ORM;
- `ServiceCatalog` + две реализации — поиск цены по названию услуги.

Важно:
- Логика проверки слотов и календаря получает репозиторий параметром
  и не знает, какая реализация подключена.
- Любой сбой хранилища превращается в `StoreUnavailableError`.
- Битые строки из хранилища логируются и пропускаются.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from datetime import date as date_cls
from decimal import Decimal
from itertools import count
from typing import Any, Dict, Iterable, List, Mapping, Optional

from django.conf import settings
from django.db import DatabaseError, transaction
from django.utils import timezone
from django.utils.module_loading import import_string

from . import models
from .domain import STATUS_CANCELLED, STATUS_PENDING, Appointment, NewAppointment
from .exceptions import MalformedRecordError, StoreUnavailableError
from .mappers import appointment_from_row, appointment_to_row

logger = logging.getLogger(__name__)

ROW_FIELDS = (
    "id",
    "client_name",
    "date",
    "time",
    "service_type",
    "location",
    "is_home_service",
    "status",
    "price",
    "payment_method",
)


def _map_rows(rows: Iterable[Mapping[str, Any]]) -> List[Appointment]:
    """Разобрать строки, пропуская битые (с предупреждением в лог)."""
    result: List[Appointment] = []
    for row in rows:
        try:
            result.append(appointment_from_row(row))
        except MalformedRecordError as exc:
            logger.warning("STORE: skip malformed appointment row %r: %s", row, exc)
    return result


# --------------------------------------------------------------------------- #
# Интерфейс
# --------------------------------------------------------------------------- #
class AppointmentRepository(ABC):
    """
    Хранилище записей.

    Методы:
        list(status=None) -> list[Appointment]
        get(appointment_id) -> Appointment | None
        insert(record, status, price) -> Appointment
        update(appointment_id, expected_status=None, **fields) -> Appointment | None
        count_for_slot(date, time, exclude_status="cancelled") -> int

    Исключения:
        StoreUnavailableError: хранилище недоступно.
    """

    @abstractmethod
    def list(self, status: Optional[str] = None) -> List[Appointment]:
        ...

    @abstractmethod
    def get(self, appointment_id: Any) -> Optional[Appointment]:
        ...

    @abstractmethod
    def insert(
        self,
        record: NewAppointment,
        status: str = STATUS_PENDING,
        price: Optional[Decimal] = None,
    ) -> Appointment:
        ...

    @abstractmethod
    def update(
        self,
        appointment_id: Any,
        expected_status: Optional[str] = None,
        **fields: Any,
    ) -> Optional[Appointment]:
        """
        Обновить поля записи.

        :param expected_status: если задан, запись меняется только в этом статусе
                                (условная запись; иначе None)
        :return: обновлённая запись или None (нет записи или статус уже другой)
        """

    @abstractmethod
    def count_for_slot(
        self,
        slot_date: date_cls,
        time: str,
        exclude_status: str = STATUS_CANCELLED,
    ) -> int:
        ...


# --------------------------------------------------------------------------- #
# Реализация в памяти
# --------------------------------------------------------------------------- #
class InMemoryAppointmentRepository(AppointmentRepository):
    """
    Записи хранятся списком в памяти процесса.

    Порядок списка — порядок вставки; его же возвращает `list()`.
    """

    def __init__(self, rows: Optional[Iterable[Mapping[str, Any]]] = None) -> None:
        self._items: List[Appointment] = _map_rows(rows or [])
        start = max((int(a.id) for a in self._items if str(a.id).isdigit()), default=0) + 1
        self._ids = count(start)

    def list(self, status: Optional[str] = None) -> List[Appointment]:
        if status is None:
            return list(self._items)
        return [a for a in self._items if a.status == status]

    def get(self, appointment_id: Any) -> Optional[Appointment]:
        for appt in self._items:
            if str(appt.id) == str(appointment_id):
                return appt
        return None

    def insert(
        self,
        record: NewAppointment,
        status: str = STATUS_PENDING,
        price: Optional[Decimal] = None,
    ) -> Appointment:
        appt = Appointment(
            id=next(self._ids),
            client_name=record.client_name,
            date=record.date,
            time=record.time,
            service_type=record.service_type,
            location=record.location,
            is_home_service=record.is_home_service,
            status=status,
            price=price,
        )
        self._items.append(appt)
        logger.info("STORE(mem): insert id=%s %s %s", appt.id, appt.date, appt.time)
        return appt

    def update(
        self,
        appointment_id: Any,
        expected_status: Optional[str] = None,
        **fields: Any,
    ) -> Optional[Appointment]:
        for index, appt in enumerate(self._items):
            if str(appt.id) == str(appointment_id):
                if expected_status is not None and appt.status != expected_status:
                    return None
                updated = appt.with_changes(**fields)
                self._items[index] = updated
                logger.info("STORE(mem): update id=%s fields=%s", appointment_id, sorted(fields))
                return updated
        return None

    def count_for_slot(
        self,
        slot_date: date_cls,
        time: str,
        exclude_status: str = STATUS_CANCELLED,
    ) -> int:
        return sum(
            1
            for a in self._items
            if a.date == slot_date and a.time == time and a.status != exclude_status
        )


# --------------------------------------------------------------------------- #
# Реализация на Django ORM
# --------------------------------------------------------------------------- #
class DjangoAppointmentRepository(AppointmentRepository):
    """
    Записи в реляционной БД (таблица appointments).

    Чтение идёт через `.values()`, т.е. «сырые» строки в snake_case,
    которые разбирает `washapp.mappers` — так же, как ответ внешнего хранилища.
    """

    def list(self, status: Optional[str] = None) -> List[Appointment]:
        try:
            qs = models.Appointment.objects.all()
            if status is not None:
                qs = qs.filter(status=status)
            rows = list(qs.values(*ROW_FIELDS))
        except DatabaseError as exc:
            logger.exception("STORE: list appointments failed status=%s", status)
            raise StoreUnavailableError(str(exc)) from exc
        logger.debug("STORE: list appointments status=%s count=%s", status, len(rows))
        return _map_rows(rows)

    def get(self, appointment_id: Any) -> Optional[Appointment]:
        try:
            pk = int(appointment_id)
        except (TypeError, ValueError):
            return None
        try:
            row = models.Appointment.objects.filter(pk=pk).values(*ROW_FIELDS).first()
        except DatabaseError as exc:
            logger.exception("STORE: get appointment failed id=%s", appointment_id)
            raise StoreUnavailableError(str(exc)) from exc
        if row is None:
            return None
        try:
            return appointment_from_row(row)
        except MalformedRecordError as exc:
            logger.warning("STORE: malformed appointment row id=%s: %s", appointment_id, exc)
            return None

    def insert(
        self,
        record: NewAppointment,
        status: str = STATUS_PENDING,
        price: Optional[Decimal] = None,
    ) -> Appointment:
        fields: Dict[str, Any] = appointment_to_row(record)
        try:
            with transaction.atomic():
                obj = models.Appointment.objects.create(status=status, price=price, **fields)
        except DatabaseError as exc:
            logger.exception("STORE: insert appointment failed %s %s", record.date, record.time)
            raise StoreUnavailableError(str(exc)) from exc
        logger.info("STORE: insert ok id=%s %s %s", obj.pk, obj.date, obj.time)
        return self.get(obj.pk)

    def update(
        self,
        appointment_id: Any,
        expected_status: Optional[str] = None,
        **fields: Any,
    ) -> Optional[Appointment]:
        try:
            pk = int(appointment_id)
        except (TypeError, ValueError):
            return None
        try:
            qs = models.Appointment.objects.filter(pk=pk)
            if expected_status is not None:
                qs = qs.filter(status=expected_status)
            updated = qs.update(
                updated_at=timezone.now(), **fields
            )
        except DatabaseError as exc:
            logger.exception("STORE: update appointment failed id=%s", appointment_id)
            raise StoreUnavailableError(str(exc)) from exc
        logger.info("STORE: update id=%s fields=%s updated=%s", pk, sorted(fields), bool(updated))
        if not updated:
            return None
        return self.get(pk)

    def count_for_slot(
        self,
        slot_date: date_cls,
        time: str,
        exclude_status: str = STATUS_CANCELLED,
    ) -> int:
        try:
            return (
                models.Appointment.objects
                .filter(date=slot_date, time=time)
                .exclude(status=exclude_status)
                .count()
            )
        except DatabaseError as exc:
            logger.exception("STORE: count_for_slot failed %s %s", slot_date, time)
            raise StoreUnavailableError(str(exc)) from exc


# --------------------------------------------------------------------------- #
# Каталог услуг
# --------------------------------------------------------------------------- #
class ServiceCatalog(ABC):
    """Поиск цены по названию услуги."""

    @abstractmethod
    def lookup_price(self, service_type: str) -> Optional[Decimal]:
        """Цена услуги или None, если услуги нет в каталоге."""


class InMemoryServiceCatalog(ServiceCatalog):
    def __init__(self, prices: Optional[Mapping[str, Any]] = None) -> None:
        self._prices = {name: Decimal(str(price)) for name, price in (prices or {}).items()}

    def lookup_price(self, service_type: str) -> Optional[Decimal]:
        return self._prices.get(service_type)


class DjangoServiceCatalog(ServiceCatalog):
    """
    Каталог из таблицы services.

    Сбой БД здесь не блокирует запись: цена просто остаётся пустой.
    """

    def lookup_price(self, service_type: str) -> Optional[Decimal]:
        try:
            price = (
                models.Service.objects
                .filter(name=service_type)
                .values_list("price", flat=True)
                .first()
            )
        except DatabaseError:
            logger.exception("CATALOG: price lookup failed service=%r", service_type)
            return None
        if price is None:
            logger.warning("CATALOG: service %r not found, price left empty", service_type)
        return price


# --------------------------------------------------------------------------- #
# Подключаемые реализации
# --------------------------------------------------------------------------- #
def get_appointment_repository() -> AppointmentRepository:
    """Репозиторий записей, указанный в settings.WASHAPP_APPOINTMENT_REPOSITORY."""
    return import_string(settings.WASHAPP_APPOINTMENT_REPOSITORY)()


def get_service_catalog() -> ServiceCatalog:
    """Каталог услуг, указанный в settings.WASHAPP_SERVICE_CATALOG."""
    return import_string(settings.WASHAPP_SERVICE_CATALOG)()
