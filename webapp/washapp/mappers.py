"""
mappers.py
==========

Единственное место, где форма данных хранилища превращается в доменную
и обратно.

Три представления записи:
1) строка хранилища — snake_case, дата ISO `YYYY-MM-DD` (или `date` из ORM);
2) доменный объект — `washapp.domain.Appointment`;
3) полезная нагрузка для фронтенда — camelCase, дата `DD/MM/YYYY`.

Все функции чистые и тестируются без БД и сети.
"""

from __future__ import annotations

from datetime import date as date_cls, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Mapping, Optional, Union

from .domain import STATUSES, Appointment, NewAppointment
from .exceptions import MalformedRecordError

ISO_DATE_FORMAT = "%Y-%m-%d"
DISPLAY_DATE_FORMAT = "%d/%m/%Y"

_ROW_REQUIRED = (
    "id",
    "client_name",
    "date",
    "time",
    "service_type",
    "location",
    "is_home_service",
    "status",
)


# ---------------------------------------------------------------------------
# Даты
# ---------------------------------------------------------------------------

def parse_iso_date(value: str) -> date_cls:
    """'2025-05-05' -> date(2025, 5, 5)."""
    return datetime.strptime(value.strip(), ISO_DATE_FORMAT).date()


def to_iso_date(value: date_cls) -> str:
    return value.strftime(ISO_DATE_FORMAT)


def parse_display_date(value: str) -> date_cls:
    """'05/05/2025' -> date(2025, 5, 5)."""
    return datetime.strptime(value.strip(), DISPLAY_DATE_FORMAT).date()


def to_display_date(value: date_cls) -> str:
    return value.strftime(DISPLAY_DATE_FORMAT)


def parse_any_date(value: Union[str, date_cls, None]) -> Optional[date_cls]:
    """
    Принять дату в любом из поддерживаемых видов.

    :param value: `date`, "YYYY-MM-DD", "DD/MM/YYYY" или None/""
    :return: date или None для пустого значения
    :raises ValueError: строка не подходит ни под один формат
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date_cls):
        return value
    text = str(value)
    if "/" in text:
        return parse_display_date(text)
    return parse_iso_date(text)


def _to_decimal(value: Any) -> Optional[Decimal]:
    if value is None or value == "":
        return None
    try:
        return Decimal(str(value))
    except InvalidOperation as exc:
        raise MalformedRecordError(f"bad price: {value!r}") from exc


def _decimal_to_json(value: Optional[Decimal]) -> Union[int, float, None]:
    if value is None:
        return None
    if value == value.to_integral_value():
        return int(value)
    return float(value)


# ---------------------------------------------------------------------------
# Appointment: строка хранилища <-> домен
# ---------------------------------------------------------------------------

def appointment_from_row(row: Mapping[str, Any]) -> Appointment:
    """
    Преобразовать строку хранилища в доменную запись.

    :param row: словарь с ключами в snake_case (например, из `.values()`)
    :return: Appointment
    :raises MalformedRecordError: нет обязательных ключей или значения не разбираются
    """
    if not isinstance(row, Mapping):
        raise MalformedRecordError(f"row is not a mapping: {type(row).__name__}")

    missing = [key for key in _ROW_REQUIRED if key not in row]
    if missing:
        raise MalformedRecordError(f"missing keys: {', '.join(missing)}")

    try:
        appt_date = parse_any_date(row["date"])
    except (TypeError, ValueError) as exc:
        raise MalformedRecordError(f"bad date: {row['date']!r}") from exc
    if appt_date is None:
        raise MalformedRecordError("empty date")

    status = row["status"]
    if status not in STATUSES:
        raise MalformedRecordError(f"unknown status: {status!r}")

    return Appointment(
        id=row["id"],
        client_name=row["client_name"] or "",
        date=appt_date,
        time=str(row["time"])[:5],
        service_type=row["service_type"] or "",
        location=row["location"] or "",
        is_home_service=bool(row["is_home_service"]),
        status=status,
        price=_to_decimal(row.get("price")),
        payment_method=row.get("payment_method") or None,
    )


def appointment_to_row(appt: Union[Appointment, NewAppointment]) -> Dict[str, Any]:
    """
    Обратное преобразование для записи в хранилище.

    Для `NewAppointment` ключи id/status/price/payment_method не выдаются —
    их добавляет репозиторий при вставке.
    """
    row: Dict[str, Any] = {
        "client_name": appt.client_name,
        "date": to_iso_date(appt.date) if appt.date else None,
        "time": appt.time,
        "service_type": appt.service_type,
        "location": appt.location,
        "is_home_service": appt.is_home_service,
    }
    if isinstance(appt, Appointment):
        row.update(
            id=appt.id,
            status=appt.status,
            price=appt.price,
            payment_method=appt.payment_method,
        )
    return row


# ---------------------------------------------------------------------------
# Appointment: домен <-> фронтенд
# ---------------------------------------------------------------------------

def appointment_to_payload(appt: Appointment) -> Dict[str, Any]:
    """Доменная запись -> JSON для фронтенда (camelCase, DD/MM/YYYY)."""
    return {
        "id": str(appt.id),
        "clientName": appt.client_name,
        "date": to_display_date(appt.date),
        "time": appt.time,
        "serviceType": appt.service_type,
        "location": appt.location,
        "isHomeService": appt.is_home_service,
        "status": appt.status,
        "price": _decimal_to_json(appt.price),
        "paymentMethod": appt.payment_method,
    }


def new_appointment_from_payload(payload: Mapping[str, Any]) -> NewAppointment:
    """
    Данные формы (camelCase) -> NewAppointment.

    Дата принимается и как ISO, и как DD/MM/YYYY.

    :raises MalformedRecordError: дата не разбирается
    """
    try:
        appt_date = parse_any_date(payload.get("date"))
    except (TypeError, ValueError) as exc:
        raise MalformedRecordError(f"bad date: {payload.get('date')!r}") from exc

    return NewAppointment(
        client_name=str(payload.get("clientName") or "").strip(),
        date=appt_date,
        time=str(payload.get("time") or "").strip(),
        service_type=str(payload.get("serviceType") or "").strip(),
        location=str(payload.get("location") or "").strip(),
        is_home_service=bool(payload.get("isHomeService", False)),
    )


# ---------------------------------------------------------------------------
# Service (каталог)
# ---------------------------------------------------------------------------

def service_to_payload(service: Any) -> Dict[str, Any]:
    """ORM-объект Service -> JSON (форма ответа каталога)."""
    return {
        "id": str(service.id),
        "name": service.name,
        "price": _decimal_to_json(service.price),
        "created_at": service.created_at.isoformat() if service.created_at else None,
        "updated_at": service.updated_at.isoformat() if service.updated_at else None,
    }
