"""
domain.py
=========

Доменные объекты записи, независимые от ORM и от формы ответа хранилища.

Бизнес-логика (проверка слота, календарь, статистика) работает только
с этими объектами; в строки БД и в JSON их превращает `washapp.mappers`.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date as date_cls
from decimal import Decimal
from typing import Optional, Union

STATUS_PENDING = "pending"
STATUS_COMPLETED = "completed"
STATUS_CANCELLED = "cancelled"

STATUSES = (STATUS_PENDING, STATUS_COMPLETED, STATUS_CANCELLED)
TERMINAL_STATUSES = (STATUS_COMPLETED, STATUS_CANCELLED)


@dataclass(frozen=True)
class Appointment:
    """Запись на мойку в доменном виде."""

    id: Union[int, str]
    client_name: str
    date: date_cls
    time: str
    service_type: str
    location: str
    is_home_service: bool
    status: str = STATUS_PENDING
    price: Optional[Decimal] = None
    payment_method: Optional[str] = None

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES

    @property
    def hour(self) -> int:
        return slot_hour(self.time)

    def with_changes(self, **fields) -> "Appointment":
        return replace(self, **fields)


@dataclass
class NewAppointment:
    """Данные формы записи (ещё без id, статуса и цены)."""

    client_name: str
    date: Optional[date_cls]
    time: str
    service_type: str
    location: str = ""
    is_home_service: bool = False


def slot_hour(time_label: str) -> int:
    """
    Ключ часового слота: целый час из метки "HH:MM".

    :param time_label: метка слота, например "09:30"
    :return: 9
    :raises ValueError: если метка не начинается с числа часов
    """
    head = str(time_label).split(":", 1)[0].strip()
    hour = int(head)
    if not 0 <= hour <= 23:
        raise ValueError(f"hour out of range: {time_label!r}")
    return hour

