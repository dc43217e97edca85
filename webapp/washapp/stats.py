"""
stats.py
========

Производная статистика по записям: метрики и простая бухгалтерия.

Все функции принимают уже загруженный список доменных записей
(см. `AppointmentRepository.list`) и ничего не пишут.
"""

from __future__ import annotations

from collections import Counter
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Optional, Union

from .domain import (
    STATUS_CANCELLED,
    STATUS_COMPLETED,
    STATUS_PENDING,
    Appointment,
)

PAYMENT_CASH = "Efectivo"
PAYMENT_ELECTRONIC = "Mercado Pago"


def appointment_stats(appointments: Iterable[Appointment]) -> Dict[str, Any]:
    """
    Сводка для страницы метрик.

    :return: {total, completed, cancelled, pending, completion_rate,
              home_services, workshop_services, service_types}
    """
    items = list(appointments)
    total = len(items)
    statuses = Counter(a.status for a in items)
    home = sum(1 for a in items if a.is_home_service)

    service_types: Dict[str, int] = {}
    for appt in items:
        service_types[appt.service_type] = service_types.get(appt.service_type, 0) + 1

    completed = statuses[STATUS_COMPLETED]
    return {
        "total": total,
        "completed": completed,
        "cancelled": statuses[STATUS_CANCELLED],
        "pending": statuses[STATUS_PENDING],
        "completion_rate": (completed / total) * 100 if total else 0.0,
        "home_services": home,
        "workshop_services": total - home,
        "service_types": service_types,
    }


def completed_appointments(appointments: Iterable[Appointment]) -> List[Appointment]:
    return [a for a in appointments if a.status == STATUS_COMPLETED]


def total_revenue(appointments: Iterable[Appointment]) -> Decimal:
    """Сумма цен завершённых записей (пустая цена считается нулём)."""
    return sum(
        (a.price or Decimal("0") for a in completed_appointments(appointments)),
        Decimal("0"),
    )


def revenue_by_month(appointments: Iterable[Appointment]) -> Dict[str, Decimal]:
    """
    Выручка по месяцам.

    :return: {"MM/YYYY": сумма}, месяцы по возрастанию
    """
    totals: Dict[tuple, Decimal] = {}
    for appt in completed_appointments(appointments):
        key = (appt.date.year, appt.date.month)
        totals[key] = totals.get(key, Decimal("0")) + (appt.price or Decimal("0"))
    return {f"{month:02d}/{year}": totals[(year, month)] for year, month in sorted(totals)}


def payment_method_totals(appointments: Iterable[Appointment]) -> Dict[str, Decimal]:
    """Выручка по способам оплаты (наличные / Mercado Pago)."""
    totals = {PAYMENT_CASH: Decimal("0"), PAYMENT_ELECTRONIC: Decimal("0")}
    for appt in completed_appointments(appointments):
        if appt.payment_method in totals:
            totals[appt.payment_method] += appt.price or Decimal("0")
    return totals


def format_price(value: Optional[Union[Decimal, int, float]]) -> str:
    """
    Цена в стиле чилийского песо: 15000 -> "$15.000".

    Копейки в CLP не показываются, значение округляется.
    """
    amount = int(round(Decimal(str(value or 0))))
    sign = "-" if amount < 0 else ""
    return f"{sign}${abs(amount):,}".replace(",", ".")
