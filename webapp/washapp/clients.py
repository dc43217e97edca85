"""
clients.py
==========

Справочник клиентов: поиск, баллы лояльности, машины, дата последней услуги.

Функции возвращают объект или None, если клиента с таким id нет.
"""

from __future__ import annotations

import logging
from datetime import date as date_cls
from typing import Any, Mapping, Optional

from django.db.models import F, QuerySet

from .models import Client, Vehicle

logger = logging.getLogger(__name__)


def search_clients(query: Optional[str] = None) -> QuerySet[Client]:
    """
    Поиск клиентов по имени без учёта регистра.

    :param query: подстрока имени; пусто — все клиенты
    """
    qs = Client.objects.prefetch_related("vehicles").order_by("name", "id")
    if query:
        qs = qs.filter(name__icontains=query.strip())
    return qs


def add_loyalty_points(client_id: Any, points: int) -> Optional[Client]:
    """Начислить (или списать отрицательным числом) баллы лояльности."""
    updated = Client.objects.filter(pk=client_id).update(
        loyalty_points=F("loyalty_points") + points
    )
    if not updated:
        return None
    logger.info("CLIENT: client_id=%s loyalty %+d", client_id, points)
    return Client.objects.get(pk=client_id)


def update_last_service_date(client_id: Any, service_date: date_cls) -> Optional[Client]:
    updated = Client.objects.filter(pk=client_id).update(last_service_date=service_date)
    if not updated:
        return None
    return Client.objects.get(pk=client_id)


def add_vehicle(client_id: Any, data: Mapping[str, Any]) -> Optional[Vehicle]:
    """
    Добавить машину клиенту.

    :param data: make, model, year, license_plate, vehicle_type, color
    """
    client = Client.objects.filter(pk=client_id).first()
    if client is None:
        return None
    vehicle = Vehicle.objects.create(client=client, **dict(data))
    logger.info("CLIENT: client_id=%s vehicle added id=%s", client_id, vehicle.pk)
    return vehicle
