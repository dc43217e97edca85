"""
catalog.py
==========

Обслуживание каталога услуг: список и смена цены.

Цена при записи берётся через `ServiceCatalog.lookup_price`
(см. washapp.repository); здесь — только редактирование каталога.
"""

from __future__ import annotations

import logging
from decimal import Decimal, InvalidOperation
from typing import Any, Optional, Tuple

from django.db import transaction
from django.db.models import QuerySet

from .models import Service

logger = logging.getLogger(__name__)

ERR_INVALID_PRICE = "invalid_price"
ERR_NOT_FOUND = "not_found"


def list_services() -> QuerySet[Service]:
    """Все услуги по алфавиту."""
    return Service.objects.order_by("name")


def parse_price(raw: Any) -> Optional[Decimal]:
    """
    Разобрать цену из формы.

    Строки чистятся от всего, кроме цифр ("$15.000" -> 15000),
    как это делает форма редактирования цены.

    :return: Decimal > 0 или None
    """
    if isinstance(raw, str):
        raw = "".join(ch for ch in raw if ch.isdigit())
    try:
        price = Decimal(str(raw))
    except (InvalidOperation, ValueError):
        return None
    if not price.is_finite() or price <= 0:
        return None
    return price


@transaction.atomic
def update_service_price(service_id: Any, new_price: Any) -> Tuple[Optional[Service], Optional[str]]:
    """
    Обновить цену услуги.

    :param service_id: id услуги
    :param new_price: новая цена (> 0)
    :return: (Service, None) или (None, "invalid_price" | "not_found")
    """
    price = parse_price(new_price)
    if price is None:
        logger.warning("CATALOG: invalid price %r for service_id=%s", new_price, service_id)
        return None, ERR_INVALID_PRICE

    service = Service.objects.select_for_update().filter(pk=service_id).first()
    if service is None:
        return None, ERR_NOT_FOUND

    service.price = price
    service.save(update_fields=["price", "updated_at"])
    logger.info("CATALOG: service_id=%s price -> %s", service_id, price)
    return service, None
