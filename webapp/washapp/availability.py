"""
availability.py
===============

Проверка занятости слота перед записью.

Правило бизнеса: в один слот (дата + "HH:MM") одновременно не больше
`settings.WASHAPP_MAX_PER_SLOT` записей (по умолчанию 2 — два бокса).
Отменённые записи место не занимают.

Важно:
- Проверка «закрыта по умолчанию»: если хранилище недоступно,
  `StoreUnavailableError` уходит наверх. Нулём занятость не считается никогда.
- Проверка и последующая вставка не атомарны. Две одновременные заявки
  на последний свободный слот могут пройти обе — это известное ограничение.
"""

from __future__ import annotations

import logging
from datetime import date as date_cls
from typing import Dict, Optional, Union

from django.conf import settings

from .domain import STATUS_CANCELLED
from .repository import AppointmentRepository

logger = logging.getLogger(__name__)


class AvailabilityChecker:
    """
    Подсчёт активных записей в слоте и решение «можно ли записать».

    :param repository: любое хранилище записей (см. washapp.repository)
    :param max_per_slot: лимит на слот; по умолчанию из настроек
    """

    def __init__(
        self,
        repository: AppointmentRepository,
        max_per_slot: Optional[int] = None,
    ) -> None:
        self.repository = repository
        self.max_per_slot = (
            settings.WASHAPP_MAX_PER_SLOT if max_per_slot is None else max_per_slot
        )

    def count_active(self, slot_date: date_cls, time: str) -> int:
        """
        Сколько неотменённых записей стоит на дату/время.

        :raises StoreUnavailableError: хранилище недоступно
        """
        active = self.repository.count_for_slot(slot_date, time, exclude_status=STATUS_CANCELLED)
        logger.debug("SLOT: %s %s active=%s", slot_date, time, active)
        return active

    def can_book(
        self,
        slot_date: date_cls,
        time: str,
        max_per_slot: Optional[int] = None,
    ) -> bool:
        """
        Можно ли принять ещё одну запись в слот.

        :raises StoreUnavailableError: хранилище недоступно (запись не разрешаем)
        """
        limit = self.max_per_slot if max_per_slot is None else max_per_slot
        return self.count_active(slot_date, time) < limit

    def slot_summary(self, slot_date: date_cls, time: str) -> Dict[str, Union[int, bool]]:
        """
        Сводка по слоту для API.

        :return: {"count": ..., "max_per_slot": ..., "available": ...}
        """
        active = self.count_active(slot_date, time)
        return {
            "count": active,
            "max_per_slot": self.max_per_slot,
            "available": active < self.max_per_slot,
        }
