"""
booking.py
==========

Сценарии записи и смены статуса.

Содержит две логические группы:

1) Новая запись:
   - валидация данных формы;
   - проверка занятости слота (AvailabilityChecker);
   - подстановка цены из каталога услуг;
   - вставка в статусе `pending`.

2) Смена статуса:
   - только `pending -> completed | cancelled`;
   - способ оплаты обязателен для `completed` и не сохраняется для `cancelled`;
   - повторная смена статуса у завершённой записи отклоняется (`already_final`),
     запись условная (только из `pending`), поэтому и при гонке двух смен.

Соглашение о результате (как и в остальных сервисных функциях проекта):
функция возвращает кортеж `(объект | None, код_ошибки | None)`
и ничего не выбрасывает наружу.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Tuple

from django.conf import settings

from .availability import AvailabilityChecker
from .domain import (
    STATUS_CANCELLED,
    STATUS_COMPLETED,
    STATUS_PENDING,
    Appointment,
    NewAppointment,
)
from .exceptions import StoreUnavailableError
from .repository import AppointmentRepository, ServiceCatalog

logger = logging.getLogger(__name__)

# Коды ошибок
ERR_INVALID = "invalid"
ERR_SLOT_FULL = "slot_full"
ERR_STORE_UNAVAILABLE = "store_unavailable"
ERR_NOT_FOUND = "not_found"
ERR_INVALID_STATUS = "invalid_status"
ERR_PAYMENT_REQUIRED = "payment_method_required"
ERR_INVALID_PAYMENT = "invalid_payment_method"
ERR_ALREADY_FINAL = "already_final"

# Тексты для пользователя (фронтенд показывает их как есть)
ERROR_MESSAGES: Dict[str, str] = {
    ERR_INVALID: "Revise los datos del turno",
    ERR_SLOT_FULL: "No hay cupos disponibles para ese horario",
    ERR_STORE_UNAVAILABLE: "No se pudo conectar con la base de datos. Intente nuevamente",
    ERR_NOT_FOUND: "Turno no encontrado",
    ERR_INVALID_STATUS: "Estado inválido",
    ERR_PAYMENT_REQUIRED: "Seleccione el método de pago",
    ERR_INVALID_PAYMENT: "Método de pago inválido",
    ERR_ALREADY_FINAL: "El turno ya fue completado o cancelado",
}

Result = Tuple[Optional[Appointment], Optional[str]]


# ---------------------------------------------------------------------------
# Новая запись
# ---------------------------------------------------------------------------

def validate_booking(record: NewAppointment) -> Dict[str, str]:
    """
    Проверить данные формы записи.

    :param record: данные формы
    :return: {поле: сообщение}; пустой словарь — всё в порядке
    """
    errors: Dict[str, str] = {}
    if not record.client_name:
        errors["clientName"] = "El nombre del cliente es obligatorio"
    if record.date is None:
        errors["date"] = "La fecha es obligatoria"
    if not record.time:
        errors["time"] = "El horario es obligatorio"
    elif record.time not in settings.WASHAPP_TIME_SLOTS:
        errors["time"] = "Horario fuera de los turnos disponibles"
    if not record.service_type:
        errors["serviceType"] = "El servicio es obligatorio"
    if record.is_home_service and not record.location:
        errors["location"] = "La dirección es obligatoria para servicio a domicilio"
    return errors


def _normalized(record: NewAppointment) -> NewAppointment:
    """Для мойки в мастерской адрес всегда заменяется на фиксированное значение."""
    if record.is_home_service:
        return record
    return NewAppointment(
        client_name=record.client_name,
        date=record.date,
        time=record.time,
        service_type=record.service_type,
        location=settings.WASHAPP_WORKSHOP_LOCATION,
        is_home_service=False,
    )


def book_appointment(
    record: NewAppointment,
    repository: AppointmentRepository,
    catalog: ServiceCatalog,
    checker: Optional[AvailabilityChecker] = None,
) -> Result:
    """
    Записать клиента на услугу.

    Шаги: валидация -> проверка слота -> цена из каталога -> вставка.

    Проверка слота и вставка не атомарны: при одновременных заявках
    на последний свободный слот обе могут пройти.

    :param record: данные формы
    :param repository: хранилище записей
    :param catalog: каталог услуг (цена)
    :param checker: проверка занятости; по умолчанию поверх того же хранилища
    :return: (Appointment, None) или (None, код ошибки)
    """
    errors = validate_booking(record)
    if errors:
        logger.warning("BOOK: validation failed fields=%s", sorted(errors))
        return None, ERR_INVALID

    checker = checker or AvailabilityChecker(repository)
    record = _normalized(record)

    try:
        if not checker.can_book(record.date, record.time):
            logger.warning("BOOK: slot full %s %s", record.date, record.time)
            return None, ERR_SLOT_FULL

        price = catalog.lookup_price(record.service_type)
        appt = repository.insert(record, status=STATUS_PENDING, price=price)
    except StoreUnavailableError:
        logger.exception("BOOK: store unavailable %s %s", record.date, record.time)
        return None, ERR_STORE_UNAVAILABLE

    logger.info(
        "BOOK: ok id=%s %s %s service=%r price=%s",
        appt.id, appt.date, appt.time, appt.service_type, appt.price,
    )
    return appt, None


# ---------------------------------------------------------------------------
# Смена статуса
# ---------------------------------------------------------------------------

def update_status(
    appointment_id: Any,
    status: str,
    repository: AppointmentRepository,
    payment_method: Optional[str] = None,
) -> Result:
    """
    Перевести запись из `pending` в `completed` или `cancelled`.

    :param appointment_id: id записи
    :param status: "completed" или "cancelled"
    :param repository: хранилище записей
    :param payment_method: "Efectivo" / "Mercado Pago" (только для completed)
    :return: (Appointment, None) или (None, код ошибки)
    """
    if status not in (STATUS_COMPLETED, STATUS_CANCELLED):
        return None, ERR_INVALID_STATUS

    if status == STATUS_COMPLETED:
        if not payment_method:
            return None, ERR_PAYMENT_REQUIRED
        if payment_method not in settings.WASHAPP_PAYMENT_METHODS:
            return None, ERR_INVALID_PAYMENT
    else:
        payment_method = None

    try:
        current = repository.get(appointment_id)
        if current is None:
            return None, ERR_NOT_FOUND
        if current.is_terminal:
            logger.warning(
                "STATUS: id=%s already %s, refusing %s", appointment_id, current.status, status
            )
            return None, ERR_ALREADY_FINAL

        # Запись меняется, только если она всё ещё pending: параллельная
        # смена статуса между чтением и записью не перезапишет результат.
        updated = repository.update(
            appointment_id,
            expected_status=STATUS_PENDING,
            status=status,
            payment_method=payment_method,
        )
        if updated is None:
            latest = repository.get(appointment_id)
    except StoreUnavailableError:
        logger.exception("STATUS: store unavailable id=%s", appointment_id)
        return None, ERR_STORE_UNAVAILABLE

    if updated is None:
        if latest is None:
            return None, ERR_NOT_FOUND
        logger.warning(
            "STATUS: id=%s changed to %s concurrently, refusing %s",
            appointment_id, latest.status, status,
        )
        return None, ERR_ALREADY_FINAL

    logger.info("STATUS: id=%s -> %s payment=%s", appointment_id, status, payment_method)
    return updated, None
