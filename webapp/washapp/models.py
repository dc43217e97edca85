"""
models.py
=========

ORM-модели приложения `washapp`.

Содержит четыре сущности:

1. **Appointment** — запись клиента на мойку (турно).
   - Создаётся в статусе `pending`, затем один раз переводится
     в `completed` (с указанием способа оплаты) или `cancelled`.
   - Время хранится строкой "HH:MM" — это метка слота, а не точное время.

2. **Service** — каталог услуг с ценами.
   - По названию услуги при записи подставляется цена.

3. **Client** и **Vehicle** — справочник клиентов и их машин.
   - Используются только для поиска и отображения.

Бизнес-логика (занятость слотов, календарь) работает не с этими моделями,
а с доменными объектами из `washapp.domain` через репозиторий.
"""
from __future__ import annotations

from django.db import models


# ---------------------------------------------------------------------------
# Appointment: записи на мойку
# ---------------------------------------------------------------------------

class Appointment(models.Model):
    """
    Запись клиента на услугу в конкретный слот (дата + "HH:MM").

    Инварианты поддерживаются сервисным слоем (`washapp.booking`):
    - payment_method заполнен тогда и только тогда, когда status == completed;
    - для услуг в мастерской location == "Taller principal".
    """

    class Status(models.TextChoices):
        """Возможные статусы записи."""
        PENDING = "pending", "Pendiente"
        COMPLETED = "completed", "Completado"
        CANCELLED = "cancelled", "Cancelado"

    class PaymentMethod(models.TextChoices):
        """Способы оплаты при завершении."""
        CASH = "Efectivo", "Efectivo"
        ELECTRONIC = "Mercado Pago", "Mercado Pago"

    client_name = models.CharField("Клиент", max_length=255)
    date = models.DateField("Дата", db_index=True)
    time = models.CharField("Слот", max_length=5, help_text="Формат HH:MM")
    service_type = models.CharField("Услуга", max_length=255)
    location = models.CharField("Место", max_length=255)
    is_home_service = models.BooleanField("Выезд на дом", default=False)

    status = models.CharField(
        "Статус",
        max_length=20,
        choices=Status.choices,
        default=Status.PENDING,
        db_index=True,
    )
    price = models.DecimalField("Цена", max_digits=12, decimal_places=2, null=True, blank=True)
    payment_method = models.CharField(
        "Способ оплаты",
        max_length=32,
        choices=PaymentMethod.choices,
        null=True,
        blank=True,
    )

    created_at = models.DateTimeField("Создано", auto_now_add=True)
    updated_at = models.DateTimeField("Обновлено", auto_now=True)

    class Meta:
        db_table = "appointments"
        verbose_name = "Запись"
        verbose_name_plural = "Записи"
        ordering = ["date", "time", "id"]
        indexes = [models.Index(fields=["date", "time"], name="appointments_slot_idx")]

    def __str__(self) -> str:
        return (
            f"{self.date} {self.time} "
            f"[{self.get_status_display()}] "
            f"{self.client_name} — {self.service_type}"
        )


# ---------------------------------------------------------------------------
# Service: каталог услуг
# ---------------------------------------------------------------------------

class Service(models.Model):
    """Услуга автомойки и её текущая цена."""

    name = models.CharField("Название", max_length=255, unique=True)
    price = models.DecimalField("Цена", max_digits=12, decimal_places=2)

    created_at = models.DateTimeField("Создано", auto_now_add=True)
    updated_at = models.DateTimeField("Обновлено", auto_now=True)

    class Meta:
        db_table = "services"
        verbose_name = "Услуга"
        verbose_name_plural = "Услуги"
        ordering = ["name"]

    def __str__(self) -> str:
        return f"{self.name} ({self.price})"


# ---------------------------------------------------------------------------
# Client / Vehicle: справочник клиентов
# ---------------------------------------------------------------------------

class Client(models.Model):
    """Клиент автомойки с контактами и баллами лояльности."""

    class ContactMethod(models.TextChoices):
        EMAIL = "email", "Email"
        PHONE = "phone", "Teléfono"
        WHATSAPP = "whatsapp", "WhatsApp"

    name = models.CharField("Имя", max_length=255)
    email = models.EmailField("Email", blank=True, default="")
    phone = models.CharField("Телефон", max_length=50, blank=True, default="")
    preferred_contact_method = models.CharField(
        "Предпочтительная связь",
        max_length=20,
        choices=ContactMethod.choices,
        default=ContactMethod.PHONE,
    )
    notes = models.TextField("Заметки", blank=True, default="")
    loyalty_points = models.IntegerField("Баллы лояльности", default=0)
    last_service_date = models.DateField("Последняя услуга", null=True, blank=True)

    created_at = models.DateTimeField("Создан", auto_now_add=True)

    class Meta:
        db_table = "clients"
        verbose_name = "Клиент"
        verbose_name_plural = "Клиенты"
        ordering = ["name", "id"]

    def __str__(self) -> str:
        return self.name


class Vehicle(models.Model):
    """Машина клиента."""

    class VehicleType(models.TextChoices):
        SMALL = "small", "Pequeño"
        MEDIUM = "medium", "Mediano"
        LARGE = "large", "Grande"
        SUV = "suv", "SUV"
        TRUCK = "truck", "Camioneta"

    client = models.ForeignKey(
        Client,
        on_delete=models.CASCADE,
        related_name="vehicles",
        verbose_name="Клиент",
    )
    make = models.CharField("Марка", max_length=100)
    model = models.CharField("Модель", max_length=100)
    year = models.CharField("Год", max_length=4, blank=True, default="")
    license_plate = models.CharField("Номер", max_length=20, blank=True, default="")
    vehicle_type = models.CharField(
        "Тип",
        max_length=10,
        choices=VehicleType.choices,
        default=VehicleType.MEDIUM,
    )
    color = models.CharField("Цвет", max_length=50, blank=True, default="")

    class Meta:
        db_table = "vehicles"
        verbose_name = "Машина"
        verbose_name_plural = "Машины"

    def __str__(self) -> str:
        return f"{self.make} {self.model} ({self.license_plate})"
