"""
admin.py
========

Регистрация моделей приложения `washapp` в панели администратора Django.

Модели:
- Appointment — записи на мойку (создаются через API/фронтенд);
- Service — каталог услуг с ценами;
- Client — клиенты, с их машинами (Vehicle) в inline.

Цель:
Дать администратору быстро найти запись по клиенту или дате,
поправить цену услуги и посмотреть карточку клиента.
"""
from __future__ import annotations

from django.contrib import admin
from .models import Appointment, Client, Service, Vehicle
from .stats import format_price


@admin.register(Appointment)
class AppointmentAdmin(admin.ModelAdmin):
    """
    Админ-интерфейс для записей.

    Фильтрация по статусу, дате и типу услуги (выезд/мастерская),
    поиск по клиенту, услуге и адресу. Статус и способ оплаты только
    для чтения, иначе админка обошла бы правила `pending -> final`.
    """
    list_display = (
        "id",
        "date",
        "time",
        "client_name",
        "service_type",
        "is_home_service",
        "status",
        "price_display",
        "payment_method",
    )
    list_filter = ("status", "is_home_service", "payment_method", "date")
    search_fields = ("client_name", "service_type", "location")
    # Статус и оплата меняются только через API смены статуса.
    readonly_fields = ("status", "payment_method", "created_at", "updated_at")
    date_hierarchy = "date"

    @admin.display(description="Цена", ordering="price")
    def price_display(self, obj: Appointment) -> str:
        return format_price(obj.price) if obj.price is not None else "-"


@admin.register(Service)
class ServiceAdmin(admin.ModelAdmin):
    list_display = ("id", "name", "price_display", "updated_at")
    search_fields = ("name",)
    readonly_fields = ("created_at", "updated_at")

    @admin.display(description="Цена", ordering="price")
    def price_display(self, obj: Service) -> str:
        return format_price(obj.price)


class VehicleInline(admin.TabularInline):
    """Машины клиента прямо в его карточке."""
    model = Vehicle
    fields = ("make", "model", "year", "license_plate", "vehicle_type", "color")
    extra = 0


@admin.register(Client)
class ClientAdmin(admin.ModelAdmin):
    """
    Карточка клиента: контакты, баллы лояльности и машины.
    """
    list_display = (
        "id", "name", "phone", "email",
        "preferred_contact_method", "loyalty_points", "vehicles_total",
        "last_service_date",
    )
    search_fields = ("name", "phone", "email")
    list_filter = ("preferred_contact_method",)
    readonly_fields = ("created_at",)
    inlines = [VehicleInline]

    @admin.display(description="Машин")
    def vehicles_total(self, obj: Client) -> int:
        return obj.vehicles.count()
