"""
serializers.py
==============

DRF-сериализаторы API.

Важно:
- Записи отдаются в форме фронтенда (camelCase, дата DD/MM/YYYY) —
  её строит `washapp.mappers`, здесь только входные данные и справочники.
- Бизнес-проверки формы записи — в `washapp.booking.validate_booking`;
  сериализатор лишь превращает их в ValidationError.
"""

from __future__ import annotations

from typing import Any, Dict

from rest_framework import serializers

from washapp.booking import validate_booking
from washapp.calendar_view import CalendarGrid, StackedEntry
from washapp.exceptions import MalformedRecordError
from washapp.mappers import (
    appointment_to_payload,
    new_appointment_from_payload,
    to_display_date,
    to_iso_date,
)
from washapp.models import Client, Vehicle


class BookingSerializer(serializers.Serializer):
    """
    Форма новой записи.

    После is_valid() в validated_data["record"] лежит NewAppointment.
    """

    clientName = serializers.CharField(required=False, allow_blank=True, default="")
    date = serializers.CharField(required=False, allow_blank=True, default="")
    time = serializers.CharField(required=False, allow_blank=True, default="")
    serviceType = serializers.CharField(required=False, allow_blank=True, default="")
    location = serializers.CharField(required=False, allow_blank=True, default="")
    isHomeService = serializers.BooleanField(required=False, default=False)

    def validate(self, attrs: Dict[str, Any]) -> Dict[str, Any]:
        try:
            record = new_appointment_from_payload(attrs)
        except MalformedRecordError:
            raise serializers.ValidationError({"date": "Fecha inválida"})
        errors = validate_booking(record)
        if errors:
            raise serializers.ValidationError(errors)
        attrs["record"] = record
        return attrs


class StatusUpdateSerializer(serializers.Serializer):
    """Смена статуса: completed (со способом оплаты) или cancelled."""

    status = serializers.CharField()
    paymentMethod = serializers.CharField(required=False, allow_null=True, allow_blank=True)


class VehicleSerializer(serializers.ModelSerializer):
    licensePlate = serializers.CharField(source="license_plate", required=False, allow_blank=True)
    type = serializers.ChoiceField(source="vehicle_type", choices=Vehicle.VehicleType.choices, required=False)

    class Meta:
        model = Vehicle
        fields = ["id", "make", "model", "year", "licensePlate", "type", "color"]
        read_only_fields = ["id"]


class ClientSerializer(serializers.ModelSerializer):
    """
    Сериализатор клиентов (форма фронтенда: camelCase).
    """

    preferredContactMethod = serializers.ChoiceField(
        source="preferred_contact_method",
        choices=Client.ContactMethod.choices,
        required=False,
    )
    loyaltyPoints = serializers.IntegerField(source="loyalty_points", read_only=True)
    lastServiceDate = serializers.SerializerMethodField()
    vehicles = VehicleSerializer(many=True, read_only=True)

    class Meta:
        model = Client
        fields = [
            "id",
            "name",
            "email",
            "phone",
            "preferredContactMethod",
            "vehicles",
            "notes",
            "loyaltyPoints",
            "lastServiceDate",
        ]
        read_only_fields = ["id"]

    def get_lastServiceDate(self, obj: Client):
        return to_display_date(obj.last_service_date) if obj.last_service_date else None


class LoyaltySerializer(serializers.Serializer):
    points = serializers.IntegerField()


# ---------------------------------------------------------------------------
# Календарь: сетка -> JSON
# ---------------------------------------------------------------------------

def _entry_payload(entry: StackedEntry) -> Dict[str, Any]:
    return {
        "appointment": appointment_to_payload(entry.appointment),
        "zIndex": entry.z_index,
        "offsetX": entry.offset_x,
        "offsetY": entry.offset_y,
        "marker": entry.marker,
    }


def calendar_grid_payload(grid: CalendarGrid) -> Dict[str, Any]:
    """Сетка календаря в JSON для фронтенда."""
    return {
        "view": grid.view_mode,
        "widthClass": grid.width_class,
        "selectedDate": to_iso_date(grid.selected_date),
        "anchor": to_iso_date(grid.anchor),
        "previousDate": to_iso_date(grid.previous_date),
        "nextDate": to_iso_date(grid.next_date),
        "days": [
            {
                "date": to_iso_date(column.date),
                "displayDate": to_display_date(column.date),
                "hours": [
                    {"hour": row.hour, "entries": [_entry_payload(e) for e in row.entries]}
                    for row in column.hours
                ],
            }
            for column in grid.days
        ],
    }
