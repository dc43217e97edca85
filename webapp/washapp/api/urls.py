"""
urls.py (API)
=============

Маршрутизация DRF-эндпоинтов.
"""

from __future__ import annotations

from django.urls import path, include
from rest_framework.routers import DefaultRouter

from .views import (
    AccountingView,
    AppointmentViewSet,
    AvailabilityView,
    CalendarView,
    ClientViewSet,
    ServiceViewSet,
    StatsView,
)

router = DefaultRouter()
router.register(r"appointments", AppointmentViewSet, basename="appointments")
router.register(r"services", ServiceViewSet, basename="services")
router.register(r"clients", ClientViewSet, basename="clients")

urlpatterns = [
    # Занятость слота: /api/availability/?date=YYYY-MM-DD&time=HH:MM
    path("availability/", AvailabilityView.as_view(), name="availability"),
    # Сетка календаря: /api/calendar/?date=...&view=...&width=...&anchor=...
    path("calendar/", CalendarView.as_view(), name="calendar"),
    path("stats/", StatsView.as_view(), name="stats"),
    path("accounting/", AccountingView.as_view(), name="accounting"),
    # CRUD-эндпоинты:
    path("", include(router.urls)),
]
