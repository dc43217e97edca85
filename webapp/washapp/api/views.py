"""
views.py (API)
==============

DRF-представления:
- AppointmentViewSet: список/карточка записи, новая запись, смена статуса
- AvailabilityView: занятость слота (дата + время)
- CalendarView: сетка календаря для выбранной даты/режима/ширины
- StatsView / AccountingView: метрики и простая бухгалтерия
- ServiceViewSet: каталог услуг и смена цены
- ClientViewSet: клиенты, их машины и баллы лояльности

Записи идут через репозиторий из настроек (`get_appointment_repository`),
а не напрямую через ORM — так же, как и в сервисных функциях.

Коды ошибок сервисного слоя переводятся в HTTP-статусы (ERROR_STATUS);
тело ответа: {"error": <код>, "detail": <текст для пользователя>}.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from django.conf import settings
from django.db.models import QuerySet
from rest_framework import mixins, permissions, status, viewsets
from rest_framework.decorators import action
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from washapp import catalog, clients
from washapp.availability import AvailabilityChecker
from washapp.booking import (
    ERR_ALREADY_FINAL,
    ERR_INVALID,
    ERR_INVALID_PAYMENT,
    ERR_INVALID_STATUS,
    ERR_NOT_FOUND,
    ERR_PAYMENT_REQUIRED,
    ERR_SLOT_FULL,
    ERR_STORE_UNAVAILABLE,
    ERROR_MESSAGES,
    book_appointment,
    update_status,
)
from washapp.calendar_view import (
    VIEW_MODES,
    VIEW_WEEK,
    WIDTH_WIDE,
    build_calendar,
    width_class_for,
)
from washapp.domain import STATUSES
from washapp.exceptions import StoreUnavailableError
from washapp.mappers import appointment_to_payload, parse_any_date, service_to_payload
from washapp.models import Client
from washapp.repository import (
    AppointmentRepository,
    get_appointment_repository,
    get_service_catalog,
)
from washapp.stats import (
    appointment_stats,
    completed_appointments,
    payment_method_totals,
    revenue_by_month,
    total_revenue,
)
from .serializers import (
    BookingSerializer,
    ClientSerializer,
    LoyaltySerializer,
    StatusUpdateSerializer,
    VehicleSerializer,
    calendar_grid_payload,
)

logger = logging.getLogger(__name__)

ERROR_STATUS: Dict[str, int] = {
    ERR_INVALID: status.HTTP_400_BAD_REQUEST,
    ERR_INVALID_STATUS: status.HTTP_400_BAD_REQUEST,
    ERR_PAYMENT_REQUIRED: status.HTTP_400_BAD_REQUEST,
    ERR_INVALID_PAYMENT: status.HTTP_400_BAD_REQUEST,
    ERR_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ERR_SLOT_FULL: status.HTTP_409_CONFLICT,
    ERR_ALREADY_FINAL: status.HTTP_409_CONFLICT,
    ERR_STORE_UNAVAILABLE: status.HTTP_503_SERVICE_UNAVAILABLE,
    catalog.ERR_INVALID_PRICE: status.HTTP_400_BAD_REQUEST,
}

SERVICE_MESSAGES: Dict[str, str] = {
    catalog.ERR_INVALID_PRICE: "El precio debe ser un número mayor a cero",
    catalog.ERR_NOT_FOUND: "Servicio no encontrado",
}


def error_response(code: str, message: Optional[str] = None, **extra: Any) -> Response:
    """Ответ с кодом ошибки сервисного слоя."""
    body = {"error": code, "detail": message or ERROR_MESSAGES.get(code, code)}
    body.update(extra)
    http_status = ERROR_STATUS.get(code, status.HTTP_400_BAD_REQUEST)
    logger.debug("API: error %s -> %s", code, http_status)
    return Response(body, status=http_status)


def store_unavailable_response() -> Response:
    return error_response(ERR_STORE_UNAVAILABLE)


class RepositoryMixin:
    """Доступ к репозиторию записей из настроек."""

    def get_repository(self) -> AppointmentRepository:
        return get_appointment_repository()


def _require_date(request: Request, name: str = "date"):
    """
    Дата из query-параметра (ISO или DD/MM/YYYY).

    :return: (date | None, Response с ошибкой | None)
    """
    raw = request.query_params.get(name)
    try:
        value = parse_any_date(raw)
    except ValueError:
        value = None
    if value is None:
        return None, Response(
            {"error": ERR_INVALID, "detail": f"Parámetro '{name}' inválido"},
            status=status.HTTP_400_BAD_REQUEST,
        )
    return value, None


# -------- Записи --------

class AppointmentViewSet(RepositoryMixin, viewsets.ViewSet):
    """
    /api/appointments/ — записи на мойку.

    GET    /api/appointments/?status=pending&search=ana
    GET    /api/appointments/<id>/
    POST   /api/appointments/                 — новая запись
    POST   /api/appointments/<id>/status/     — completed/cancelled
    """

    permission_classes = [permissions.AllowAny]
    lookup_value_regex = r"\d+"

    def list(self, request: Request) -> Response:
        status_filter = request.query_params.get("status") or None
        if status_filter is not None and status_filter not in STATUSES:
            return error_response(ERR_INVALID_STATUS)
        try:
            items = self.get_repository().list(status=status_filter)
        except StoreUnavailableError:
            return store_unavailable_response()

        search = (request.query_params.get("search") or "").strip().lower()
        if search:
            items = [
                a for a in items
                if search in a.client_name.lower() or search in a.service_type.lower()
            ]
        return Response([appointment_to_payload(a) for a in items])

    def retrieve(self, request: Request, pk: Optional[str] = None) -> Response:
        try:
            appt = self.get_repository().get(pk)
        except StoreUnavailableError:
            return store_unavailable_response()
        if appt is None:
            return error_response(ERR_NOT_FOUND)
        return Response(appointment_to_payload(appt))

    def create(self, request: Request) -> Response:
        serializer = BookingSerializer(data=request.data)
        if not serializer.is_valid():
            return error_response(ERR_INVALID, fields=serializer.errors)

        appt, err = book_appointment(
            serializer.validated_data["record"],
            self.get_repository(),
            get_service_catalog(),
        )
        if err:
            return error_response(err)
        return Response(appointment_to_payload(appt), status=status.HTTP_201_CREATED)

    @action(detail=True, methods=["post"], url_path="status")
    def set_status(self, request: Request, pk: Optional[str] = None) -> Response:
        serializer = StatusUpdateSerializer(data=request.data)
        if not serializer.is_valid():
            return error_response(ERR_INVALID_STATUS, fields=serializer.errors)

        appt, err = update_status(
            pk,
            serializer.validated_data["status"],
            self.get_repository(),
            payment_method=serializer.validated_data.get("paymentMethod"),
        )
        if err:
            return error_response(err)
        return Response(appointment_to_payload(appt))


# -------- Занятость слота --------

class AvailabilityView(RepositoryMixin, APIView):
    """
    GET /api/availability/?date=2025-05-05&time=10:00

    Если хранилище недоступно — 503: «свободно» без проверки не отвечаем.
    """

    permission_classes = [permissions.AllowAny]

    def get(self, request: Request) -> Response:
        slot_date, error = _require_date(request)
        if error:
            return error
        time = (request.query_params.get("time") or "").strip()
        if time not in settings.WASHAPP_TIME_SLOTS:
            return Response(
                {"error": ERR_INVALID, "detail": "Parámetro 'time' inválido"},
                status=status.HTTP_400_BAD_REQUEST,
            )

        try:
            summary = AvailabilityChecker(self.get_repository()).slot_summary(slot_date, time)
        except StoreUnavailableError:
            return store_unavailable_response()
        return Response({"date": slot_date.isoformat(), "time": time, **summary})


# -------- Календарь --------

class CalendarView(RepositoryMixin, APIView):
    """
    GET /api/calendar/?date=2025-05-07&view=week&width=390&anchor=2025-05-05

    - view: day | week | fullWeek (по умолчанию week)
    - width: ширина экрана в пикселях (по умолчанию — широкий экран)
    - anchor: понедельник недели, где календарь был открыт; его надо
      передавать обратно при листании узкого недельного вида
      (поле `anchor` ответа). Без него страницы считаются от недели `date`
      и обратный шаг может не вернуть на те же дни.
    """

    permission_classes = [permissions.AllowAny]

    def get(self, request: Request) -> Response:
        selected, error = _require_date(request)
        if error:
            return error

        view_mode = request.query_params.get("view") or VIEW_WEEK
        if view_mode not in VIEW_MODES:
            return Response(
                {"error": ERR_INVALID, "detail": "Parámetro 'view' inválido"},
                status=status.HTTP_400_BAD_REQUEST,
            )

        width_raw = request.query_params.get("width") or ""
        width_class = width_class_for(int(width_raw)) if width_raw.isdigit() else WIDTH_WIDE
        anchor = None
        if request.query_params.get("anchor"):
            anchor, error = _require_date(request, "anchor")
            if error:
                return error

        try:
            items = self.get_repository().list()
        except StoreUnavailableError:
            return store_unavailable_response()

        grid = build_calendar(items, selected, view_mode, width_class, anchor)
        return Response(calendar_grid_payload(grid))


# -------- Метрики и бухгалтерия --------

class StatsView(RepositoryMixin, APIView):
    """GET /api/stats/ — сводка по записям для страницы метрик."""

    permission_classes = [permissions.AllowAny]

    def get(self, request: Request) -> Response:
        try:
            items = self.get_repository().list()
        except StoreUnavailableError:
            return store_unavailable_response()
        return Response(appointment_stats(items))


class AccountingView(RepositoryMixin, APIView):
    """
    GET /api/accounting/

    Завершённые записи, общая выручка, выручка по месяцам
    и по способам оплаты.
    """

    permission_classes = [permissions.AllowAny]

    def get(self, request: Request) -> Response:
        try:
            items = self.get_repository().list()
        except StoreUnavailableError:
            return store_unavailable_response()

        return Response({
            "completed": [appointment_to_payload(a) for a in completed_appointments(items)],
            "totalRevenue": total_revenue(items),
            "revenueByMonth": revenue_by_month(items),
            "paymentMethods": payment_method_totals(items),
        })


# -------- Каталог услуг --------

class ServiceViewSet(viewsets.ViewSet):
    """
    /api/services/ — каталог услуг.

    PATCH /api/services/<id>/ {"price": 15000}
    """

    permission_classes = [permissions.AllowAny]
    lookup_value_regex = r"\d+"

    def list(self, request: Request) -> Response:
        return Response([service_to_payload(s) for s in catalog.list_services()])

    def partial_update(self, request: Request, pk: Optional[str] = None) -> Response:
        service, err = catalog.update_service_price(pk, request.data.get("price"))
        if err:
            return error_response(err, SERVICE_MESSAGES[err])
        return Response(service_to_payload(service))


# -------- Клиенты --------

class ClientViewSet(
    mixins.ListModelMixin,
    mixins.CreateModelMixin,
    mixins.RetrieveModelMixin,
    viewsets.GenericViewSet,
):
    """
    /api/clients/ — справочник клиентов.

    GET  /api/clients/?search=ana
    POST /api/clients/<id>/vehicles/   — добавить машину
    POST /api/clients/<id>/loyalty/    — начислить баллы {"points": 10}
    """

    serializer_class = ClientSerializer
    permission_classes = [permissions.AllowAny]
    lookup_value_regex = r"\d+"

    def get_queryset(self) -> QuerySet[Client]:
        return clients.search_clients(self.request.query_params.get("search"))

    @action(detail=True, methods=["post"])
    def vehicles(self, request: Request, pk: Optional[str] = None) -> Response:
        serializer = VehicleSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        vehicle = clients.add_vehicle(pk, serializer.validated_data)
        if vehicle is None:
            return Response({"detail": "Cliente no encontrado"}, status=status.HTTP_404_NOT_FOUND)
        return Response(VehicleSerializer(vehicle).data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=["post"])
    def loyalty(self, request: Request, pk: Optional[str] = None) -> Response:
        serializer = LoyaltySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        client = clients.add_loyalty_points(pk, serializer.validated_data["points"])
        if client is None:
            return Response({"detail": "Cliente no encontrado"}, status=status.HTTP_404_NOT_FOUND)
        return Response(ClientSerializer(client).data)
