# tests/test_models.py
from __future__ import annotations
import pytest
from decimal import Decimal
from washapp.models import Appointment, Client, Service, Vehicle


@pytest.mark.django_db
def test_appointment_defaults(make_appointment):
    a = make_appointment()
    a.refresh_from_db()
    assert a.status == Appointment.Status.PENDING
    assert a.price is None and a.payment_method is None
    assert a.created_at is not None


@pytest.mark.django_db
def test_appointment_ordering(make_appointment):
    late = make_appointment(date="2025-05-06", time="09:00")
    early = make_appointment(date="2025-05-05", time="11:00")
    earliest = make_appointment(date="2025-05-05", time="09:30")
    assert list(Appointment.objects.values_list("pk", flat=True)) == [earliest.pk, early.pk, late.pk]


@pytest.mark.django_db
def test_service_price_update(make_service):
    s = make_service("Lavado premium", 25000)
    s.price = Decimal("27000")
    s.save(update_fields=["price", "updated_at"])
    assert Service.objects.get(pk=s.pk).price == Decimal("27000")


@pytest.mark.django_db
def test_client_with_vehicles():
    c = Client.objects.create(name="Pedro", phone="+56911111111")
    Vehicle.objects.create(client=c, make="Toyota", model="Yaris", license_plate="AB1234")
    Vehicle.objects.create(client=c, make="Kia", model="Rio", vehicle_type=Vehicle.VehicleType.SMALL)
    assert c.vehicles.count() == 2
    assert c.preferred_contact_method == Client.ContactMethod.PHONE
    assert c.loyalty_points == 0


@pytest.mark.django_db
def test_admin_shows_clp_price(admin_client, make_appointment, make_service):
    make_appointment(price=Decimal("15000"))
    make_service("Lavado premium", 25000)
    resp = admin_client.get("/admin/washapp/appointment/")
    assert resp.status_code == 200
    assert "$15.000" in resp.content.decode()
    assert "$25.000" in admin_client.get("/admin/washapp/service/").content.decode()


@pytest.mark.django_db
def test_admin_cannot_edit_status_or_payment(admin_client, make_appointment):
    row = make_appointment(status="completed", payment_method="Efectivo")
    resp = admin_client.get(f"/admin/washapp/appointment/{row.pk}/change/")
    assert resp.status_code == 200
    html = resp.content.decode()
    assert 'name="status"' not in html
    assert 'name="payment_method"' not in html
