"""
API tests: routing, bearer-token auth and the service-error to HTTP mapping.
"""
from decimal import Decimal

import pytest

from models import RentalRequestStatus
from tests.conftest import auth_headers, days_from_today, make_booking


def _request_payload(prop, start=10, end=200, guests=2):
    return {
        "property_id": prop.id,
        "start_date": days_from_today(start).isoformat(),
        "end_date": days_from_today(end).isoformat(),
        "number_of_guests": guests,
    }


class TestAuth:
    def test_register_and_login(self, client):
        response = client.post("/api/auth/register", json={
            "firstName": "Nia",
            "lastName": "New",
            "email": "nia@example.com",
            "password": "secret123",
            "role": "Landlord",
        })
        assert response.status_code == 201

        response = client.post("/api/auth/login", json={"email": "nia@example.com", "password": "secret123"})
        assert response.status_code == 200
        body = response.json()
        assert body["user"]["role"] == "Landlord"
        assert body["token"]

    def test_wrong_password(self, client):
        client.post("/api/auth/register", json={
            "firstName": "Nia", "lastName": "New", "email": "nia@example.com", "password": "secret123",
        })

        response = client.post("/api/auth/login", json={"email": "nia@example.com", "password": "nope"})

        assert response.status_code == 401

    def test_admin_cannot_self_register(self, client):
        response = client.post("/api/auth/register", json={
            "firstName": "Eve", "lastName": "Evil", "email": "eve@example.com",
            "password": "secret123", "role": "Admin",
        })

        assert response.status_code == 403

    def test_missing_token(self, client):
        assert client.get("/api/rental-requests").status_code == 401

    def test_invalid_token(self, client):
        response = client.get("/api/rental-requests", headers={"Authorization": "Bearer garbage"})

        assert response.status_code == 403

    def test_unset_secret_refuses_to_sign(self, monkeypatch, tenant_user):
        from security import create_access_token

        monkeypatch.delenv("JWT_SECRET")

        with pytest.raises(RuntimeError, match="JWT_SECRET"):
            create_access_token(tenant_user.id, tenant_user.role)

    def test_token_signed_with_another_key_is_rejected(self, client, admin):
        from jose import jwt

        forged = jwt.encode({"id": admin.id, "role": "Admin"}, "change-me", algorithm="HS256")

        response = client.get("/api/rental-requests", headers={"Authorization": f"Bearer {forged}"})

        assert response.status_code == 403


class TestProperties:
    def test_landlord_lists_property(self, client, landlord):
        response = client.post("/api/properties", headers=auth_headers(landlord), json={
            "name": "Garden flat", "price": "750.00", "bedrooms": 1,
        })

        assert response.status_code == 201
        body = response.json()
        assert body["owner_id"] == landlord.id
        assert body["renting_type"] == "Monthly"
        assert Decimal(body["price"]) == Decimal("750.00")

    def test_tenant_cannot_list_property(self, client, tenant_user):
        response = client.post("/api/properties", headers=auth_headers(tenant_user), json={
            "name": "Garden flat", "price": "750.00",
        })

        assert response.status_code == 403
        assert response.json()["error"] == "forbidden"

    def test_availability_endpoint(self, client, db, prop, tenant_user):
        booking = make_booking(db, prop, tenant_user, days_from_today(5), days_from_today(8))
        params = {"start_date": days_from_today(1).isoformat(), "end_date": days_from_today(30).isoformat()}

        response = client.get(
            f"/api/properties/{prop.id}/availability", headers=auth_headers(tenant_user), params=params
        )

        assert response.status_code == 200
        body = response.json()
        assert body["is_available"] is False
        assert body["conflicting_booking_ids"] == [booking.id]
        assert body["blocked_periods"][0]["reason"] == "Booking"

    def test_availability_rejects_inverted_range(self, client, prop, tenant_user):
        params = {"start_date": days_from_today(9).isoformat(), "end_date": days_from_today(3).isoformat()}

        response = client.get(
            f"/api/properties/{prop.id}/availability", headers=auth_headers(tenant_user), params=params
        )

        assert response.status_code == 400

    def test_missing_property_is_404(self, client, tenant_user):
        response = client.get("/api/properties/999", headers=auth_headers(tenant_user))

        assert response.status_code == 404
        assert response.json() == {"error": "not_found", "detail": "Property 999 not found", "errors": []}


class TestRentalRequestFlow:
    def test_create_approve_and_block_overlap(self, client, prop, landlord, tenant_user, other_user):
        response = client.post(
            "/api/rental-requests", headers=auth_headers(tenant_user), json=_request_payload(prop)
        )
        assert response.status_code == 201
        created = response.json()
        assert created["status"] == "Pending"
        assert created["property_name"] == prop.name
        assert created["user_name"] == "Tom Tenant"
        assert Decimal(created["total_price"]) == Decimal("4200.00")

        response = client.post(
            f"/api/rental-requests/{created['id']}/approve",
            headers=auth_headers(landlord),
            json={"reason": "Welcome"},
        )
        assert response.status_code == 200
        assert response.json()["status"] == RentalRequestStatus.APPROVED.value

        response = client.post(
            "/api/rental-requests", headers=auth_headers(other_user), json=_request_payload(prop, 40, 250)
        )
        assert response.status_code == 409
        assert response.json()["error"] == "invalid_state"

    def test_validation_failure_is_400_with_all_errors(self, client, prop, tenant_user):
        response = client.post(
            "/api/rental-requests",
            headers=auth_headers(tenant_user),
            json=_request_payload(prop, end=160, guests=5),
        )

        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "validation_failed"
        assert len(body["errors"]) == 2

    def test_validate_endpoint_does_not_raise(self, client, prop, tenant_user):
        response = client.post(
            "/api/rental-requests/validate",
            headers=auth_headers(tenant_user),
            json=_request_payload(prop, end=160),
        )

        assert response.status_code == 200
        assert response.json() == {
            "is_valid": False,
            "errors": ["Minimum rental period is 6 months for annual leases"],
        }

    def test_quote(self, client, prop, tenant_user):
        response = client.post("/api/rental-requests/quote", headers=auth_headers(tenant_user), json={
            "property_id": prop.id,
            "start_date": days_from_today(10).isoformat(),
            "end_date": days_from_today(70).isoformat(),
            "number_of_guests": 4,
        })

        assert response.status_code == 200
        assert response.json()["months"] == 2
        assert Decimal(response.json()["total_price"]) == Decimal("1440.00")

    def test_requester_cannot_approve(self, client, prop, tenant_user):
        created = client.post(
            "/api/rental-requests", headers=auth_headers(tenant_user), json=_request_payload(prop)
        ).json()

        response = client.post(f"/api/rental-requests/{created['id']}/approve", headers=auth_headers(tenant_user))

        assert response.status_code == 403

    def test_missing_request_is_404(self, client, tenant_user):
        response = client.get("/api/rental-requests/12345", headers=auth_headers(tenant_user))

        assert response.status_code == 404
        assert response.json()["detail"] == "Rental request 12345 not found"

    def test_list_is_scoped(self, client, prop, landlord, tenant_user, other_user):
        client.post("/api/rental-requests", headers=auth_headers(tenant_user), json=_request_payload(prop))

        mine = client.get("/api/rental-requests", headers=auth_headers(tenant_user)).json()
        theirs = client.get("/api/rental-requests", headers=auth_headers(other_user)).json()
        owner = client.get("/api/rental-requests", headers=auth_headers(landlord)).json()

        assert mine["total"] == 1
        assert theirs["total"] == 0
        assert owner["total"] == 1

    def test_delete_then_404(self, client, prop, tenant_user):
        created = client.post(
            "/api/rental-requests", headers=auth_headers(tenant_user), json=_request_payload(prop)
        ).json()

        response = client.delete(f"/api/rental-requests/{created['id']}", headers=auth_headers(tenant_user))
        assert response.status_code == 204

        response = client.get(f"/api/rental-requests/{created['id']}", headers=auth_headers(tenant_user))
        assert response.status_code == 404


class TestBookingRoutes:
    def test_book_cancel_and_refund(self, client, daily_prop, tenant_user):
        response = client.post("/api/bookings", headers=auth_headers(tenant_user), json={
            "property_id": daily_prop.id,
            "start_date": days_from_today(20).isoformat(),
            "end_date": days_from_today(23).isoformat(),
            "number_of_guests": 2,
        })
        assert response.status_code == 201
        booking = response.json()
        assert Decimal(booking["total_price"]) == Decimal("300.00")
        assert booking["property_name"] == daily_prop.name

        response = client.get(f"/api/bookings/{booking['id']}/refund", headers=auth_headers(tenant_user))
        assert Decimal(response.json()["refund_amount"]) == Decimal("300.00")

        response = client.post(
            f"/api/bookings/{booking['id']}/cancel",
            headers=auth_headers(tenant_user),
            json={"reason": "Change of plans"},
        )
        assert response.status_code == 200
        assert response.json()["booking"]["status"] == "Cancelled"
        assert Decimal(response.json()["refund_amount"]) == Decimal("300.00")

    def test_illegal_transition_is_409(self, client, daily_prop, tenant_user):
        booking = client.post("/api/bookings", headers=auth_headers(tenant_user), json={
            "property_id": daily_prop.id,
            "start_date": days_from_today(20).isoformat(),
            "end_date": days_from_today(23).isoformat(),
        }).json()

        response = client.put(
            f"/api/bookings/{booking['id']}",
            headers=auth_headers(tenant_user),
            json={"status": "Completed"},
        )

        assert response.status_code == 409

    def test_status_refresh_is_admin_only(self, client, tenant_user, admin):
        assert client.post("/api/bookings/refresh-statuses", headers=auth_headers(tenant_user)).status_code == 403

        response = client.post("/api/bookings/refresh-statuses", headers=auth_headers(admin))
        assert response.status_code == 200
        assert response.json() == {"activated": 0, "completed": 0}


class TestHealth:
    def test_health(self, client):
        response = client.get("/api/health")

        assert response.status_code == 200
        assert response.json()["database"] is True
