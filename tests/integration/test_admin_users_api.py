"""Integration tests for /api/v1/admin/users/."""

from __future__ import annotations

import pytest

pytestmark = pytest.mark.integration

ADMIN_USERS_URL = "/api/v1/admin/users/"


def _detail_url(user) -> str:
    return f"{ADMIN_USERS_URL}{user.id}/"


class TestAdminUserList:
    def test_lists_accounts_with_pagination(self, admin_client, customer, vendor):
        response = admin_client.get(ADMIN_USERS_URL)
        assert response.status_code == 200
        data = response.json()
        assert data["pagination"]["total"] == 3
        assert "password" not in data["results"][0]

    def test_filters_by_role_and_search(self, admin_client, customer, vendor, other_vendor):
        response = admin_client.get(ADMIN_USERS_URL, {"role": "vendor", "search": "MEERA"})
        assert [u["email"] for u in response.json()["results"]] == [vendor.email]

    def test_non_admins_are_forbidden(self, vendor_client):
        response = vendor_client.get(ADMIN_USERS_URL)
        assert response.status_code == 403
        assert response.json() == {"error": "Admin access required"}


class TestAdminUserUpdate:
    def test_changes_role(self, admin_client, customer):
        response = admin_client.put(_detail_url(customer), {"role": "vendor"}, format="json")
        assert response.status_code == 200
        assert response.json()["role"] == "vendor"
        customer.refresh_from_db()
        assert customer.role == "vendor"

    def test_deactivates(self, admin_client, customer):
        response = admin_client.patch(
            _detail_url(customer), {"is_active": False}, format="json"
        )
        assert response.status_code == 200
        assert response.json()["is_active"] is False

    def test_invalid_role(self, admin_client, customer):
        response = admin_client.put(_detail_url(customer), {"role": "owner"}, format="json")
        assert response.status_code == 400
        assert response.json() == {"error": "Invalid role"}

    def test_unknown_user(self, admin_client):
        response = admin_client.put(
            f"{ADMIN_USERS_URL}00000000-0000-0000-0000-000000000000/",
            {"role": "admin"},
            format="json",
        )
        assert response.status_code == 404
        assert response.json() == {"error": "User not found"}

    def test_array_body_is_rejected(self, admin_client, customer):
        response = admin_client.put(_detail_url(customer), ["vendor"], format="json")
        assert response.status_code == 400
        assert response.json() == {"error": "Invalid request body"}
