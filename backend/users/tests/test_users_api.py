"""
Staff accounts, login and role permission tests.
"""
from io import StringIO
from types import SimpleNamespace

import pytest
from django.contrib.auth.models import AnonymousUser
from django.core.management import CommandError, call_command
from rest_framework_simplejwt.tokens import AccessToken

from users.models import User
from users.permissions import (
    CanCloseOrders,
    CanServeOrders,
    IsAdmin,
    IsAnyStaff,
    is_self_or_admin,
    staff_identity,
)
from users.registry import parse_staff_id, staff_exists

TOKEN_URL = "/api/auth/token/"
REFRESH_URL = "/api/auth/token/refresh/"
USERS_URL = "/api/users/"


def request_for(user):
    return SimpleNamespace(user=user)


@pytest.mark.django_db
class TestRolePermissions:
    @pytest.mark.parametrize(
        "permission, allowed",
        [
            (IsAdmin, {"admin"}),
            (IsAnyStaff, {"admin", "waiter", "cashier"}),
            (CanServeOrders, {"admin", "waiter"}),
            (CanCloseOrders, {"admin", "cashier"}),
        ],
    )
    def test_role_matrix(self, permission, allowed, admin_user, waiter_user, cashier_user):
        users = {"admin": admin_user, "waiter": waiter_user, "cashier": cashier_user}

        granted = {
            name for name, user in users.items() if permission().has_permission(request_for(user), None)
        }

        assert granted == allowed

    def test_anonymous_has_no_role(self):
        assert staff_identity(AnonymousUser()) == (None, None)
        assert IsAnyStaff().has_permission(request_for(AnonymousUser()), None) is False

    def test_inactive_staff_has_no_role(self, waiter_user):
        waiter_user.is_active = False

        assert staff_identity(waiter_user) == (None, None)
        assert CanServeOrders().has_permission(request_for(waiter_user), None) is False

    def test_self_or_admin(self):
        assert is_self_or_admin(5, User.Role.WAITER, 5) is True
        assert is_self_or_admin(5, User.Role.WAITER, "5") is True
        assert is_self_or_admin(5, User.Role.CASHIER, 6) is False
        assert is_self_or_admin(1, User.Role.ADMIN, 6) is True
        assert is_self_or_admin(None, None, 6) is False


@pytest.mark.django_db
class TestTokenAuth:
    def test_login_returns_tokens_with_role_claim(self, api_client, cashier_user):
        response = api_client.post(
            TOKEN_URL, {"username": "cashier", "password": "cashier-pass-123"}, format="json"
        )

        assert response.status_code == 200
        token = AccessToken(response.data["access"])
        assert token["role"] == User.Role.CASHIER
        assert token["username"] == "cashier"
        assert response.data["user"]["role"] == User.Role.CASHIER

    def test_wrong_password_is_rejected(self, api_client, cashier_user):
        response = api_client.post(
            TOKEN_URL, {"username": "cashier", "password": "wrong"}, format="json"
        )

        assert response.status_code == 401

    def test_inactive_account_cannot_log_in(self, api_client, cashier_user):
        cashier_user.is_active = False
        cashier_user.save()

        response = api_client.post(
            TOKEN_URL, {"username": "cashier", "password": "cashier-pass-123"}, format="json"
        )

        assert response.status_code == 401

    def test_refresh_issues_new_access_token(self, api_client, waiter_user):
        login = api_client.post(
            TOKEN_URL, {"username": "waiter", "password": "waiter-pass-123"}, format="json"
        )

        response = api_client.post(REFRESH_URL, {"refresh": login.data["refresh"]}, format="json")

        assert response.status_code == 200
        assert str(AccessToken(response.data["access"])["user_id"]) == str(waiter_user.pk)

    def test_bearer_token_authenticates_api_calls(self, api_client, waiter_user):
        login = api_client.post(
            TOKEN_URL, {"username": "waiter", "password": "waiter-pass-123"}, format="json"
        )
        api_client.credentials(HTTP_AUTHORIZATION=f"Bearer {login.data['access']}")

        response = api_client.get(f"{USERS_URL}me/")

        assert response.status_code == 200
        assert response.data["username"] == "waiter"


@pytest.mark.django_db
class TestUsersAPI:
    def test_me(self, cashier_client):
        response = cashier_client.get(f"{USERS_URL}me/")

        assert response.status_code == 200
        assert response.data["role"] == User.Role.CASHIER

    def test_admin_lists_and_filters_staff(self, admin_client, waiter_user, other_waiter, cashier_user):
        response = admin_client.get(USERS_URL, {"role": User.Role.WAITER})

        assert response.status_code == 200
        assert response.data["count"] == 2
        assert {u["username"] for u in response.data["results"]} == {"waiter", "waiter2"}

    def test_waiter_cannot_list_staff(self, waiter_client):
        response = waiter_client.get(USERS_URL)

        assert response.status_code == 403

    def test_staff_can_read_an_account(self, waiter_client, cashier_user):
        response = waiter_client.get(f"{USERS_URL}{cashier_user.pk}/")

        assert response.status_code == 200
        assert response.data["username"] == "cashier"

    def test_admin_creates_staff_account(self, admin_client):
        response = admin_client.post(
            USERS_URL,
            {"username": "newcashier", "password": "long-enough-1", "role": User.Role.CASHIER},
            format="json",
        )

        assert response.status_code == 201
        assert "password" not in response.data
        user = User.objects.get(username="newcashier")
        assert user.role == User.Role.CASHIER
        assert user.check_password("long-enough-1")

    def test_short_password_is_rejected(self, admin_client):
        response = admin_client.post(
            USERS_URL, {"username": "newcashier", "password": "short"}, format="json"
        )

        assert response.status_code == 400
        assert "password" in response.data

    def test_unknown_role_is_rejected(self, admin_client):
        response = admin_client.post(
            USERS_URL,
            {"username": "boss", "password": "long-enough-1", "role": "OWNER"},
            format="json",
        )

        assert response.status_code == 400
        assert "role" in response.data

    def test_waiter_cannot_create_accounts(self, waiter_client):
        response = waiter_client.post(
            USERS_URL, {"username": "x", "password": "long-enough-1"}, format="json"
        )

        assert response.status_code == 403

    def test_delete_deactivates_account(self, admin_client, waiter_user):
        """
        HIGH: Staff accounts are referenced by served and closed orders.

        Scenario:
        - Admin deletes a waiter
        - Expected: 204, the row survives with is_active=False
        """
        response = admin_client.delete(f"{USERS_URL}{waiter_user.pk}/")

        assert response.status_code == 204
        waiter_user.refresh_from_db()
        assert waiter_user.is_active is False


@pytest.mark.django_db
class TestSeedAdminCommand:
    def test_creates_admin_from_options(self):
        out = StringIO()

        call_command("seed_admin", username="boss", password="boss-pass-123", stdout=out)

        admin = User.objects.get(username="boss")
        assert admin.role == User.Role.ADMIN
        assert admin.is_superuser is True
        assert admin.check_password("boss-pass-123")
        assert "created" in out.getvalue()

    def test_reads_credentials_from_environment(self, monkeypatch):
        monkeypatch.setenv("DEFAULT_ADMIN_USERNAME", "envboss")
        monkeypatch.setenv("DEFAULT_ADMIN_PASSWORD", "env-pass-123")

        call_command("seed_admin", stdout=StringIO())

        assert User.objects.filter(username="envboss", role=User.Role.ADMIN).exists()

    def test_existing_admin_is_left_alone(self, admin_user):
        call_command("seed_admin", username="boss", password="boss-pass-123", stdout=StringIO())

        assert not User.objects.filter(username="boss").exists()

    def test_missing_credentials_fail(self, monkeypatch):
        monkeypatch.delenv("DEFAULT_ADMIN_USERNAME", raising=False)
        monkeypatch.delenv("DEFAULT_ADMIN_PASSWORD", raising=False)

        with pytest.raises(CommandError):
            call_command("seed_admin", stdout=StringIO())


@pytest.mark.django_db
class TestStaffRegistry:
    @pytest.mark.parametrize(
        "value, expected",
        [(7, 7), ("7", 7), (" 12 ", 12), ("abc", None), ("1.5", None), (None, None), (True, None)],
    )
    def test_parse_staff_id(self, value, expected):
        assert parse_staff_id(value) == expected

    def test_staff_exists(self, waiter_user):
        assert staff_exists(waiter_user.pk) is True
        assert staff_exists(str(waiter_user.pk)) is True
        assert staff_exists(987654) is False
        assert staff_exists("not-a-number") is False
