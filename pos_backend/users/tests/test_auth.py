# users/tests/test_auth.py

import os
from io import StringIO
from unittest import mock

from django.contrib.auth import get_user_model
from django.core.management import call_command
from django.test import TestCase
from rest_framework.test import APIClient

User = get_user_model()


class UserModelTests(TestCase):
    """
    GUARANTEES:
    - Email is required and normalized
    - New users default to the cashier role
    - Superusers are admins
    """

    def test_email_is_required(self):
        with self.assertRaises(ValueError):
            User.objects.create_user(email="", password="password123")

    def test_defaults(self):
        user = User.objects.create_user(email="ravi@EXAMPLE.com", password="password123")

        self.assertEqual(user.email, "ravi@example.com")
        self.assertEqual(user.role, User.ROLE_CASHIER)
        self.assertTrue(user.check_password("password123"))

    def test_superuser_is_admin(self):
        admin = User.objects.create_superuser(email="root@example.com", password="password123")

        self.assertEqual(admin.role, User.ROLE_ADMIN)
        self.assertTrue(admin.is_staff)
        self.assertTrue(admin.is_superuser)


class LoginAPITests(TestCase):
    """
    GUARANTEES:
    - Valid credentials return JWT access + refresh tokens
    - Unknown email and wrong password look the same (400)
    - Disabled accounts are refused (403)
    - Issued access token authenticates /me/
    """

    def setUp(self):
        self.client = APIClient()
        self.user = User.objects.create_user(
            email="asha@example.com",
            password="password123",
            role=User.ROLE_MANAGER,
        )

    def login(self, email, password):
        return self.client.post(
            "/api/auth/login/", {"email": email, "password": password}, format="json"
        )

    def test_login_success(self):
        response = self.login("asha@example.com", "password123")

        self.assertEqual(response.status_code, 200)
        self.assertIn("access", response.data)
        self.assertIn("refresh", response.data)
        self.assertEqual(response.data["user"]["role"], User.ROLE_MANAGER)

    def test_bad_credentials(self):
        for email, password in (
            ("asha@example.com", "wrong"),
            ("nobody@example.com", "password123"),
        ):
            with self.subTest(email=email):
                response = self.login(email, password)
                self.assertEqual(response.status_code, 400)
                self.assertEqual(response.data["detail"], "Email or password is incorrect.")

    def test_disabled_account(self):
        self.user.is_active = False
        self.user.save()

        self.assertEqual(self.login("asha@example.com", "password123").status_code, 403)

    def test_me_with_token(self):
        access = self.login("asha@example.com", "password123").data["access"]

        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {access}")
        response = self.client.get("/api/auth/me/")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["email"], "asha@example.com")

    def test_refresh_token(self):
        refresh = self.login("asha@example.com", "password123").data["refresh"]

        response = self.client.post("/api/auth/jwt/refresh/", {"refresh": refresh}, format="json")

        self.assertEqual(response.status_code, 200)
        self.assertIn("access", response.data)


class EnsureSuperuserCommandTests(TestCase):
    """
    GUARANTEES:
    - Skips quietly without env vars
    - Creates the admin once, then only updates it
    """

    def test_skips_without_env(self):
        with mock.patch.dict(os.environ, {}, clear=False):
            os.environ.pop("AUTO_ADMIN_EMAIL", None)
            os.environ.pop("AUTO_ADMIN_PASSWORD", None)
            out = StringIO()
            call_command("ensure_superuser", stdout=out)

        self.assertIn("Skipping", out.getvalue())
        self.assertFalse(User.objects.exists())

    def test_creates_then_updates(self):
        env = {"AUTO_ADMIN_EMAIL": "boss@example.com", "AUTO_ADMIN_PASSWORD": "s3cret-pass"}
        with mock.patch.dict(os.environ, env):
            call_command("ensure_superuser", stdout=StringIO())
            call_command("ensure_superuser", stdout=StringIO())

        admin = User.objects.get(email="boss@example.com")
        self.assertEqual(User.objects.count(), 1)
        self.assertEqual(admin.role, User.ROLE_ADMIN)
        self.assertTrue(admin.check_password("s3cret-pass"))
