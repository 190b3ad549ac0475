# users/management/commands/ensure_superuser.py

"""
PATH: users/management/commands/ensure_superuser.py

Superuser bootstrap for fresh deployments.

- Reads AUTO_ADMIN_EMAIL + AUTO_ADMIN_PASSWORD from env.
- Idempotent: creates the superuser if missing; resets the password if it exists.
- Never prints the password.
"""

from __future__ import annotations

import environ
from django.core.management.base import BaseCommand
from django.db import transaction

from users.models import User

env = environ.Env()


class Command(BaseCommand):
    help = "Create/update an initial superuser from env vars (idempotent)."

    def handle(self, *args, **options):
        email = (env.str("AUTO_ADMIN_EMAIL", default="") or "").strip()
        password = (env.str("AUTO_ADMIN_PASSWORD", default="") or "").strip()

        if not email or not password:
            self.stdout.write(self.style.WARNING("AUTO_ADMIN_* env vars not set. Skipping."))
            return

        email = User.objects.normalize_email(email)

        with transaction.atomic():
            user = User.objects.select_for_update().filter(email__iexact=email).first()

            if user:
                user.is_active = True
                user.is_staff = True
                user.is_superuser = True
                user.role = User.ROLE_ADMIN
                user.set_password(password)
                user.save()
                self.stdout.write(self.style.SUCCESS(f"Superuser ensured: {email} (updated)"))
                return

            User.objects.create_superuser(email=email, password=password)
            self.stdout.write(self.style.SUCCESS(f"Superuser ensured: {email} (created)"))
