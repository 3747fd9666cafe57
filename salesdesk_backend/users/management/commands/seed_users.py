# users/management/commands/seed_users.py

from __future__ import annotations

from dataclasses import dataclass

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand, CommandError
from django.db import transaction

from permissions.roles import ROLE_ADMIN, ROLE_STAFF


@dataclass(frozen=True)
class SeedUserSpec:
    label: str
    role: str
    email: str
    full_name: str = ""


DEFAULT_SPECS = [
    SeedUserSpec("Admin", ROLE_ADMIN, "admin@example.com", "System Admin"),
    SeedUserSpec("Staff", ROLE_STAFF, "staff@example.com", "Front Desk"),
]


class Command(BaseCommand):
    help = "Seed one admin and one staff account."

    def add_arguments(self, parser):
        parser.add_argument(
            "--password",
            type=str,
            default="Pass1234!",
            help="Password for seeded users (default: Pass1234!)",
        )
        parser.add_argument(
            "--force-password",
            action="store_true",
            help="Reset password for existing seeded users too.",
        )

    @transaction.atomic
    def handle(self, *args, **options):
        password = options.get("password") or ""
        force_password = bool(options.get("force_password"))

        if len(password) < 6:
            raise CommandError("--password must be at least 6 characters.")

        User = get_user_model()

        created_count = 0
        updated_count = 0
        pw_reset_count = 0

        for spec in DEFAULT_SPECS:
            is_admin = spec.role == ROLE_ADMIN

            user, created = User.objects.get_or_create(
                email=spec.email,
                defaults={
                    "role": spec.role,
                    "full_name": spec.full_name,
                    "is_staff": is_admin,
                    "is_superuser": is_admin,
                    "is_active": True,
                },
            )

            dirty = False

            # Keep aligned with desired seed spec
            if user.role != spec.role:
                user.role = spec.role
                dirty = True

            if not user.is_active:
                user.is_active = True
                dirty = True

            if created or force_password:
                user.set_password(password)
                dirty = True
                if not created:
                    pw_reset_count += 1

            if dirty:
                user.save()
                if not created:
                    updated_count += 1

            if created:
                created_count += 1
                self.stdout.write(f"created: {spec.label} ({spec.role}) -> {spec.email}")
            else:
                self.stdout.write(f"exists:  {spec.label} ({spec.role}) -> {spec.email}")

        self.stdout.write("\n--- Summary ---")
        self.stdout.write(f"Created: {created_count}")
        self.stdout.write(f"Updated: {updated_count}")
        if force_password:
            self.stdout.write(f"Passwords reset: {pw_reset_count}")

        self.stdout.write(self.style.SUCCESS("Users seeded."))
