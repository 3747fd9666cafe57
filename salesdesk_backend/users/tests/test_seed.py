from io import StringIO

from django.contrib.auth import get_user_model
from django.core.management import CommandError, call_command
from django.test import TestCase

User = get_user_model()


class SeedUsersCommandTests(TestCase):
    def test_seeds_admin_and_staff(self):
        call_command("seed_users", "--password", "Seeded123!", stdout=StringIO())

        admin = User.objects.get(email="admin@example.com")
        staff = User.objects.get(email="staff@example.com")
        self.assertTrue(admin.is_admin)
        self.assertFalse(staff.is_admin)
        self.assertTrue(staff.check_password("Seeded123!"))

    def test_rerun_restores_role_without_resetting_password(self):
        call_command("seed_users", "--password", "Seeded123!", stdout=StringIO())
        User.objects.filter(email="staff@example.com").update(role="admin", is_active=False)

        call_command("seed_users", "--password", "Other123!", stdout=StringIO())

        staff = User.objects.get(email="staff@example.com")
        self.assertEqual(staff.role, "staff")
        self.assertTrue(staff.is_active)
        self.assertTrue(staff.check_password("Seeded123!"))

    def test_short_password_rejected(self):
        with self.assertRaises(CommandError):
            call_command("seed_users", "--password", "abc", stdout=StringIO())
