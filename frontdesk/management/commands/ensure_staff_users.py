# frontdesk/management/commands/ensure_staff_users.py
from django.core.management.base import BaseCommand
from rest_framework.authtoken.models import Token
from frontdesk.models import User

STAFF_SET = [
    ("admin", User.Role.ADMIN),
    ("frontdesk", User.Role.STAFF),
    ("doctor", User.Role.DOCTOR),
]


class Command(BaseCommand):
    help = "Ensure the default staff accounts exist and print their API tokens (idempotent)."

    def add_arguments(self, parser):
        parser.add_argument("--password", default="changeme123", help="password set on every account")

    def handle(self, *args, **opts):
        for username, role in STAFF_SET:
            u, created = User.objects.get_or_create(username=username, defaults={"role": role, "is_active": True})
            u.set_password(opts["password"])
            u.role = role
            u.is_active = True
            u.is_staff = role == User.Role.ADMIN
            u.save()
            token, _ = Token.objects.get_or_create(user=u)
            state = "created" if created else "updated"
            self.stdout.write(self.style.SUCCESS(f"{state}: {username} ({role}) token={token.key}"))
        self.stdout.write(self.style.SUCCESS("All staff users ensured."))
