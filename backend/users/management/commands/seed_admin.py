import os

from django.core.management.base import BaseCommand, CommandError

from users.models import User


class Command(BaseCommand):
    help = (
        "Ensure an admin account exists.\n"
        "Credentials come from --username/--password or the DEFAULT_ADMIN_USERNAME "
        "and DEFAULT_ADMIN_PASSWORD environment variables. Does nothing when an "
        "active admin already exists."
    )

    def add_arguments(self, parser):
        parser.add_argument("--username", dest="username", help="Admin username")
        parser.add_argument("--password", dest="password", help="Admin password")
        parser.add_argument(
            "--email",
            dest="email",
            default="admin@example.com",
            help="Admin email address",
        )

    def handle(self, *args, **options):
        if User.objects.filter(role=User.Role.ADMIN, is_active=True).exists():
            self.stdout.write("An admin account already exists, nothing to do.")
            return

        username = options["username"] or os.environ.get("DEFAULT_ADMIN_USERNAME")
        password = options["password"] or os.environ.get("DEFAULT_ADMIN_PASSWORD")
        if not username or not password:
            raise CommandError(
                "DEFAULT_ADMIN_USERNAME and DEFAULT_ADMIN_PASSWORD must be set "
                "(or pass --username and --password)"
            )

        User.objects.create_superuser(
            username=username,
            email=options["email"],
            password=password,
            first_name="Default",
            last_name="Admin",
        )
        self.stdout.write(self.style.SUCCESS(f"Admin user {username} created."))
