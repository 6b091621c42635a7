"""
Django management command to grant or revoke a role by email.

Usage:
    python manage.py grant_role admin@example.com
    python manage.py grant_role admin@example.com --role admin --revoke
"""

from asgiref.sync import async_to_sync
from django.core.management.base import BaseCommand, CommandError

from accounts.infrastructure.repositories.django_account_repository import DjangoAccountRepository
from core.domain.value_objects import Email, Role


class Command(BaseCommand):
    """Command to grant or revoke a role."""

    help = "Grant (or with --revoke, revoke) a role for the account with the given email"

    def add_arguments(self, parser):
        """Add command arguments."""
        parser.add_argument("email", type=str, help="Email of the account")
        parser.add_argument(
            "--role",
            type=str,
            default=Role.ADMIN.value,
            choices=[role.value for role in Role],
            help="Role to grant or revoke (default: admin)",
        )
        parser.add_argument(
            "--revoke",
            action="store_true",
            help="Revoke the role instead of granting it",
        )

    def handle(self, *args, **options):
        """Execute the command."""
        try:
            email = Email(options["email"])
        except ValueError as e:
            raise CommandError(str(e)) from e

        role = Role(options["role"])
        changed = async_to_sync(self._apply)(email, role, options["revoke"])

        verb = "Revoked" if options["revoke"] else "Granted"
        if changed:
            # pylint: disable=no-member
            self.stdout.write(self.style.SUCCESS(f"{verb} role '{role.value}' for {email.value}"))
        else:
            # pylint: disable=no-member
            self.stdout.write(self.style.WARNING(f"Nothing to do: role '{role.value}' unchanged for {email.value}"))

    async def _apply(self, email: Email, role: Role, revoke: bool) -> bool:
        repository = DjangoAccountRepository()
        user = await repository.find_by_email(email)
        if user is None:
            raise CommandError(f"No account for {email.value}")
        if revoke:
            return await repository.revoke_role(user.id, role)
        return await repository.grant_role(user.id, role)
