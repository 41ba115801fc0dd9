"""Clear comfort chat conversations from the command line.

Usage::

    python manage.py clear_chat_history --email someone@example.com
    python manage.py clear_chat_history --all --no-input

The command goes through the configured journal store, the same way the
``DELETE /api/chat/messages`` endpoint does, so it removes exactly what a
user clearing their own history would.
"""

from __future__ import annotations

from django.contrib.auth.models import User
from django.core.management.base import BaseCommand, CommandError

from journal.services.journal_store import JournalStoreError, build_journal_store


class Command(BaseCommand):
    help = "Delete the comfort chat history of one user or of every user."

    def add_arguments(self, parser):
        target = parser.add_mutually_exclusive_group(required=True)
        target.add_argument(
            "--email",
            help="Email address of the user whose history should be cleared.",
        )
        target.add_argument(
            "--all",
            action="store_true",
            help="Clear the history of every user.",
        )
        parser.add_argument(
            "--no-input",
            action="store_true",
            help="Run without an interactive confirmation prompt.",
        )

    def handle(self, *args, **options):
        if options["email"]:
            users = list(User.objects.filter(email__iexact=options["email"]))
            if not users:
                raise CommandError(f"No user with email {options['email']}.")
        else:
            users = list(User.objects.all())

        if options["all"] and not options["no_input"]:
            try:
                answer = input(f"This will clear chat history for {len(users)} users. Proceed? [y/N] ").strip()
            except EOFError as exc:
                raise CommandError(
                    "Interactive input is not available; re-run with --no-input to proceed without confirmation."
                ) from exc
            if answer.lower() not in {"y", "yes"}:
                self.stdout.write(self.style.WARNING("Nothing cleared."))
                return

        store = build_journal_store()
        total = 0
        for user in users:
            try:
                total += store.clear_chat_history(user.pk)
            except JournalStoreError as exc:
                raise CommandError(f"Failed to clear chat history for {user.email}: {exc}") from exc

        self.stdout.write(self.style.SUCCESS(f"Removed {total} chat messages for {len(users)} user(s)."))
