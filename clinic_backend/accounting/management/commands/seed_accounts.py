# accounting/management/commands/seed_accounts.py

from __future__ import annotations

from django.core.management.base import BaseCommand
from django.db import transaction

from accounting.services.ledger_service import ensure_accounts


class Command(BaseCommand):
    help = "Create the five clinic accounts (hospital, medicine, optics, operation, main) if missing."

    @transaction.atomic
    def handle(self, *args, **options):
        accounts = ensure_accounts()

        self.stdout.write(self.style.MIGRATE_HEADING("Clinic accounts"))
        for account in accounts:
            self.stdout.write(f"  {account.kind:<10} {account.name:<20} {account.balance}")

        self.stdout.write(self.style.SUCCESS(f"{len(accounts)} accounts ready."))
