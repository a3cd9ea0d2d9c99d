# accounting/management/commands/verify_ledger.py

from __future__ import annotations

from django.core.management.base import BaseCommand

from accounting.services.balance_service import verify_balances


class Command(BaseCommand):
    help = "Compare every stored account balance with its replay from journal entries and fund transfers."

    def add_arguments(self, parser):
        parser.add_argument(
            "--strict",
            action="store_true",
            help="Fail (non-zero exit) if any account has drifted.",
        )

    def handle(self, *args, **options):
        strict = bool(options.get("strict"))
        checks = verify_balances()

        self.stdout.write(self.style.MIGRATE_HEADING("Ledger balance verification"))

        drifted = 0
        for check in checks:
            line = (
                f"  {check.account_kind:<10} stored={check.stored}  "
                f"replayed={check.replayed}  drift={check.drift}"
            )
            if check.ok:
                self.stdout.write(line)
            else:
                drifted += 1
                self.stdout.write(self.style.ERROR(line))

        if drifted:
            self.stderr.write(self.style.ERROR(f"{drifted} account(s) drifted."))
        else:
            self.stdout.write(self.style.SUCCESS("All balances match their replay."))

        return self._exit(strict and drifted > 0)

    def _exit(self, fail: bool):
        if fail:
            raise SystemExit(1)
        return None
