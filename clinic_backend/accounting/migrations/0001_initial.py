# accounting/migrations/0001_initial.py

from decimal import Decimal

import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Account",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "kind",
                    models.CharField(
                        choices=[
                            ("hospital", "Hospital"),
                            ("medicine", "Medicine"),
                            ("optics", "Optics"),
                            ("operation", "Operation"),
                            ("main", "Main"),
                        ],
                        max_length=20,
                        unique=True,
                    ),
                ),
                ("name", models.CharField(max_length=100)),
                ("balance", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=14)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "verbose_name": "Account",
                "verbose_name_plural": "Accounts",
                "ordering": ["id"],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("balance__gte", 0)),
                        name="chk_account_balance_non_negative",
                    )
                ],
            },
        ),
        migrations.CreateModel(
            name="Category",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=120)),
                (
                    "direction",
                    models.CharField(
                        choices=[("income", "Income"), ("expense", "Expense")],
                        max_length=10,
                    ),
                ),
                ("is_active", models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
            options={
                "verbose_name_plural": "Categories",
                "ordering": ["direction", "name"],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("name", "direction"),
                        name="uniq_category_name_direction",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(("name", ""), _negated=True),
                        name="chk_category_name_not_blank",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="NumberSequence",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("scope", models.CharField(max_length=40, unique=True)),
                ("last_value", models.PositiveBigIntegerField(default=0)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "ordering": ["scope"],
            },
        ),
        migrations.CreateModel(
            name="JournalEntry",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "direction",
                    models.CharField(
                        choices=[("income", "Income"), ("expense", "Expense")],
                        max_length=10,
                    ),
                ),
                ("amount", models.DecimalField(decimal_places=2, max_digits=14)),
                (
                    "category_name",
                    models.CharField(
                        blank=True,
                        default="",
                        help_text="Category name snapshot at posting time",
                        max_length=120,
                    ),
                ),
                ("description", models.TextField(blank=True, default="")),
                ("entry_date", models.DateField(default=django.utils.timezone.localdate)),
                ("transaction_no", models.CharField(max_length=40, unique=True)),
                ("is_rollup", models.BooleanField(default=False)),
                ("reference_type", models.CharField(blank=True, default="", max_length=40)),
                ("reference_id", models.CharField(blank=True, default="", max_length=64)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "account",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="journal_entries",
                        to="accounting.account",
                    ),
                ),
                (
                    "category",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="journal_entries",
                        to="accounting.category",
                    ),
                ),
                (
                    "created_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="journal_entries",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "linked_main_voucher",
                    models.OneToOneField(
                        blank=True,
                        help_text="Mirror entry on the Main account",
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="source_entry",
                        to="accounting.journalentry",
                    ),
                ),
            ],
            options={
                "verbose_name": "Journal Entry",
                "verbose_name_plural": "Journal Entries",
                "ordering": ["-entry_date", "-created_at"],
                "indexes": [
                    models.Index(fields=["account", "entry_date"], name="acct_journal_account_date_idx"),
                    models.Index(fields=["direction"], name="acct_journal_direction_idx"),
                    models.Index(fields=["reference_type", "reference_id"], name="acct_journal_reference_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("amount__gt", 0)),
                        name="chk_journal_amount_positive",
                    )
                ],
            },
        ),
        migrations.CreateModel(
            name="FundTransfer",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "direction",
                    models.CharField(
                        choices=[("fund_in", "Fund In"), ("fund_out", "Fund Out")],
                        max_length=10,
                    ),
                ),
                ("amount", models.DecimalField(decimal_places=2, max_digits=14)),
                ("investor_name", models.CharField(max_length=150)),
                ("description", models.TextField(blank=True, default="")),
                ("transfer_date", models.DateField(default=django.utils.timezone.localdate)),
                ("voucher_no", models.CharField(max_length=40, unique=True)),
                ("is_rollup", models.BooleanField(default=False)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "account",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="fund_transfers",
                        to="accounting.account",
                    ),
                ),
                (
                    "created_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="fund_transfers",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "linked_main_transfer",
                    models.OneToOneField(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="source_transfer",
                        to="accounting.fundtransfer",
                    ),
                ),
            ],
            options={
                "ordering": ["-transfer_date", "-created_at"],
                "indexes": [
                    models.Index(fields=["account", "transfer_date"], name="acct_fund_account_date_idx"),
                    models.Index(fields=["direction"], name="acct_fund_direction_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("amount__gt", 0)),
                        name="chk_fund_transfer_amount_positive",
                    )
                ],
            },
        ),
    ]
