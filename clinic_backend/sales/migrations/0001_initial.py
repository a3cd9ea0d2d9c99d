# sales/migrations/0001_initial.py

import uuid
from decimal import Decimal

import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        ("accounting", "0001_initial"),
        ("inventory", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Sale",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                (
                    "invoice_no",
                    models.CharField(help_text="System-generated invoice number", max_length=40, unique=True),
                ),
                ("customer_name", models.CharField(blank=True, default="", max_length=150)),
                ("customer_phone", models.CharField(blank=True, default="", max_length=32)),
                ("fitting_price", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=12)),
                ("subtotal_amount", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=12)),
                (
                    "discount_percent",
                    models.DecimalField(
                        blank=True,
                        decimal_places=2,
                        help_text="Set when the discount was given as a percentage",
                        max_digits=5,
                        null=True,
                    ),
                ),
                ("discount_amount", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=12)),
                ("total_amount", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=12)),
                ("advance_payment", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=12)),
                ("due_amount", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=12)),
                (
                    "status",
                    models.CharField(
                        choices=[("pending", "Pending"), ("ready", "Ready"), ("delivered", "Delivered")],
                        default="pending",
                        max_length=16,
                    ),
                ),
                ("notes", models.TextField(blank=True, default="")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "account",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="sales",
                        to="accounting.account",
                    ),
                ),
                (
                    "seller",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="sales",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["created_at"], name="sales_sale_created_idx"),
                    models.Index(fields=["status"], name="sales_sale_status_idx"),
                    models.Index(fields=["account", "created_at"], name="sales_sale_account_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(condition=models.Q(("fitting_price__gte", 0)), name="chk_sale_fitting_non_negative"),
                    models.CheckConstraint(condition=models.Q(("discount_amount__gte", 0)), name="chk_sale_discount_non_negative"),
                    models.CheckConstraint(condition=models.Q(("advance_payment__gte", 0)), name="chk_sale_advance_non_negative"),
                    models.CheckConstraint(condition=models.Q(("due_amount__gte", 0)), name="chk_sale_due_non_negative"),
                    models.CheckConstraint(condition=models.Q(("total_amount__gte", 0)), name="chk_sale_total_non_negative"),
                ],
            },
        ),
        migrations.CreateModel(
            name="SaleItem",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("item_name", models.CharField(max_length=255)),
                ("item_kind", models.CharField(max_length=20)),
                ("quantity", models.PositiveIntegerField()),
                ("unit_price", models.DecimalField(decimal_places=2, max_digits=12)),
                ("total_price", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=12)),
                (
                    "sale",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="items",
                        to="sales.sale",
                    ),
                ),
                (
                    "stock_item",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="sale_items",
                        to="inventory.stockitem",
                    ),
                ),
            ],
            options={
                "ordering": ["id"],
                "constraints": [
                    models.CheckConstraint(condition=models.Q(("quantity__gt", 0)), name="chk_sale_item_quantity_positive"),
                ],
            },
        ),
        migrations.CreateModel(
            name="Payment",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("amount", models.DecimalField(decimal_places=2, max_digits=12)),
                (
                    "method",
                    models.CharField(
                        choices=[
                            ("cash", "Cash"),
                            ("card", "Card"),
                            ("bkash", "bKash"),
                            ("nagad", "Nagad"),
                            ("rocket", "Rocket"),
                        ],
                        max_length=16,
                    ),
                ),
                ("transaction_ref", models.CharField(blank=True, default="", max_length=128)),
                ("notes", models.CharField(blank=True, default="", max_length=255)),
                ("is_advance", models.BooleanField(default=False)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "journal_entry",
                    models.OneToOneField(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="sale_payment",
                        to="accounting.journalentry",
                    ),
                ),
                (
                    "received_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="sale_payments",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "sale",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="payments",
                        to="sales.sale",
                    ),
                ),
            ],
            options={
                "ordering": ["created_at"],
                "indexes": [
                    models.Index(fields=["sale", "created_at"], name="sales_payment_sale_idx"),
                    models.Index(fields=["method"], name="sales_payment_method_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(condition=models.Q(("amount__gt", 0)), name="chk_payment_amount_positive"),
                ],
            },
        ),
    ]
