# accounting/migrations/0002_provision_accounts.py

"""
Provision the five clinic accounts (zero balance).
Idempotent; the seed_accounts command does the same for existing databases.
"""

from django.db import migrations

ACCOUNTS = [
    ("hospital", "Hospital Account"),
    ("medicine", "Medicine Account"),
    ("optics", "Optics Account"),
    ("operation", "Operation Account"),
    ("main", "Main Account"),
]


def provision_accounts(apps, schema_editor):
    Account = apps.get_model("accounting", "Account")
    for kind, name in ACCOUNTS:
        Account.objects.get_or_create(kind=kind, defaults={"name": name})


class Migration(migrations.Migration):
    dependencies = [
        ("accounting", "0001_initial"),
    ]

    operations = [
        migrations.RunPython(provision_accounts, migrations.RunPython.noop),
    ]
