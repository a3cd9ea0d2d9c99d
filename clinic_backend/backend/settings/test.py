# backend/settings/test.py
"""
PATH: backend/settings/test.py

TEST SETTINGS
- in-memory SQLite unless DATABASE_URL points elsewhere
  (set it to Postgres to exercise row-lock concurrency tests)
- fast password hashing
- quiet ledger logging
"""

from __future__ import annotations

from .base import *  # noqa: F403
from .base import LOGGING, env

DEBUG = False
SECRET_KEY = "test-only-secret-key"
ALLOWED_HOSTS = ["testserver", "localhost"]

DATABASES = {
    "default": env.db("TEST_DATABASE_URL", default="sqlite://:memory:"),
}

PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]

LEDGER_MAIN_ROLLUP_ENABLED = True
LEDGER_LOCK_TIMEOUT_MS = 2000

REST_FRAMEWORK = {
    **REST_FRAMEWORK,  # noqa: F405
    "DEFAULT_THROTTLE_CLASSES": (),
}

for _logger in LOGGING["loggers"].values():
    _logger["level"] = "WARNING"
