"""
settings_test.py
================

Настройки для прогона тестов (pytest-django).

Всё наследуется из `webapp.settings`, меняется только БД:
in-memory SQLite, чтобы тестам не нужен был живой PostgreSQL.
"""

from .settings import *  # noqa: F401,F403

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}

PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]
