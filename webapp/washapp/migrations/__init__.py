"""
washapp.migrations
==================

Пакет миграций Django-приложения `washapp`.

    python manage.py makemigrations
    python manage.py migrate
"""
