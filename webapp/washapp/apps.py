"""
apps.py
=======

Конфигурация Django-приложения `washapp`.

Назначение:
- регистрирует приложение в системе Django;
- определяет читаемое имя (verbose_name);
- задаёт автоинкрементное поле по умолчанию для моделей.

Приложение включает:
- модели записей (Appointment), услуг (Service), клиентов и их машин;
- проверку занятости слотов и модель календаря;
- REST API для фронтенда.
"""

from django.apps import AppConfig


class WashappConfig(AppConfig):
    """
    Конфигурация приложения автомойки.

    Используется Django для инициализации пакета `washapp`
    при запуске проекта.
    """
    default_auto_field = "django.db.models.BigAutoField"
    name = "washapp"
    verbose_name = "Автомойка / Записи"
