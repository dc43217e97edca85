"""
manage.py
=========

Командный интерфейс Django-проекта **Cleanly WebApp** (запись на автомойку).

Чаще всего нужны:
-----------------
    python manage.py migrate            # таблицы appointments/services/clients/vehicles
    python manage.py createsuperuser    # доступ в /admin/ (каталог цен, записи)
    python manage.py runserver          # API на /api/, фронтенд из WASHAPP_FRONTEND_DIST

Настройки берутся из `webapp.settings` (Postgres через переменные окружения
POSTGRES_*); тесты используют `webapp.settings_test` с SQLite в памяти.
"""

import os
import sys


def main() -> None:
    """Задать DJANGO_SETTINGS_MODULE и передать аргументы CLI в Django."""
    os.environ.setdefault("DJANGO_SETTINGS_MODULE", "webapp.settings")

    try:
        from django.core.management import execute_from_command_line
    except ImportError as exc:
        raise ImportError(
            "Не удалось импортировать Django. "
            "Проверьте, что зависимости проекта установлены (pip install -e .)."
        ) from exc

    execute_from_command_line(sys.argv)


if __name__ == "__main__":
    main()
