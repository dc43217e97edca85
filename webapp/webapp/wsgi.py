"""
wsgi.py
=======

WSGI-точка входа **Cleanly WebApp**.

Один процесс отдаёт и API (/api/), и собранный фронтенд (SPA-фолбэк
на index.html), поэтому для деплоя достаточно одного WSGI-сервера:

    gunicorn webapp.wsgi:application --chdir webapp
"""

import os
from django.core.wsgi import get_wsgi_application


os.environ.setdefault("DJANGO_SETTINGS_MODULE", "webapp.settings")

application = get_wsgi_application()
