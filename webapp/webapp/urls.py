"""
urls.py
=======

Корневой маршрутизатор Django-проекта **Cleanly WebApp**.

Назначение:
- объединяет все маршруты проекта;
- подключает административную панель Django;
- подключает REST API и раздачу фронтенда.

Структура маршрутов:
- /admin/ — стандартная админка Django;
- /api/ — REST API записей, календаря, каталога и клиентов;
- / — healthcheck и SPA (`washapp`). Подключается последним:
  его маршрут ловит все оставшиеся пути.
"""

from django.contrib import admin
from django.urls import path, include


urlpatterns = [
    # Панель администратора Django
    path("admin/", admin.site.urls),

    # DRF API
    path("api/", include("washapp.api.urls")),

    # Healthcheck + фронтенд (catch-all)
    path("", include("washapp.urls")),
]
