"""
urls.py
=======

Маршруты (URL patterns) приложения `washapp`.

Текущие маршруты:
- `/health/` — healthcheck: сервер Django запущен, приложение доступно;
- всё остальное (кроме /api/ и /admin/, они подключены раньше) —
  собранный фронтенд с fallback на index.html.
"""
from django.urls import path, re_path
from . import views

urlpatterns = [
    path("health/", views.healthcheck, name="healthcheck"),
    re_path(r"^(?!(?:api|admin)(?:/|$))(?P<path>.*)$", views.spa_entry, name="spa_entry"),
]
