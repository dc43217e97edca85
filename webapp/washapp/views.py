# webapp/washapp/views.py
"""
Представления (views) приложения `washapp`.

- healthcheck — проверка живости
- spa_entry — раздача собранного фронтенда (SPA)

SPA особенности:
- файлы из каталога сборки (settings.WASHAPP_FRONTEND_DIST) отдаются как есть;
- любой другой путь получает index.html — маршрутизацию делает фронтенд;
- выход за пределы каталога сборки (../) не допускается.
"""
from __future__ import annotations

import logging
import mimetypes
from pathlib import Path

from django.conf import settings
from django.http import FileResponse, Http404, HttpResponse
from django.views.decorators.http import require_GET

logger = logging.getLogger(__name__)


def healthcheck(request) -> HttpResponse:
    """Простой healthcheck для аптайм-мониторинга."""
    return HttpResponse("Cleanly WebApp is running.")


def _resolve_asset(dist: Path, path: str) -> Path | None:
    """Файл сборки по пути запроса или None, если такого файла нет."""
    if not path:
        return None
    candidate = (dist / path).resolve()
    try:
        candidate.relative_to(dist)
    except ValueError:
        logger.warning("spa_entry: path escapes dist: %r", path)
        return None
    return candidate if candidate.is_file() else None


@require_GET
def spa_entry(request, path: str = "") -> FileResponse:
    """
    Отдать статический файл сборки или index.html (SPA fallback).

    Path-параметр:
      - path: путь внутри каталога сборки (может быть пустым)
    """
    dist = Path(settings.WASHAPP_FRONTEND_DIST).resolve()
    asset = _resolve_asset(dist, path)
    if asset is None:
        asset = dist / "index.html"
        if not asset.is_file():
            logger.error("spa_entry: index.html not found in %s", dist)
            raise Http404("frontend bundle is not built")

    content_type, _ = mimetypes.guess_type(str(asset))
    return FileResponse(asset.open("rb"), content_type=content_type or "application/octet-stream")
