"""
exceptions.py
=============

Исключения слоя хранения.

Наружу (в API и во вьюхи) они не пробрасываются: сервисные функции
(`washapp.booking`) превращают их в коды ошибок.
"""

from __future__ import annotations


class WashAppError(Exception):
    """Базовое исключение приложения."""


class StoreUnavailableError(WashAppError):
    """Хранилище недоступно или запрос к нему упал."""


class MalformedRecordError(WashAppError):
    """Строка из хранилища не похожа на ожидаемую запись."""
