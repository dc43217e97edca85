"""
settings.py
============

Глобальные настройки Django-проекта **Cleanly WebApp**.

Назначение:
- определяет конфигурацию Django (БД, middleware, приложения и др.);
- хранит бизнес-константы автомойки (слоты, лимит записей, брейкпоинты
  календаря, способы оплаты);
- используется при запуске как через `manage.py`, так и при WSGI-развёртывании.

Примечание:
Значения по умолчанию рассчитаны на локальную разработку.
Для продакшена ключи, пароли и хосты задаются переменными окружения.
"""

import os
from pathlib import Path


# ---------------------------------------------------------------------------
# Базовая конфигурация проекта
# ---------------------------------------------------------------------------

BASE_DIR = Path(__file__).resolve().parent.parent

SECRET_KEY = os.getenv("DJANGO_SECRET_KEY", "dev-secret-key-change-this")
DEBUG = os.getenv("DJANGO_DEBUG", "1") == "1"
ALLOWED_HOSTS = os.getenv("DJANGO_ALLOWED_HOSTS", "127.0.0.1,localhost").split(",")


# ---------------------------------------------------------------------------
# Приложения (Django apps)
# ---------------------------------------------------------------------------

INSTALLED_APPS = [
    # --- системные приложения Django ---
    "django.contrib.admin",
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    "django.contrib.messages",
    "django.contrib.staticfiles",

    # --- кастомные приложения проекта ---
    "washapp",   # записи, календарь, каталог услуг, клиенты

    # --- сторонние библиотеки ---
    "rest_framework",
]


# ---------------------------------------------------------------------------
# Middleware
# ---------------------------------------------------------------------------

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.contrib.sessions.middleware.SessionMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.contrib.auth.middleware.AuthenticationMiddleware",
    "django.contrib.messages.middleware.MessageMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
]


# ---------------------------------------------------------------------------
# URL / Templates / WSGI
# ---------------------------------------------------------------------------

ROOT_URLCONF = "webapp.urls"

TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [],
        "APP_DIRS": True,
        "OPTIONS": {
            "context_processors": [
                "django.template.context_processors.debug",
                "django.template.context_processors.request",
                "django.contrib.auth.context_processors.auth",
                "django.contrib.messages.context_processors.messages",
            ],
        },
    },
]

WSGI_APPLICATION = "webapp.wsgi.application"


# ---------------------------------------------------------------------------
# База данных
# ---------------------------------------------------------------------------

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.postgresql",
        "NAME": os.getenv("POSTGRES_DB", "cleanly_db"),
        "USER": os.getenv("POSTGRES_USER", "cleanly_user"),
        "PASSWORD": os.getenv("POSTGRES_PASSWORD", "cleanly_password"),
        "HOST": os.getenv("POSTGRES_HOST", "localhost"),
        "PORT": os.getenv("POSTGRES_PORT", "5432"),
    }
}


# ---------------------------------------------------------------------------
# Аутентификация и безопасность
# ---------------------------------------------------------------------------

AUTH_PASSWORD_VALIDATORS = [
    {"NAME": "django.contrib.auth.password_validation.UserAttributeSimilarityValidator"},
    {"NAME": "django.contrib.auth.password_validation.MinimumLengthValidator"},
    {"NAME": "django.contrib.auth.password_validation.CommonPasswordValidator"},
    {"NAME": "django.contrib.auth.password_validation.NumericPasswordValidator"},
]


# ---------------------------------------------------------------------------
# Локализация и время
# ---------------------------------------------------------------------------

LANGUAGE_CODE = "es-cl"
TIME_ZONE = "America/Santiago"

USE_I18N = True
USE_TZ = True


# ---------------------------------------------------------------------------
# Статика и собранный фронтенд (SPA)
# ---------------------------------------------------------------------------

STATIC_URL = "static/"
STATIC_ROOT = BASE_DIR / "staticfiles"

# Каталог со сборкой фронтенда (index.html + assets/)
WASHAPP_FRONTEND_DIST = Path(os.getenv("WASHAPP_FRONTEND_DIST", str(BASE_DIR.parent / "dist")))


# ---------------------------------------------------------------------------
# REST API
# ---------------------------------------------------------------------------

REST_FRAMEWORK = {
    "DEFAULT_PERMISSION_CLASSES": ["rest_framework.permissions.AllowAny"],
}


# ---------------------------------------------------------------------------
# Логирование
# ---------------------------------------------------------------------------

WASHAPP_LOG_LEVEL = os.getenv("WASHAPP_LOG_LEVEL", "INFO")

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "default": {"format": "%(asctime)s [%(levelname)s] %(name)s: %(message)s"},
    },
    "handlers": {
        "console": {"class": "logging.StreamHandler", "formatter": "default"},
    },
    "loggers": {
        "washapp": {"handlers": ["console"], "level": WASHAPP_LOG_LEVEL, "propagate": True},
    },
}


# ---------------------------------------------------------------------------
# Бизнес-правила автомойки
# ---------------------------------------------------------------------------

# Одновременно не более двух записей на слот (два бокса / два мойщика)
WASHAPP_MAX_PER_SLOT = int(os.getenv("WASHAPP_MAX_PER_SLOT", "2"))

# Допустимые слоты записи (каждые полчаса, 09:00–17:30)
WASHAPP_TIME_SLOTS = [
    f"{hour:02d}:{minute:02d}" for hour in range(9, 18) for minute in (0, 30)
]

# Значение location для услуг, выполняемых в мастерской
WASHAPP_WORKSHOP_LOCATION = "Taller principal"

WASHAPP_PAYMENT_METHODS = ["Efectivo", "Mercado Pago"]

# Подключаемые реализации хранилища (см. washapp.repository)
WASHAPP_APPOINTMENT_REPOSITORY = "washapp.repository.DjangoAppointmentRepository"
WASHAPP_SERVICE_CATALOG = "washapp.repository.DjangoServiceCatalog"


# ---------------------------------------------------------------------------
# Календарь: брейкпоинты и раскладка
# ---------------------------------------------------------------------------

# (максимальная ширина в px, класс ширины); всё шире считается "wide"
WASHAPP_BREAKPOINTS = [
    (430, "very-narrow"),
    (639, "narrow"),
    (767, "medium"),
]

# Сколько дней показывать в режиме "week" для каждого класса ширины
WASHAPP_DAYS_PER_WIDTH = {
    "very-narrow": 2,
    "narrow": 3,
    "medium": 4,
    "wide": 7,
}

# Часы, которые дневной вид показывает всегда (09:00–18:00)
WASHAPP_DAY_HOURS = list(range(9, 19))

# Смещение (dx, dy) в px для каждой следующей карточки в общем слоте
WASHAPP_STACK_OFFSET = {
    "day": (12, 8),
    "week": (8, 4),
}


# ---------------------------------------------------------------------------
# Прочее
# ---------------------------------------------------------------------------

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"
