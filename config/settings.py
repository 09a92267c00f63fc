"""
Kirana – Django Settings (Infrastructure Only)
===============================================
Django serves as the HTTP container for the shop engine.
The engine is the authority — Django does not dictate structure.

Shop tunables are exposed as KIRANA_* values read from the
environment; adapters/django_api/wiring.py turns them into
core.config.PosSettings.
"""

import os
from pathlib import Path

# ── Paths ─────────────────────────────────────────────────────
BASE_DIR = Path(__file__).resolve().parent.parent

# ── Security ──────────────────────────────────────────────────
SECRET_KEY = os.environ.get("KIRANA_SECRET_KEY", "kirana-dev-key-replace-before-deployment")

DEBUG = os.environ.get("KIRANA_DEBUG", "1") == "1"

ALLOWED_HOSTS = ["localhost", "127.0.0.1", "testserver"]

# ── Installed Apps ────────────────────────────────────────────
# No models: shop state lives in memory inside PosService.
INSTALLED_APPS = [
    "django.contrib.contenttypes",
]

# ── Middleware ────────────────────────────────────────────────
MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.middleware.common.CommonMiddleware",
]

# ── URL & WSGI ────────────────────────────────────────────────
ROOT_URLCONF = "config.urls"
WSGI_APPLICATION = "config.wsgi.application"

# ── Database ──────────────────────────────────────────────────
# Unused by the engine; Django still expects one to be configured.
DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}

# ── Internationalization ──────────────────────────────────────
LANGUAGE_CODE = "en-us"
TIME_ZONE = "UTC"
USE_I18N = False
USE_TZ = True

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

# ── Shop Engine ───────────────────────────────────────────────
# Empty values fall back to PosSettings defaults.
KIRANA_COST_RATIO = os.environ.get("KIRANA_COST_RATIO", "")
KIRANA_QUICK_RESTOCK_UNITS = os.environ.get("KIRANA_QUICK_RESTOCK_UNITS", "")
KIRANA_PLACEHOLDER_PRICE = os.environ.get("KIRANA_PLACEHOLDER_PRICE", "")
KIRANA_DEFAULT_UNIT = os.environ.get("KIRANA_DEFAULT_UNIT", "")
KIRANA_DEFAULT_SHELF_LIFE_DAYS = os.environ.get("KIRANA_DEFAULT_SHELF_LIFE_DAYS", "")
KIRANA_LOW_STOCK_THRESHOLD = os.environ.get("KIRANA_LOW_STOCK_THRESHOLD", "")
KIRANA_EXPIRY_WARNING_DAYS = os.environ.get("KIRANA_EXPIRY_WARNING_DAYS", "")
KIRANA_TOP_SELLING_LIMIT = os.environ.get("KIRANA_TOP_SELLING_LIMIT", "")
KIRANA_INCOME_WINDOW_DAYS = os.environ.get("KIRANA_INCOME_WINDOW_DAYS", "")
KIRANA_DEFAULT_VIEW = os.environ.get("KIRANA_DEFAULT_VIEW", "")

# Start with the demo shelf (biscuits, noodles, salt, ...).
KIRANA_SEED_DEMO = os.environ.get("KIRANA_SEED_DEMO", "1") == "1"

# ── Logging ───────────────────────────────────────────────────
LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "plain": {
            "format": "%(asctime)s %(levelname)s %(name)s: %(message)s",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "plain",
        },
    },
    "loggers": {
        "kirana": {
            "handlers": ["console"],
            "level": os.environ.get("KIRANA_LOG_LEVEL", "INFO"),
            "propagate": True,
        },
    },
}
