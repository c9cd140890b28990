import os
from pathlib import Path
import dj_database_url

BASE_DIR = Path(__file__).resolve().parent.parent

# ===== Entorno / seguridad =====
SECRET_KEY = os.getenv("SECRET_KEY", "change-me")
DEBUG = os.getenv("DEBUG", "false").lower() == "true"

APP_BASE_URL = os.getenv("APP_BASE_URL", "http://127.0.0.1:8000").rstrip("/")

ALLOWED_HOSTS = os.getenv("ALLOWED_HOSTS", "localhost,127.0.0.1").split(",")

# CSRF: orígenes confiables (usar URLs con esquema)
CSRF_TRUSTED_ORIGINS = list({
    APP_BASE_URL if APP_BASE_URL.startswith("http") else f"https://{APP_BASE_URL}",
})

SECURE_PROXY_SSL_HEADER = ("HTTP_X_FORWARDED_PROTO", "https")
SESSION_COOKIE_SECURE = not DEBUG
CSRF_COOKIE_SECURE = not DEBUG
SESSION_COOKIE_SAMESITE = "Lax"
SESSION_COOKIE_HTTPONLY = True
USE_X_FORWARDED_HOST = True

# Endurece seguridad en producción
if not DEBUG:
    SECURE_SSL_REDIRECT = os.getenv("SECURE_SSL_REDIRECT", "true").lower() == "true"
    SECURE_HSTS_SECONDS = int(os.getenv("SECURE_HSTS_SECONDS", "31536000"))  # 1 año
    SECURE_HSTS_INCLUDE_SUBDOMAINS = True
    SECURE_HSTS_PRELOAD = True
    SECURE_CONTENT_TYPE_NOSNIFF = True
    X_FRAME_OPTIONS = "DENY"
    REFERRER_POLICY = "strict-origin-when-cross-origin"

# ===== Apps =====
INSTALLED_APPS = [
    "django.contrib.contenttypes", "django.contrib.sessions",
    "django.contrib.messages", "django.contrib.staticfiles",
    "widget_tweaks",
    "core", "accounts", "clients", "cases", "documents", "analytics",
]

# ===== Middleware =====
MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    # WhiteNoise inmediatamente después de SecurityMiddleware
    "whitenoise.middleware.WhiteNoiseMiddleware",
    "django.contrib.sessions.middleware.SessionMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "core.middleware.usuario_sesion",
    "django.contrib.messages.middleware.MessageMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
]

ROOT_URLCONF = "adminlegal.urls"
WSGI_APPLICATION = "adminlegal.wsgi.application"

TEMPLATES = [{
    "BACKEND": "django.template.backends.django.DjangoTemplates",
    "DIRS": [BASE_DIR / "templates"],
    "APP_DIRS": True,
    "OPTIONS": {"context_processors": [
        "django.template.context_processors.debug",
        "django.template.context_processors.request",
        "django.contrib.messages.context_processors.messages",
        "core.context_processors.sesion",
    ]},
}]

# ===== Base de datos (sólo sesiones; los datos viven en el backend) =====
DATABASES = {
    "default": dj_database_url.config(
        default=f"sqlite:///{BASE_DIR / 'db.sqlite3'}",
        conn_max_age=600,
    )
}

SESSION_ENGINE = os.getenv("SESSION_ENGINE", "django.contrib.sessions.backends.db")
MESSAGE_STORAGE = "django.contrib.messages.storage.session.SessionStorage"

# ===== Idioma / TZ =====
LANGUAGE_CODE = "es-cl"
TIME_ZONE = "America/Santiago"
USE_I18N = False
USE_TZ = True

# ===== Estáticos =====
STATIC_URL = "/static/"
STATIC_ROOT = BASE_DIR / "staticfiles"
if (BASE_DIR / "static").exists():
    STATICFILES_DIRS = [BASE_DIR / "static"]

STORAGES = {
    "default": {"BACKEND": "django.core.files.storage.FileSystemStorage"},
    "staticfiles": {
        "BACKEND": (
            "django.contrib.staticfiles.storage.StaticFilesStorage" if DEBUG
            else "whitenoise.storage.CompressedManifestStaticFilesStorage"
        ),
    },
}

# ===== Sesión de la consola =====
DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"
LOGIN_URL = "accounts:login"
LOGIN_REDIRECT_URL = "core:home"

# ===== Backends externos =====
# "rest" o "graphql": ambas integraciones exponen el mismo contrato
API_BACKEND = os.getenv("API_BACKEND", "rest").strip().lower()
API_BASE_URL = os.getenv("API_BASE_URL", "http://localhost:3000").rstrip("/")
DOCS_API_BASE_URL = os.getenv("DOCS_API_BASE_URL", "http://localhost:8081").rstrip("/")
API_GRAPHQL_URL = os.getenv("API_GRAPHQL_URL", "http://localhost:3000/graphql")
ANALYTICS_BASE_URL = os.getenv("ANALYTICS_BASE_URL", "http://localhost:8010").rstrip("/")
API_TIMEOUT = float(os.getenv("API_TIMEOUT", "15"))

# Rutas que nunca reciben el bearer
API_PUBLIC_PREFIXES = tuple(
    p.strip() for p in os.getenv("API_PUBLIC_PREFIXES", "/admin/").split(",") if p.strip()
)

# ===== Logging =====
LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {"simple": {"format": "%(asctime)s %(levelname)s %(name)s: %(message)s"}},
    "handlers": {"console": {"class": "logging.StreamHandler", "formatter": "simple"}},
    "root": {"handlers": ["console"], "level": os.getenv("LOG_LEVEL", "INFO")},
}
