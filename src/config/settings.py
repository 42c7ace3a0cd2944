import re
from pathlib import Path

import structlog
from decouple import Csv, config
from dj_database_url import parse as db_url

# Build paths inside the project like this: BASE_DIR / 'subdir'.
BASE_DIR = Path(__file__).resolve().parent.parent

SECRET_KEY = config("SECRET_KEY", default="django-insecure-order-lanes-dev")

DEBUG = config("DEBUG", default=False, cast=bool)

ALLOWED_HOSTS = config(
    "ALLOWED_HOSTS", default="127.0.0.1,localhost,testserver", cast=Csv()
)

# Application definition
INSTALLED_APPS = [
    "django.contrib.auth",
    "django.contrib.contenttypes",
    # Third-party
    "rest_framework",
    # Local Apps (Modules)
    "modules.core",
    "modules.state",
    "modules.orders",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "modules.core.middleware.CorrelationIdMiddleware",
    "django.middleware.common.CommonMiddleware",
]

ROOT_URLCONF = "config.urls"

WSGI_APPLICATION = "config.wsgi.application"

DATABASES = {
    "default": config(
        "DATABASE_URL", default=f'sqlite:///{BASE_DIR / "db.sqlite3"}', cast=db_url
    )
}

# Internationalization
LANGUAGE_CODE = "de-de"
TIME_ZONE = "Europe/Berlin"
USE_I18N = True
USE_TZ = True

# Default primary key field type
DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

# DRF Configuration (the state endpoint brings its own token check)
REST_FRAMEWORK = {
    "DEFAULT_AUTHENTICATION_CLASSES": [
        "modules.core.authentication.StateTokenAuthentication",
    ],
    "DEFAULT_PERMISSION_CLASSES": [
        "modules.core.authentication.StateTokenRequired",
    ],
    "DEFAULT_RENDERER_CLASSES": [
        "rest_framework.renderers.JSONRenderer",
    ],
    "DEFAULT_PARSER_CLASSES": [
        "rest_framework.parsers.JSONParser",
    ],
    "UNAUTHENTICATED_USER": None,
}

# ---------------------------------------------------------------------------
# State endpoint (server side of the key-value store)
# ---------------------------------------------------------------------------
STATE_KEY = config("STATE_KEY", default="orders_state")
STATE_API_TOKEN = config("STATE_API_TOKEN", default="")

# ---------------------------------------------------------------------------
# Order board (client side: store + persistence gateway)
# ---------------------------------------------------------------------------
ORDER_STATE_BACKEND = config("ORDER_STATE_BACKEND", default="file")
ORDER_STATE_URL = config("ORDER_STATE_URL", default="http://127.0.0.1:8000/api/orders")
ORDER_STATE_TOKEN = config("ORDER_STATE_TOKEN", default="")
ORDER_STATE_TIMEOUT = config("ORDER_STATE_TIMEOUT", default=10.0, cast=float)
ORDER_STATE_FILE = config(
    "ORDER_STATE_FILE", default=str(BASE_DIR / "appState.json")
)
GIST_ID = config("GIST_ID", default="")
GITHUB_PAT = config("GITHUB_PAT", default="")
GIST_FILENAME = config("GIST_FILENAME", default="appState.json")
ORDER_STATUSES = config("ORDER_STATUSES", default="red,yellow,green", cast=Csv())
ORDER_SEED_ON_EMPTY = config("ORDER_SEED_ON_EMPTY", default=False, cast=bool)
MACHINES_FILE = config("MACHINES_FILE", default=str(BASE_DIR / "machines.json"))

# ---------------------------------------------------------------------------
# Structured Logging (structlog + Django LOGGING)
# ---------------------------------------------------------------------------
SENSITIVE_PATTERN = re.compile(
    r"(gh[pousr]_[A-Za-z0-9]{20,})"  # GitHub tokens
    r"|(password|passwd|secret|token|authorization)"
    r"""([=:]\s*["']?)(?:(?:bearer|token)\s+)?([^\s,}"']+)""",
    re.IGNORECASE,
)


def mask_sensitive_data(_, __, event_dict):
    """Processor that masks GitHub PATs, passwords and tokens in log values."""
    for key, value in list(event_dict.items()):
        if isinstance(value, str):
            event_dict[key] = SENSITIVE_PATTERN.sub("***MASKED***", value)
    return event_dict


# Shared processors used by both structlog and stdlib logging
_shared_processors = [
    structlog.contextvars.merge_contextvars,
    structlog.stdlib.add_log_level,
    structlog.stdlib.add_logger_name,
    structlog.processors.TimeStamper(fmt="iso"),
    mask_sensitive_data,
    structlog.processors.StackInfoRenderer(),
    structlog.processors.UnicodeDecoder(),
]

structlog.configure(
    processors=[
        *_shared_processors,
        structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
    ],
    logger_factory=structlog.stdlib.LoggerFactory(),
    wrapper_class=structlog.stdlib.BoundLogger,
    cache_logger_on_first_use=True,
)

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "json": {
            "()": structlog.stdlib.ProcessorFormatter,
            "processors": [
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                structlog.processors.JSONRenderer(),
            ],
            "foreign_pre_chain": _shared_processors,
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "json",
        },
    },
    "root": {
        "handlers": ["console"],
        "level": "INFO",
    },
    "loggers": {
        "django": {
            "handlers": ["console"],
            "level": "INFO",
            "propagate": False,
        },
        "django.server": {
            "handlers": ["console"],
            "level": "WARNING",
            "propagate": False,
        },
    },
}
