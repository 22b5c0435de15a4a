from .base import *  # noqa: F403
from .base import env

# GENERAL
# ------------------------------------------------------------------------------
# https://docs.djangoproject.com/en/dev/ref/settings/#debug
DEBUG = True
# https://docs.djangoproject.com/en/dev/ref/settings/#secret-key
SECRET_KEY = env(
    "DJANGO_SECRET_KEY",
    default="9Ld1qfI0kQ1sbzYpCw3cUV7oM0hXMRr6sAi9xg3xD4HcIQ7bJ7u6WzG2nKCyOHyL",
)
# https://docs.djangoproject.com/en/dev/ref/settings/#allowed-hosts
ALLOWED_HOSTS = ["localhost", "0.0.0.0", "127.0.0.1"]  # noqa: S104

# drf-spectacular
# ------------------------------------------------------------------------------
SPECTACULAR_SETTINGS["SERVE_PERMISSIONS"] = [  # noqa: F405
    "rest_framework.permissions.AllowAny",
]

LOGGING["loggers"]["productivity"]["level"] = env(  # noqa: F405
    "REALTIME_LOG_LEVEL",
    default="DEBUG",
)
