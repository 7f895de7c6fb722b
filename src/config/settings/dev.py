"""Development settings."""
from .base import *  # noqa: F401,F403

DEBUG = True

# Debug toolbar
try:
    import debug_toolbar  # noqa: F401
    INSTALLED_APPS += ["debug_toolbar"]  # noqa: F405
    MIDDLEWARE.insert(0, "debug_toolbar.middleware.DebugToolbarMiddleware")  # noqa: F405
    INTERNAL_IPS = ["127.0.0.1"]
except ImportError:
    pass

# CORS
CORS_ALLOW_ALL_ORIGINS = True

# Config edits from the admin should show up on the next request
ASSISTANT_CONFIG_MEMO_SECONDS = env.int("ASSISTANT_CONFIG_MEMO_SECONDS", default=0)  # noqa: F405

# Without a Redis URL fall back to the in-process cache
if not env("REDIS_URL", default=""):  # noqa: F405
    CACHES = {
        "default": {
            "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
            "LOCATION": "distrinet-dev",
        }
    }

# Logging
LOGGING["root"]["level"] = "DEBUG"  # noqa: F405
LOGGING["loggers"]["distrinet"]["level"] = "DEBUG"  # noqa: F405
