"""Core middleware."""
import logging
import time

from django.utils.cache import add_never_cache_headers

logger = logging.getLogger("distrinet")


class APIResponseMiddleware:
    """Mark API responses as never cacheable and log slow API requests."""

    API_PREFIX = "/api/"
    SLOW_REQUEST_SECONDS = 2.0

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        if not request.path.startswith(self.API_PREFIX):
            return self.get_response(request)

        started = time.monotonic()
        response = self.get_response(request)
        elapsed = time.monotonic() - started

        add_never_cache_headers(response)
        response["Pragma"] = "no-cache"

        if elapsed >= self.SLOW_REQUEST_SECONDS:
            logger.warning(
                "Slow API request %s %s: %.2fs (status=%s, cache=%s)",
                request.method,
                request.path,
                elapsed,
                response.status_code,
                response.get("X-Cache", "-"),
            )
        return response
