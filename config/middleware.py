"""
Custom middleware for seatdesk.
"""
import logging
import time

from django.utils.deprecation import MiddlewareMixin

logger = logging.getLogger(__name__)


class RequestLoggingMiddleware(MiddlewareMixin):
    """
    Log one line per API request: method, path, status, duration and user id.
    Health checks are skipped to keep the log readable.
    """
    SKIP_PREFIXES = ('/api/health', '/static/')

    def process_request(self, request):
        request._started_at = time.monotonic()

    def process_response(self, request, response):
        path = request.path
        if any(path.startswith(prefix) for prefix in self.SKIP_PREFIXES):
            return response

        started = getattr(request, '_started_at', None)
        duration_ms = (time.monotonic() - started) * 1000 if started is not None else 0.0
        user = getattr(request, 'user', None)
        user_id = user.pk if user is not None and user.is_authenticated else None

        status_code = getattr(response, 'status_code', None)
        level = logging.WARNING if status_code and status_code >= 500 else logging.INFO
        logger.log(
            level,
            '%s %s -> %s (%.1f ms) user=%s',
            request.method, path, status_code, duration_ms, user_id,
        )
        return response
