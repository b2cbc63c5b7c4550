"""
Request ID Middleware for the newsroom API.

Generates and propagates unique request IDs for tracing.

- Accepts incoming X-Request-ID header (must be a UUID)
- Adds request ID to response headers
- Injects request ID into thread-local logging context
- Celery tasks set their own context through the task signals in config.celery
"""

import uuid
import threading
import logging
from django.utils.deprecation import MiddlewareMixin

logger = logging.getLogger(__name__)

# Thread-local storage for request context
_request_context = threading.local()


def get_request_id():
    """
    Get the current request ID from thread-local storage.

    Returns None if called outside of a request context.
    """
    return getattr(_request_context, 'request_id', None)


def set_request_context(request_id, user_id=None, path=None):
    """Set request context in thread-local storage."""
    _request_context.request_id = request_id
    _request_context.user_id = user_id
    _request_context.path = path


def clear_request_context():
    """Clear request context from thread-local storage."""
    _request_context.request_id = None
    _request_context.user_id = None
    _request_context.path = None


class RequestIDMiddleware(MiddlewareMixin):
    """
    Middleware to handle request IDs for tracing.

    Flow:
    1. Check for incoming X-Request-ID header
    2. Generate new UUID if not present or malformed
    3. Store in thread-local for access in logging
    4. Attach to request object as request.request_id
    5. Add to response headers
    """

    REQUEST_ID_HEADER = 'HTTP_X_REQUEST_ID'
    RESPONSE_HEADER = 'X-Request-ID'

    def process_request(self, request):
        request_id = request.META.get(self.REQUEST_ID_HEADER)

        if request_id:
            try:
                uuid.UUID(request_id)
            except (ValueError, TypeError):
                request_id = str(uuid.uuid4())
        else:
            request_id = str(uuid.uuid4())

        user = getattr(request, 'user', None)
        user_id = str(user.pk) if user is not None and user.is_authenticated else None
        set_request_context(request_id, user_id=user_id, path=request.path)

        request.request_id = request_id
        return None

    def process_response(self, request, response):
        request_id = getattr(request, 'request_id', None)

        if request_id:
            response[self.RESPONSE_HEADER] = request_id

        clear_request_context()
        return response


class RequestIDFilter(logging.Filter):
    """
    Logging filter that adds request_id to log records.

    Referenced from the LOGGING config as 'apps.core.middleware.RequestIDFilter'.
    """

    def filter(self, record):
        record.request_id = get_request_id() or '-'
        return True
