"""
Rate Limiting / Throttling for the newsroom API.

Custom DRF throttle classes for different endpoint types.

Usage in views:
    from apps.core.throttling import AIEndpointThrottle

    class SummarizeView(APIView):
        throttle_classes = [AIEndpointThrottle]

Rates live in settings:
    REST_FRAMEWORK = {
        'DEFAULT_THROTTLE_RATES': {
            'burst': '100/minute',   # article and category endpoints
            'ai': '10/minute',       # assistant endpoints
            'login': '20/hour',      # token issuance
        }
    }
"""

import logging

from django.core.exceptions import ImproperlyConfigured
from rest_framework.throttling import UserRateThrottle

logger = logging.getLogger(__name__)


class BurstThrottle(UserRateThrottle):
    """
    Burst throttle to prevent rapid-fire requests.

    Anonymous readers are keyed by IP address.

    Default: 100 requests/minute
    """
    scope = 'burst'

    def get_rate(self):
        try:
            return super().get_rate()
        except ImproperlyConfigured:
            return '100/minute'


class AIEndpointThrottle(UserRateThrottle):
    """
    Throttle for assistant endpoints that call the external model.

    Applies to:
    - POST /api/ai/summarize/
    - POST /api/ai/tags/
    - POST /api/ai/seo/
    - POST /api/ai/translate/
    - POST /api/ai/complete/

    Default: 10 requests/minute
    """
    scope = 'ai'

    def get_rate(self):
        try:
            return super().get_rate()
        except ImproperlyConfigured:
            return '10/minute'


class LoginThrottle(UserRateThrottle):
    """
    Throttle for token issuance, keyed by IP for anonymous callers.

    Default: 20 requests/hour
    """
    scope = 'login'

    def get_rate(self):
        try:
            return super().get_rate()
        except ImproperlyConfigured:
            return '20/hour'
