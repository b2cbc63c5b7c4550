"""
Tests for request ID propagation and health endpoints.
"""

import uuid
from unittest.mock import patch

import pytest
from django.db import DatabaseError
from django.test import RequestFactory
from django.http import HttpResponse

from apps.core.middleware import (
    RequestIDFilter,
    RequestIDMiddleware,
    clear_request_context,
    get_request_id,
    set_request_context,
)
from apps.core.observability import HealthStatus, check_database, health_checker


# ============================================================================
# Request ID Middleware Tests
# ============================================================================

class TestRequestIdMiddleware:
    """Test request ID propagation."""

    def _run(self, **headers):
        request = RequestFactory().get('/livez/', **headers)
        middleware = RequestIDMiddleware(lambda r: HttpResponse('ok'))
        response = middleware(request)
        return request, response

    def test_generates_request_id(self):
        request, response = self._run()
        assert uuid.UUID(response['X-Request-ID'])
        assert response['X-Request-ID'] == request.request_id

    def test_keeps_valid_incoming_id(self):
        incoming = str(uuid.uuid4())
        _, response = self._run(HTTP_X_REQUEST_ID=incoming)
        assert response['X-Request-ID'] == incoming

    def test_replaces_malformed_incoming_id(self):
        _, response = self._run(HTTP_X_REQUEST_ID='not-a-uuid')
        assert response['X-Request-ID'] != 'not-a-uuid'
        assert uuid.UUID(response['X-Request-ID'])

    def test_context_cleared_after_response(self):
        self._run()
        assert get_request_id() is None

    def test_log_filter_adds_request_id(self):
        import logging

        record = logging.LogRecord('x', logging.INFO, __file__, 1, 'msg', (), None)
        set_request_context('abc')
        try:
            RequestIDFilter().filter(record)
        finally:
            clear_request_context()
        assert record.request_id == 'abc'

        RequestIDFilter().filter(record)
        assert record.request_id == '-'


# ============================================================================
# Health Checks
# ============================================================================

@pytest.mark.django_db
class TestHealth:

    def test_health_endpoint(self, client):
        response = client.get('/health/')

        assert response.status_code == 200
        body = response.json()
        assert body['status'] == 'healthy'
        assert set(body['checks']) >= {'database', 'cache'}
        assert 'version' in body

    def test_single_check(self, client):
        response = client.get('/health/database/')
        assert response.json()['status'] == 'healthy'

    def test_unknown_check_is_unhealthy(self, client):
        response = client.get('/health/nope/')
        assert response.status_code == 503

    def test_liveness(self, client):
        assert client.get('/livez/').json() == {'status': 'alive'}

    def test_readiness(self, client):
        assert client.get('/readyz/').json() == {'status': 'ready'}

    def test_database_failure_is_unhealthy(self):
        with patch('django.db.connection') as connection:
            connection.cursor.side_effect = DatabaseError('down')
            result = check_database()
        assert result.status == HealthStatus.UNHEALTHY

    def test_checker_survives_crashing_check(self):
        def boom():
            raise RuntimeError('boom')

        health_checker.register('boom', boom)
        try:
            result = health_checker.check('boom')
        finally:
            health_checker._checks.pop('boom', None)
        assert result.status == HealthStatus.UNHEALTHY
