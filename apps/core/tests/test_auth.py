"""
Tests for JWT login, refresh, profile and logout endpoints, and the error
envelope they share with the rest of the API.
"""

import pytest
from django.contrib.auth import get_user_model
from rest_framework_simplejwt.tokens import AccessToken

User = get_user_model()

pytestmark = pytest.mark.django_db


@pytest.fixture
def tokens(api_client, editor):
    response = api_client.post(
        '/api/auth/login/', {'username': 'editor', 'password': 'testpass123'}, format='json',
    )
    return response.json()['data']


class TestLogin:

    def test_login_returns_tokens_and_role(self, api_client, editor):
        response = api_client.post(
            '/api/auth/login/', {'username': 'editor', 'password': 'testpass123'}, format='json',
        )

        assert response.status_code == 200
        body = response.json()
        assert body['success'] is True
        assert body['message'] == 'Login successful'
        assert body['data']['user']['role'] == 'EDITOR'
        claims = AccessToken(body['data']['access'])
        assert claims['role'] == 'EDITOR'
        assert claims['username'] == 'editor'

    def test_bad_credentials(self, api_client, editor):
        response = api_client.post(
            '/api/auth/login/', {'username': 'editor', 'password': 'wrong'}, format='json',
        )

        assert response.status_code == 401
        body = response.json()
        assert body['success'] is False
        assert body['code'] == 'AUTHENTICATION_REQUIRED'
        assert response['X-Request-ID'] == body['request_id']

    def test_refresh(self, api_client, tokens):
        response = api_client.post('/api/auth/refresh/', {'refresh': tokens['refresh']}, format='json')
        assert response.status_code == 200
        assert 'access' in response.json()['data']


class TestCurrentUser:

    def test_me_with_bearer_token(self, api_client, tokens):
        api_client.credentials(HTTP_AUTHORIZATION=f"Bearer {tokens['access']}")

        response = api_client.get('/api/auth/me/')

        assert response.json()['data']['username'] == 'editor'
        assert response.json()['data']['role'] == 'EDITOR'

    def test_me_requires_auth(self, api_client):
        response = api_client.get('/api/auth/me/')
        assert response.status_code == 401

    def test_patch_cannot_change_role(self, client_for, reporter):
        response = client_for(reporter).patch(
            '/api/auth/me/', {'first_name': 'Asha', 'role': 'ADMIN'}, format='json',
        )

        assert response.status_code == 200
        assert response.json()['data']['first_name'] == 'Asha'
        assert response.json()['data']['role'] == 'REPORTER'


class TestLogout:

    def test_logout_blacklists_refresh(self, api_client, tokens):
        api_client.credentials(HTTP_AUTHORIZATION=f"Bearer {tokens['access']}")

        response = api_client.post('/api/auth/logout/', {'refresh': tokens['refresh']}, format='json')
        assert response.status_code == 200

        again = api_client.post('/api/auth/refresh/', {'refresh': tokens['refresh']}, format='json')
        assert again.status_code == 401

    def test_logout_with_garbage_token(self, client_for, reporter):
        response = client_for(reporter).post('/api/auth/logout/', {'refresh': 'garbage'}, format='json')

        assert response.status_code == 400
        assert response.json()['field'] == 'refresh'


class TestProfileEmail:

    def test_patch_rejects_email_of_another_user(self, client_for, reporter, other_reporter):
        response = client_for(other_reporter).patch(
            '/api/auth/me/', {'email': reporter.email.upper()}, format='json',
        )

        assert response.status_code == 409
        assert response.json()['code'] == 'USER_EXISTS'
        assert response.json()['field'] == 'email'
        assert User.objects.filter(email__iexact=reporter.email).count() == 1

    def test_patch_keeps_own_email(self, client_for, reporter):
        response = client_for(reporter).patch(
            '/api/auth/me/', {'email': reporter.email, 'last_name': 'Verma'}, format='json',
        )

        assert response.status_code == 200
        assert response.json()['data']['last_name'] == 'Verma'


class TestRegister:

    payload = {
        'username': 'newdesk',
        'email': 'newdesk@example.com',
        'password': 'Khabar-desk-2024',
        'first_name': 'Ravi',
    }

    def test_register_creates_reporter_with_tokens(self, api_client):
        response = api_client.post('/api/auth/register/', self.payload, format='json')

        assert response.status_code == 201
        body = response.json()
        assert body['message'] == 'User registered successfully'
        assert body['data']['user']['username'] == 'newdesk'
        assert body['data']['user']['role'] == 'REPORTER'
        assert 'password' not in body['data']['user']
        assert AccessToken(body['data']['access'])['role'] == 'REPORTER'

        login = api_client.post(
            '/api/auth/login/',
            {'username': 'newdesk', 'password': 'Khabar-desk-2024'},
            format='json',
        )
        assert login.status_code == 200

    def test_register_ignores_requested_role(self, api_client):
        response = api_client.post(
            '/api/auth/register/', dict(self.payload, role='ADMIN'), format='json',
        )

        assert response.status_code == 201
        user = User.objects.get(username='newdesk')
        assert user.staff_profile.role == 'REPORTER'
        assert not user.is_superuser

    def test_register_duplicate_email(self, api_client, reporter):
        response = api_client.post(
            '/api/auth/register/', dict(self.payload, email=reporter.email), format='json',
        )

        assert response.status_code == 409
        assert response.json()['code'] == 'USER_EXISTS'
        assert response.json()['field'] == 'email'
        assert not User.objects.filter(username='newdesk').exists()

    def test_register_duplicate_username(self, api_client, reporter):
        response = api_client.post(
            '/api/auth/register/', dict(self.payload, username=reporter.username), format='json',
        )

        assert response.status_code == 409
        assert response.json()['field'] == 'username'

    def test_register_weak_password(self, api_client):
        response = api_client.post(
            '/api/auth/register/', dict(self.payload, password='12345678'), format='json',
        )

        assert response.status_code == 400
        assert response.json()['code'] == 'VALIDATION_ERROR'
        assert 'password' in response.json()['details']
