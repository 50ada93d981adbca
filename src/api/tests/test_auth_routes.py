"""Tests for /auth routes: local register/login, Google OAuth round trip, /auth/me."""

import unittest
from dataclasses import replace
from unittest.mock import patch
from urllib.parse import parse_qs, urlparse

from fastapi.testclient import TestClient

from adapter.external.google_oauth import GoogleOAuthAdapter, GoogleOAuthConfig
from adapter.fake.user_repository import FakeUserRepository
from api.config import load_settings
from api.dependencies import (
    get_google_oauth,
    get_settings,
    get_token_service,
    get_user_repo,
    get_user_repo_or_none,
)
from api.main import app
from domain.model.credentials import OAuthIdentity
from domain.model.errors import OAuthExchangeError
from domain.model.user import AuthProvider, UserRole
from services import auth_service

GOOGLE_CONFIG = GoogleOAuthConfig(
    client_id='client-id',
    client_secret='client-secret',
    callback_url='http://localhost:8000/auth/google/callback',
    frontend_url='http://localhost:5173',
)


class StubGoogleAdapter(GoogleOAuthAdapter):
    """Returns a fixed identity (or raises) instead of calling Google."""

    def __init__(self, config=GOOGLE_CONFIG, identity=None, error=None):
        super().__init__(config)
        self.identity = identity
        self.error = error

    async def exchange_code(self, code: str) -> OAuthIdentity:
        if self.error:
            raise self.error
        return self.identity


class _AuthRouteTestCase(unittest.TestCase):

    def setUp(self):
        patcher = patch.object(auth_service, 'BCRYPT_ROUNDS', 4)
        patcher.start()
        self.addCleanup(patcher.stop)

        self.repo = FakeUserRepository()
        app.dependency_overrides[get_user_repo] = lambda: self.repo
        app.dependency_overrides[get_user_repo_or_none] = lambda: self.repo
        self.client = TestClient(app, follow_redirects=False)
        self.tokens = get_token_service()

    def tearDown(self):
        app.dependency_overrides.clear()

    def _register(self, **overrides):
        body = {'email': 'ada@example.com', 'password': 'secret1', 'name': 'Ada'}
        body.update(overrides)
        return self.client.post('/auth/register', json=body)


class TestRegister(_AuthRouteTestCase):

    def test_register_returns_token_and_public_user(self):
        response = self._register()

        self.assertEqual(response.status_code, 201)
        data = response.json()
        self.assertEqual(data['message'], 'Registration successful')
        self.assertEqual(data['user']['email'], 'ada@example.com')
        self.assertEqual(data['user']['role'], 'client')
        self.assertNotIn('password', str(data['user']).lower())
        claims = self.tokens.verify(data['token'])
        self.assertEqual(claims.user_id, data['user']['id'])

    def test_duplicate_email(self):
        self._register()

        response = self._register(email='ADA@example.com')

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json(), {'error': 'Email already registered'})

    def test_business_registration_keeps_profile(self):
        response = self._register(
            email='shop@example.com', role='business', businessName='Glow Studio', businessPhone='555-0100',
        )

        self.assertEqual(response.status_code, 201)
        stored = self.repo.get_by_email('shop@example.com')
        self.assertEqual(stored.role, UserRole.BUSINESS)
        self.assertEqual(stored.business.business_name, 'Glow Studio')

    def test_admin_cannot_self_register(self):
        response = self._register(role='admin')

        self.assertEqual(response.status_code, 422)
        self.assertEqual(response.json()['error'], 'Invalid request')

    def test_invalid_email_and_short_password(self):
        response = self._register(email='not-an-email', password='123')

        self.assertEqual(response.status_code, 422)
        fields = {d['field'] for d in response.json()['details']}
        self.assertEqual(fields, {'email', 'password'})


class TestLogin(_AuthRouteTestCase):

    def setUp(self):
        super().setUp()
        self._register()

    def test_login_success(self):
        response = self.client.post('/auth/login', json={'email': 'ada@example.com', 'password': 'secret1'})

        self.assertEqual(response.status_code, 200)
        data = response.json()
        self.assertEqual(data['message'], 'Login successful')
        self.assertEqual(self.tokens.verify(data['token']).user_id, data['user']['id'])

    def test_wrong_password_and_unknown_email_share_response(self):
        wrong = self.client.post('/auth/login', json={'email': 'ada@example.com', 'password': 'nope123'})
        unknown = self.client.post('/auth/login', json={'email': 'bob@example.com', 'password': 'secret1'})

        self.assertEqual(wrong.status_code, 401)
        self.assertEqual(unknown.status_code, 401)
        self.assertEqual(wrong.json(), {'error': 'Invalid credentials'})
        self.assertEqual(wrong.json(), unknown.json())

    def test_missing_fields(self):
        response = self.client.post('/auth/login', json={'email': 'ada@example.com'})

        self.assertEqual(response.status_code, 422)


class TestMe(_AuthRouteTestCase):

    def test_me_returns_current_user(self):
        token = self._register().json()['token']

        response = self.client.get('/auth/me', headers={'Authorization': f'Bearer {token}'})

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()['email'], 'ada@example.com')

    def test_me_without_token(self):
        response = self.client.get('/auth/me')

        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json(), {'error': 'Authentication required'})

    def test_me_with_invalid_token(self):
        response = self.client.get('/auth/me', headers={'Authorization': 'Bearer garbage'})

        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json(), {'error': 'Invalid token'})

    def test_me_for_deleted_user(self):
        data = self._register().json()
        self.repo.store.pop(data['user']['id'])

        response = self.client.get('/auth/me', headers={'Authorization': f"Bearer {data['token']}"})

        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json(), {'error': 'User not found'})


class TestGoogleStatus(_AuthRouteTestCase):

    def test_not_configured(self):
        response = self.client.get('/auth/google/status')

        self.assertEqual(response.json(), {'googleAuthAvailable': False})

    def test_configured(self):
        settings = replace(load_settings(), google=GOOGLE_CONFIG)
        app.dependency_overrides[get_settings] = lambda: settings

        response = self.client.get('/auth/google/status')

        self.assertEqual(response.json(), {'googleAuthAvailable': True})


class TestGoogleLogin(_AuthRouteTestCase):

    def test_not_configured_returns_503(self):
        app.dependency_overrides[get_google_oauth] = lambda: StubGoogleAdapter(
            config=replace(GOOGLE_CONFIG, client_id=None),
        )

        response = self.client.get('/auth/google')

        self.assertEqual(response.status_code, 503)
        self.assertIn('error', response.json())

    def test_redirects_to_consent_with_signed_state(self):
        app.dependency_overrides[get_google_oauth] = lambda: StubGoogleAdapter()

        response = self.client.get('/auth/google')

        self.assertEqual(response.status_code, 302)
        location = response.headers['location']
        self.assertTrue(location.startswith('https://accounts.google.com/'))
        state = parse_qs(urlparse(location).query)['state'][0]
        self.assertTrue(self.tokens.verify_state(state))


class TestGoogleCallback(_AuthRouteTestCase):

    def _callback(self, adapter, **params):
        app.dependency_overrides[get_google_oauth] = lambda: adapter
        query = {'code': 'auth-code', 'state': self.tokens.issue_state()}
        query.update(params)
        return self.client.get('/auth/google/callback', params=query)

    def _redirect_query(self, response) -> dict:
        self.assertEqual(response.status_code, 302)
        return parse_qs(urlparse(response.headers['location']).query)

    def test_success_redirects_with_token(self):
        identity = OAuthIdentity(external_id='g-1', email='ada@example.com', name='Ada')

        response = self._callback(StubGoogleAdapter(identity=identity))

        location = response.headers['location']
        self.assertTrue(location.startswith('http://localhost:5173/auth/callback?'))
        token = self._redirect_query(response)['token'][0]
        user = self.repo.get_by_id(self.tokens.verify(token).user_id)
        self.assertEqual(user.auth_provider, AuthProvider.OAUTH)
        self.assertEqual(user.google_id, 'g-1')

    def test_invalid_state(self):
        response = self._callback(StubGoogleAdapter(), state='forged')

        self.assertEqual(self._redirect_query(response), {'error': ['oauth']})
        self.assertTrue(response.headers['location'].startswith('http://localhost:5173/login?'))

    def test_provider_error(self):
        response = self._callback(StubGoogleAdapter(), code=None, error='access_denied')

        self.assertEqual(self._redirect_query(response), {'error': ['oauth']})

    def test_exchange_failure(self):
        response = self._callback(StubGoogleAdapter(error=OAuthExchangeError('invalid_grant')))

        self.assertEqual(self._redirect_query(response), {'error': ['oauth']})

    def test_email_of_local_account_is_rejected(self):
        self._register()
        identity = OAuthIdentity(external_id='g-1', email='ada@example.com', name='Ada')

        response = self._callback(StubGoogleAdapter(identity=identity))

        self.assertEqual(self._redirect_query(response), {'error': ['oauth_conflict']})
        self.assertIsNone(self.repo.get_by_email('ada@example.com').google_id)

    def test_database_down_redirects_to_login(self):
        identity = OAuthIdentity(external_id='g-1', email='ada@example.com', name='Ada')
        app.dependency_overrides[get_user_repo_or_none] = lambda: None

        response = self._callback(StubGoogleAdapter(identity=identity))

        self.assertEqual(self._redirect_query(response), {'error': ['oauth']})
        self.assertTrue(response.headers['location'].startswith('http://localhost:5173/login?'))


if __name__ == '__main__':
    unittest.main()
