"""Tests for /auth routes (register, login, me)."""

import unittest
from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock
from fastapi.testclient import TestClient

from api.main import app
from api.dependencies import get_user_repo
from adapter.fake.user_repository import FakeUserRepository
from config.settings import Settings, get_settings
from domain.model.errors import DirectoryError
from domain.model.user import Role, VerifiedIdentity
from services.token_service import issue_token

SETTINGS = Settings(mongodb_uri='mongodb://localhost:27017', jwt_secret='test-secret')


class AuthRouteTestCase(unittest.TestCase):

    def setUp(self):
        self.client = TestClient(app)
        self.repo = FakeUserRepository()
        app.dependency_overrides[get_settings] = lambda: SETTINGS
        app.dependency_overrides[get_user_repo] = lambda: self.repo

    def tearDown(self):
        app.dependency_overrides.clear()

    def _register(self, **body):
        return self.client.post('/auth/register', json=body)

    def _login(self, **body):
        return self.client.post('/auth/login', json=body)


class TestRegisterRoute(AuthRouteTestCase):

    def test_register_returns_201_with_summary(self):
        response = self._register(email='a@x.com', password='pw123456', role='author')

        assert response.status_code == 201
        body = response.json()
        assert set(body) == {'id', 'email', 'role'}
        assert body['email'] == 'a@x.com'
        assert body['role'] == 'author'
        assert 'password' not in body
        assert 'password_hash' not in body

    def test_register_defaults_role_to_reader(self):
        response = self._register(email='a@x.com', password='pw123456')
        assert response.status_code == 201
        assert response.json()['role'] == 'reader'

    def test_register_missing_fields_returns_400(self):
        for body in [{}, {'email': 'a@x.com'}, {'password': 'pw123456'}, {'email': '', 'password': ''}]:
            with self.subTest(body=body):
                response = self.client.post('/auth/register', json=body)
                assert response.status_code == 400
                assert response.json() == {'error': 'email and password required'}

    def test_register_unknown_role_returns_400(self):
        response = self._register(email='a@x.com', password='pw123456', role='root')
        assert response.status_code == 400
        assert response.json()['error'] == 'invalid role'

    def test_register_duplicate_email_returns_400(self):
        assert self._register(email='a@x.com', password='pw123456').status_code == 201

        response = self._register(email='a@x.com', password='other-password')

        assert response.status_code == 400
        assert response.json() == {'error': 'cannot register', 'detail': 'Email already registered'}
        assert len(self.repo.store) == 1

    def test_register_non_object_body_returns_400(self):
        response = self.client.post('/auth/register', content='not json',
                                    headers={'Content-Type': 'application/json'})
        assert response.status_code == 400
        assert response.json() == {'error': 'invalid request'}


class TestLoginRoute(AuthRouteTestCase):

    def setUp(self):
        super().setUp()
        self._register(email='a@x.com', password='pw123456', role='author')

    def test_login_returns_token(self):
        response = self._login(email='a@x.com', password='pw123456')

        assert response.status_code == 200
        assert set(response.json()) == {'token'}
        assert response.json()['token'].count('.') == 2

    def test_wrong_password_and_unknown_email_look_the_same(self):
        wrong_password = self._login(email='a@x.com', password='wrong-password')
        unknown_email = self._login(email='nobody@x.com', password='pw123456')

        assert wrong_password.status_code == unknown_email.status_code == 401
        assert wrong_password.json() == unknown_email.json() == {'error': 'invalid credentials'}

    def test_missing_fields_return_401(self):
        response = self._login(email='a@x.com')
        assert response.status_code == 401
        assert response.json() == {'error': 'invalid credentials'}

    def test_non_string_fields_return_401(self):
        for body in [{'email': 1, 'password': 'pw123456'},
                     {'email': 'a@x.com', 'password': ['pw123456']},
                     {'email': None, 'password': {'$ne': ''}}]:
            with self.subTest(body=body):
                response = self.client.post('/auth/login', json=body)
                assert response.status_code == 401
                assert response.json() == {'error': 'invalid credentials'}

    def test_malformed_body_returns_401(self):
        for content in ['not json', '[1, 2]']:
            with self.subTest(content=content):
                response = self.client.post('/auth/login', content=content,
                                            headers={'Content-Type': 'application/json'})
                assert response.status_code == 401
                assert response.json() == {'error': 'invalid credentials'}

    def test_long_password_round_trips(self):
        long_password = 'p' * 100
        assert self._register(email='long@x.com', password=long_password).status_code == 201
        assert self._login(email='long@x.com', password=long_password).status_code == 200

    def test_directory_failure_returns_503(self):
        repo = MagicMock()
        repo.get_by_email.side_effect = DirectoryError('Failed to look up user')
        app.dependency_overrides[get_user_repo] = lambda: repo

        response = self._login(email='a@x.com', password='pw123456')

        assert response.status_code == 503
        assert response.json() == {'error': 'directory unavailable'}


class TestMeRoute(AuthRouteTestCase):

    def _me(self, authorization=None):
        headers = {'Authorization': authorization} if authorization is not None else {}
        return self.client.get('/auth/me', headers=headers)

    def test_valid_token_returns_claim(self):
        token = issue_token(VerifiedIdentity(id='user-1', email='a@x.com', role=Role.ADMIN), SETTINGS)

        response = self._me(f'Bearer {token}')

        assert response.status_code == 200
        body = response.json()
        assert body['sub'] == 'user-1'
        assert body['email'] == 'a@x.com'
        assert body['role'] == 'admin'
        assert body['exp'] - body['iat'] == 12 * 3600

    def test_missing_header_returns_401(self):
        response = self._me()
        assert response.status_code == 401
        assert response.json() == {'error': 'missing token'}
        assert response.headers['WWW-Authenticate'] == 'Bearer'

    def test_empty_bearer_returns_401(self):
        response = self._me('Bearer ')
        assert response.status_code == 401

    def test_garbled_token_returns_401(self):
        response = self._me('Bearer not.a.token')
        assert response.status_code == 401
        assert response.json() == {'error': 'invalid token'}

    def test_expired_token_returns_same_body_as_garbled(self):
        token = issue_token(
            VerifiedIdentity(id='user-1', email='a@x.com', role=Role.READER),
            SETTINGS,
            now=datetime.now(timezone.utc) - timedelta(hours=13),
        )

        expired = self._me(f'Bearer {token}')
        garbled = self._me('Bearer garbage')

        assert expired.status_code == garbled.status_code == 401
        assert expired.json() == garbled.json()

    def test_non_bearer_scheme_returns_401(self):
        response = self._me('Basic YTpi')
        assert response.status_code == 401


class TestEndToEnd(AuthRouteTestCase):

    def test_register_login_me(self):
        registered = self._register(email='a@x.com', password='pw123456', role='author')
        assert registered.status_code == 201
        assert 'password' not in registered.json()
        user_id = registered.json()['id']

        login = self._login(email='a@x.com', password='pw123456')
        assert login.status_code == 200
        token = login.json()['token']

        me = self.client.get('/auth/me', headers={'Authorization': f'Bearer {token}'})
        assert me.status_code == 200
        assert me.json()['sub'] == user_id
        assert me.json()['email'] == 'a@x.com'
        assert me.json()['role'] == 'author'

        garbled = self.client.get('/auth/me', headers={'Authorization': f'Bearer {token[:-4]}'})
        assert garbled.status_code == 401


if __name__ == '__main__':
    unittest.main()
