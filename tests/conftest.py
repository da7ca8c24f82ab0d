"""
Pytest configuration and fixtures for the music school app
"""

import pytest
from unittest.mock import patch

from music_school import create_app
from music_school.extensions import api_client
from music_school.models import SessionUser
from music_school.utils.api_client import ApiError


class FakeApi:
    """
    Stand-in for ``ApiClient.request`` that answers from a route table.

    Routes map ``(method, path)`` to a value or a callable taking
    ``(body, token)``. Exceptions are raised instead of returned. Unknown
    routes answer 404.
    """

    def __init__(self, routes=None):
        self.routes = dict(routes or {})
        self.calls = []

    def __call__(self, method, path, body=None, token=None, params=None):
        self.calls.append({'method': method, 'path': path, 'body': body, 'token': token, 'params': params})
        if (method, path) not in self.routes:
            raise ApiError(method, path, 404)

        result = self.routes[(method, path)]
        if isinstance(result, Exception):
            raise result
        if callable(result):
            return result(body, token)
        return result

    def calls_to(self, method, path):
        return [c for c in self.calls if c['method'] == method and c['path'] == path]


@pytest.fixture
def app():
    """Flask app configured for testing"""
    app = create_app('testing')
    yield app


@pytest.fixture
def client(app):
    """Flask test client"""
    return app.test_client()


@pytest.fixture
def fake_api():
    """Replace every REST call made through the shared client"""
    fake = FakeApi()
    with patch.object(api_client, 'request', side_effect=fake):
        yield fake


def _sign_in(client, user):
    with client.session_transaction() as sess:
        sess['_user_id'] = user.id
        sess['_fresh'] = True
        sess[SessionUser.SESSION_KEY] = user.to_session()
    return user


@pytest.fixture
def mock_student():
    return SessionUser('user-1', email='student@example.com', name='Asha Rao',
                       roles=('student',), token='student-token')


@pytest.fixture
def mock_admin():
    return SessionUser('admin-1', email='admin@themusinest.com', name='Site Admin',
                       roles=('admin',), token='admin-token')


@pytest.fixture
def student_client(client, mock_student):
    """Test client with a signed-in student"""
    _sign_in(client, mock_student)
    return client


@pytest.fixture
def admin_client(client, mock_admin):
    """Test client with a signed-in admin"""
    _sign_in(client, mock_admin)
    return client


@pytest.fixture
def sample_courses():
    return [
        {'_id': 'c1', 'title': 'Guitar Basics', 'price': 2999, 'level': 'Beginner', 'description': 'Chords'},
        {'_id': 'c2', 'title': 'Piano Pro', 'price': 0, 'level': 'Intermediate', 'description': 'Scales'},
        {'_id': 'c3', 'title': 'Vocal Coaching', 'price': 2799, 'level': 'Beginner', 'description': 'Breathing'},
    ]
