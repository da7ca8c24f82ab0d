"""
Tests for the REST client
"""

from unittest.mock import MagicMock, patch

import pytest
import requests

from music_school.utils.api_client import ApiClient, ApiError


def make_response(status=200, payload=None, content=b'{}'):
    response = MagicMock()
    response.status_code = status
    response.ok = 200 <= status < 300
    response.content = content
    response.json.return_value = payload
    return response


@pytest.fixture
def client():
    return ApiClient('http://api.test/api/', timeout=3)


class TestApiClient:
    def test_get_sends_bearer_token_and_timeout(self, client):
        with patch.object(client.session, 'request', return_value=make_response(payload=[{'_id': 'c1'}])) as request:
            result = client.get('/me/enrollments', token='abc')

        assert result == [{'_id': 'c1'}]
        method, url = request.call_args.args
        kwargs = request.call_args.kwargs
        assert method == 'GET'
        assert url == 'http://api.test/api/me/enrollments'
        assert kwargs['headers']['Authorization'] == 'Bearer abc'
        assert kwargs['timeout'] == 3
        assert 'json' not in kwargs

    def test_anonymous_call_has_no_auth_header(self, client):
        with patch.object(client.session, 'request', return_value=make_response(payload=[])) as request:
            client.get('courses')

        assert 'Authorization' not in request.call_args.kwargs['headers']
        assert request.call_args.args[1] == 'http://api.test/api/courses'

    def test_post_sends_json_body(self, client):
        with patch.object(client.session, 'request', return_value=make_response(payload={'ok': True})) as request:
            client.post('/leads', {'email': 'a@b.com'})

        assert request.call_args.kwargs['json'] == {'email': 'a@b.com'}

    def test_error_status_raises(self, client):
        response = make_response(status=403, payload={'error': 'Admins only'})
        with patch.object(client.session, 'request', return_value=response):
            with pytest.raises(ApiError) as excinfo:
                client.delete('/courses/c1', token='abc')

        assert excinfo.value.status == 403
        assert excinfo.value.method == 'DELETE'
        assert str(excinfo.value) == 'Admins only'

    def test_transport_failure_raises(self, client):
        with patch.object(client.session, 'request', side_effect=requests.Timeout('slow')):
            with pytest.raises(ApiError) as excinfo:
                client.get('/courses')

        assert excinfo.value.status is None

    def test_empty_body_returns_none(self, client):
        with patch.object(client.session, 'request', return_value=make_response(status=204, content=b'')):
            assert client.delete('/admin/faqs/f1', token='abc') is None

    def test_invalid_json_raises(self, client):
        response = make_response()
        response.json.side_effect = ValueError('bad json')
        with patch.object(client.session, 'request', return_value=response):
            with pytest.raises(ApiError):
                client.get('/courses')

    def test_init_app_reads_config(self, app):
        bound = ApiClient()
        bound.init_app(app)
        assert bound.base_url == 'http://api.test/api'
        assert bound.timeout == 2
        assert app.extensions['api_client'] is bound
