# utils/api_client.py
"""
Thin JSON client for the music school REST API.

Every page talks to the backend through the shared ``api_client`` instance
bound in ``music_school.extensions``. Authenticated calls pass the viewer's
bearer token explicitly; the client never stores one.
"""

import logging

import requests

logger = logging.getLogger('api_client')


class ApiError(Exception):
    """Raised when the API is unreachable or answers with a non-2xx status."""

    def __init__(self, method, path, status=None, message=None):
        self.method = method
        self.path = path
        self.status = status
        detail = f"{status}" if status is not None else 'unreachable'
        super().__init__(message or f"{method} {path} failed: {detail}")


class ApiClient:
    """JSON over HTTP with optional bearer authentication."""

    def __init__(self, base_url=None, timeout=10):
        self.base_url = (base_url or '').rstrip('/')
        self.timeout = timeout
        self.session = requests.Session()

    def init_app(self, app):
        """Bind base URL and timeout from application config."""
        self.base_url = app.config['API_BASE_URL'].rstrip('/')
        self.timeout = app.config.get('API_TIMEOUT', 10)
        app.extensions['api_client'] = self

    def url_for(self, path):
        if not path.startswith('/'):
            path = '/' + path
        return f"{self.base_url}{path}"

    def request(self, method, path, body=None, token=None, params=None):
        headers = {'Accept': 'application/json'}
        if token:
            headers['Authorization'] = f'Bearer {token}'

        kwargs = {'headers': headers, 'timeout': self.timeout, 'params': params}
        if method in ('POST', 'PUT'):
            kwargs['json'] = body or {}

        try:
            response = self.session.request(method, self.url_for(path), **kwargs)
        except requests.RequestException as e:
            logger.warning(f"{method} {path} transport error: {e}")
            raise ApiError(method, path) from e

        if not response.ok:
            message = None
            try:
                message = (response.json() or {}).get('error')
            except ValueError:
                pass
            logger.warning(f"{method} {path} returned {response.status_code}")
            raise ApiError(method, path, response.status_code, message)

        if not response.content:
            return None

        try:
            return response.json()
        except ValueError as e:
            raise ApiError(method, path, response.status_code, 'Invalid JSON in response') from e

    def get(self, path, token=None, params=None):
        return self.request('GET', path, token=token, params=params)

    def post(self, path, body=None, token=None):
        return self.request('POST', path, body=body, token=token)

    def put(self, path, body=None, token=None):
        return self.request('PUT', path, body=body, token=token)

    def delete(self, path, token=None):
        return self.request('DELETE', path, token=token)
