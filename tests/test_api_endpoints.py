"""
Tests for the JSON form endpoints
"""


class TestFormEndpoints:
    def test_change_formats_phone(self, client):
        response = client.post('/api/forms/contact/change', json={'field': 'phone', 'value': '919876543210'})

        assert response.status_code == 200
        data = response.get_json()
        assert data['value'] == '+91 98765 43210'
        assert data['values']['phone'] == '+91 98765 43210'

    def test_blur_reports_error_and_touch(self, client):
        response = client.post('/api/forms/lead/blur', json={'field': 'email', 'value': 'nope'})

        data = response.get_json()
        assert data['error'] == 'Please enter a valid email address'
        assert data['errors'] == {'email': 'Please enter a valid email address'}
        assert data['touched'] == ['email']

    def test_change_after_blur_clears_error(self, client):
        client.post('/api/forms/lead/blur', json={'field': 'email', 'value': 'nope'})

        response = client.post('/api/forms/lead/change', json={'field': 'email', 'value': 'nope2'})

        data = response.get_json()
        assert data['errors'] == {}
        assert data['touched'] == ['email']

    def test_state_kept_per_form(self, client):
        client.post('/api/forms/lead/change', json={'field': 'country', 'value': 'India'})
        client.post('/api/forms/contact/change', json={'field': 'name', 'value': 'Asha'})

        response = client.post('/api/forms/lead/blur', json={'field': 'country'})

        data = response.get_json()
        assert data['values']['country'] == 'India'
        assert 'name' not in data['values']

    def test_reset(self, client):
        client.post('/api/forms/lead/blur', json={'field': 'email', 'value': 'nope'})

        response = client.post('/api/forms/lead/reset')

        data = response.get_json()
        assert data['errors'] == {}
        assert data['touched'] == []
        assert set(data['values'].values()) == {''}

    def test_unknown_form(self, client):
        response = client.post('/api/forms/nope/change', json={'field': 'a', 'value': 'b'})
        assert response.status_code == 404

    def test_unknown_field(self, client):
        response = client.post('/api/forms/lead/change', json={'field': 'nickname', 'value': 'b'})
        assert response.status_code == 400
        assert 'nickname' in response.get_json()['error']


class TestEnrolledCourses:
    def test_anonymous_gets_empty_list(self, client, fake_api):
        response = client.get('/api/me/enrolled-courses')

        assert response.get_json() == {'courseIds': []}
        assert fake_api.calls == []

    def test_student_gets_ids(self, student_client, fake_api):
        fake_api.routes[('GET', '/me/enrollments')] = [
            {'course': {'_id': 'c2'}},
            {'courseId': 'c1'},
            {'courseId': 'c1'},
        ]

        response = student_client.get('/api/me/enrolled-courses')

        assert response.get_json() == {'courseIds': ['c1', 'c2']}
