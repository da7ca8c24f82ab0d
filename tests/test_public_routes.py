"""
Tests for the public website pages and forms
"""

from datetime import date

from music_school.models import DEMO_COURSES
from music_school.services.student_service import StudentService
from music_school.utils.api_client import ApiError

VALID_LEAD = {
    'full_name': 'Asha Rao',
    'email': 'Asha@Example.com',
    'whatsapp': '+91 98765 43210',
    'country': 'India',
}

VALID_CONTACT = {
    'name': 'Asha Rao',
    'email': 'asha@example.com',
    'phone': '',
    'subject': 'Weekend batches',
    'message': 'Do you run guitar classes on Sundays?',
}


class TestCatalog:
    def test_home_lists_featured_courses(self, client, fake_api, sample_courses):
        fake_api.routes[('GET', '/courses')] = sample_courses * 3
        fake_api.routes[('GET', '/teachers')] = [{'name': 'Ravi', 'instrument': 'Sitar'}]

        response = client.get('/')

        assert response.status_code == 200
        assert response.data.count(b'View Details') == 6
        assert b'Ravi' in response.data

    def test_catalog_falls_back_to_demo_courses(self, client, fake_api):
        fake_api.routes[('GET', '/courses')] = ApiError('GET', '/courses')

        response = client.get('/courses')

        assert response.status_code == 200
        for course in DEMO_COURSES:
            assert course['title'].encode() in response.data
        assert b'Showing sample courses' in response.data

    def test_level_filter(self, client, fake_api, sample_courses):
        fake_api.routes[('GET', '/courses')] = sample_courses

        response = client.get('/courses?level=Intermediate')

        assert b'Piano Pro' in response.data
        assert b'Guitar Basics' not in response.data
        assert b'Free' in response.data

    def test_anonymous_viewer_skips_enrollment_lookup(self, client, fake_api, sample_courses):
        fake_api.routes[('GET', '/courses')] = sample_courses

        client.get('/courses')

        assert fake_api.calls_to('GET', '/me/enrollments') == []

    def test_enrolled_courses_flagged_for_student(self, student_client, fake_api, sample_courses):
        fake_api.routes[('GET', '/courses')] = sample_courses
        fake_api.routes[('GET', '/me/enrollments')] = [{'course': {'_id': 'c1'}}]

        response = student_client.get('/courses')

        assert response.data.count(b'Already Enrolled') == 1
        assert response.data.count(b'Continue Learning') == 1
        assert '₹2999'.encode() not in response.data
        assert '₹2799'.encode() in response.data

    def test_enrollment_lookup_failure_still_renders(self, student_client, fake_api, sample_courses):
        fake_api.routes[('GET', '/courses')] = sample_courses
        fake_api.routes[('GET', '/me/enrollments')] = ApiError('GET', '/me/enrollments', 500)

        response = student_client.get('/courses')

        assert response.status_code == 200
        assert b'Already Enrolled' not in response.data

    def test_course_detail_not_found(self, client, fake_api):
        response = client.get('/courses/missing')
        assert response.status_code == 404

    def test_demo_course_detail_when_api_down(self, client, fake_api):
        fake_api.routes[('GET', '/courses/demo1')] = ApiError('GET', '/courses/demo1')

        response = client.get('/courses/demo1')

        assert response.status_code == 200
        assert b'Guitar Basics' in response.data


class TestLeadForm:
    def test_valid_lead_is_posted_and_redirects(self, client, fake_api):
        fake_api.routes[('POST', '/leads')] = {'_id': 'l1'}

        response = client.post('/', data=VALID_LEAD)

        assert response.status_code == 302
        assert response.headers['Location'].endswith('#enroll')
        body = fake_api.calls_to('POST', '/leads')[0]['body']
        assert body == {
            'fullName': 'Asha Rao',
            'email': 'asha@example.com',
            'whatsapp': '+91 98765 43210',
            'country': 'India',
        }

    def test_invalid_lead_never_reaches_api(self, client, fake_api, sample_courses):
        fake_api.routes[('GET', '/courses')] = sample_courses

        response = client.post('/', data=dict(VALID_LEAD, email='not-an-email', whatsapp='123'))

        assert response.status_code == 200
        assert fake_api.calls_to('POST', '/leads') == []
        assert b'Please fix the errors in the form' in response.data
        assert b'Please enter a valid email address' in response.data
        assert b'Asha Rao' in response.data
        assert b'"field": "email"' in response.data

    def test_failed_submission_keeps_values(self, client, fake_api):
        fake_api.routes[('POST', '/leads')] = ApiError('POST', '/leads', 500)

        response = client.post('/', data=VALID_LEAD)

        assert response.status_code == 200
        assert b'Submission failed. Please try again.' in response.data
        assert b'value="Asha Rao"' in response.data

    def test_course_page_lead_carries_course(self, client, fake_api):
        fake_api.routes[('GET', '/courses/c1')] = {'_id': 'c1', 'title': 'Guitar Basics', 'price': 2999}
        fake_api.routes[('POST', '/leads')] = {'_id': 'l1'}

        response = client.post('/courses/c1', data=VALID_LEAD)

        assert response.status_code == 302
        body = fake_api.calls_to('POST', '/leads')[0]['body']
        assert body['courseId'] == 'c1'
        assert body['courseTitle'] == 'Guitar Basics'


class TestContactAndConsultation:
    def test_contact_success_flashes(self, client, fake_api):
        fake_api.routes[('POST', '/contact')] = {'_id': 'm1'}

        response = client.post('/contact', data=VALID_CONTACT, follow_redirects=True)

        assert b'Message sent successfully!' in response.data
        assert fake_api.calls_to('POST', '/contact')[0]['body']['subject'] == 'Weekend batches'

    def test_contact_short_message(self, client, fake_api):
        response = client.post('/contact', data=dict(VALID_CONTACT, message='Hi'))

        assert b'Message must be at least 10 characters' in response.data
        assert fake_api.calls_to('POST', '/contact') == []

    def test_consultation_requires_phone(self, client, fake_api):
        response = client.post('/about', data={
            'name': 'Asha',
            'email': 'asha@example.com',
            'phone': '',
            'preferred_date': '2026-11-02',
            'preferred_time': '10:00 AM',
        })

        assert b'Phone number is required' in response.data
        assert fake_api.calls_to('POST', '/consultations') == []

    def test_consultation_payload(self, client, fake_api):
        fake_api.routes[('POST', '/consultations')] = {'_id': 'k1'}

        response = client.post('/about', data={
            'name': 'Asha',
            'email': 'asha@example.com',
            'phone': '+91 98765 43210',
            'preferred_date': '2026-11-02',
            'preferred_time': '10:00 AM',
            'message': '',
        })

        assert response.status_code == 302
        body = fake_api.calls_to('POST', '/consultations')[0]['body']
        assert body['preferredDate'] == '2026-11-02'
        assert body['preferredTime'] == '10:00 AM'


class TestWorkshops:
    def test_enroll_requires_sign_in(self, client, fake_api):
        response = client.get('/workshops/w1/enroll', follow_redirects=True)

        assert b'Please sign in to enroll in workshops' in response.data

    def test_signed_in_enrollment_uses_token(self, student_client, fake_api):
        fake_api.routes[('GET', '/workshops')] = [{'_id': 'w1', 'title': 'Rhythm Lab'}]
        fake_api.routes[('POST', '/workshops/w1/enroll')] = {'_id': 'we1'}

        response = student_client.post('/workshops/w1/enroll', data={
            'name': 'Asha Rao',
            'email': 'student@example.com',
            'phone': '9876543210',
        })

        assert response.status_code == 302
        call = fake_api.calls_to('POST', '/workshops/w1/enroll')[0]
        assert call['token'] == 'student-token'
        assert call['body']['phone'] == '9876543210'

    def test_form_prefilled_from_viewer(self, student_client, fake_api):
        fake_api.routes[('GET', '/workshops')] = [{'_id': 'w1', 'title': 'Rhythm Lab'}]

        response = student_client.get('/workshops/w1/enroll')

        assert b'value="student@example.com"' in response.data


class TestHealth:
    def test_health(self, client):
        response = client.get('/health')
        assert response.get_json()['status'] == 'ok'

    def test_api_health_down(self, client, fake_api):
        fake_api.routes[('GET', '/health')] = ApiError('GET', '/health')

        response = client.get('/health/api')

        assert response.status_code == 503
        assert response.get_json()['status'] == 'unhealthy'

    def test_unknown_api_path_is_json(self, client):
        response = client.get('/api/nope')
        assert response.status_code == 404
        assert response.get_json() == {'error': 'Resource not found'}


class TestStudentResources:
    RESOURCES = [
        {'_id': 'r1', 'title': 'Chord Chart', 'type': 'pdf', 'order': 2},
        {'_id': 'r2', 'title': 'Strumming Video', 'type': 'video', 'order': 1,
         'url': 'https://videos.example.com/strum'},
    ]

    def test_requires_sign_in(self, client, fake_api):
        response = client.get('/my/resources')

        assert response.status_code == 302
        assert '/auth/sign-in' in response.headers['Location']

    def test_first_enrolled_course_selected(self, student_client, fake_api):
        fake_api.routes[('GET', '/me/enrollments')] = [
            {'course': {'_id': 'c1', 'title': 'Guitar Basics'}},
            {'courseId': 'c2'},
        ]
        fake_api.routes[('GET', '/me/resources/c1')] = self.RESOURCES

        response = student_client.get('/my/resources')

        assert response.status_code == 200
        assert response.data.index(b'Strumming Video') < response.data.index(b'Chord Chart')
        assert b'https://videos.example.com/strum' in response.data
        assert b'http://api.test/api/resources/r1/file' in response.data
        assert fake_api.calls_to('GET', '/me/resources/c1')[0]['token'] == 'student-token'

    def test_type_and_text_filters(self, student_client, fake_api):
        fake_api.routes[('GET', '/me/enrollments')] = [{'courseId': 'c1'}]
        fake_api.routes[('GET', '/me/resources/c1')] = self.RESOURCES

        by_type = student_client.get('/my/resources?course=c1&type=video')
        by_text = student_client.get('/my/resources?course=c1&q=chord')

        assert b'Strumming Video' in by_type.data
        assert b'Chord Chart' not in by_type.data
        assert b'Chord Chart' in by_text.data
        assert b'Strumming Video' not in by_text.data

    def test_not_enrolled(self, student_client, fake_api):
        fake_api.routes[('GET', '/me/enrollments')] = []

        response = student_client.get('/my/resources')

        assert b'You need to be enrolled in courses to access course resources.' in response.data
        assert fake_api.calls_to('GET', '/me/resources/c1') == []


class TestStudentAttendance:
    def test_history_and_summary(self, student_client, fake_api):
        fake_api.routes[('GET', '/me/enrollments')] = [{'course': {'_id': 'c1', 'title': 'Guitar Basics'}}]
        fake_api.routes[('GET', '/me/attendance/c1')] = [
            {'date': '2026-10-05T00:00:00.000Z', 'status': 'absent'},
            {'date': '2026-10-12T00:00:00.000Z', 'status': 'present'},
            {'date': '2026-10-19T00:00:00.000Z', 'status': 'present'},
            {'date': '2026-10-26T00:00:00.000Z', 'status': 'waived'},
        ]

        response = student_client.get('/my/attendance?month=10&year=2026')

        assert response.status_code == 200
        assert b'50%' in response.data
        assert response.data.index(b'2026-10-26') < response.data.index(b'2026-10-05')
        call = fake_api.calls_to('GET', '/me/attendance/c1')[0]
        assert call['params'] == {'month': 10, 'year': 2026}
        assert call['token'] == 'student-token'

    def test_failure_still_renders(self, student_client, fake_api):
        fake_api.routes[('GET', '/me/enrollments')] = [{'courseId': 'c1'}]
        fake_api.routes[('GET', '/me/attendance/c1')] = ApiError('GET', '/me/attendance/c1', 500)

        response = student_client.get('/my/attendance')

        assert response.status_code == 200
        assert b'Unable to load attendance for this course.' in response.data


class TestStudentSchedule:
    def test_requires_sign_in(self, client):
        assert client.get('/my/schedule').status_code == 302

    def test_splits_today_and_upcoming(self, app, fake_api):
        fake_api.routes[('GET', '/me/schedules')] = [
            {'title': 'Later Jam', 'startTime': '2026-11-05T10:00'},
            {'title': 'Past Lesson', 'startTime': '2026-10-01T10:00'},
            {'title': 'Morning Scales', 'startTime': '2026-11-02T09:00'},
        ]

        todays, upcoming = StudentService.load_schedules('student-token', today=date(2026, 11, 2))

        assert [s['title'] for s in todays] == ['Morning Scales']
        assert [s['title'] for s in upcoming] == ['Later Jam']

    def test_page_lists_classes(self, student_client, fake_api):
        fake_api.routes[('GET', '/me/schedules')] = [
            {'title': 'Far Future Recital', 'startTime': '2999-01-01T18:00', 'meetingLink': 'https://meet.example.com/x'},
        ]

        response = student_client.get('/my/schedule')

        assert b'Far Future Recital' in response.data
        assert b'https://meet.example.com/x' in response.data


class TestLiveValidationScript:
    def test_superseded_requests_are_cancelled(self, client):
        response = client.get('/static/js/forms.js')
        script = response.get_data(as_text=True)
        response.close()

        assert response.status_code == 200
        assert 'new AbortController()' in script
        assert 'pending.abort()' in script
        assert 'input.value !== sent' in script
