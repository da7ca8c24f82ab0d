# services/admin_service.py
"""
Back-office operations for the admin console.

Every call forwards the admin's bearer token; authorization itself is
enforced by the API.
"""

import logging
from calendar import monthrange
from datetime import date as date_cls
from typing import Dict, List, Optional

from music_school.extensions import api_client
from music_school.models import AttendanceStatus, ContactStatus, ConsultationStatus, WorkshopEnrollmentStatus
from music_school.services.catalog_service import display_order
from music_school.utils.api_client import ApiError

logger = logging.getLogger('admin_service')


def parse_month(value):
    """Split ``YYYY-MM`` into ``(year, month)``; raises ValueError when malformed."""
    year, month = (int(part) for part in value.split('-'))
    date_cls(year, month, 1)
    return year, month


def month_bounds(year, month):
    """First and last ISO dates of a month."""
    return date_cls(year, month, 1).isoformat(), date_cls(year, month, monthrange(year, month)[1]).isoformat()


class Collection:
    """A CRUD-able record type exposed by the API."""

    def __init__(self, name, label, list_path, item_path, create_path=None, public_list=False):
        self.name = name
        self.label = label
        self.list_path = list_path
        self.item_path = item_path
        self.create_path = create_path or list_path
        self.public_list = public_list

    def path_for(self, item_id):
        return self.item_path.format(id=item_id)


class Inbox:
    """Submitted records the admin triages by status."""

    def __init__(self, name, label, path, statuses):
        self.name = name
        self.label = label
        self.path = path
        self.statuses = statuses


COLLECTIONS = {
    'courses': Collection('courses', 'Course', '/courses', '/courses/{id}', public_list=True),
    'teachers': Collection('teachers', 'Teacher', '/teachers', '/teachers/{id}', public_list=True),
    'workshops': Collection('workshops', 'Workshop', '/admin/workshops', '/admin/workshops/{id}'),
    'faqs': Collection('faqs', 'FAQ', '/admin/faqs', '/admin/faqs/{id}'),
}

INBOXES = {
    'contacts': Inbox('contacts', 'Contact Messages', '/admin/contacts', ContactStatus.ALL),
    'consultations': Inbox('consultations', 'Consultations', '/admin/consultations', ConsultationStatus.ALL),
    'workshop-enrollments': Inbox('workshop-enrollments', 'Workshop Enrollments',
                                  '/admin/workshop-enrollments', WorkshopEnrollmentStatus.ALL),
}


class AdminService:
    """Service class for admin CRUD operations."""

    # Generic collections

    @staticmethod
    def list_items(collection: Collection, token) -> List[Dict]:
        data = api_client.get(collection.list_path, token=None if collection.public_list else token)
        return data if isinstance(data, list) else []

    @staticmethod
    def find_item(collection: Collection, item_id, token) -> Optional[Dict]:
        for item in AdminService.list_items(collection, token):
            if str(item.get('_id')) == str(item_id):
                return item
        return None

    @staticmethod
    def create_item(collection: Collection, data, token):
        created = api_client.post(collection.create_path, data, token=token)
        logger.info(f"{collection.label} created")
        return created

    @staticmethod
    def update_item(collection: Collection, item_id, data, token):
        updated = api_client.put(collection.path_for(item_id), data, token=token)
        logger.info(f"{collection.label} {item_id} updated")
        return updated

    @staticmethod
    def delete_item(collection: Collection, item_id, token):
        api_client.delete(collection.path_for(item_id), token=token)
        logger.info(f"{collection.label} {item_id} deleted")

    # Inboxes

    @staticmethod
    def list_inbox(inbox: Inbox, token, status=None):
        items = api_client.get(inbox.path, token=token) or []
        if status:
            items = [i for i in items if i.get('status') == status]
        return items

    @staticmethod
    def set_inbox_status(inbox: Inbox, item_id, status, token):
        if status not in inbox.statuses:
            raise ValueError(f"Invalid status '{status}' for {inbox.label}")
        return api_client.put(f"{inbox.path}/{item_id}", {'status': status}, token=token)

    @staticmethod
    def delete_inbox_item(inbox: Inbox, item_id, token):
        api_client.delete(f"{inbox.path}/{item_id}", token=token)

    @staticmethod
    def list_leads(token):
        return api_client.get('/admin/leads', token=token) or []

    # Course enrollments

    @staticmethod
    def pending_enrollments(token):
        """Enrollments waiting for approval."""
        items = api_client.get('/admin/enrollments', token=token) or []
        return [e for e in items if not e.get('approved')]

    @staticmethod
    def approve_enrollment(enrollment_id, token):
        result = api_client.post(f'/admin/enrollments/{enrollment_id}/approve', token=token)
        logger.info(f"Enrollment {enrollment_id} approved")
        return result

    @staticmethod
    def list_manual_enrollments(token):
        return api_client.get('/admin/enrollments/manual', token=token) or []

    @staticmethod
    def create_manual_enrollment(payload, token):
        body = {k: payload.get(k) for k in ('name', 'email', 'courseId')}
        return api_client.post('/admin/enrollments/manual', body, token=token)

    @staticmethod
    def update_enrollment(enrollment_id, payload, token):
        return api_client.put(f'/admin/enrollments/{enrollment_id}', payload, token=token)

    @staticmethod
    def delete_enrollment(enrollment_id, token):
        api_client.delete(f'/admin/enrollments/{enrollment_id}', token=token)

    # Course-scoped resources and schedules

    @staticmethod
    def list_resources(course_id, token):
        items = api_client.get(f'/admin/resources/{course_id}', token=token) or []
        return sorted(items, key=display_order)

    @staticmethod
    def create_resource(payload, token):
        return api_client.post('/admin/resources', payload, token=token)

    @staticmethod
    def update_resource(resource_id, payload, token):
        return api_client.put(f'/admin/resources/{resource_id}', payload, token=token)

    @staticmethod
    def delete_resource(resource_id, token):
        api_client.delete(f'/admin/resources/{resource_id}', token=token)

    @staticmethod
    def list_schedules(course_id, token):
        return api_client.get(f'/admin/schedules/{course_id}', token=token) or []

    @staticmethod
    def create_schedule(payload, token):
        return api_client.post('/admin/schedules', payload, token=token)

    @staticmethod
    def update_schedule(schedule_id, payload, token):
        return api_client.put(f'/admin/schedules/{schedule_id}', payload, token=token)

    @staticmethod
    def delete_schedule(schedule_id, token):
        api_client.delete(f'/admin/schedules/{schedule_id}', token=token)

    # Free courses

    @staticmethod
    def list_free_courses(token):
        return api_client.get('/free-courses', token=token) or []

    @staticmethod
    def set_course_free(course_id, is_free, token):
        return api_client.put(f'/courses/{course_id}', {'isFree': bool(is_free)}, token=token)

    # Attendance

    @staticmethod
    def course_students(course_id, token):
        """
        Students of a course.

        Falls back to the course's approved enrollments when the roster
        endpoint is unavailable.
        """
        try:
            return api_client.get(f'/admin/courses/{course_id}/students', token=token) or []
        except ApiError as e:
            logger.warning(f"Roster unavailable for course {course_id}, using enrollments: {str(e)}")

        enrollments = api_client.get('/admin/enrollments', token=token) or []
        return [
            {'_id': e.get('_id'), 'userId': e.get('userId'), 'name': e.get('name'), 'email': e.get('email')}
            for e in enrollments
            if str(e.get('courseId')) == str(course_id) and e.get('approved')
        ]

    @staticmethod
    def attendance_for_month(course_id, year, month, token):
        first, last = month_bounds(year, month)
        return api_client.get(f'/admin/attendance/{course_id}/{first}/{last}', token=token) or []

    @staticmethod
    def mark_attendance(payload, token):
        return api_client.post('/admin/attendance', payload, token=token)

    @staticmethod
    def attendance_grid(students, records, year, month):
        """
        Arrange attendance records as one row per student.

        Returns:
            tuple: (days, rows, stats) where each row is
            ``(student, [status or '' for every day of the month])``
        """
        days = [date_cls(year, month, day) for day in range(1, monthrange(year, month)[1] + 1)]

        marks = {}
        for record in records:
            key = (str(record.get('studentId')), str(record.get('date') or '')[:10])
            marks[key] = record.get('status') or ''

        rows = []
        for student in students:
            student_id = str(student.get('_id'))
            rows.append((student, [marks.get((student_id, day.isoformat()), '') for day in days]))

        stats = {'students': len(students), 'marked': len(records)}
        for status in AttendanceStatus.ALL:
            stats[status] = sum(1 for r in records if r.get('status') == status)
        return days, rows, stats

    # Calendar

    @staticmethod
    def events_on(date, token):
        """Calendar events whose date starts with ``date`` (YYYY-MM-DD)."""
        try:
            events = api_client.get('/admin/events', token=token) or []
        except ApiError as e:
            logger.error(f"Error loading events: {str(e)}")
            return []
        return [e for e in events if str(e.get('date') or e.get('dateTime') or '').startswith(date)]

    @staticmethod
    def create_event(payload, token):
        body = dict(payload)
        body['dateTime'] = f"{payload['date']}T{payload['time']}:00.000Z"
        return api_client.post('/admin/events', body, token=token)
