# services/student_service.py
"""
Signed-in student's own data: course resources, attendance and class
schedule. Every call carries the viewer's bearer token; the API only returns
records for courses the viewer is enrolled in.
"""

import logging
from datetime import date as date_cls

from music_school.extensions import api_client
from music_school.models import AttendanceStatus
from music_school.services.catalog_service import display_order
from music_school.services.enrollment_reconciler import EnrollmentReconciler

logger = logging.getLogger('student_service')


class StudentService:
    """Service class for the student pages."""

    @staticmethod
    def enrolled_courses(enrollments):
        """(course id, title) pairs for the viewer's enrollments, first occurrence wins."""
        courses = {}
        for enrollment in enrollments:
            if not isinstance(enrollment, dict):
                continue
            course_id = EnrollmentReconciler.candidate_id(enrollment)
            if course_id is None or course_id in courses:
                continue
            course = enrollment.get('course')
            courses[course_id] = (course.get('title') if isinstance(course, dict) else None) or 'Course'
        return list(courses.items())

    # Resources

    @staticmethod
    def load_resources(course_id, token):
        """Resources of one of the viewer's courses, in display order."""
        items = api_client.get(f'/me/resources/{course_id}', token=token) or []
        return sorted(items, key=display_order)

    @staticmethod
    def filter_resources(resources, kind=None, query=None):
        """Resources of type ``kind`` whose title or description contains ``query``."""
        query = (query or '').strip().lower()
        matched = []
        for resource in resources:
            if kind and resource.get('type') != kind:
                continue
            text = f"{resource.get('title') or ''} {resource.get('description') or ''}".lower()
            if query and query not in text:
                continue
            matched.append(resource)
        return matched

    @staticmethod
    def resource_link(resource):
        """External URL of a resource, or the API's file endpoint for uploaded files."""
        return resource.get('url') or api_client.url_for(f"/resources/{resource.get('_id')}/file")

    # Attendance

    @staticmethod
    def load_attendance(course_id, token, month=None, year=None):
        """
        The viewer's attendance records for a course, newest first.

        Args:
            month: optional month number (1-12) to narrow the records
            year: optional year to narrow the records
        """
        params = {key: value for key, value in (('month', month), ('year', year)) if value}
        records = api_client.get(f'/me/attendance/{course_id}', token=token, params=params or None) or []
        return sorted(records, key=lambda r: str(r.get('date') or ''), reverse=True)

    @staticmethod
    def attendance_summary(records):
        summary = {status: 0 for status in AttendanceStatus.ALL}
        for record in records:
            status = record.get('status')
            if status in summary:
                summary[status] += 1

        total = sum(summary.values())
        summary['total'] = total
        summary['rate'] = round(summary[AttendanceStatus.PRESENT] * 100 / total) if total else 0
        return summary

    # Schedule

    @staticmethod
    def load_schedules(token, today=None):
        """
        Live classes across the viewer's courses.

        Returns:
            tuple: (todays_classes, upcoming_classes), both ordered by start time
        """
        today = (today or date_cls.today()).isoformat()
        schedules = api_client.get('/me/schedules', token=token) or []
        schedules = sorted(schedules, key=lambda s: str(s.get('startTime') or ''))

        todays = [s for s in schedules if str(s.get('startTime') or '')[:10] == today]
        upcoming = [s for s in schedules if str(s.get('startTime') or '')[:10] > today]
        return todays, upcoming
