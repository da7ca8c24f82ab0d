# services/catalog_service.py
"""Read-only catalog data for the public pages."""

import logging

from music_school.extensions import api_client
from music_school.models import DEMO_COURSES
from music_school.utils.api_client import ApiError

logger = logging.getLogger('catalog_service')


def display_order(record):
    """Sort key for records carrying an optional numeric ``order``."""
    try:
        return int(record.get('order') or 0)
    except (TypeError, ValueError):
        return 0


class CatalogService:
    """Service class for courses, teachers, workshops and FAQs."""

    @staticmethod
    def _list(path, what):
        try:
            data = api_client.get(path)
        except ApiError as e:
            logger.error(f"Failed to load {what}: {str(e)}")
            return None
        return data if isinstance(data, list) else []

    @staticmethod
    def load_courses(fallback=True):
        """
        Catalog courses.

        Returns:
            tuple: (courses, live) where ``live`` is False when the demo
            courses are shown because the API was unavailable
        """
        courses = CatalogService._list('/courses', 'courses')
        if courses is None:
            return (list(DEMO_COURSES) if fallback else []), False
        return courses, True

    @staticmethod
    def get_course(course_id):
        try:
            return api_client.get(f'/courses/{course_id}')
        except ApiError as e:
            if e.status == 404:
                return None
            raise

    @staticmethod
    def load_teachers():
        return CatalogService._list('/teachers', 'teachers') or []

    @staticmethod
    def load_workshops():
        return CatalogService._list('/workshops', 'workshops') or []

    @staticmethod
    def load_faqs():
        return CatalogService._list('/faqs', 'FAQs') or []

    @staticmethod
    def filter_by_level(courses, level):
        """Courses matching ``level``; ``'all'`` or empty keeps every course."""
        if not level or level == 'all':
            return list(courses)
        return [c for c in courses if (c.get('level') or 'All Levels') == level]

    @staticmethod
    def levels(courses):
        """Distinct course levels in first-seen order."""
        return list(dict.fromkeys(c.get('level') or 'All Levels' for c in courses))

    @staticmethod
    def load_my_enrollments(token):
        """
        Approved and pending enrollments for the student dashboard.

        Returns:
            tuple: (approved, pending)
        """
        approved = api_client.get('/me/enrollments', token=token) or []
        try:
            pending = api_client.get('/me/enrollments/pending', token=token) or []
        except ApiError as e:
            logger.warning(f"Failed to load pending enrollments: {str(e)}")
            pending = []
        return approved, pending
