# services/enrollment_reconciler.py
"""
Work out which catalog courses the signed-in viewer already holds.

Used by the home page, the course catalog and ``/api/me/enrolled-courses``.
Reconciliation is a best-effort enhancement: any auth or network problem
yields an empty set and the catalog renders as if nothing were enrolled.
"""

import logging
from collections.abc import Hashable

logger = logging.getLogger('enrollment_reconciler')

ENROLLMENTS_PATH = '/me/enrollments'


class CourseCard:
    """Presentation data for one catalog card."""

    def __init__(self, course, enrolled, currency='₹'):
        self.course = course
        self.enrolled = enrolled
        self.currency = currency

    @property
    def course_id(self):
        return self.course.get('_id')

    @property
    def show_price(self):
        return not self.enrolled

    @property
    def price_label(self):
        if not self.show_price:
            return None
        price = self.course.get('price')
        if price in (None, ''):
            return None
        if price in (0, '0'):
            return 'Free'
        return f"{self.currency}{price}"

    @property
    def action_label(self):
        return 'Continue Learning' if self.enrolled else 'View Details'

    @property
    def badge(self):
        return 'Already Enrolled' if self.enrolled else None


class EnrollmentReconciler:
    """Cross-reference the viewer's enrollments with a list of courses."""

    def __init__(self, api):
        self.api = api

    @staticmethod
    def candidate_id(enrollment):
        """Course id for one enrollment entry; ``course._id`` wins over ``courseId``."""
        course = enrollment.get('course') or {}
        candidate = course.get('_id') if isinstance(course, dict) else None
        if candidate is None:
            candidate = enrollment.get('courseId')
        return None if candidate is None else str(candidate)

    @classmethod
    def enrolled_ids(cls, enrollments):
        """Build the enrolled-id set from scratch for the given entries."""
        ids = set()
        for enrollment in enrollments or []:
            if not isinstance(enrollment, dict):
                continue
            candidate = cls.candidate_id(enrollment)
            if candidate is not None:
                ids.add(candidate)
        return frozenset(ids)

    @staticmethod
    def is_enrolled(course, enrolled_ids):
        course_id = course.get('_id')
        if course_id is None:
            return False
        if str(course_id) in enrolled_ids:
            return True
        return isinstance(course_id, Hashable) and course_id in enrolled_ids

    def fetch_enrolled_ids(self, signed_in, token_getter):
        """
        Fetch the viewer's enrollments and return their course ids.

        Returns an empty set when the viewer is signed out, when no token can
        be obtained or when the enrollments call fails.
        """
        if not signed_in:
            return frozenset()

        try:
            token = token_getter()
        except Exception as e:
            logger.info(f"Token unavailable, skipping enrollment lookup: {str(e)}")
            return frozenset()

        if not token:
            return frozenset()

        try:
            enrollments = self.api.get(ENROLLMENTS_PATH, token=token)
        except Exception as e:
            logger.warning(f"Could not load enrollments: {str(e)}")
            return frozenset()

        if not isinstance(enrollments, list):
            return frozenset()

        return self.enrolled_ids(enrollments)

    def course_cards(self, courses, enrolled_ids, currency='₹'):
        return [CourseCard(course, self.is_enrolled(course, enrolled_ids), currency) for course in courses]
