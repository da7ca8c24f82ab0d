# services/submission_service.py
"""Submitters for the public lead-capture and enrollment forms."""

import logging

from music_school.extensions import api_client

logger = logging.getLogger('submission_service')


class SubmissionService:
    """Post validated form payloads to the API."""

    @staticmethod
    def submit_lead(payload, course=None):
        payload = dict(payload)
        if course:
            payload['courseId'] = course.get('_id')
            payload['courseTitle'] = course.get('title')
        result = api_client.post('/leads', payload)
        logger.info(f"Lead captured for {payload.get('email')}")
        return result

    @staticmethod
    def submit_contact(payload):
        result = api_client.post('/contact', payload)
        logger.info(f"Contact message received from {payload.get('email')}")
        return result

    @staticmethod
    def submit_consultation(payload):
        result = api_client.post('/consultations', payload)
        logger.info(f"Consultation requested by {payload.get('email')}")
        return result

    @staticmethod
    def enroll_in_workshop(workshop_id, payload, token):
        result = api_client.post(f'/workshops/{workshop_id}/enroll', payload, token=token)
        logger.info(f"Workshop {workshop_id} enrollment submitted by {payload.get('email')}")
        return result
