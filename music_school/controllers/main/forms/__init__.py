# forms/__init__.py
"""
Forms package for the public site.

Every form here is a RuleForm: rendering and CSRF come from Flask-WTF, field
checks come from the shared rule table.
"""

from .base import RuleForm
from .public_forms import (
    LeadForm,
    ContactForm,
    ConsultationForm,
    WorkshopEnrollmentForm,
)

__all__ = [
    'RuleForm',
    'LeadForm',
    'ContactForm',
    'ConsultationForm',
    'WorkshopEnrollmentForm',
]
