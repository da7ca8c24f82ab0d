# services/validation.py
"""
Field rules shared by every form on the site.

Each form is described by a tuple of ``FieldRule`` objects. A rule knows how
to validate a raw string (returning an error message or ``None``), how to
clean it for the API payload and, for phone-like inputs, how to reformat it
while the user types.
"""

import re
from typing import Callable, Dict, Iterable, Mapping, Optional

from music_school.models.catalog import AttendanceStatus

NAME_PATTERN = re.compile(r"^[a-zA-Z\s'-]+$")
EMAIL_PATTERN = re.compile(r'^[^\s@]+@[^\s@]+\.[^\s@]+$')
PHONE_DIGITS_PATTERN = re.compile(r'^[0-9]{10,15}$')
PHONE_SEPARATORS = re.compile(r'[\s\-+]')
PHONE_PUNCTUATION = re.compile(r'[\s\-+()]')
NON_DIGITS = re.compile(r'[^0-9]')

DEFAULT_PHONE_MAX_LENGTH = 17


def _blank(value):
    return value is None or not str(value).strip()


def _strip(value):
    return '' if value is None else str(value).strip()


def _strip_lower(value):
    return _strip(value).lower()


class FieldRule:
    """Validation rule for a single form field."""

    def __init__(self, name: str, validate: Callable[[str], Optional[str]], required: bool = False,
                 key: Optional[str] = None, clean: Callable = _strip, formatter: Optional[Callable] = None):
        self.name = name
        self.validate = validate
        self.required = required
        self.key = key or name
        self.clean = clean
        self.formatter = formatter

    def check(self, value) -> Optional[str]:
        return self.validate('' if value is None else str(value))

    def __repr__(self):
        return f"<FieldRule {self.name}>"


# Validators. Each returns None when the value is acceptable.

def validate_full_name(name):
    if _blank(name):
        return 'Full name is required'
    name = name.strip()
    if len(name) < 2:
        return 'Name must be at least 2 characters'
    if len(name) > 100:
        return 'Name must be less than 100 characters'
    if not NAME_PATTERN.match(name):
        return 'Name can only contain letters, spaces, hyphens, and apostrophes'
    return None


def validate_name(name):
    if _blank(name):
        return 'Name is required'
    if len(name.strip()) < 2:
        return 'Name must be at least 2 characters'
    return None


def validate_email(email):
    if _blank(email):
        return 'Email is required'
    if not EMAIL_PATTERN.match(email.strip()):
        return 'Please enter a valid email address'
    return None


def _phone_digits_error(phone, separators):
    cleaned = separators.sub('', phone)
    if not PHONE_DIGITS_PATTERN.match(cleaned):
        return 'Please enter a valid phone number (10-15 digits)'
    return None


def validate_optional_phone(phone):
    if _blank(phone):
        return None
    return _phone_digits_error(phone, PHONE_SEPARATORS)


def validate_required_phone(phone):
    if _blank(phone):
        return 'Phone number is required'
    # Required numbers may also be written with a bracketed area code
    return _phone_digits_error(phone, PHONE_PUNCTUATION)


def validate_country(country):
    if _blank(country):
        return None
    if len(country.strip()) < 2:
        return 'Country name must be at least 2 characters'
    return None


def validate_subject(subject):
    if _blank(subject):
        return 'Subject is required'
    if len(subject.strip()) < 3:
        return 'Subject must be at least 3 characters'
    return None


def validate_message(message):
    if _blank(message):
        return 'Message is required'
    if len(message.strip()) < 10:
        return 'Message must be at least 10 characters'
    return None


def required(label):
    """Build a validator that only checks for a non-empty selection."""

    def validate(value):
        if _blank(value):
            return f'{label} is required'
        return None

    return validate


def one_of(label, allowed):
    """Build a validator that accepts only the values in ``allowed``."""

    def validate(value):
        if _blank(value):
            return f'{label} is required'
        if value.strip() not in allowed:
            return f"{label} must be one of: {', '.join(allowed)}"
        return None

    return validate


def optional(value):
    return None


def format_phone_input(raw, max_length=DEFAULT_PHONE_MAX_LENGTH):
    """
    Reformat a phone number as it is typed.

    Non-digits are dropped and the digits regrouped as ``+91 98765 43210``.
    Digits past the twelfth are discarded and the result never exceeds
    ``max_length`` characters.
    """
    digits = NON_DIGITS.sub('', raw or '')
    if not digits:
        return ''
    if len(digits) <= 2:
        formatted = f'+{digits}'
    elif len(digits) <= 7:
        formatted = f'+{digits[:2]} {digits[2:]}'
    else:
        formatted = f'+{digits[:2]} {digits[2:7]} {digits[7:12]}'
    return formatted[:max_length]


# Rule tables

LEAD_RULES = (
    FieldRule('full_name', validate_full_name, required=True, key='fullName'),
    FieldRule('email', validate_email, required=True, clean=_strip_lower),
    FieldRule('whatsapp', validate_optional_phone, formatter=format_phone_input),
    FieldRule('country', validate_country),
)

CONTACT_RULES = (
    FieldRule('name', validate_name, required=True),
    FieldRule('email', validate_email, required=True, clean=_strip_lower),
    FieldRule('phone', validate_optional_phone, formatter=format_phone_input),
    FieldRule('subject', validate_subject, required=True),
    FieldRule('message', validate_message, required=True),
)

CONSULTATION_RULES = (
    FieldRule('name', validate_name, required=True),
    FieldRule('email', validate_email, required=True, clean=_strip_lower),
    FieldRule('phone', validate_required_phone, required=True, formatter=format_phone_input),
    FieldRule('preferred_date', required('Preferred date'), required=True, key='preferredDate'),
    FieldRule('preferred_time', required('Preferred time'), required=True, key='preferredTime'),
    FieldRule('message', optional),
)

WORKSHOP_ENROLLMENT_RULES = (
    FieldRule('name', validate_name, required=True),
    FieldRule('email', validate_email, required=True, clean=_strip_lower),
    FieldRule('phone', validate_required_phone, required=True, formatter=format_phone_input),
    FieldRule('message', optional),
)

MANUAL_ENROLLMENT_RULES = (
    FieldRule('name', validate_name, required=True),
    FieldRule('email', validate_email, required=True, clean=_strip_lower),
    FieldRule('course_id', required('Course'), required=True, key='courseId'),
)

RESOURCE_RULES = (
    FieldRule('course_id', required('Course'), required=True, key='courseId'),
    FieldRule('title', required('Title'), required=True),
    FieldRule('type', required('Resource type'), required=True),
    FieldRule('description', optional),
)

WORKSHOP_RULES = (
    FieldRule('title', required('Title'), required=True),
    FieldRule('date', required('Date'), required=True),
    FieldRule('time', required('Time'), required=True),
    FieldRule('description', optional),
    FieldRule('location', optional),
    FieldRule('duration', optional),
)

EVENT_RULES = (
    FieldRule('title', required('Title'), required=True),
    FieldRule('date', required('Date'), required=True),
    FieldRule('time', required('Time'), required=True),
    FieldRule('type', required('Event type'), required=True),
    FieldRule('description', optional),
    FieldRule('course_id', optional, key='courseId'),
)

SCHEDULE_RULES = (
    FieldRule('course_id', required('Course'), required=True, key='courseId'),
    FieldRule('title', required('Title'), required=True),
    FieldRule('start_time', required('Start time'), required=True, key='startTime'),
    FieldRule('end_time', required('End time'), required=True, key='endTime'),
    FieldRule('description', optional),
    FieldRule('instructor', optional),
    FieldRule('location', optional),
    FieldRule('meeting_link', optional, key='meetingLink'),
)

ATTENDANCE_RULES = (
    FieldRule('student_id', required('Student'), required=True, key='studentId'),
    FieldRule('course_id', required('Course'), required=True, key='courseId'),
    FieldRule('date', required('Date'), required=True),
    FieldRule('status', one_of('Status', AttendanceStatus.ALL), required=True),
    FieldRule('notes', optional),
)

FORM_RULES = {
    'lead': LEAD_RULES,
    'contact': CONTACT_RULES,
    'consultation': CONSULTATION_RULES,
    'workshop_enrollment': WORKSHOP_ENROLLMENT_RULES,
    'manual_enrollment': MANUAL_ENROLLMENT_RULES,
    'resource': RESOURCE_RULES,
    'workshop': WORKSHOP_RULES,
    'event': EVENT_RULES,
    'schedule': SCHEDULE_RULES,
    'attendance': ATTENDANCE_RULES,
}


def rules_by_name(rules: Iterable[FieldRule]) -> Dict[str, FieldRule]:
    return {rule.name: rule for rule in rules}


def validate_values(rules: Iterable[FieldRule], values: Mapping) -> Dict[str, str]:
    """Validate every rule and return messages for the invalid fields only."""
    errors = {}
    for rule in rules:
        message = rule.check(values.get(rule.name))
        if message:
            errors[rule.name] = message
    return errors


def build_payload(rules: Iterable[FieldRule], values: Mapping) -> Dict[str, str]:
    """Clean validated values into the API's payload shape."""
    return {rule.key: rule.clean(values.get(rule.name)) for rule in rules}
