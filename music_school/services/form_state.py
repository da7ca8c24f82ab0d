# services/form_state.py
"""
Touched/error bookkeeping for a single mounted form.

A ``FormState`` lives for as long as the form is on screen: it is created
empty, updated on every change and blur, and reset after a successful
submission or an explicit cancel.
"""

import logging

from flask import flash

from .validation import build_payload, rules_by_name, validate_values

logger = logging.getLogger('form_state')

INVALID_FORM_MESSAGE = 'Please fix the errors in the form'


class SubmitStatus:
    """Submission outcome constants."""
    BLOCKED = 'blocked'
    SUBMITTED = 'submitted'
    FAILED = 'failed'


class FocusRequest:
    """Where the page should move focus after a blocked submission."""

    def __init__(self, field, behavior='smooth', block='center'):
        self.field = field
        self.behavior = behavior
        self.block = block

    def to_dict(self):
        return {'field': self.field, 'behavior': self.behavior, 'block': self.block}


class SubmitOutcome:
    def __init__(self, status, errors=None, focus=None, response=None):
        self.status = status
        self.errors = errors or {}
        self.focus = focus
        self.response = response

    @property
    def succeeded(self):
        return self.status == SubmitStatus.SUBMITTED

    def to_dict(self):
        return {
            'status': self.status,
            'errors': dict(self.errors),
            'focus': self.focus.to_dict() if self.focus else None,
        }


class FormState:
    """Values, errors and touched fields for one form instance."""

    def __init__(self, rules, values=None):
        self.rules = tuple(rules)
        self._rules = rules_by_name(self.rules)
        self.values = {rule.name: '' for rule in self.rules}
        self.errors = {}
        self.touched = set()
        self.submitting = False
        for name, value in (values or {}).items():
            if name in self._rules:
                self.values[name] = '' if value is None else str(value)

    def _rule(self, field):
        try:
            return self._rules[field]
        except KeyError:
            raise KeyError(f"Unknown form field: {field}") from None

    def change(self, field, value):
        """
        Record a keystroke.

        Phone-like fields are reformatted as they are typed. An existing error
        on the field is cleared straight away; the new value is only checked
        again on blur or submit.
        """
        rule = self._rule(field)
        value = '' if value is None else str(value)
        if rule.formatter:
            value = rule.formatter(value)
        self.values[field] = value
        self.errors.pop(field, None)
        return value

    def blur(self, field, value=None):
        """Mark a field touched and validate its current value."""
        rule = self._rule(field)
        if value is not None:
            self.values[field] = str(value)
        self.touched.add(field)
        message = rule.check(self.values.get(field))
        if message:
            self.errors[field] = message
        else:
            self.errors.pop(field, None)
        return message

    def validate(self):
        self.errors = validate_values(self.rules, self.values)
        return self.errors

    def payload(self):
        return build_payload(self.rules, self.values)

    def reset(self):
        self.values = {rule.name: '' for rule in self.rules}
        self.errors = {}
        self.touched = set()
        self.submitting = False

    def first_error_field(self):
        for rule in self.rules:
            if rule.name in self.errors:
                return rule.name
        return None

    def submit(self, submitter, success_message, failure_message, notify=None):
        """
        Validate everything and hand the cleaned payload to ``submitter``.

        Nothing is sent while any field is invalid. A failing submitter is
        logged and reported through ``notify`` but never re-raised, and the
        entered values are kept so the user can retry.
        """
        notify = notify or flash
        self.touched = {rule.name for rule in self.rules}

        errors = self.validate()
        if errors:
            notify(INVALID_FORM_MESSAGE, 'error')
            return SubmitOutcome(SubmitStatus.BLOCKED, dict(errors), FocusRequest(self.first_error_field()))

        self.submitting = True
        try:
            response = submitter(self.payload())
        except Exception as e:
            logger.error(f"Form submission failed: {str(e)}", exc_info=True)
            notify(failure_message, 'error')
            return SubmitOutcome(SubmitStatus.FAILED)
        else:
            self.reset()
            notify(success_message, 'success')
            return SubmitOutcome(SubmitStatus.SUBMITTED, response=response)
        finally:
            self.submitting = False

    def to_dict(self):
        return {
            'values': dict(self.values),
            'errors': dict(self.errors),
            'touched': sorted(self.touched),
        }

    @classmethod
    def from_dict(cls, rules, data):
        state = cls(rules, (data or {}).get('values'))
        known = state._rules
        state.errors = {k: v for k, v in (data or {}).get('errors', {}).items() if k in known}
        state.touched = {name for name in (data or {}).get('touched', []) if name in known}
        return state
