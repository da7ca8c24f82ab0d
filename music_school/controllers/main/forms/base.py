# forms/base.py
"""
Flask-WTF base form driven by a FieldRule table.

WTForms handles rendering, CSRF and type coercion of the extra fields; the
rule table in ``music_school.services.validation`` decides which values are
acceptable, so the same checks back the HTML forms and the JSON endpoints.
"""

from flask import flash
from flask_wtf import FlaskForm

from music_school.services.form_state import (
    FormState, SubmitOutcome, SubmitStatus, FocusRequest, INVALID_FORM_MESSAGE
)
from music_school.services.validation import FORM_RULES


class RuleForm(FlaskForm):
    """Base form whose field checks come from ``FORM_RULES[form_name]``."""

    form_name = None

    @classmethod
    def rules(cls):
        return FORM_RULES[cls.form_name]

    def to_state(self):
        values = {}
        for rule in self.rules():
            field = self._fields.get(rule.name)
            if field is not None and field.data is not None:
                values[rule.name] = field.data
        return FormState(self.rules(), values)

    def extra_payload(self):
        """Typed fields sent alongside the rule-checked values."""
        return {}

    def apply_state(self, state):
        """Copy the state's error map onto the rendered fields."""
        for rule in state.rules:
            field = self._fields.get(rule.name)
            if field is None:
                continue
            message = state.errors.get(rule.name)
            field.errors = [message] if message else []

    def submit_with(self, submitter, success_message, failure_message):
        """
        Run a posted form through its FormState.

        Returns:
            SubmitOutcome or None when the form was not submitted
        """
        if not self.is_submitted():
            return None

        state = self.to_state()
        if not self.validate():
            # CSRF or a typed field failed; report rule errors alongside it
            state.touched = {rule.name for rule in state.rules}
            state.validate()
            for name, messages in self.errors.items():
                if messages and name not in state.errors:
                    state.errors[name] = messages[0]
            flash(INVALID_FORM_MESSAGE, 'error')
            first = state.first_error_field() or next(iter(state.errors), None)
            outcome = SubmitOutcome(SubmitStatus.BLOCKED, dict(state.errors), FocusRequest(first) if first else None)
        else:
            extra = self.extra_payload()
            outcome = state.submit(
                lambda payload: submitter({**payload, **extra}),
                success_message,
                failure_message
            )

        self.apply_state(state)
        for name, message in outcome.errors.items():
            field = self._fields.get(name)
            if field is not None and not field.errors:
                field.errors = [message]
        return outcome
