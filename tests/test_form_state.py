"""
Tests for the per-form touched/error state machine
"""

import logging
from unittest.mock import MagicMock

import pytest

from music_school.services.form_state import FormState, SubmitStatus, INVALID_FORM_MESSAGE
from music_school.services.validation import FORM_RULES

VALID_CONTACT = {
    'name': 'Asha Rao',
    'email': 'asha@example.com',
    'phone': '',
    'subject': 'Guitar lessons',
    'message': 'Do you have weekend batches?',
}


@pytest.fixture
def contact_state():
    return FormState(FORM_RULES['contact'])


@pytest.fixture
def notify():
    return MagicMock()


class TestFieldEvents:
    def test_starts_empty(self, contact_state):
        assert contact_state.values == {name: '' for name in VALID_CONTACT}
        assert contact_state.errors == {}
        assert contact_state.touched == set()
        assert contact_state.submitting is False

    def test_blur_marks_touched_and_validates(self, contact_state):
        message = contact_state.blur('email', 'nope')
        assert message == 'Please enter a valid email address'
        assert 'email' in contact_state.touched
        assert contact_state.errors['email'] == message

    def test_blur_clears_error_once_valid(self, contact_state):
        contact_state.blur('email', 'nope')
        assert contact_state.blur('email', 'a@b.com') is None
        assert 'email' not in contact_state.errors

    def test_change_clears_error_without_revalidating(self, contact_state):
        contact_state.blur('email', 'nope')
        contact_state.change('email', 'still nope')
        assert 'email' not in contact_state.errors
        assert contact_state.values['email'] == 'still nope'

    def test_change_formats_phone(self, contact_state):
        assert contact_state.change('phone', '919876543210') == '+91 98765 43210'
        assert contact_state.values['phone'] == '+91 98765 43210'

    def test_unknown_field(self, contact_state):
        with pytest.raises(KeyError):
            contact_state.change('nickname', 'x')


class TestSubmit:
    def test_invalid_form_is_blocked(self, contact_state, notify):
        contact_state.values.update(VALID_CONTACT, email='bad')
        before = dict(contact_state.values)
        submitter = MagicMock()

        outcome = contact_state.submit(submitter, 'ok', 'failed', notify=notify)

        assert outcome.status == SubmitStatus.BLOCKED
        assert outcome.errors == {'email': 'Please enter a valid email address'}
        assert contact_state.values == before
        assert contact_state.touched == set(VALID_CONTACT)
        submitter.assert_not_called()
        notify.assert_called_once_with(INVALID_FORM_MESSAGE, 'error')

    def test_blocked_submit_focuses_first_invalid_field(self, contact_state, notify):
        contact_state.values.update(VALID_CONTACT, message='', email='bad')

        outcome = contact_state.submit(MagicMock(), 'ok', 'failed', notify=notify)

        assert outcome.focus.field == 'email'
        assert outcome.focus.to_dict() == {'field': 'email', 'behavior': 'smooth', 'block': 'center'}

    def test_success_resets_everything(self, contact_state, notify):
        contact_state.values.update(VALID_CONTACT)
        contact_state.blur('name')
        submitter = MagicMock(return_value={'_id': 'm1'})

        outcome = contact_state.submit(submitter, 'sent', 'failed', notify=notify)

        assert outcome.succeeded
        assert outcome.response == {'_id': 'm1'}
        assert contact_state.values == {name: '' for name in VALID_CONTACT}
        assert contact_state.errors == {}
        assert contact_state.touched == set()
        assert contact_state.submitting is False
        notify.assert_called_once_with('sent', 'success')

    def test_submitter_receives_cleaned_payload(self, contact_state, notify):
        contact_state.values.update(VALID_CONTACT, email=' Asha@Example.com ')
        submitter = MagicMock()

        contact_state.submit(submitter, 'sent', 'failed', notify=notify)

        submitter.assert_called_once_with({
            'name': 'Asha Rao',
            'email': 'asha@example.com',
            'phone': '',
            'subject': 'Guitar lessons',
            'message': 'Do you have weekend batches?',
        })

    def test_submitting_flag_set_during_call(self, contact_state, notify):
        contact_state.values.update(VALID_CONTACT)
        seen = []
        contact_state.submit(lambda payload: seen.append(contact_state.submitting), 'ok', 'failed', notify=notify)
        assert seen == [True]
        assert contact_state.submitting is False

    def test_failure_keeps_values_and_is_logged(self, contact_state, notify, caplog):
        contact_state.values.update(VALID_CONTACT)
        submitter = MagicMock(side_effect=RuntimeError('network down'))

        with caplog.at_level(logging.ERROR, logger='form_state'):
            outcome = contact_state.submit(submitter, 'sent', 'Failed to send', notify=notify)

        assert outcome.status == SubmitStatus.FAILED
        assert contact_state.values == VALID_CONTACT
        assert contact_state.submitting is False
        assert 'network down' in caplog.text
        notify.assert_called_once_with('Failed to send', 'error')


class TestSerialization:
    def test_round_trip_through_session_dict(self, contact_state):
        contact_state.change('name', 'Asha')
        contact_state.blur('email', 'bad')

        restored = FormState.from_dict(FORM_RULES['contact'], contact_state.to_dict())

        assert restored.values == contact_state.values
        assert restored.errors == contact_state.errors
        assert restored.touched == contact_state.touched

    def test_from_dict_ignores_unknown_fields(self):
        state = FormState.from_dict(FORM_RULES['contact'], {
            'values': {'name': 'Asha', 'bogus': 'x'},
            'errors': {'bogus': 'nope'},
            'touched': ['bogus', 'name'],
        })
        assert 'bogus' not in state.values
        assert state.errors == {}
        assert state.touched == {'name'}

    def test_reset(self, contact_state):
        contact_state.blur('name', 'A')
        contact_state.reset()
        assert contact_state.to_dict() == {
            'values': {name: '' for name in VALID_CONTACT},
            'errors': {},
            'touched': [],
        }
