# controllers/api/__init__.py
"""
JSON endpoints used by the page scripts.

A mounted form's state lives in the Flask session under
``form_state:<form>`` so inline validation on change and blur follows the
same rule table as the server-side submit.
"""

from flask import Blueprint, jsonify, request, session, current_app
from flask_login import current_user

from music_school.extensions import reconciler
from music_school.services.form_state import FormState
from music_school.services.validation import FORM_RULES
from music_school.utils.auth import viewer_token

api_bp = Blueprint('api', __name__, url_prefix='/api')

STATE_KEY = 'form_state:{}'


def _load_state(form_name):
    rules = FORM_RULES[form_name]
    return FormState.from_dict(rules, session.get(STATE_KEY.format(form_name)))


def _store_state(form_name, state):
    session[STATE_KEY.format(form_name)] = state.to_dict()


def _field_and_value():
    data = request.get_json(silent=True) or {}
    return data.get('field'), data.get('value')


@api_bp.route('/forms/<form_name>/change', methods=['POST'])
def form_change(form_name):
    """Apply one keystroke; returns the (possibly reformatted) value."""
    if form_name not in FORM_RULES:
        return jsonify({'error': f'Unknown form: {form_name}'}), 404

    field, value = _field_and_value()
    state = _load_state(form_name)
    try:
        formatted = state.change(field, value)
    except KeyError as e:
        return jsonify({'error': str(e.args[0])}), 400

    _store_state(form_name, state)
    return jsonify({**state.to_dict(), 'value': formatted})


@api_bp.route('/forms/<form_name>/blur', methods=['POST'])
def form_blur(form_name):
    """Mark a field touched and return its error, if any."""
    if form_name not in FORM_RULES:
        return jsonify({'error': f'Unknown form: {form_name}'}), 404

    field, value = _field_and_value()
    state = _load_state(form_name)
    try:
        message = state.blur(field, value)
    except KeyError as e:
        return jsonify({'error': str(e.args[0])}), 400

    _store_state(form_name, state)
    return jsonify({**state.to_dict(), 'error': message})


@api_bp.route('/forms/<form_name>/reset', methods=['POST'])
def form_reset(form_name):
    if form_name not in FORM_RULES:
        return jsonify({'error': f'Unknown form: {form_name}'}), 404

    session.pop(STATE_KEY.format(form_name), None)
    return jsonify(FormState(FORM_RULES[form_name]).to_dict())


@api_bp.route('/me/enrolled-courses')
def enrolled_courses():
    """Course ids the viewer is enrolled in; empty for anonymous viewers."""
    ids = reconciler.fetch_enrolled_ids(current_user.is_authenticated, viewer_token)
    current_app.logger.debug(f"Enrolled ids resolved: {len(ids)}")
    return jsonify({'courseIds': sorted(ids)})
