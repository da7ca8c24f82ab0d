# utils/auth.py
from functools import wraps
from flask import request, jsonify, redirect, url_for, flash, abort
from flask_login import current_user

from music_school.models import RoleType


def _wants_json():
    return request.path.startswith('/api/') or request.is_json


def _unauthenticated():
    if _wants_json():
        return jsonify({'error': 'Authentication required'}), 401
    flash('Please sign in to access this page.', 'info')
    return redirect(url_for('auth.sign_in', next=request.path))


def role_required(*roles):
    """Decorator to require specific role(s)."""

    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            if not current_user.is_authenticated:
                return _unauthenticated()

            if not current_user.has_any_role(roles):
                if _wants_json():
                    return jsonify({'error': f'Role required: {", ".join(roles)}'}), 403
                abort(403)

            return f(*args, **kwargs)

        return decorated_function

    return decorator


def admin_required(f):
    """Decorator to require the admin role claim."""
    return role_required(RoleType.ADMIN)(f)


def signed_in_required(f):
    """Decorator that allows any signed-in viewer."""

    @wraps(f)
    def decorated_function(*args, **kwargs):
        if not current_user.is_authenticated:
            return _unauthenticated()

        return f(*args, **kwargs)

    return decorated_function


def viewer_token():
    """Bearer token of the current viewer, or ``None`` when signed out."""
    if not current_user.is_authenticated:
        return None
    return current_user.get_token()
