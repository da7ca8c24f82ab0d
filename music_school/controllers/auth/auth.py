# controllers/auth/auth.py
"""
Sign-in and sign-out routes.

The identity provider's browser widget authenticates the viewer and posts
its session token to ``/auth/session``; everything else about the viewer
comes from the API's ``/me`` endpoint.
"""

from urllib.parse import urlparse, urljoin

from flask import render_template, request, redirect, url_for, flash, jsonify, current_app
from flask_login import current_user

from music_school.extensions import csrf
from music_school.services.auth_service import AuthService
from .forms.auth_forms import SignInForm

from . import auth_bp


def is_safe_url(target):
    """Check if redirect target is safe (same domain)."""
    ref_url = urlparse(request.host_url)
    test_url = urlparse(urljoin(request.host_url, target))
    return test_url.scheme in ('http', 'https') and ref_url.netloc == test_url.netloc


def _landing_for(user):
    if user.is_admin:
        return url_for('admin.dashboard')
    return url_for('main.dashboard')


def _bearer_token():
    header = request.headers.get('Authorization', '')
    if header.startswith('Bearer '):
        return header[len('Bearer '):].strip()
    return None


@auth_bp.route('/sign-in')
def sign_in():
    """Sign-in page hosting the provider widget."""
    if current_user.is_authenticated:
        return redirect(_landing_for(current_user))

    form = SignInForm()
    form.next_url.data = request.args.get('next')
    return render_template('auth/sign_in.html', form=form)


@auth_bp.route('/session', methods=['POST'])
@csrf.exempt
def create_session():
    """
    Exchange a provider token for a signed-in session.

    Accepts the token either from the sign-in form or as a bearer header;
    header callers get JSON back instead of a redirect.
    """
    header_token = _bearer_token()
    if header_token:
        success, user, message = AuthService.start_session(header_token)
        if not success:
            return jsonify({'error': message}), 401
        return jsonify({
            'id': user.id,
            'email': user.email,
            'roles': list(user.roles),
            'redirect': _landing_for(user)
        })

    form = SignInForm()
    if not form.validate_on_submit():
        for messages in form.errors.values():
            flash(messages[0], 'error')
            break
        return redirect(url_for('auth.sign_in'))

    try:
        success, user, message = AuthService.start_session(form.token.data, remember=form.remember_me.data)
    except Exception as e:
        current_app.logger.error(f"Sign-in error: {str(e)}")
        flash('Sign-in failed. Please try again.', 'error')
        return redirect(url_for('auth.sign_in'))

    if not success:
        flash(message, 'error')
        return redirect(url_for('auth.sign_in'))

    flash(f'Welcome, {user.display_name}!', 'success')
    next_page = form.next_url.data
    if next_page and is_safe_url(next_page):
        return redirect(next_page)
    return redirect(_landing_for(user))


@auth_bp.route('/logout', methods=['GET', 'POST'])
def logout():
    """Sign the viewer out."""
    if current_user.is_authenticated:
        AuthService.end_session()
        flash('You have been signed out.', 'info')

    return redirect(url_for('main.home'))
