# services/auth_service.py
"""
Session handling for viewers signed in through the identity provider.

The provider's browser SDK hands us an opaque session token. We confirm it
with the API's ``/me`` endpoint and keep the resulting viewer record,
roles included, in the Flask session.
"""

import logging

from flask import current_app, session
from flask_login import login_user, logout_user

from music_school.extensions import api_client
from music_school.models import SessionUser, RoleType
from music_school.utils.api_client import ApiError

logger = logging.getLogger('auth_service')


class AuthService:
    """Service class for viewer session management."""

    @staticmethod
    def resolve_roles(profile):
        """
        Roles for a viewer profile returned by ``/me``.

        Explicit role claims are kept as-is; the admin role is also granted
        to addresses listed in ``ADMIN_EMAILS``.
        """
        roles = profile.get('roles') or []
        if isinstance(roles, str):
            roles = [roles]
        if profile.get('role'):
            roles = list(roles) + [profile['role']]

        roles = [str(r).lower() for r in roles]
        email = (profile.get('email') or '').lower()
        admin_emails = current_app.config.get('ADMIN_EMAILS', ())
        if email and email in admin_emails and RoleType.ADMIN not in roles:
            roles.append(RoleType.ADMIN)
        if not roles:
            roles.append(RoleType.STUDENT)

        return tuple(dict.fromkeys(roles))

    @staticmethod
    def start_session(token, remember=False):
        """
        Confirm a provider token and sign the viewer in.

        Returns:
            tuple: (success, user or None, message)
        """
        token = (token or '').strip()
        if not token:
            return False, None, 'Missing sign-in token'

        try:
            profile = api_client.get('/me', token=token) or {}
        except ApiError as e:
            logger.warning(f"Token rejected by API: {e}")
            return False, None, 'Sign-in failed. Please try again.'

        user_id = profile.get('userId') or profile.get('id')
        if not user_id:
            return False, None, 'Sign-in failed. Please try again.'

        user = SessionUser(
            user_id=user_id,
            email=profile.get('email'),
            name=profile.get('name') or profile.get('fullName'),
            roles=AuthService.resolve_roles(profile),
            token=token
        )

        session[SessionUser.SESSION_KEY] = user.to_session()
        login_user(user, remember=remember)
        logger.info(f"Viewer {user.id} signed in with roles {', '.join(user.roles)}")
        return True, user, 'Signed in successfully'

    @staticmethod
    def end_session():
        """Sign the viewer out and forget the stored token."""
        session.pop(SessionUser.SESSION_KEY, None)
        logout_user()
        return True
