# models/user.py
"""Signed-in viewer held in the Flask session."""

from flask_login import UserMixin


class RoleType:
    """Role name constants."""
    ADMIN = 'admin'
    STUDENT = 'student'


class SessionUser(UserMixin):
    """
    The viewer as established by the identity provider.

    Nothing is persisted locally: the record is rebuilt from the session on
    every request and carries the provider's bearer token for API calls.
    """

    SESSION_KEY = 'viewer'

    def __init__(self, user_id, email=None, name=None, roles=None, token=None):
        self.id = str(user_id)
        self.email = (email or '').lower() or None
        self.name = name
        self.roles = tuple(roles or ())
        self.token = token

    def get_token(self):
        """Bearer token for authenticated API calls, or ``None``."""
        return self.token

    def has_role(self, role):
        return role in self.roles

    def has_any_role(self, roles):
        return any(role in self.roles for role in roles)

    @property
    def is_admin(self):
        return self.has_role(RoleType.ADMIN)

    @property
    def display_name(self):
        return self.name or self.email or 'Student'

    def to_session(self):
        return {
            'id': self.id,
            'email': self.email,
            'name': self.name,
            'roles': list(self.roles),
            'token': self.token,
        }

    @classmethod
    def from_session(cls, data):
        if not data or not data.get('id'):
            return None
        return cls(
            user_id=data['id'],
            email=data.get('email'),
            name=data.get('name'),
            roles=data.get('roles'),
            token=data.get('token'),
        )

    def __repr__(self):
        return f"<SessionUser {self.id}>"
