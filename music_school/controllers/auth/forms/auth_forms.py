# forms/auth_forms.py
"""Flask-WTF form carrying the identity provider's session token."""

from flask_wtf import FlaskForm
from wtforms import HiddenField, BooleanField
from wtforms.validators import DataRequired


class SignInForm(FlaskForm):
    """Filled in by the provider widget once the viewer has signed in."""

    token = HiddenField(validators=[DataRequired(message='Missing sign-in token')])

    remember_me = BooleanField('Keep me signed in', default=False)

    next_url = HiddenField()
