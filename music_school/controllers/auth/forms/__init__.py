# forms/__init__.py
from .auth_forms import SignInForm

__all__ = ['SignInForm']
