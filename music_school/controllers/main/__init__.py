from flask import Blueprint

main_bp = Blueprint('main', __name__)

from . import pages  # noqa: E402,F401
