from flask import Blueprint

bp = Blueprint("lecturer", __name__)

from . import routes  # noqa: E402,F401
