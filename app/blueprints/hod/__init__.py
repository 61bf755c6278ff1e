from flask import Blueprint

bp = Blueprint("hod", __name__)

from . import routes  # noqa: E402,F401
