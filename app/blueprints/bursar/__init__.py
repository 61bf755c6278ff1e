from flask import Blueprint

bp = Blueprint("bursar", __name__)

from . import routes  # noqa: E402,F401
