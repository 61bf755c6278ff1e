from flask import Blueprint

bp = Blueprint("registrar", __name__)

from . import routes  # noqa: E402,F401
