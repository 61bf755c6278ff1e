from flask import jsonify
from flask_login import current_user

from ..services.permissions import Principal


def current_principal():
    return Principal.from_user(current_user)


def respond(result, render, status=200):
    """Turn a service result into a JSON response.

    ``render`` maps the ``Ok`` value to something ``jsonify`` accepts.
    """
    if not result.ok:
        return jsonify(error=result.message), result.status_code
    return jsonify(render(result.value)), status
