from functools import wraps

from flask import abort, current_app, jsonify, request
from flask_login import current_user, login_required, login_user, logout_user
from werkzeug.security import check_password_hash, generate_password_hash

from ...extensions import db
from ...models.user import User
from ...services.permissions import has_role
from .. import current_principal
from . import bp

def role_required(*roles):
    def deco(f):
        @wraps(f)
        def wrapper(*args, **kwargs):
            if not current_user.is_authenticated:
                return current_app.login_manager.unauthorized()
            if not has_role(current_principal(), roles):
                current_app.logger.info("user %s (%s) refused %s",
                                        current_user.id, current_user.role, request.path)
                abort(403)
            return f(*args, **kwargs)
        return wrapper
    return deco

@bp.post("/login")
def login():
    username = (request.form.get("username") or "").strip()
    password = request.form.get("password", "")
    u = User.query.filter_by(username=username).one_or_none()
    if u and check_password_hash(u.password_hash, password):
        login_user(u)
        current_app.logger.info("user %s logged in", u.id)
        return jsonify(id=u.id, username=u.username, role=u.role)
    current_app.logger.info("failed login for %r", username)
    return jsonify(error="Incorrect username or password"), 401

@bp.post("/logout")
@login_required
def logout():
    logout_user()
    return jsonify(ok=True)

@bp.get("/me")
@login_required
def me():
    p = current_principal()
    return jsonify(user_id=p.user_id, role=p.role, department_id=p.department_id)

@bp.post("/password")
@login_required
def change_password():
    u = current_user
    old = request.form.get("old_password", "")
    new = request.form.get("new_password", "")
    confirm = request.form.get("confirm_password", "")
    if not check_password_hash(u.password_hash, old):
        return jsonify(error="Current password is incorrect"), 422
    if len(new) < 6:
        return jsonify(error="New password must be at least 6 characters"), 422
    if new != confirm:
        return jsonify(error="Passwords do not match"), 422
    u.password_hash = generate_password_hash(new)
    db.session.commit()
    return jsonify(ok=True)
