import logging

from flask import Flask, jsonify
from .extensions import db, migrate, login_manager

def register_error_handlers(app):
    @app.errorhandler(403)
    def forbidden(e):
        return jsonify(error="You do not have permission to access this resource."), 403

    @app.errorhandler(404)
    def not_found(e):
        return jsonify(error="Not found"), 404

def create_app(config_object="config.Config"):
    app = Flask(__name__)
    app.config.from_object(config_object)
    app.logger.setLevel(getattr(logging, str(app.config.get("LOG_LEVEL", "INFO")).upper(), logging.INFO))

    db.init_app(app)
    migrate.init_app(app, db)
    login_manager.init_app(app)

    from . import models
    from .models.user import User

    @login_manager.user_loader
    def load_user(user_id):
        return db.session.get(User, int(user_id))

    @login_manager.unauthorized_handler
    def unauthorized():
        return jsonify(error="Unauthorized: You must be logged in."), 401

    from .storage import ObjectStorage
    app.extensions["storage"] = ObjectStorage.from_config(app.config)

    from .blueprints.auth import bp as auth_bp
    from .blueprints.admin import bp as admin_bp
    from .blueprints.registrar import bp as registrar_bp
    from .blueprints.lecturer import bp as lecturer_bp
    from .blueprints.hod import bp as hod_bp
    from .blueprints.student import bp as student_bp
    from .blueprints.bursar import bp as bursar_bp
    app.register_blueprint(auth_bp, url_prefix="/auth")
    app.register_blueprint(admin_bp, url_prefix="/admin")
    app.register_blueprint(registrar_bp, url_prefix="/registrar")
    app.register_blueprint(lecturer_bp, url_prefix="/lecturer")
    app.register_blueprint(hod_bp, url_prefix="/hod")
    app.register_blueprint(student_bp, url_prefix="/student")
    app.register_blueprint(bursar_bp, url_prefix="/bursar")
    register_error_handlers(app)

    return app
