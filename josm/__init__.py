import logging
import os

from flask import Flask, jsonify, send_from_directory

from config import Config
from .errors import register_error_handlers
from .extensions import db, login_manager, photo_storage


def create_app(config_class=Config):
    app = Flask(__name__)
    app.config.from_object(config_class)

    if not app.config.get("SQLALCHEMY_DATABASE_URI"):
        db_url = os.getenv("DATABASE_URL")
        if db_url:
            if db_url.startswith("postgres://"):
                db_url = db_url.replace("postgres://", "postgresql+psycopg://", 1)
            app.config["SQLALCHEMY_DATABASE_URI"] = db_url
        else:
            app.config["SQLALCHEMY_DATABASE_URI"] = "sqlite:///josm.db"

    logging.basicConfig(
        level=app.config.get("LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    db.init_app(app)
    login_manager.init_app(app)
    photo_storage.init_app(app)

    from .models.user import User

    @login_manager.user_loader
    def load_user(user_id):
        return db.session.get(User, int(user_id))

    @login_manager.unauthorized_handler
    def unauthorized():
        return jsonify({"error": "unauthorized", "message": "login required"}), 401

    register_error_handlers(app)

    # Blueprints
    from josm.blueprints.auth import auth_bp
    from josm.blueprints.users import users_bp
    from josm.blueprints.materials import materials_bp
    from josm.blueprints.requests import requests_bp
    from josm.blueprints.tools import tools_bp
    from josm.blueprints.boards import boards_bp
    from josm.blueprints.jobs import jobs_bp
    from josm.blueprints.customer_goods import customer_goods_bp
    from josm.blueprints.reports import reports_bp

    app.register_blueprint(auth_bp)
    app.register_blueprint(users_bp)
    app.register_blueprint(materials_bp)
    app.register_blueprint(requests_bp)
    app.register_blueprint(tools_bp)
    app.register_blueprint(boards_bp)
    app.register_blueprint(jobs_bp)
    app.register_blueprint(customer_goods_bp)
    app.register_blueprint(reports_bp)

    @app.get("/")
    def index():
        return jsonify({"app": "josm", "status": "ok"})

    @app.get("/uploads/<path:filename>")
    def uploaded_file(filename):
        return send_from_directory(photo_storage.root, filename)

    # create tables + default admin
    with app.app_context():
        db.create_all()
        _seed_admin(app)

    return app


def _seed_admin(app):
    from josm.models.user import User

    email = app.config["ADMIN_EMAIL"]
    if not User.query.filter_by(email=email).first():
        u = User(name="Admin User", email=email, role="admin", active=True)
        u.set_password(app.config["ADMIN_PASSWORD"])
        db.session.add(u)
        db.session.commit()
