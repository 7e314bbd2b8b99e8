from __future__ import annotations
import os
from importlib import import_module
from flask import Flask
from config import config_map
from extensions import db, migrate, login_manager
from werkzeug.security import generate_password_hash
from sqlalchemy import inspect

def _seed_from_config(app):
    if not app.config.get("SEED_TEST_DATA"):
        return
    with app.app_context():
        # таблица users может ещё не быть создана (alembic upgrade и т.п.)
        if not inspect(db.engine).has_table("users"):
            return

        from models import User  # локальный импорт, чтобы избежать циклов
        created = 0
        for u in app.config.get("DEFAULT_USERS", []):
            if User.query.filter_by(email=u["email"]).first():
                continue
            db.session.add(User(
                email=u["email"],
                password_hash=generate_password_hash(u["password"]),
                role=u["role"],
                full_name=u.get("full_name"),
                is_active=True,
            ))
            created += 1
        if created:
            db.session.commit()

def register_blueprints(app: Flask) -> None:
    # Жёстко импортируем модуль с маршрутами core перед взятием bp
    import_module("blueprints.core.routes")
    from blueprints.core import bp as core_bp
    from blueprints.auth.routes import bp as auth_bp, api_bp as auth_api_bp
    from blueprints.link.routes import bp as link_bp, api_bp as link_api_bp
    from blueprints.import_export.routes import api_bp as import_export_api_bp
    from blueprints.upgrade.routes import api_bp as upgrade_api_bp
    from blueprints.admin.routes import api_bp as admin_api_bp

    # core без префикса → '/health' в корне
    app.register_blueprint(core_bp)
    app.register_blueprint(auth_bp, url_prefix="/auth")
    app.register_blueprint(link_bp, url_prefix="/assign")
    app.register_blueprint(auth_api_bp, url_prefix="/api/v1")
    app.register_blueprint(link_api_bp, url_prefix="/api/v1")
    app.register_blueprint(import_export_api_bp, url_prefix="/api/v1")
    app.register_blueprint(upgrade_api_bp, url_prefix="/api/v1")
    app.register_blueprint(admin_api_bp, url_prefix="/api/v1")

def create_app(config_name: str | None = None) -> Flask:
    app = Flask(__name__, instance_relative_config=True)
    app.config.setdefault("SECRET_KEY", "change-me-in-prod")
    cfg_name = config_name or os.getenv("FLASK_CONFIG", "default")
    app.config.from_object(config_map[cfg_name])
    # --- ВАЖНО: изоляция БД в тестах ---
    # pytest всегда выставляет переменную окружения PYTEST_CURRENT_TEST.
    # Делаем БД в памяти, чтобы никакие изменения из одного теста не протекали в другой.
    if os.environ.get("PYTEST_CURRENT_TEST"):
        app.config["SQLALCHEMY_DATABASE_URI"] = "sqlite:///:memory:"
        app.config["SEED_TEST_DATA"] = False

    try:
        os.makedirs(app.instance_path, exist_ok=True)
    except OSError:
        pass
    db.init_app(app)
    migrate.init_app(app, db)
    login_manager.init_app(app)
    # провайдеры антиплагиата регистрируются через blueprints.assign.plagiarism.register_provider
    app.extensions.setdefault("plagiarism_providers", [])
    register_blueprints(app)
    _seed_from_config(app)
    return app
